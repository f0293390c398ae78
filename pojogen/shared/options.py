"""Generation options.

Options arrive as a string-keyed bag (schema file ``options:`` sections and
``--option key=value`` on the command line). ``parse_options`` is the only
place that looks at the raw strings; everything downstream reads the typed
``GenerationOptions``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Final, Iterable, Mapping

DEFAULT_PACKAGE: Final[str] = "generated"

# bag key -> GenerationOptions field
BOOLEAN_OPTIONS: Final[dict[str, str]] = {
    "dataclasses": "emit_data_shape",
    "immutable_pojos": "immutable_pojos",
    "immutable_interfaces": "immutable_contracts",
    "copy": "emit_copy_helpers",
    "destructuring": "emit_destructuring",
    "interfaces": "emit_contract_types",
    "jpa_annotations": "emit_persistence_annotations",
    "validation_annotations": "emit_validation_annotations",
    "introspected": "emit_introspection_annotation",
    "micronaut": "target_runtime_micronaut",
    "generated_annotation": "emit_generated_annotation",
    "catalog_version_provider": "use_catalog_version",
    "schema_version_provider": "use_schema_version",
    "pojos_equals_and_hash_code": "emit_equals_and_hash_code",
    "pojos_to_string": "emit_to_string",
    "java_beans_getters_and_setters": "bean_accessor_style",
}

STRING_OPTIONS: Final[dict[str, str]] = {
    "pojo_append": "plain_record_suffix",
    "jpa_version": "persistence_annotation_version",
    "package_name": "package_name",
    "pojo_extends": "pojo_extends",
}

LIST_OPTIONS: Final[dict[str, str]] = {
    "pojo_implements": "pojo_implements",
    "interface_implements": "interface_implements",
}


@dataclass(frozen=True, slots=True)
class GenerationOptions:
    """Resolved, immutable options for one generation run."""

    emit_data_shape: bool = False
    immutable_pojos: bool = False
    immutable_contracts: bool = False
    emit_copy_helpers: bool = False
    emit_destructuring: bool = False
    emit_contract_types: bool = False
    emit_persistence_annotations: bool = False
    emit_validation_annotations: bool = False
    emit_introspection_annotation: bool = False
    target_runtime_micronaut: bool = False
    emit_generated_annotation: bool = False
    use_catalog_version: bool = False
    use_schema_version: bool = False
    emit_equals_and_hash_code: bool = False
    emit_to_string: bool = False
    bean_accessor_style: bool = False
    plain_record_suffix: str = ""
    persistence_annotation_version: str = ""
    package_name: str = DEFAULT_PACKAGE
    pojo_extends: str = ""
    pojo_implements: tuple[str, ...] = ()
    interface_implements: tuple[str, ...] = ()

    @property
    def emit_mutable_contracts(self) -> bool:
        return self.emit_contract_types and not self.immutable_contracts

    @property
    def emit_index_annotations(self) -> bool:
        """Index declarations need JPA 2.1; a blank version means latest."""
        version = self.persistence_annotation_version.strip()
        return not version or _version_tuple(version) >= (2, 1)


def _version_tuple(version: str) -> tuple[int, ...]:
    parts: list[int] = []
    for part in version.split("."):
        if not part.isdigit():
            break
        parts.append(int(part))
    return tuple(parts)


def to_option_string(value: Any) -> str:
    """Flatten a YAML value into the option bag's string form."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)
    return "" if value is None else str(value)


def merge_option_bags(*bags: Mapping[str, Any] | None) -> dict[str, str]:
    """Merge option bags, later bags winning."""
    merged: dict[str, str] = {}
    for bag in bags:
        if not bag:
            continue
        for key, value in bag.items():
            merged[str(key)] = to_option_string(value)
    return merged


def parse_option_pairs(pairs: Iterable[str]) -> dict[str, str]:
    """Parse ``key=value`` strings from the command line.

    A bare ``key`` is read as ``key=true``.
    """
    bag: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        bag[key.strip()] = value.strip() if sep else "true"
    return bag


def parse_options(bag: Mapping[str, Any] | None = None) -> GenerationOptions:
    """Build ``GenerationOptions`` from a string-keyed option bag.

    Only the literal string ``"true"`` enables a flag; anything else,
    including absent keys, leaves the feature disabled.
    """
    raw = merge_option_bags(bag)
    values: dict[str, Any] = {}

    for key, attr in BOOLEAN_OPTIONS.items():
        values[attr] = raw.get(key) == "true"

    for key, attr in STRING_OPTIONS.items():
        if key in raw:
            values[attr] = raw[key].strip()

    for key, attr in LIST_OPTIONS.items():
        if key in raw:
            values[attr] = tuple(item.strip() for item in raw[key].split(",") if item.strip())

    if not values.get("package_name"):
        values["package_name"] = DEFAULT_PACKAGE

    return GenerationOptions(**values)
