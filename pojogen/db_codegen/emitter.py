"""Kotlin source emitter.

Renders a ``TypeDescription`` into formatted Kotlin source. Type references
go through an ``ImportRegistry`` so the file header lists every import the
body needs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .model import (
    Annotation,
    Constructor,
    Function,
    Parameter,
    Property,
    TypeDescription,
    TypeKind,
)
from .types import TypeRef

TEMPLATE_DIR: Final[Path] = Path(__file__).parent / "templates"

# Packages Kotlin imports by default
IMPLICIT_PACKAGES: Final[frozenset[str]] = frozenset({
    "kotlin",
    "kotlin.annotation",
    "kotlin.collections",
    "kotlin.comparisons",
    "kotlin.io",
    "kotlin.ranges",
    "kotlin.sequences",
    "kotlin.text",
})

# Annotations longer than this are broken onto one member per line
MAX_INLINE_ANNOTATION: Final[int] = 100

INDENT: Final[str] = "    "


class ImportRegistry:
    """Tracks the imports needed by one generated file."""

    def __init__(self, package: str) -> None:
        self.package = package
        self._names: dict[str, str] = {}
        self._imports: set[str] = set()

    def ref(self, type_ref: TypeRef) -> str:
        """Register ``type_ref`` and return the name to use in source."""
        suffix = "?" if type_ref.nullable else ""
        nested = ".".join(type_ref.simple_names)
        if not type_ref.package:
            return nested + suffix

        top = type_ref.top_level
        qualified_top = f"{type_ref.package}.{top}"
        known = self._names.setdefault(top, qualified_top)
        if known != qualified_top:
            return type_ref.canonical_name + suffix

        if type_ref.package not in IMPLICIT_PACKAGES and type_ref.package != self.package:
            self._imports.add(qualified_top)
        return nested + suffix

    def reserve(self, name: str, package: str) -> None:
        """Claim a simple name, e.g. for the type being declared."""
        self._names.setdefault(name, f"{package}.{name}")

    @property
    def imports(self) -> list[str]:
        return sorted(self._imports)


def kotlin_string(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("$", "\\$")
        .replace("\n", "\\n")
    )
    return f'"{escaped}"'


def render_kdoc(text: str) -> str:
    # "*/" inside the text would end the comment early
    text = text.replace("*/", "*&#47;")
    lines = ["/**"]
    lines.extend(f" * {line}".rstrip() for line in text.splitlines() or [""])
    lines.append(" */")
    return "\n".join(lines)


class KotlinEmitter:
    """Renders type descriptions with jinja2 templates."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR) -> None:
        self.env = Environment(
            loader=FileSystemLoader(template_dir),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
            auto_reload=False,
        )
        self._type_template = self.env.get_template("type.kt.j2")
        self._file_template = self.env.get_template("file.kt.j2")

    def render(self, description: TypeDescription) -> str:
        """Render a complete source file for ``description``."""
        registry = ImportRegistry(description.package)
        registry.reserve(description.name, description.package)
        body = _TypeRenderer(description, registry).render(self._type_template)
        return self._file_template.render(
            package=description.package,
            imports=registry.imports,
            body=body.rstrip("\n"),
        )


class _TypeRenderer:
    """Renders the pieces of one type against a shared import registry."""

    def __init__(self, description: TypeDescription, registry: ImportRegistry) -> None:
        self.description = description
        self.registry = registry

    def render(self, template: Any) -> str:
        description = self.description
        primary = description.primary_constructor
        merged = self._merged_properties(primary)

        return template.render(
            kdoc=render_kdoc(description.kdoc) if description.kdoc else None,
            annotations=[self.annotation(a) for a in description.annotations],
            declaration=self.declaration(primary, merged),
            properties=[self.property(p) for p in description.properties if p.name not in merged],
            constructors=[self.constructor(c) for c in description.secondary_constructors],
            functions=[self.function(f) for f in description.functions],
        )

    def _merged_properties(self, primary: Constructor | None) -> dict[str, Property]:
        """Properties declared directly in the primary constructor."""
        if primary is None:
            return {}
        params = {p.name for p in primary.parameters}
        return {
            prop.name: prop
            for prop in self.description.properties
            if prop.name in params and prop.initializer == prop.name
        }

    def ref(self, type_ref: TypeRef) -> str:
        return self.registry.ref(type_ref)

    # -- values and annotations ---------------------------------------

    def value(self, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, str):
            return kotlin_string(value)
        if isinstance(value, TypeRef):
            return self.ref(value)
        if isinstance(value, Annotation):
            return self.annotation_body(value)
        if isinstance(value, (tuple, list)):
            return "[" + ", ".join(self.value(item) for item in value) + "]"
        raise TypeError(f"Unsupported annotation value: {value!r}")

    def annotation_body(self, annotation: Annotation) -> str:
        name = self.ref(annotation.type)
        if not annotation.members:
            return name
        members = [f"{key} = {self.value(value)}" for key, value in annotation.members]
        inline = f"{name}({', '.join(members)})"
        if len(inline) <= MAX_INLINE_ANNOTATION:
            return inline
        lines = ",\n".join(INDENT + member for member in members)
        return f"{name}(\n{lines}\n)"

    def annotation(self, annotation: Annotation) -> str:
        site = f"{annotation.use_site}:" if annotation.use_site else ""
        return f"@{site}{self.annotation_body(annotation)}"

    # -- declarations --------------------------------------------------

    def parameter(self, parameter: Parameter) -> str:
        text = f"{parameter.name}: {self.ref(parameter.type)}"
        if parameter.default is not None:
            text += f" = {parameter.default}"
        return text

    def parameters(self, parameters: tuple[Parameter, ...]) -> str:
        return ", ".join(self.parameter(p) for p in parameters)

    def _property_lines(self, prop: Property) -> list[str]:
        lines: list[str] = []
        if prop.kdoc:
            lines.extend(render_kdoc(prop.kdoc).splitlines())
        lines.extend(self.annotation(a) for a in prop.annotations)
        return lines

    def property(self, prop: Property) -> str:
        lines = self._property_lines(prop)
        modifiers = "".join(f"{m} " for m in prop.modifiers)
        keyword = "var" if prop.mutable else "val"
        declaration = f"{modifiers}{keyword} {prop.name}: {self.ref(prop.type)}"
        if prop.initializer is not None:
            declaration += f" = {prop.initializer}"
        lines.append(declaration)
        return "\n".join(lines)

    def _constructor_parameter(self, parameter: Parameter, merged: dict[str, Property]) -> str:
        prop = merged.get(parameter.name)
        if prop is None:
            return self.parameter(parameter)
        lines = self._property_lines(prop)
        modifiers = "".join(f"{m} " for m in prop.modifiers)
        keyword = "var" if prop.mutable else "val"
        lines.append(f"{modifiers}{keyword} {self.parameter(parameter)}")
        return "\n".join(lines)

    def declaration(self, primary: Constructor | None, merged: dict[str, Property]) -> str:
        description = self.description
        modifiers = "".join(f"{m} " for m in description.modifiers)
        header = f"{modifiers}{description.kind.value} {description.name}"

        if description.kind is TypeKind.DATA_HOLDER and primary is not None:
            if not primary.parameters:
                header += "()"
            elif merged:
                params = ",\n".join(
                    _indent(self._constructor_parameter(p, merged)) for p in primary.parameters
                )
                header += f"(\n{params}\n)"
            else:
                header += f"({self.parameters(primary.parameters)})"

        supertypes: list[str] = []
        if description.super_type is not None:
            supertypes.append(f"{self.ref(description.super_type)}()")
        supertypes.extend(self.ref(contract) for contract in description.contracts)
        if supertypes:
            header += " : " + ", ".join(supertypes)
        return header

    def constructor(self, constructor: Constructor) -> str:
        text = f"constructor({self.parameters(constructor.parameters)})"
        if constructor.delegate:
            text += f" : {constructor.delegate}"
        if constructor.body:
            text += " {\n" + "\n".join(_indent(line) for line in constructor.body) + "\n}"
        return text

    def function(self, function: Function) -> str:
        modifiers = "".join(f"{m} " for m in function.modifiers)
        type_vars = ""
        if function.type_variables:
            bounds = ", ".join(f"{name} : {self.ref(bound)}" for name, bound in function.type_variables)
            type_vars = f"<{bounds}> "
        text = f"{modifiers}fun {type_vars}{function.name}({self.parameters(function.parameters)})"
        if function.returns is not None:
            text += f": {self.ref(function.returns)}"
        if function.body:
            text += " {\n" + "\n".join(_indent(line) for line in function.body) + "\n}"
        elif function.body is not None:
            text += " {\n}"
        return text


def _indent(text: str) -> str:
    return "\n".join(INDENT + line if line else line for line in text.splitlines())


def write_source(path: Path, source: str) -> Path:
    """Write one generated file; the text is fully built before opening it."""
    text = source.replace("``", "`")
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        handle.write(text)
    return path
