"""Schema metadata loading.

Schema files are YAML documents describing one database schema: its catalog,
its tables with their columns, keys and indexes, and optional generation
options.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Final, Iterator, Sequence

import yaml

from .errors import SchemaError, SchemaValidationError, TypeMappingError
from .metadata import (
    CatalogFact,
    ColumnFact,
    ForeignKeyFact,
    IndexColumn,
    IndexFact,
    KeyFact,
    SchemaFact,
    SchemaMetadata,
    SortOrder,
    TableFact,
)

# Type mappings from SQL types to JVM type descriptors
DEFAULT_JVM_TYPES: Final[dict[str, str]] = {
    "char": "java.lang.String",
    "varchar": "java.lang.String",
    "nvarchar": "java.lang.String",
    "string": "java.lang.String",
    "text": "java.lang.String",
    "clob": "java.lang.String",
    "json": "java.lang.String",
    "jsonb": "java.lang.String",
    "tinyint": "java.lang.Byte",
    "smallint": "java.lang.Short",
    "int": "java.lang.Integer",
    "integer": "java.lang.Integer",
    "bigint": "java.lang.Long",
    "real": "java.lang.Float",
    "float": "java.lang.Float",
    "double": "java.lang.Double",
    "numeric": "java.math.BigDecimal",
    "decimal": "java.math.BigDecimal",
    "boolean": "java.lang.Boolean",
    "bool": "java.lang.Boolean",
    "bit": "java.lang.Boolean",
    "date": "java.time.LocalDate",
    "time": "java.time.LocalTime",
    "timestamp": "java.time.LocalDateTime",
    "timestamptz": "java.time.OffsetDateTime",
    "uuid": "java.util.UUID",
    "blob": "byte[]",
    "binary": "byte[]",
    "varbinary": "byte[]",
    "bytea": "byte[]",
}


def load_schema(schema_path: Path) -> dict[str, Any]:
    """Load a schema document from a YAML file.

    Args:
        schema_path: Path to the schema file.

    Returns:
        The parsed schema dictionary.

    Raises:
        SchemaError: If the file cannot be read or parsed.
    """
    try:
        content = schema_path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaError(f"Failed to read schema file: {e}", str(schema_path)) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SchemaError(f"Invalid YAML: {e}", str(schema_path)) from e

    if not isinstance(data, dict):
        raise SchemaError("Schema root must be a mapping", str(schema_path))

    return data


def collect_schema_paths(inputs: Sequence[Path]) -> list[Path]:
    """Collect all schema files from the given inputs.

    Args:
        inputs: Paths to schema files or directories.

    Returns:
        List of unique, resolved schema file paths.

    Raises:
        FileNotFoundError: If any input path doesn't exist.
    """

    def _iter_paths() -> Iterator[Path]:
        for raw in inputs:
            path = raw.resolve()
            if not path.exists():
                raise FileNotFoundError(f"Schema path '{raw}' does not exist")
            if path.is_dir():
                yield from sorted(
                    p
                    for p in path.iterdir()
                    if p.is_file() and p.suffix in (".yaml", ".yml")
                )
            else:
                yield path

    # Use dict to preserve order while deduplicating
    seen: dict[Path, None] = {}
    for path in _iter_paths():
        seen.setdefault(path, None)

    return list(seen.keys())


def jvm_type_for_column(column: dict[str, Any], schema_path: str | None = None) -> str:
    """Resolve the JVM type descriptor for a column.

    Raises:
        SchemaValidationError: If the column has no type.
        TypeMappingError: If no type mapping exists.
    """
    if "jvm_type" in column:
        return str(column["jvm_type"])

    type_name = column.get("type")
    col_name = column.get("name", "<unknown>")

    if not type_name:
        raise SchemaValidationError(
            "column is missing required 'type'",
            schema_path,
            field=col_name,
        )

    mapped = DEFAULT_JVM_TYPES.get(str(type_name).lower())
    if not mapped:
        raise TypeMappingError(str(type_name), f"column '{col_name}'", schema_path)
    return mapped


def _named_entity(raw: Any, fallback_name: str) -> tuple[str, bool, str | None]:
    if raw is None:
        return fallback_name, True, None
    if isinstance(raw, str):
        return raw, False, None
    if not isinstance(raw, dict):
        raise SchemaValidationError("must be a name or a mapping", field=fallback_name or "schema")
    version = raw.get("version")
    return (
        str(raw.get("name", fallback_name)),
        bool(raw.get("default", False)),
        None if version is None else str(version),
    )


def _string_list(raw: Any) -> list[str]:
    if isinstance(raw, str):
        return [raw]
    if isinstance(raw, list):
        return [str(item) for item in raw]
    return []


def _determine_primary_key(table: dict[str, Any]) -> KeyFact | None:
    """Determine the primary key from the table, then from column flags."""
    keys = _string_list(table.get("primary_key"))

    if not keys:
        keys = [
            str(col["name"])
            for col in table.get("columns", [])
            if isinstance(col, dict) and col.get("primary_key", False)
        ]

    # Deduplicate while preserving order
    seen: set[str] = set()
    keys = [k for k in keys if not (k in seen or seen.add(k))]  # type: ignore[func-returns-value]
    if not keys:
        return None
    return KeyFact(name=f"pk_{table['name']}", columns=tuple(keys))


def _extract_unique_keys(table: dict[str, Any]) -> list[KeyFact]:
    """Collect declared unique keys plus ``unique: true`` column flags."""
    table_name = str(table["name"])
    unique_keys: list[KeyFact] = []

    for raw in table.get("unique_keys", []) or []:
        columns = tuple(_string_list(raw.get("columns")))
        name = str(raw.get("name") or f"uk_{table_name}_{'_'.join(columns)}")
        unique_keys.append(KeyFact(name=name, columns=columns))

    for col in table.get("columns", []):
        if not (isinstance(col, dict) and col.get("unique", False)):
            continue
        col_name = str(col["name"])
        if any(key.columns == (col_name,) for key in unique_keys):
            continue
        unique_keys.append(KeyFact(name=f"uk_{table_name}_{col_name}", columns=(col_name,)))

    return unique_keys


def _sort_order(raw: Any) -> SortOrder | None:
    if isinstance(raw, str) and raw.upper() in SortOrder.__members__:
        return SortOrder[raw.upper()]
    return None


def _extract_indexes(table: dict[str, Any]) -> list[IndexFact]:
    """Extract index definitions, keeping declared column order."""
    raw_indexes = table.get("indexes", [])
    if not isinstance(raw_indexes, list):
        return []

    table_name = str(table["name"])
    indexes: list[IndexFact] = []
    for raw in raw_indexes:
        columns: list[IndexColumn] = []
        for entry in raw.get("columns", []) or []:
            if isinstance(entry, dict):
                columns.append(IndexColumn(str(entry["name"]), _sort_order(entry.get("order"))))
            else:
                columns.append(IndexColumn(str(entry)))
        name = raw.get("name") or f"idx_{table_name}_{'_'.join(c.name for c in columns)}"
        indexes.append(
            IndexFact(name=str(name), unique=bool(raw.get("unique", False)), columns=tuple(columns))
        )
    return indexes


def _extract_foreign_keys(table: dict[str, Any]) -> list[ForeignKeyFact]:
    """Extract foreign keys from the table and from column ``references``."""
    table_name = str(table["name"])
    fks: list[ForeignKeyFact] = []

    for raw in table.get("foreign_keys", []) or []:
        columns = tuple(_string_list(raw.get("columns")))
        referenced = str(raw["references"])
        fks.append(
            ForeignKeyFact(
                name=str(raw.get("name") or f"fk_{table_name}_{referenced}"),
                table=table_name,
                columns=columns,
                referenced_table=referenced,
                method_name=raw.get("method_name"),
            )
        )

    for col in table.get("columns", []):
        if not (isinstance(col, dict) and col.get("references")):
            continue
        col_name = str(col["name"])
        fks.append(
            ForeignKeyFact(
                name=f"fk_{table_name}_{col_name}",
                table=table_name,
                columns=(col_name,),
                referenced_table=str(col["references"]),
            )
        )

    return fks


def _build_table(
    table: dict[str, Any],
    schema: SchemaFact,
    schema_path: str | None = None,
) -> TableFact:
    if not isinstance(table, dict) or "name" not in table:
        raise SchemaValidationError("table is missing required 'name'", schema_path)

    table_name = str(table["name"])
    raw_columns = table.get("columns", [])
    if not isinstance(raw_columns, list):
        raise SchemaValidationError("'columns' must be a list", schema_path, field=table_name)

    primary_key = _determine_primary_key(table)
    unique_keys = _extract_unique_keys(table)
    indexes = _extract_indexes(table)

    columns: list[ColumnFact] = []
    for position, column in enumerate(raw_columns):
        if not isinstance(column, dict) or "name" not in column:
            raise SchemaValidationError(
                f"column #{position + 1} is missing required 'name'",
                schema_path,
                field=table_name,
            )
        name = str(column["name"])
        columns.append(
            ColumnFact(
                table=table_name,
                name=name,
                type_name=jvm_type_for_column(column, schema_path),
                position=position,
                nullable=bool(column.get("nullable", True)),
                defaulted=column.get("default") is not None,
                identity=bool(column.get("identity", column.get("auto_increment", False))),
                length=int(column.get("length", 0) or 0),
                precision=int(column.get("precision", 0) or 0),
                scale=int(column.get("scale", 0) or 0),
                primary_key=primary_key if primary_key and name in primary_key.columns else None,
                unique_keys=tuple(key for key in unique_keys if name in key.columns),
                indexes=tuple(
                    index.name for index in indexes if any(c.name == name for c in index.columns)
                ),
                comment=column.get("comment"),
            )
        )

    return TableFact(
        name=table_name,
        schema=schema,
        columns=tuple(columns),
        primary_key=primary_key,
        unique_keys=tuple(unique_keys),
        indexes=tuple(indexes),
        foreign_keys=tuple(_extract_foreign_keys(table)),
        comment=table.get("comment"),
    )


def build_metadata(data: dict[str, Any], schema_path: str | None = None) -> SchemaMetadata:
    """Turn a parsed schema document into metadata facts.

    Raises:
        SchemaValidationError: If the document lacks a ``tables`` list or a
            table/column is malformed.
        TypeMappingError: If a column type has no JVM mapping.
    """
    tables = data.get("tables")
    if not isinstance(tables, list):
        raise SchemaValidationError("schema must provide a 'tables' list", schema_path)

    catalog_name, catalog_default, catalog_version = _named_entity(data.get("catalog"), "")
    schema_name, schema_default, schema_version = _named_entity(data.get("schema"), "")
    catalog = CatalogFact(catalog_name, catalog_default, catalog_version)
    schema = SchemaFact(schema_name, schema_default, schema_version, catalog)

    options = data.get("options") or {}
    if not isinstance(options, dict):
        raise SchemaValidationError("'options' must be a mapping", schema_path)

    return SchemaMetadata(
        schema=schema,
        tables=tuple(_build_table(table, schema, schema_path) for table in tables),
        options=options,
        source=schema_path,
    )


def load_metadata(path: Path) -> SchemaMetadata:
    """Load one schema file into metadata facts."""
    return build_metadata(load_schema(path), str(path))
