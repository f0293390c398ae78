"""Relational schema metadata consumed by the generators.

These are plain value objects. They carry facts about catalogs, schemas,
tables, columns, keys and indexes and never talk to a database.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class SortOrder(Enum):
    """Explicit ordering of an index column."""

    ASC = "ASC"
    DESC = "DESC"


@dataclass(frozen=True, slots=True)
class CatalogFact:
    name: str
    default: bool = True
    version: str | None = None


@dataclass(frozen=True, slots=True)
class SchemaFact:
    name: str
    default: bool = True
    version: str | None = None
    catalog: CatalogFact = field(default_factory=lambda: CatalogFact(""))


@dataclass(frozen=True, slots=True)
class KeyFact:
    """A primary or unique key; ``columns`` keeps declaration order."""

    name: str
    columns: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class IndexColumn:
    name: str
    order: SortOrder | None = None


@dataclass(frozen=True, slots=True)
class IndexFact:
    name: str
    unique: bool
    columns: tuple[IndexColumn, ...]


@dataclass(frozen=True, slots=True)
class ForeignKeyFact:
    """A foreign key from ``table`` to ``referenced_table``.

    ``method_name`` lets the schema author name the traversal method when a
    table has several keys to the same target.
    """

    name: str
    table: str
    columns: tuple[str, ...]
    referenced_table: str
    method_name: str | None = None


@dataclass(frozen=True, slots=True)
class ColumnFact:
    """A single table column.

    ``type_name`` is the JVM type descriptor, e.g. ``java.lang.String`` or
    ``byte[]``.
    """

    table: str
    name: str
    type_name: str
    position: int
    nullable: bool = True
    defaulted: bool = False
    identity: bool = False
    length: int = 0
    precision: int = 0
    scale: int = 0
    primary_key: KeyFact | None = None
    unique_keys: tuple[KeyFact, ...] = ()
    indexes: tuple[str, ...] = ()
    comment: str | None = None

    @property
    def is_array(self) -> bool:
        return self.type_name.endswith("[]")


@dataclass(frozen=True, slots=True)
class TableFact:
    name: str
    schema: SchemaFact
    columns: tuple[ColumnFact, ...]
    primary_key: KeyFact | None = None
    unique_keys: tuple[KeyFact, ...] = ()
    indexes: tuple[IndexFact, ...] = ()
    foreign_keys: tuple[ForeignKeyFact, ...] = ()
    comment: str | None = None

    @property
    def catalog(self) -> CatalogFact:
        return self.schema.catalog

    def foreign_keys_to(self, referenced_table: str) -> tuple[ForeignKeyFact, ...]:
        """Return the foreign keys of this table that point at ``referenced_table``."""
        return tuple(
            fk for fk in self.foreign_keys if fk.referenced_table == referenced_table
        )

    def qualified_name(self, column: ColumnFact | None = None) -> str:
        """Dotted ``catalog.schema.table[.column]`` name, skipping blank parts."""
        parts = [self.catalog.name, self.schema.name, self.name]
        if column is not None:
            parts.append(column.name)
        return ".".join(part for part in parts if part)


@dataclass(frozen=True, slots=True)
class SchemaMetadata:
    """Everything loaded from a single schema file."""

    schema: SchemaFact
    tables: tuple[TableFact, ...]
    options: dict[str, Any] = field(default_factory=dict)
    source: str | None = None

    def table(self, name: str) -> TableFact | None:
        return next((table for table in self.tables if table.name == name), None)


Definition = Union[CatalogFact, SchemaFact, TableFact, ColumnFact, ForeignKeyFact, IndexFact, KeyFact]
