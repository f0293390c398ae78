"""Annotation planning for generated types and properties.

Decides which persistence, validation and provenance annotations a table or
column gets. Only the facts needed to pick an annotation are looked at; the
annotation frameworks themselves are the generated code's concern.
"""

from __future__ import annotations

from typing import Any, Final

from ..shared.metadata import ColumnFact, IndexFact, KeyFact, TableFact
from ..shared.options import GenerationOptions
from .model import Annotation
from .types import TypeRef

PERSISTENCE_PACKAGE: Final[str] = "javax.persistence"
VALIDATION_PACKAGE: Final[str] = "javax.validation.constraints"

GENERATED: Final = TypeRef("javax.annotation", ("Generated",))
ENTITY: Final = TypeRef(PERSISTENCE_PACKAGE, ("Entity",))
TABLE: Final = TypeRef(PERSISTENCE_PACKAGE, ("Table",))
UNIQUE_CONSTRAINT: Final = TypeRef(PERSISTENCE_PACKAGE, ("UniqueConstraint",))
INDEX: Final = TypeRef(PERSISTENCE_PACKAGE, ("Index",))
COLUMN: Final = TypeRef(PERSISTENCE_PACKAGE, ("Column",))
ID: Final = TypeRef(PERSISTENCE_PACKAGE, ("Id",))
GENERATED_VALUE: Final = TypeRef(PERSISTENCE_PACKAGE, ("GeneratedValue",))
IDENTITY_STRATEGY: Final = TypeRef(PERSISTENCE_PACKAGE, ("GenerationType", "IDENTITY"))
NOT_NULL: Final = TypeRef(VALIDATION_PACKAGE, ("NotNull",))
SIZE: Final = TypeRef(VALIDATION_PACKAGE, ("Size",))
DIGITS: Final = TypeRef(VALIDATION_PACKAGE, ("Digits",))
INTROSPECTED: Final = TypeRef("io.micronaut.core.annotation", ("Introspected",))

GETTER: Final[str] = "get"

_EXACT_DECIMALS: Final[frozenset[str]] = frozenset({"BigDecimal", "BigInteger"})


def index_column_list(index: IndexFact) -> str:
    """Render an index's columns in declared order with explicit directions."""
    return ", ".join(
        f"{column.name} {column.order.value}" if column.order else column.name
        for column in index.columns
    )


class AnnotationPlanner:
    """Plans class- and property-level annotations for one generation run."""

    def __init__(
        self,
        options: GenerationOptions,
        generated_at: str,
        generator_version: str,
        generator_name: str = "pojogen",
    ) -> None:
        self.options = options
        self.generated_at = generated_at
        self.generator_version = generator_version
        self.generator_name = generator_name

    def class_annotations(self, table: TableFact) -> list[Annotation]:
        """Annotations for a table's data holder."""
        annotations: list[Annotation] = []
        if self.options.emit_generated_annotation:
            annotations.append(self.provenance(table))
        if self.options.emit_persistence_annotations:
            annotations.append(Annotation(ENTITY))
            annotations.append(self.table_annotation(table))
        if self.options.target_runtime_micronaut and self.options.emit_introspection_annotation:
            annotations.append(Annotation(INTROSPECTED))
        return annotations

    def contract_annotations(self, table: TableFact) -> list[Annotation]:
        """Annotations for a table's contract type: provenance only."""
        # @Entity/@Table/@Introspected belong on the concrete data holder only
        if self.options.emit_generated_annotation:
            return [self.provenance(table)]
        return []

    def provenance(self, table: TableFact) -> Annotation:
        values = [f"{self.generator_name} version:{self.generator_version}"]
        if self.options.use_catalog_version and (table.catalog.version or "").strip():
            values.append(f"catalog version:{table.catalog.version}")
        if self.options.use_schema_version and (table.schema.version or "").strip():
            values.append(f"schema version:{table.schema.version}")
        return Annotation(
            GENERATED,
            (
                ("value", tuple(values)),
                ("date", self.generated_at),
                ("comments", f"This class is generated by {self.generator_name}"),
            ),
        )

    def table_annotation(self, table: TableFact) -> Annotation:
        members: list[tuple[str, Any]] = [("name", table.name)]
        if not table.schema.default and table.schema.name:
            members.append(("schema", table.schema.name))

        unique_constraints = tuple(
            self.unique_constraint(key) for key in table.unique_keys if len(key.columns) > 1
        )
        if unique_constraints:
            members.append(("uniqueConstraints", unique_constraints))

        if self.options.emit_index_annotations:
            indexes = tuple(self.index(index) for index in table.indexes)
            if indexes:
                members.append(("indexes", indexes))

        return Annotation(TABLE, tuple(members))

    @staticmethod
    def unique_constraint(key: KeyFact) -> Annotation:
        return Annotation(UNIQUE_CONSTRAINT, (("columnNames", tuple(key.columns)),))

    @staticmethod
    def index(index: IndexFact) -> Annotation:
        members: list[tuple[str, Any]] = [("name", index.name), ("unique", index.unique)]
        if index.columns:
            members.append(("columnList", index_column_list(index)))
        return Annotation(INDEX, tuple(members))

    def property_annotations(self, column: ColumnFact, property_type: TypeRef) -> list[Annotation]:
        """Annotations for the property generated from ``column``."""
        annotations: list[Annotation] = []
        if self.options.emit_validation_annotations:
            annotations.extend(self.validation_annotations(column, property_type))
        if self.options.emit_persistence_annotations:
            annotations.extend(self.persistence_annotations(column))
        return annotations

    @staticmethod
    def validation_annotations(column: ColumnFact, property_type: TypeRef) -> list[Annotation]:
        annotations: list[Annotation] = []
        if not (column.nullable or column.defaulted or column.identity):
            annotations.append(Annotation(NOT_NULL, use_site=GETTER))

        if property_type.simple_name == "String":
            if column.length > 0:
                annotations.append(Annotation(SIZE, (("max", column.length),), GETTER))
        elif property_type.simple_name in _EXACT_DECIMALS:
            annotations.append(
                Annotation(
                    DIGITS,
                    (
                        ("integer", column.precision - column.scale),
                        ("fraction", column.scale),
                    ),
                    GETTER,
                )
            )
        return annotations

    @staticmethod
    def persistence_annotations(column: ColumnFact) -> list[Annotation]:
        annotations: list[Annotation] = []
        pk = column.primary_key
        if pk is not None and len(pk.columns) == 1:
            annotations.append(Annotation(ID, use_site=GETTER))
            if column.identity:
                annotations.append(
                    Annotation(GENERATED_VALUE, (("strategy", IDENTITY_STRATEGY),), GETTER)
                )

        members: list[tuple[str, Any]] = []
        if column.length > 0:
            members.append(("length", column.length))
        elif column.precision > 0:
            members.append(("precision", column.precision))
            if column.scale > 0:
                members.append(("scale", column.scale))
        members.append(("nullable", column.nullable))
        if any(len(key.columns) == 1 for key in column.unique_keys):
            members.append(("unique", True))
        members.append(("name", column.name))
        annotations.append(Annotation(COLUMN, tuple(members), GETTER))
        return annotations
