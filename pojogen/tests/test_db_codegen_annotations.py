import pytest

from pojogen.db_codegen.annotations import (
    COLUMN,
    DIGITS,
    ENTITY,
    GENERATED,
    GENERATED_VALUE,
    ID,
    IDENTITY_STRATEGY,
    INDEX,
    INTROSPECTED,
    NOT_NULL,
    SIZE,
    TABLE,
    UNIQUE_CONSTRAINT,
    AnnotationPlanner,
    index_column_list,
)
from pojogen.db_codegen.types import TypeRef
from pojogen.shared.metadata import (
    CatalogFact,
    ColumnFact,
    IndexColumn,
    IndexFact,
    KeyFact,
    SchemaFact,
    SortOrder,
    TableFact,
)
from pojogen.shared.options import parse_options

STRING = TypeRef("kotlin", ("String",), nullable=True)
LONG = TypeRef("kotlin", ("Long",), nullable=True)
DECIMAL = TypeRef("java.math", ("BigDecimal",), nullable=True)

PK = KeyFact("pk_orders", ("id",))


def _planner(**options: str) -> AnnotationPlanner:
    return AnnotationPlanner(parse_options(options), "2026-01-01T00:00:00+00:00", "1.2.3")


def _column(name: str = "id", **kwargs) -> ColumnFact:
    kwargs.setdefault("type_name", "java.lang.Long")
    return ColumnFact(table="orders", name=name, position=0, **kwargs)


def _table(
    schema: SchemaFact | None = None,
    unique_keys: tuple[KeyFact, ...] = (),
    indexes: tuple[IndexFact, ...] = (),
) -> TableFact:
    return TableFact(
        name="orders",
        schema=schema or SchemaFact("public"),
        columns=(_column(),),
        primary_key=PK,
        unique_keys=unique_keys,
        indexes=indexes,
    )


class TestIndexColumnList:
    def test_declared_order_and_directions(self):
        index = IndexFact(
            "idx",
            False,
            (
                IndexColumn("b", SortOrder.DESC),
                IndexColumn("a"),
                IndexColumn("c", SortOrder.ASC),
            ),
        )
        assert index_column_list(index) == "b DESC, a, c ASC"


class TestClassAnnotations:
    def test_nothing_enabled(self):
        assert _planner().class_annotations(_table()) == []

    def test_order(self):
        planner = _planner(
            generated_annotation="true",
            jpa_annotations="true",
            micronaut="true",
            introspected="true",
        )
        types = [a.type for a in planner.class_annotations(_table())]
        assert types == [GENERATED, ENTITY, TABLE, INTROSPECTED]

    def test_introspected_needs_micronaut(self):
        planner = _planner(introspected="true")
        assert planner.class_annotations(_table()) == []

    def test_contract_carries_only_provenance(self):
        planner = _planner(generated_annotation="true", jpa_annotations="true")
        types = [a.type for a in planner.contract_annotations(_table())]
        assert types == [GENERATED]

    def test_contract_without_provenance(self):
        assert _planner(jpa_annotations="true").contract_annotations(_table()) == []


class TestProvenance:
    def test_generator_version_only(self):
        annotation = _planner().provenance(_table())
        assert annotation.member("value") == ("pojogen version:1.2.3",)
        assert annotation.member("date") == "2026-01-01T00:00:00+00:00"
        assert annotation.member("comments") == "This class is generated by pojogen"

    def test_catalog_and_schema_versions(self):
        schema = SchemaFact("public", version="2024.1", catalog=CatalogFact("main", version="7"))
        planner = _planner(catalog_version_provider="true", schema_version_provider="true")
        assert planner.provenance(_table(schema)).member("value") == (
            "pojogen version:1.2.3",
            "catalog version:7",
            "schema version:2024.1",
        )

    def test_blank_versions_skipped(self):
        schema = SchemaFact("public", version=" ", catalog=CatalogFact("main", version=None))
        planner = _planner(catalog_version_provider="true", schema_version_provider="true")
        assert planner.provenance(_table(schema)).member("value") == ("pojogen version:1.2.3",)

    def test_versions_need_provider_option(self):
        schema = SchemaFact("public", version="2024.1", catalog=CatalogFact("main", version="7"))
        assert _planner().provenance(_table(schema)).member("value") == ("pojogen version:1.2.3",)


class TestTableAnnotation:
    def test_default_schema_omitted(self):
        annotation = _planner().table_annotation(_table())
        assert annotation.members == (("name", "orders"),)

    def test_non_default_schema(self):
        annotation = _planner().table_annotation(_table(SchemaFact("sales", default=False)))
        assert annotation.member("schema") == "sales"

    def test_only_multi_column_unique_keys(self):
        keys = (KeyFact("uk_single", ("ref",)), KeyFact("uk_pair", ("ref", "region")))
        annotation = _planner().table_annotation(_table(unique_keys=keys))
        (constraint,) = annotation.member("uniqueConstraints")
        assert constraint.type == UNIQUE_CONSTRAINT
        assert constraint.member("columnNames") == ("ref", "region")

    def test_indexes(self):
        index = IndexFact("idx_total", True, (IndexColumn("total", SortOrder.DESC), IndexColumn("id")))
        annotation = _planner().table_annotation(_table(indexes=(index,)))
        (rendered,) = annotation.member("indexes")
        assert rendered.type == INDEX
        assert rendered.members == (
            ("name", "idx_total"),
            ("unique", True),
            ("columnList", "total DESC, id"),
        )

    @pytest.mark.parametrize("version,present", [("2.0", False), ("2.1", True), ("", True)])
    def test_indexes_gated_by_jpa_version(self, version, present):
        index = IndexFact("idx_total", False, (IndexColumn("total"),))
        annotation = _planner(jpa_version=version).table_annotation(_table(indexes=(index,)))
        assert (annotation.member("indexes") is not None) is present


class TestPropertyAnnotations:
    def test_nothing_enabled(self):
        assert _planner().property_annotations(_column(nullable=False), LONG) == []

    def test_validation_before_persistence(self):
        planner = _planner(validation_annotations="true", jpa_annotations="true")
        column = _column(nullable=False, primary_key=PK)
        types = [a.type for a in planner.property_annotations(column, LONG)]
        assert types == [NOT_NULL, ID, COLUMN]

    def test_getter_use_site(self):
        planner = _planner(validation_annotations="true", jpa_annotations="true")
        annotations = planner.property_annotations(_column(nullable=False, primary_key=PK), LONG)
        assert all(a.use_site == "get" for a in annotations)


class TestValidationAnnotations:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"nullable": True},
            {"nullable": False, "defaulted": True},
            {"nullable": False, "identity": True},
        ],
    )
    def test_not_null_skipped(self, kwargs):
        annotations = AnnotationPlanner.validation_annotations(_column(**kwargs), LONG)
        assert annotations == []

    def test_not_null(self):
        (annotation,) = AnnotationPlanner.validation_annotations(_column(nullable=False), LONG)
        assert annotation.type == NOT_NULL

    def test_size_for_strings(self):
        column = _column("ref", type_name="java.lang.String", length=32)
        (annotation,) = AnnotationPlanner.validation_annotations(column, STRING)
        assert annotation.type == SIZE
        assert annotation.member("max") == 32

    def test_no_size_without_length(self):
        column = _column("ref", type_name="java.lang.String")
        assert AnnotationPlanner.validation_annotations(column, STRING) == []

    def test_digits_for_decimals(self):
        column = _column("total", type_name="java.math.BigDecimal", precision=10, scale=2)
        (annotation,) = AnnotationPlanner.validation_annotations(column, DECIMAL)
        assert annotation.type == DIGITS
        assert annotation.members == (("integer", 8), ("fraction", 2))


class TestPersistenceAnnotations:
    def test_single_column_primary_key(self):
        column = _column(nullable=False, identity=True, primary_key=PK)
        annotations = AnnotationPlanner.persistence_annotations(column)
        assert [a.type for a in annotations] == [ID, GENERATED_VALUE, COLUMN]
        assert annotations[1].member("strategy") == IDENTITY_STRATEGY

    def test_composite_primary_key_has_no_id(self):
        pk = KeyFact("pk", ("id", "region"))
        annotations = AnnotationPlanner.persistence_annotations(_column(primary_key=pk))
        assert [a.type for a in annotations] == [COLUMN]

    def test_column_length(self):
        column = _column("ref", type_name="java.lang.String", length=32)
        (annotation,) = AnnotationPlanner.persistence_annotations(column)
        assert annotation.members == (("length", 32), ("nullable", True), ("name", "ref"))

    def test_column_precision_and_scale(self):
        column = _column("total", precision=10, scale=2, nullable=False)
        (annotation,) = AnnotationPlanner.persistence_annotations(column)
        assert annotation.members == (
            ("precision", 10),
            ("scale", 2),
            ("nullable", False),
            ("name", "total"),
        )

    def test_column_precision_without_scale(self):
        (annotation,) = AnnotationPlanner.persistence_annotations(_column("n", precision=5))
        assert annotation.members == (("precision", 5), ("nullable", True), ("name", "n"))

    def test_unique_only_for_sole_member(self):
        single = _column("ref", unique_keys=(KeyFact("uk", ("ref",)),))
        pair = _column("ref", unique_keys=(KeyFact("uk", ("ref", "region")),))
        assert AnnotationPlanner.persistence_annotations(single)[-1].member("unique") is True
        assert AnnotationPlanner.persistence_annotations(pair)[-1].member("unique") is None
