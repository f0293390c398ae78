import pytest

from pojogen.db_codegen.types import (
    TypeNameResolver,
    TypeRef,
    best_guess,
    type_variable,
)


class TestTypeRef:
    def test_names(self):
        ref = TypeRef("javax.persistence", ("GenerationType", "IDENTITY"))
        assert ref.simple_name == "IDENTITY"
        assert ref.top_level == "GenerationType"
        assert ref.canonical_name == "javax.persistence.GenerationType.IDENTITY"

    def test_nullability(self):
        ref = TypeRef("kotlin", ("String",))
        assert ref.nullable is False
        assert ref.as_nullable().nullable is True
        assert ref.as_nullable().as_non_nullable() == ref
        assert str(ref.as_nullable()) == "kotlin.String?"

    def test_as_nullable_returns_self_when_nullable(self):
        ref = TypeRef("kotlin", ("String",), nullable=True)
        assert ref.as_nullable() is ref

    def test_is_array(self):
        assert TypeRef("kotlin", ("ByteArray",)).is_array is True
        assert TypeRef("kotlin", ("String",)).is_array is False

    def test_type_variable(self):
        ref = type_variable("E")
        assert ref.package == ""
        assert ref.canonical_name == "E"


class TestBestGuess:
    @pytest.mark.parametrize(
        "name,package,simple_names",
        [
            ("java.math.BigDecimal", "java.math", ("BigDecimal",)),
            ("com.example.Outer.Inner", "com.example", ("Outer", "Inner")),
            ("Foo", "", ("Foo",)),
        ],
    )
    def test_guess(self, name, package, simple_names):
        ref = best_guess(name)
        assert ref.package == package
        assert ref.simple_names == simple_names

    @pytest.mark.parametrize("name", ["java.math", "", "com..example.Foo", "com.example.Foo-Bar"])
    def test_failure(self, name):
        with pytest.raises(ValueError) as exc_info:
            best_guess(name)
        assert "couldn't make a guess for" in str(exc_info.value)


class TestTypeNameResolver:
    @pytest.mark.parametrize(
        "jvm_type,canonical",
        [
            ("java.lang.String", "kotlin.String"),
            ("java.lang.Integer", "kotlin.Int"),
            ("java.lang.Long", "kotlin.Long"),
            ("java.lang.Boolean", "kotlin.Boolean"),
            ("java.lang.Object", "kotlin.Any"),
            ("java.math.BigDecimal", "java.math.BigDecimal"),
            ("java.time.LocalDateTime", "java.time.LocalDateTime"),
            ("java.util.UUID", "java.util.UUID"),
            ("byte[]", "kotlin.ByteArray"),
            ("int[]", "kotlin.IntArray"),
            ("boolean[]", "kotlin.BooleanArray"),
        ],
    )
    def test_resolve(self, jvm_type, canonical):
        ref = TypeNameResolver().resolve(jvm_type)
        assert ref.canonical_name == canonical
        assert ref.nullable is True

    def test_resolve_is_cached(self):
        resolver = TypeNameResolver()
        assert resolver.resolve("java.lang.String") is resolver.resolve("java.lang.String")

    def test_resolve_failure_propagates(self):
        with pytest.raises(ValueError):
            TypeNameResolver().resolve("not.a.type")

    def test_resolve_all(self):
        refs = TypeNameResolver().resolve_all(["java.io.Serializable", " ", "com.example.Marker"])
        assert [r.canonical_name for r in refs] == ["java.io.Serializable", "com.example.Marker"]
        assert all(r.nullable is False for r in refs)
