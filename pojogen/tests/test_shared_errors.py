from pojogen.shared.errors import (
    ConfigurationError,
    SchemaError,
    SchemaValidationError,
    TypeMappingError,
)


class TestSchemaError:
    def test_init_no_path(self):
        error = SchemaError("test message")
        assert str(error) == "test message"
        assert error.schema_path is None

    def test_init_with_path(self):
        error = SchemaError("test message", "path/to/schema.yaml")
        assert str(error) == "[path/to/schema.yaml] test message"
        assert error.schema_path == "path/to/schema.yaml"


class TestSchemaValidationError:
    def test_init_no_field_no_path(self):
        error = SchemaValidationError("validation failed")
        assert str(error) == "validation failed"
        assert error.field is None
        assert error.schema_path is None

    def test_init_with_field(self):
        error = SchemaValidationError("invalid value", field="name")
        assert str(error) == "Field 'name': invalid value"
        assert error.field == "name"

    def test_init_with_field_and_path(self):
        error = SchemaValidationError("invalid value", "schema.yaml", "name")
        assert str(error) == "[schema.yaml] Field 'name': invalid value"
        assert error.field == "name"
        assert error.schema_path == "schema.yaml"


class TestTypeMappingError:
    def test_init(self):
        error = TypeMappingError("geometry", "column 'shape'")
        assert str(error) == "No type mapping for 'geometry' (column 'shape')"
        assert error.type_name == "geometry"
        assert error.schema_path is None

    def test_init_with_path(self):
        error = TypeMappingError("geometry", "column 'shape'", "schema.yaml")
        assert str(error) == "[schema.yaml] No type mapping for 'geometry' (column 'shape')"
        assert error.schema_path == "schema.yaml"


class TestConfigurationError:
    def test_init(self):
        error = ConfigurationError("needs a contract type")
        assert str(error) == "needs a contract type"
        assert error.table is None

    def test_init_with_table(self):
        error = ConfigurationError("needs a contract type", table="wide")
        assert str(error) == "Table 'wide': needs a contract type"
        assert error.table == "wide"

    def test_is_schema_error(self):
        assert isinstance(ConfigurationError("x"), SchemaError)
