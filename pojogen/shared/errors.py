"""Custom exceptions for pojogen."""

from __future__ import annotations


class SchemaError(Exception):
    """Base exception for schema-related errors."""

    def __init__(self, message: str, schema_path: str | None = None) -> None:
        self.schema_path = schema_path
        full_message = f"{message}" if not schema_path else f"[{schema_path}] {message}"
        super().__init__(full_message)


class SchemaValidationError(SchemaError):
    """Raised when schema metadata is structurally unusable."""

    def __init__(
        self,
        message: str,
        schema_path: str | None = None,
        field: str | None = None,
    ) -> None:
        self.field = field
        if field:
            message = f"Field '{field}': {message}"
        super().__init__(message, schema_path)


class TypeMappingError(SchemaError):
    """Raised when a SQL type has no JVM type mapping."""

    def __init__(
        self,
        type_name: str,
        context: str,
        schema_path: str | None = None,
    ) -> None:
        self.type_name = type_name
        super().__init__(f"No type mapping for '{type_name}' ({context})", schema_path)


class ConfigurationError(SchemaError):
    """Raised when the generation options cannot be honoured for a table.

    This aborts the whole run.
    """

    def __init__(
        self,
        message: str,
        table: str | None = None,
        schema_path: str | None = None,
    ) -> None:
        self.table = table
        if table:
            message = f"Table '{table}': {message}"
        super().__init__(message, schema_path)
