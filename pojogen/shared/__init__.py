"""Shared utilities for pojogen."""

from .schema_loader import (
    DEFAULT_JVM_TYPES,
    build_metadata,
    collect_schema_paths,
    load_metadata,
    load_schema,
)
from .naming import (
    KOTLIN_KEYWORDS,
    BooleanAccessorStrategy,
    DefaultNamingStrategy,
    Mode,
    NamingStrategy,
    create_naming_strategy,
    escape_identifier,
    normalize,
)
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
from .options import (
    GenerationOptions,
    merge_option_bags,
    parse_option_pairs,
    parse_options,
)
from .errors import (
    ConfigurationError,
    SchemaError,
    SchemaValidationError,
    TypeMappingError,
)

__all__ = [
    # Schema loading
    "DEFAULT_JVM_TYPES",
    "build_metadata",
    "collect_schema_paths",
    "load_metadata",
    "load_schema",
    # Naming
    "KOTLIN_KEYWORDS",
    "BooleanAccessorStrategy",
    "DefaultNamingStrategy",
    "Mode",
    "NamingStrategy",
    "create_naming_strategy",
    "escape_identifier",
    "normalize",
    # Metadata
    "CatalogFact",
    "ColumnFact",
    "ForeignKeyFact",
    "IndexColumn",
    "IndexFact",
    "KeyFact",
    "SchemaFact",
    "SchemaMetadata",
    "SortOrder",
    "TableFact",
    # Options
    "GenerationOptions",
    "merge_option_bags",
    "parse_option_pairs",
    "parse_options",
    # Errors
    "ConfigurationError",
    "SchemaError",
    "SchemaValidationError",
    "TypeMappingError",
]
