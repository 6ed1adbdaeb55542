"""ddlforge: declarative PostgreSQL table definitions compiled to DDL.

ddlforge turns a structured description of a table (columns, constraints,
indexes, row-level security policies, foreign keys, partitioning) into
PostgreSQL DDL text. The same definition can be emitted under five
migration modes, from a plain CREATE TABLE to guarded ALTER TABLE blocks.

Key Features:
    - Typed, immutable table model loadable from YAML
    - Cross-entity validation before any SQL is generated
    - Five migration strategies sharing the same stateless builders
    - Whitespace-only, idempotent SQL formatter

Example:
    >>> from ddlforge import SchemaCompiler, TableSchema, GeneratorConfig
    >>> schema = TableSchema.from_yaml("users.yaml")
    >>> sql = SchemaCompiler(GeneratorConfig()).compile(schema)
"""

# --- Core orchestration ---------------------------------------------------
from .hq import (
    GeneratorConfig,
    MigrationConfig,
    SchemaBuilder,
    SchemaCompiler,
    SchemaValidator,
)

# --- Architecture ----------------------------------------------------------
from .architecture import (
    ColumnSchema,
    ColumnType,
    DatabaseIndex,
    DefaultValue,
    ForeignKey,
    ForeignKeyAction,
    IndexMethod,
    PolicyCommand,
    RlsPolicy,
    TableSchema,
)

# --- SQL -------------------------------------------------------------------
from .sql import format_sql

# --- Enums & errors --------------------------------------------------------
from .errors import ConfigurationError, DDLForgeError, SchemaValidationError
from .onto import MigrationMode

__all__ = [
    # Orchestration
    "SchemaCompiler",
    "SchemaBuilder",
    "SchemaValidator",
    "GeneratorConfig",
    "MigrationConfig",
    # Architecture
    "TableSchema",
    "ColumnSchema",
    "ColumnType",
    "DefaultValue",
    "DatabaseIndex",
    "ForeignKey",
    "ForeignKeyAction",
    "IndexMethod",
    "PolicyCommand",
    "RlsPolicy",
    # SQL
    "format_sql",
    # Enums & errors
    "MigrationMode",
    "DDLForgeError",
    "ConfigurationError",
    "SchemaValidationError",
]
