"""Compilation of a table schema into DDL text.

Key Components:
    - SchemaCompiler: Runs timestamp injection, validation, the migration
      strategy and the formatter for one table at a time
    - with_timestamps: Appends created_at/updated_at columns to a schema

Example:
    >>> compiler = SchemaCompiler(GeneratorConfig(add_timestamps=True))
    >>> sql = compiler.compile(schema)
"""

from __future__ import annotations

import logging

from ddlforge.architecture.column import ColumnSchema
from ddlforge.architecture.column_types import ColumnKind, ColumnType
from ddlforge.architecture.default_values import CURRENT_TIMESTAMP
from ddlforge.architecture.table import TableSchema
from ddlforge.hq.config import GeneratorConfig
from ddlforge.hq.strategies import run_strategy
from ddlforge.hq.validator import SchemaValidator
from ddlforge.sql.format import format_sql

logger = logging.getLogger(__name__)

TIMESTAMP_COLUMNS = ("created_at", "updated_at")


def with_timestamps(schema: TableSchema) -> TableSchema:
    """Return a copy of the schema with created_at/updated_at appended.

    Each column is TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
    and is only added when the schema has no column of that name.
    """
    existing = set(schema.column_names)
    extra = [
        ColumnSchema(
            name=name,
            type=ColumnType(kind=ColumnKind.TIMESTAMPTZ),
            is_nullable=False,
            default=CURRENT_TIMESTAMP,
        )
        for name in TIMESTAMP_COLUMNS
        if name not in existing
    ]
    if not extra:
        return schema
    return schema.evolve(columns=[*schema.columns, *extra])


class SchemaCompiler:
    """Compiles table schemas into PostgreSQL DDL.

    The compiler holds only its configuration; each call works on its own
    schema, so one instance can serve any number of tables.

    Attributes:
        config: Generator configuration
    """

    def __init__(self, config: GeneratorConfig | None = None):
        self.config = config if config is not None else GeneratorConfig()
        self.validator = SchemaValidator(
            max_identifier_length=self.config.migration.max_identifier_length
        )

    def compile(self, schema: TableSchema) -> str:
        """Generate the DDL of one table.

        Args:
            schema: Table schema to compile

        Returns:
            str: Statements separated by blank lines, each terminated by ``;``

        Raises:
            SchemaValidationError: If validation is enabled and the schema is invalid
            ConfigurationError: If a builder meets an invalid entity
        """
        if self.config.add_timestamps:
            schema = with_timestamps(schema)
        if self.config.validate_schema:
            self.validator.validate(schema)

        sql = run_strategy(schema, self.config)
        extensions = schema.required_extensions
        if extensions:
            logger.info(
                "Table %s requires extension(s): %s", schema.name, ", ".join(extensions)
            )
        if self.config.format_sql:
            sql = format_sql(sql)
        logger.debug("Compiled table %s (%d characters)", schema.name, len(sql))
        return sql
