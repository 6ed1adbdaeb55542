"""Cross-entity validation of table schemas.

The validator checks the rules that span several parts of a table
(foreign keys against columns, indexes against columns, partitioning
against the primary key) before any SQL is generated. Every violation is
collected and reported at once in a :class:`SchemaValidationError`.
Findings that yield legal but questionable SQL are logged as warnings.

Key Components:
    - SchemaValidator: Validation pass over a TableSchema; never mutates it

Example:
    >>> SchemaValidator().validate(schema)  # raises SchemaValidationError on violations
"""

from __future__ import annotations

import logging

from ddlforge.architecture.table import TableSchema
from ddlforge.errors import ConfigurationError, SchemaValidationError
from ddlforge.hq.config import POSTGRES_MAX_IDENTIFIER_LENGTH

logger = logging.getLogger(__name__)


class SchemaValidator:
    """Validation pass over a table schema.

    Attributes:
        max_identifier_length: Identifiers longer than this produce a warning
    """

    def __init__(self, max_identifier_length: int = POSTGRES_MAX_IDENTIFIER_LENGTH):
        self.max_identifier_length = max_identifier_length

    def validate(self, schema: TableSchema) -> None:
        """Validate a schema, logging warnings and raising on violations.

        Args:
            schema: Table schema to validate

        Raises:
            SchemaValidationError: If any rule is violated; the error lists all of them
        """
        for warning in self.warnings(schema):
            logger.warning("Table %s: %s", schema.name, warning)
        violations = self.violations(schema)
        if violations:
            raise SchemaValidationError(schema.name, violations)

    def violations(self, schema: TableSchema) -> list[str]:
        """Rule violations, grouped by foreign keys, indexes, policies, partitioning."""
        columns = set(schema.column_names)
        found: list[str] = []

        for fk in schema.foreign_keys:
            if not fk.references_table.strip():
                found.append(f"Foreign key on column '{fk.column}' has no target table")
            if fk.column not in columns:
                found.append(f"Foreign key references unknown column '{fk.column}'")

        for index in schema.indexes:
            name = index.effective_name(schema.name)
            for column in index.columns:
                if column not in columns:
                    found.append(f"Index {name} references unknown column '{column}'")
            for column in index.include:
                if column not in columns:
                    found.append(
                        f"Index {name} includes unknown column '{column}'"
                    )

        for policy in schema.policies:
            if not policy.condition.strip():
                found.append(f"Policy '{policy.name}' has an empty USING condition")
            if policy.check_condition and not policy.command.allows_check:
                found.append(
                    f"Policy '{policy.name}' cannot have a WITH CHECK condition "
                    f"for {policy.command.sql_command}"
                )

        for constraint in schema.constraints:
            try:
                constraint.validate()
            except ConfigurationError as e:
                found.append(str(e))
                continue
            for column in getattr(constraint, "columns", []):
                if column not in columns:
                    found.append(
                        f"Constraint {constraint.name} references unknown column '{column}'"
                    )

        if schema.partition is not None:
            try:
                schema.partition.validate()
            except ConfigurationError as e:
                found.append(str(e))
            primary_key = set(schema.primary_key_columns)
            for column in schema.partition.columns:
                if not column.strip():
                    continue
                if column not in columns:
                    found.append(f"Partition column '{column}' is not a column of the table")
                elif column not in primary_key:
                    found.append(
                        f"Partition column '{column}' must be part of the primary key"
                    )
        return found

    def warnings(self, schema: TableSchema) -> list[str]:
        """Non-fatal findings about a schema."""
        found: list[str] = []
        if not schema.primary_key_columns:
            found.append("Table has no primary key")
        if schema.policies and not schema.enable_rls:
            found.append("Policies are defined but row level security is disabled")

        for fk in schema.foreign_keys:
            column = schema.column(fk.column)
            if column is None:
                continue
            for action in dict.fromkeys((fk.on_delete, fk.on_update)):
                if not action.is_valid_for_column(
                    column.effective_nullable, column.has_default
                ):
                    found.append(
                        f"{action.sql_clause} on foreign key column '{column.name}': "
                        + "; ".join(action.requirements)
                    )

        for column in schema.columns:
            if column.default is None:
                continue
            if not column.default.is_valid_for(column.sql_type):
                found.append(
                    f"Default {column.default.sql_expression} may not be valid "
                    f"for column '{column.name}' of type {column.sql_type}"
                )
            for warning in column.default.warnings:
                found.append(f"Column '{column.name}': {warning}")

        for identifier in self._identifiers(schema):
            if len(identifier) > self.max_identifier_length:
                found.append(
                    f"Identifier '{identifier}' exceeds {self.max_identifier_length} "
                    "characters and will be truncated by PostgreSQL"
                )
        return found

    @staticmethod
    def _identifiers(schema: TableSchema) -> list[str]:
        identifiers = [schema.name, *schema.column_names]
        identifiers += [i.effective_name(schema.name) for i in schema.indexes]
        identifiers += [f.effective_name(schema.name) for f in schema.foreign_keys]
        identifiers += [p.name for p in schema.policies]
        identifiers += [c.name for c in schema.constraints]
        return identifiers
