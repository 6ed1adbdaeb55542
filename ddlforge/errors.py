"""Exceptions raised while validating or compiling table definitions.

All errors derive from ``ValueError`` so callers that already guard schema
loading with ``except ValueError`` keep working.
"""

from __future__ import annotations


class DDLForgeError(ValueError):
    """Base class for ddlforge errors."""


class ConfigurationError(DDLForgeError):
    """A structural rule was violated by one entity of a table definition.

    Raised inline by builders and value types (empty foreign key target,
    unknown index column, invalid constraint name, ...) before any SQL for
    the table is returned.
    """


class SchemaValidationError(DDLForgeError):
    """Cross-entity invariants of a table definition do not hold.

    Attributes:
        table: Name of the offending table
        violations: Human-readable description of every violated rule
    """

    def __init__(self, table: str, violations: list[str]):
        self.table = table
        self.violations = list(violations)
        details = "; ".join(self.violations)
        super().__init__(f"Schema validation failed for table {table}: {details}")
