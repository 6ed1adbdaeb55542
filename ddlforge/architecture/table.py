"""Table schema: the unit compiled into DDL.

This module defines :class:`TableSchema`, which aggregates the columns,
indexes, policies, foreign keys, table constraints and partition strategy
of one table. A table schema is built once per compilation (from YAML, a
dict, or Python code) and read by the validator, the SQL builders and the
migration strategies without ever being mutated.

Key Components:
    - TableSchema: Table definition with derived primary-key information

Example:
    >>> schema = TableSchema.from_dict(
    ...     {
    ...         "name": "users",
    ...         "columns": [
    ...             {"name": "id", "type": "uuid", "is_primary_key": True},
    ...             {"name": "email", "type": "text", "is_nullable": False},
    ...         ],
    ...     }
    ... )
    >>> schema.primary_key_columns
    ['id']
"""

from __future__ import annotations

import logging

from pydantic import Field, field_validator

from ddlforge.architecture.base import ConfigBaseModel
from ddlforge.architecture.column import ColumnSchema
from ddlforge.architecture.constraints import PartitionStrategy, TableConstraint
from ddlforge.architecture.foreign_key import ForeignKey
from ddlforge.architecture.index import DatabaseIndex
from ddlforge.architecture.policy import RlsPolicy

logger = logging.getLogger(__name__)


class TableSchema(ConfigBaseModel):
    """Declarative description of a PostgreSQL table.

    Attributes:
        name: Table name
        columns: Columns in declaration order
        indexes: Secondary indexes
        policies: Row-level security policies
        foreign_keys: Foreign keys, matched to columns by name
        constraints: Named table-level constraints
        comment: Table comment
        enable_rls: Whether row-level security is enabled
        partition: Partition strategy
    """

    name: str = Field(..., min_length=1, description="Table name")
    columns: list[ColumnSchema] = Field(default_factory=list)
    indexes: list[DatabaseIndex] = Field(default_factory=list)
    policies: list[RlsPolicy] = Field(default_factory=list)
    foreign_keys: list[ForeignKey] = Field(default_factory=list)
    constraints: list[TableConstraint] = Field(default_factory=list)
    comment: str | None = Field(default=None, description="Table comment")
    enable_rls: bool = Field(default=False, description="Enable row-level security")
    partition: PartitionStrategy | None = Field(
        default=None, description="Partition strategy"
    )

    @field_validator("columns")
    @classmethod
    def check_unique_column_names(
        cls, columns: list[ColumnSchema]
    ) -> list[ColumnSchema]:
        seen: set[str] = set()
        for column in columns:
            if column.name in seen:
                raise ValueError(f"Duplicate column name: {column.name}")
            seen.add(column.name)
        return columns

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> ColumnSchema | None:
        """Return the column with the given name, if any."""
        for c in self.columns:
            if c.name == name:
                return c
        return None

    @property
    def primary_key_columns(self) -> list[str]:
        """Names of the columns flagged as primary key, in declaration order."""
        return [c.name for c in self.columns if c.is_primary_key]

    @property
    def has_composite_primary_key(self) -> bool:
        return len(self.primary_key_columns) > 1

    @property
    def effective_primary_key(self) -> list[str]:
        """Primary key columns with partition columns folded in.

        PostgreSQL requires partition columns to take part in any primary key
        of a partitioned table, so partition columns missing from a declared
        key are appended to it. A table without a declared key stays without one.
        """
        declared = self.primary_key_columns
        if not declared or self.partition is None:
            return declared
        return declared + [c for c in self.partition.columns if c not in declared]

    @property
    def has_composite_effective_primary_key(self) -> bool:
        return len(self.effective_primary_key) > 1

    @property
    def required_extensions(self) -> list[str]:
        """PostgreSQL extensions needed by the column defaults, sorted."""
        extensions: set[str] = set()
        for c in self.columns:
            if c.default is not None:
                extensions.update(c.default.required_extensions)
        return sorted(extensions)
