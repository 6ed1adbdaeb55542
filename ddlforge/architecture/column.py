"""Column definitions for table schemas.

Key Components:
    - ColumnSchema: One column with its type, nullability, keys, default,
      check constraints, validators, collation and comment

A column flagged as primary key is always treated as NOT NULL and unique,
whatever its ``is_nullable`` and ``is_unique`` flags say.

Example:
    >>> column = ColumnSchema(name="email", type="text", is_nullable=False, is_unique=True)
    >>> column.sql_type
    'TEXT'
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from ddlforge.architecture.base import ConfigBaseModel
from ddlforge.architecture.column_types import ColumnType
from ddlforge.architecture.default_values import DefaultValue
from ddlforge.architecture.validators import ColumnValidator


class ColumnSchema(ConfigBaseModel):
    """Column of a table.

    Attributes:
        name: Column name
        type: Column type (SQL text such as ``varchar(255)`` or a mapping)
        is_nullable: Whether NULL values are allowed
        is_primary_key: Whether the column is (part of) the primary key
        is_unique: Whether a UNIQUE constraint applies to the column alone
        default: Default value
        check_constraints: CHECK expressions, rendered in declaration order
        validators: Value validators rendered as extra CHECK expressions
        collation: Collation name
        comment: Column comment
    """

    name: str = Field(..., min_length=1, description="Column name")
    type: ColumnType = Field(..., description="Column type")
    is_nullable: bool = Field(default=True, alias="nullable")
    is_primary_key: bool = Field(default=False, alias="primary_key")
    is_unique: bool = Field(default=False, alias="unique")
    default: DefaultValue | None = Field(default=None, description="Default value")
    check_constraints: list[str] = Field(
        default_factory=list, alias="checks", description="CHECK expressions"
    )
    validators: list[ColumnValidator] = Field(
        default_factory=list, description="Value validators rendered as CHECKs"
    )
    collation: str | None = Field(default=None, description="Collation name")
    comment: str | None = Field(default=None, description="Column comment")

    @field_validator("check_constraints", mode="before")
    @classmethod
    def checks_to_list(cls, v: Any) -> Any:
        """Allow a single CHECK expression instead of a list."""
        if isinstance(v, str):
            return [v]
        return v

    @property
    def sql_type(self) -> str:
        return self.type.sql_type

    @property
    def checks(self) -> list[str]:
        """Explicit CHECK expressions followed by the validator expressions."""
        return list(self.check_constraints) + [
            v.to_sql(self.name) for v in self.validators
        ]

    @property
    def effective_nullable(self) -> bool:
        return self.is_nullable and not self.is_primary_key

    @property
    def effective_unique(self) -> bool:
        return self.is_unique or self.is_primary_key

    @property
    def has_default(self) -> bool:
        return self.default is not None
