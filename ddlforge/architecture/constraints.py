"""Table-level constraints and partition strategies.

Both families are pydantic discriminated unions keyed on ``type``. Each
variant renders its own SQL fragment via ``to_sql()`` and checks its own
structure via ``validate()``, which raises :class:`ConfigurationError`.

Key Components:
    - CheckConstraint, UniqueConstraint, PrimaryKeyConstraint: ``TableConstraint`` variants
    - RangePartition, HashPartition, ListPartition: ``PartitionStrategy`` variants

Example:
    >>> c = UniqueConstraint(name="uq_user_email", columns=["user_id", "email"])
    >>> c.to_sql()
    'CONSTRAINT uq_user_email UNIQUE (user_id, email)'
    >>> HashPartition(columns=["user_id"]).to_sql()
    'PARTITION BY HASH (user_id)'
"""

from __future__ import annotations

import re
from typing import Annotated, ClassVar, Literal

from pydantic import Field, TypeAdapter

from ddlforge.architecture.base import ConfigBaseModel
from ddlforge.errors import ConfigurationError

CONSTRAINT_NAME_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


def _check_columns(columns: list[str], what: str) -> None:
    if not columns:
        raise ConfigurationError(f"{what} must specify at least one column")
    for column in columns:
        if not column.strip():
            raise ConfigurationError(f"{what} column name cannot be empty")


class _NamedConstraint(ConfigBaseModel):
    name: str = Field(..., description="Constraint name")
    comment: str | None = Field(default=None, description="Constraint comment")

    def validate(self) -> None:  # type: ignore[override]
        if not self.name:
            raise ConfigurationError("Constraint name cannot be empty")
        if not CONSTRAINT_NAME_PATTERN.match(self.name):
            raise ConfigurationError(
                "Constraint name must start with a letter or underscore and contain "
                f"only letters, numbers, and underscores: {self.name}"
            )


class CheckConstraint(_NamedConstraint):
    """Named CHECK constraint over one or more columns."""

    type: Literal["check"] = Field(
        default="check", description="Constraint type discriminator"
    )
    condition: str = Field(..., description="Boolean SQL expression")

    def to_sql(self) -> str:
        return f"CONSTRAINT {self.name} CHECK ({self.condition})"

    def validate(self) -> None:  # type: ignore[override]
        super().validate()
        if not self.condition.strip():
            raise ConfigurationError(
                f"CHECK constraint {self.name} condition cannot be empty"
            )


class UniqueConstraint(_NamedConstraint):
    """Named UNIQUE constraint, typically spanning several columns."""

    type: Literal["unique"] = Field(
        default="unique", description="Constraint type discriminator"
    )
    columns: list[str] = Field(default_factory=list, description="Unique columns")

    def to_sql(self) -> str:
        return f"CONSTRAINT {self.name} UNIQUE ({', '.join(self.columns)})"

    def validate(self) -> None:  # type: ignore[override]
        super().validate()
        _check_columns(self.columns, f"UNIQUE constraint {self.name}")


class PrimaryKeyConstraint(_NamedConstraint):
    """Named PRIMARY KEY constraint."""

    type: Literal["primary_key"] = Field(
        default="primary_key", description="Constraint type discriminator"
    )
    columns: list[str] = Field(default_factory=list, description="Key columns")

    def to_sql(self) -> str:
        return f"CONSTRAINT {self.name} PRIMARY KEY ({', '.join(self.columns)})"

    def validate(self) -> None:  # type: ignore[override]
        super().validate()
        _check_columns(self.columns, f"PRIMARY KEY constraint {self.name}")


TableConstraint = Annotated[
    CheckConstraint | UniqueConstraint | PrimaryKeyConstraint,
    Field(discriminator="type"),
]

table_constraint_adapter: TypeAdapter[
    CheckConstraint | UniqueConstraint | PrimaryKeyConstraint
] = TypeAdapter(TableConstraint)


# ----------------------------------------------------------------------
# Partitioning
# ----------------------------------------------------------------------


class _Partition(ConfigBaseModel):
    keyword: ClassVar[str]

    columns: list[str] = Field(default_factory=list, description="Partition key columns")

    def to_sql(self) -> str:
        return f"PARTITION BY {self.keyword} ({', '.join(self.columns)})"

    def validate(self) -> None:  # type: ignore[override]
        _check_columns(self.columns, f"{self.keyword.capitalize()} partition")


class RangePartition(_Partition):
    """Partition by value ranges, e.g. one partition per month."""

    keyword: ClassVar[str] = "RANGE"

    type: Literal["range"] = Field(
        default="range", description="Partition type discriminator"
    )


class HashPartition(_Partition):
    """Partition by hash of the key columns."""

    keyword: ClassVar[str] = "HASH"

    type: Literal["hash"] = Field(
        default="hash", description="Partition type discriminator"
    )


class ListPartition(_Partition):
    """Partition by explicit lists of key values."""

    keyword: ClassVar[str] = "LIST"

    type: Literal["list"] = Field(
        default="list", description="Partition type discriminator"
    )


PartitionStrategy = Annotated[
    RangePartition | HashPartition | ListPartition,
    Field(discriminator="type"),
]

partition_strategy_adapter: TypeAdapter[
    RangePartition | HashPartition | ListPartition
] = TypeAdapter(PartitionStrategy)
