"""Index definitions for table schemas.

Key Components:
    - DatabaseIndex: An index over columns or an expression

An index without an explicit name gets one derived from the table, the
indexed columns and the uniqueness flag. The derivation is a pure function
of those inputs, so regenerating the same schema yields the same names.

Example:
    >>> DatabaseIndex(columns=["status", "created_at"]).effective_name("orders")
    'idx_orders_status_created_at'
"""

from __future__ import annotations

import hashlib
from typing import Any

from pydantic import Field, field_validator

from ddlforge.architecture.base import ConfigBaseModel
from ddlforge.architecture.onto import IndexMethod
from ddlforge.errors import ConfigurationError


class DatabaseIndex(ConfigBaseModel):
    """Index over one or more columns, or over an expression.

    Attributes:
        name: Index name; derived from table and columns when omitted
        columns: Indexed columns (mutually exclusive with expression)
        expression: Indexed expression, e.g. ``lower(email)``
        unique: Whether the index enforces uniqueness
        method: Access method
        condition: WHERE clause of a partial index
        include: Non-key columns stored in the index (btree only)
        storage_parameters: Parameters rendered in the WITH clause
        fill_factor: Fill factor percentage (10-100, btree and hash only)
        descending: Sort key columns in descending order
        nulls_first: Put NULLs first (True) or last (False)
        op_class: Operator class applied to each column
        tablespace: Tablespace for the index
        concurrent: Build without locking out writes
        comment: Index comment
    """

    name: str | None = Field(default=None, description="Index name")
    columns: list[str] = Field(default_factory=list, description="Indexed columns")
    expression: str | None = Field(default=None, description="Indexed expression")
    unique: bool = Field(default=False, description="Unique index")
    method: IndexMethod = Field(default=IndexMethod.BTREE, alias="using")
    condition: str | None = Field(default=None, alias="where")
    include: list[str] = Field(default_factory=list, description="INCLUDE columns")
    storage_parameters: dict[str, Any] = Field(
        default_factory=dict, description="WITH (...) storage parameters"
    )
    fill_factor: int | None = Field(default=None, description="Fill factor percentage")
    descending: bool = Field(default=False, description="Descending key order")
    nulls_first: bool | None = Field(default=None, description="NULLS FIRST/LAST")
    op_class: str | None = Field(default=None, description="Operator class")
    tablespace: str | None = Field(default=None, description="Tablespace")
    concurrent: bool = Field(default=False, description="CREATE INDEX CONCURRENTLY")
    comment: str | None = Field(default=None, description="Index comment")

    @field_validator("columns", "include", mode="before")
    @classmethod
    def str_to_list(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("method", mode="before")
    @classmethod
    def parse_method(cls, v: Any) -> Any:
        if isinstance(v, str):
            return IndexMethod.parse(v)
        return v

    def effective_name(self, table: str) -> str:
        """Explicit name, or ``idx[_unique]_<table>_<columns>``.

        Expression indexes use the first 8 hex digits of the md5 of the
        expression in place of the column list.
        """
        if self.name:
            return self.name
        prefix = "idx_unique" if self.unique else "idx"
        if self.expression is not None:
            digest = hashlib.md5(self.expression.encode("utf-8")).hexdigest()[:8]
            return f"{prefix}_{table}_expr_{digest}"
        return f"{prefix}_{table}_{'_'.join(self.columns)}"

    def validate(self) -> None:  # type: ignore[override]
        """Check structure and access-method restrictions.

        Raises:
            ConfigurationError: On the first violated rule
        """
        if self.expression is not None and self.columns:
            raise ConfigurationError(
                "Index cannot specify both columns and an expression"
            )
        if self.expression is None and not self.columns:
            raise ConfigurationError("Index must specify columns or an expression")
        if self.expression is not None and not self.expression.strip():
            raise ConfigurationError("Index expression cannot be empty")

        method = self.method
        if not method.allows_multiple_columns and len(self.columns) > 1:
            raise ConfigurationError(f"{method} indexes support a single column only")
        if not method.allows_ordering and (
            self.descending or self.nulls_first is not None
        ):
            raise ConfigurationError(f"{method} indexes do not support ordering")
        if self.include and not method.allows_include:
            raise ConfigurationError(f"{method} indexes do not support INCLUDE columns")
        if self.unique and not method.allows_unique:
            raise ConfigurationError(f"{method} indexes cannot be unique")

        if self.fill_factor is not None:
            if not 10 <= self.fill_factor <= 100:
                raise ConfigurationError(
                    f"Fill factor must be between 10 and 100, got {self.fill_factor}"
                )
            if not method.allows_fill_factor:
                raise ConfigurationError(
                    f"Fill factor is only supported for btree and hash indexes, not {method}"
                )
        for parameter in self.storage_parameters:
            if not method.allows_storage_parameter(parameter):
                raise ConfigurationError(
                    f"Storage parameter '{parameter}' is not valid for {method} indexes"
                )

    @property
    def rendered_storage_parameters(self) -> list[str]:
        params = []
        if self.fill_factor is not None:
            params.append(f"fillfactor = {self.fill_factor}")
        for key, value in self.storage_parameters.items():
            if isinstance(value, bool):
                value = "on" if value else "off"
            params.append(f"{key} = {value}")
        return params
