"""Foreign key definitions."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from ddlforge.architecture.base import ConfigBaseModel
from ddlforge.architecture.onto import ForeignKeyAction


class ForeignKey(ConfigBaseModel):
    """Foreign key from one column to a column of another table.

    The target table may be empty at construction; the foreign key builder
    and the schema validator reject it, naming the offending column.

    Attributes:
        column: Referencing column
        references_table: Referenced table
        references_column: Referenced column
        on_delete: Action on delete of the referenced row
        on_update: Action on update of the referenced key
        name: Constraint name; derived when omitted
        deferrable: Render DEFERRABLE
        initially_deferred: Render INITIALLY DEFERRED (with deferrable)
        not_valid: Skip validation of existing rows
        comment: Constraint comment
    """

    column: str = Field(..., min_length=1, description="Referencing column")
    references_table: str = Field(default="", alias="table")
    references_column: str = Field(default="id", alias="references")
    on_delete: ForeignKeyAction = Field(default=ForeignKeyAction.NO_ACTION)
    on_update: ForeignKeyAction = Field(default=ForeignKeyAction.NO_ACTION)
    name: str | None = Field(default=None, description="Constraint name")
    deferrable: bool = Field(default=False)
    initially_deferred: bool = Field(default=False)
    not_valid: bool = Field(default=False)
    comment: str | None = Field(default=None, description="Constraint comment")

    @field_validator("on_delete", "on_update", mode="before")
    @classmethod
    def parse_action(cls, v: Any) -> Any:
        if isinstance(v, str):
            return ForeignKeyAction.parse(v)
        return v

    def effective_name(self, table: str) -> str:
        """Explicit name, or ``fk_<table>_<column>_<target_table>_<target_column>``."""
        if self.name:
            return self.name
        return (
            f"fk_{table}_{self.column}_{self.references_table}_{self.references_column}"
        )
