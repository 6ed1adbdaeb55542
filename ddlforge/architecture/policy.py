"""Row-level security policies."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from ddlforge.architecture.base import ConfigBaseModel
from ddlforge.architecture.onto import PolicyCommand


class RlsPolicy(ConfigBaseModel):
    """Row-level security policy on a table.

    An empty ``roles`` list renders no ``TO`` clause, which PostgreSQL
    treats as PUBLIC.

    Attributes:
        name: Policy name
        command: Command the policy applies to
        roles: Roles the policy applies to
        condition: USING expression
        check_condition: WITH CHECK expression
        comment: Policy comment
        permissive: False renders ``AS RESTRICTIVE``
    """

    name: str = Field(..., min_length=1, description="Policy name")
    command: PolicyCommand = Field(default=PolicyCommand.ALL, alias="for")
    roles: list[str] = Field(default_factory=list, alias="to")
    condition: str = Field(default="", alias="using", description="USING expression")
    check_condition: str | None = Field(
        default=None, alias="with_check", description="WITH CHECK expression"
    )
    comment: str | None = Field(default=None, description="Policy comment")
    permissive: bool = Field(default=True, description="Permissive or restrictive")

    @field_validator("command", mode="before")
    @classmethod
    def lower_command(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("roles", mode="before")
    @classmethod
    def str_to_list(cls, v: Any) -> Any:
        if isinstance(v, str):
            return [v]
        return v
