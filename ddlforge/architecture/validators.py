"""Column value validators rendered as CHECK expressions.

Validators describe a rule on the values of one column. Each renders a SQL
boolean expression over the column name (appended to the column's CHECK
constraints) and can also evaluate a Python value directly, which is
useful for validating seed data before it is written.

Key Components:
    - RangeValidator, LengthValidator: numeric bounds and text length bounds
    - PatternValidator, EmailValidator, UrlValidator: POSIX regex matches (``~``)
    - AlphaValidator, AlphanumericValidator: character class restrictions
    - EnumValidator: membership in a fixed list of values
    - AllValidator, AnyValidator: AND / OR composition of other validators

YAML form:

    validators:
      - type: range
        min: 0
        max: 150
      - type: any
        validators:
          - {type: email}
          - {type: url}

Example:
    >>> RangeValidator(min=0, max=150).to_sql("age")
    'age >= 0 AND age <= 150'
"""

from __future__ import annotations

import re
from typing import Annotated, Any, Literal

from pydantic import Field, TypeAdapter, model_validator

from ddlforge.architecture.base import ConfigBaseModel

EMAIL_PATTERN = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
URL_PATTERN = r"^https?:\/\/[^\s]+$"


def _regex_sql(column: str, pattern: str) -> str:
    return "{} ~ '{}'".format(column, pattern.replace("'", "''"))


class _Bounded(ConfigBaseModel):
    min: float | None = Field(default=None, description="Inclusive lower bound")
    max: float | None = Field(default=None, description="Inclusive upper bound")

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min is None and self.max is None:
            raise ValueError("At least one of min or max must be specified")
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"min {self.min} is greater than max {self.max}")
        return self

    @staticmethod
    def _fmt(bound: float) -> str:
        return str(int(bound)) if float(bound).is_integer() else str(bound)


class RangeValidator(_Bounded):
    """Numeric value within inclusive bounds."""

    type: Literal["range"] = Field(default="range", description="Validator type")

    def to_sql(self, column: str) -> str:
        conditions = []
        if self.min is not None:
            conditions.append(f"{column} >= {self._fmt(self.min)}")
        if self.max is not None:
            conditions.append(f"{column} <= {self._fmt(self.max)}")
        return " AND ".join(conditions)

    def check(self, value: Any) -> bool:
        if self.min is not None and value < self.min:
            return False
        return self.max is None or value <= self.max

    @property
    def description(self) -> str:
        if self.min is not None and self.max is not None:
            return f"Value must be between {self._fmt(self.min)} and {self._fmt(self.max)}"
        if self.min is not None:
            return f"Value must be at least {self._fmt(self.min)}"
        return f"Value must be at most {self._fmt(self.max)}"  # type: ignore[arg-type]


class LengthValidator(_Bounded):
    """Text length within inclusive bounds."""

    type: Literal["length"] = Field(default="length", description="Validator type")

    def to_sql(self, column: str) -> str:
        conditions = []
        if self.min is not None:
            conditions.append(f"length({column}) >= {self._fmt(self.min)}")
        if self.max is not None:
            conditions.append(f"length({column}) <= {self._fmt(self.max)}")
        return " AND ".join(conditions)

    def check(self, value: Any) -> bool:
        length = len(value)
        if self.min is not None and length < self.min:
            return False
        return self.max is None or length <= self.max

    @property
    def description(self) -> str:
        if self.min is not None and self.max is not None:
            return (
                f"Length must be between {self._fmt(self.min)} "
                f"and {self._fmt(self.max)} characters"
            )
        if self.min is not None:
            return f"Length must be at least {self._fmt(self.min)} characters"
        return f"Length must be at most {self._fmt(self.max)} characters"  # type: ignore[arg-type]


class PatternValidator(ConfigBaseModel):
    """Text matching a regular expression."""

    type: Literal["pattern"] = Field(default="pattern", description="Validator type")
    pattern: str = Field(..., min_length=1, description="POSIX regular expression")
    message: str | None = Field(default=None, description="Custom error message")

    def to_sql(self, column: str) -> str:
        return _regex_sql(column, self.pattern)

    def check(self, value: Any) -> bool:
        return re.search(self.pattern, str(value)) is not None

    @property
    def description(self) -> str:
        return self.message or f"Value must match pattern: {self.pattern}"


class EnumValidator(ConfigBaseModel):
    """Value from a fixed list."""

    type: Literal["enum"] = Field(default="enum", description="Validator type")
    values: list[str] = Field(..., min_length=1, description="Allowed values")

    def to_sql(self, column: str) -> str:
        rendered = ", ".join("'{}'".format(v.replace("'", "''")) for v in self.values)
        return f"{column} IN ({rendered})"

    def check(self, value: Any) -> bool:
        return str(value) in self.values

    @property
    def description(self) -> str:
        return f"Value must be one of: {', '.join(self.values)}"


class EmailValidator(ConfigBaseModel):
    type: Literal["email"] = Field(default="email", description="Validator type")

    def to_sql(self, column: str) -> str:
        return _regex_sql(column, EMAIL_PATTERN)

    def check(self, value: Any) -> bool:
        return re.search(EMAIL_PATTERN, str(value)) is not None

    @property
    def description(self) -> str:
        return "Value must be a valid email address"


class UrlValidator(ConfigBaseModel):
    type: Literal["url"] = Field(default="url", description="Validator type")

    def to_sql(self, column: str) -> str:
        return _regex_sql(column, URL_PATTERN)

    def check(self, value: Any) -> bool:
        return re.search(URL_PATTERN, str(value)) is not None

    @property
    def description(self) -> str:
        return "Value must be a valid URL"


class AlphaValidator(ConfigBaseModel):
    type: Literal["alpha"] = Field(default="alpha", description="Validator type")
    allow_spaces: bool = Field(default=False, description="Allow whitespace")

    @property
    def pattern(self) -> str:
        return r"^[a-zA-Z\s]+$" if self.allow_spaces else r"^[a-zA-Z]+$"

    def to_sql(self, column: str) -> str:
        return _regex_sql(column, self.pattern)

    def check(self, value: Any) -> bool:
        return re.search(self.pattern, str(value)) is not None

    @property
    def description(self) -> str:
        if self.allow_spaces:
            return "Value must contain only letters and spaces"
        return "Value must contain only letters"


class AlphanumericValidator(ConfigBaseModel):
    type: Literal["alphanumeric"] = Field(
        default="alphanumeric", description="Validator type"
    )
    allow_spaces: bool = Field(default=False, description="Allow whitespace")
    allow_underscores: bool = Field(default=False, description="Allow underscores")

    @property
    def pattern(self) -> str:
        chars = "a-zA-Z0-9"
        if self.allow_spaces:
            chars += r"\s"
        if self.allow_underscores:
            chars += "_"
        return f"^[{chars}]+$"

    def to_sql(self, column: str) -> str:
        return _regex_sql(column, self.pattern)

    def check(self, value: Any) -> bool:
        return re.search(self.pattern, str(value)) is not None

    @property
    def description(self) -> str:
        extras = []
        if self.allow_spaces:
            extras.append("spaces")
        if self.allow_underscores:
            extras.append("underscores")
        desc = "Value must contain only letters and numbers"
        if extras:
            desc += " and " + " and ".join(extras)
        return desc


class AllValidator(ConfigBaseModel):
    """Every nested validator must pass."""

    type: Literal["all"] = Field(default="all", description="Validator type")
    validators: list[ColumnValidator] = Field(..., min_length=1)

    def to_sql(self, column: str) -> str:
        return " AND ".join(f"({v.to_sql(column)})" for v in self.validators)

    def check(self, value: Any) -> bool:
        return all(v.check(value) for v in self.validators)

    @property
    def description(self) -> str:
        return " AND ".join(v.description for v in self.validators)


class AnyValidator(ConfigBaseModel):
    """At least one nested validator must pass."""

    type: Literal["any"] = Field(default="any", description="Validator type")
    validators: list[ColumnValidator] = Field(..., min_length=1)

    def to_sql(self, column: str) -> str:
        return " OR ".join(f"({v.to_sql(column)})" for v in self.validators)

    def check(self, value: Any) -> bool:
        return any(v.check(value) for v in self.validators)

    @property
    def description(self) -> str:
        return " OR ".join(v.description for v in self.validators)


ColumnValidator = Annotated[
    RangeValidator
    | LengthValidator
    | PatternValidator
    | EnumValidator
    | EmailValidator
    | UrlValidator
    | AlphaValidator
    | AlphanumericValidator
    | AllValidator
    | AnyValidator,
    Field(discriminator="type"),
]

AllValidator.model_rebuild()
AnyValidator.model_rebuild()

column_validator_adapter: TypeAdapter[Any] = TypeAdapter(ColumnValidator)
