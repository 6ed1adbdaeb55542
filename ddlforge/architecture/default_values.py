"""Column default values.

A default value carries the literal SQL expression placed after ``DEFAULT``
and a human readable description. It is one of three kinds: a literal
(``'x'``, ``0``, ``true``, ``NULL``), a function call (``CURRENT_TIMESTAMP``,
``gen_random_uuid()``, ``nextval('seq')``) or a free-form expression.

Key Components:
    - DefaultKind: literal / function / expression
    - DefaultValue: The default value model with factories and metadata
    - Module constants for the common defaults (CURRENT_TIMESTAMP, GEN_RANDOM_UUID, ...)

In YAML a default can be a scalar; see :meth:`DefaultValue.parse`:

    default: gen_random_uuid()
    default: 0
    default: "'draft'"

Example:
    >>> DefaultValue.string("it's").sql_expression
    "'it''s'"
    >>> GEN_RANDOM_UUID.required_extensions
    ['pgcrypto']
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, model_validator

from ddlforge.architecture.base import ConfigBaseModel
from ddlforge.onto import BaseEnum


class DefaultKind(BaseEnum):
    """Kinds of default value."""

    LITERAL = "literal"
    FUNCTION = "function"
    EXPRESSION = "expression"


_NUMERIC_TYPE_MARKERS = (
    "INTEGER",
    "BIGINT",
    "SMALLINT",
    "SERIAL",
    "BIGSERIAL",
    "DECIMAL",
    "NUMERIC",
    "REAL",
    "DOUBLE PRECISION",
    "FLOAT",
)

_STRING_TYPE_MARKERS = ("TEXT", "VARCHAR", "CHAR", "CHARACTER")


class DefaultValue(ConfigBaseModel):
    """Default value of a column.

    Attributes:
        kind: Literal, function call or custom expression
        sql_expression: SQL text rendered after ``DEFAULT``
        description: Human readable description
    """

    kind: DefaultKind = Field(
        default=DefaultKind.EXPRESSION, description="Kind of default value"
    )
    sql_expression: str = Field(..., min_length=1, description="SQL expression")
    description: str = Field(default="", description="Human readable description")

    @model_validator(mode="before")
    @classmethod
    def parse_scalar(cls, data: Any) -> Any:
        """Accept a YAML scalar in place of a mapping."""
        if isinstance(data, (str, int, float, bool)):
            return _scalar_to_fields(data)
        return data

    @classmethod
    def parse(cls, value: Any) -> DefaultValue:
        """Build a default from a scalar or mapping.

        Booleans and numbers become literals, known function names map to the
        module constants, single-quoted text is kept as a literal and any other
        text is treated as a custom expression.

        Args:
            value: Scalar or mapping describing the default

        Returns:
            DefaultValue: Parsed default
        """
        if isinstance(value, DefaultValue):
            return value
        if value is None:
            return cls.null()
        return cls.model_validate(value)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def null(cls) -> DefaultValue:
        return cls(
            kind=DefaultKind.LITERAL,
            sql_expression="NULL",
            description="Explicit NULL value",
        )

    @classmethod
    def string(cls, value: str) -> DefaultValue:
        escaped = value.replace("'", "''")
        return cls(
            kind=DefaultKind.LITERAL,
            sql_expression=f"'{escaped}'",
            description=f"String literal: {value}",
        )

    @classmethod
    def number(cls, value: int | float) -> DefaultValue:
        return cls(
            kind=DefaultKind.LITERAL,
            sql_expression=str(value),
            description=f"Numeric literal: {value}",
        )

    @classmethod
    def boolean(cls, value: bool) -> DefaultValue:
        rendered = "true" if value else "false"
        return cls(
            kind=DefaultKind.LITERAL,
            sql_expression=rendered,
            description=f"Boolean literal: {rendered}",
        )

    @classmethod
    def expression(cls, expression: str, description: str | None = None) -> DefaultValue:
        return cls(
            kind=DefaultKind.EXPRESSION,
            sql_expression=expression,
            description=description or f"Custom expression: {expression}",
        )

    @classmethod
    def next_val(cls, sequence_name: str) -> DefaultValue:
        return cls(
            kind=DefaultKind.FUNCTION,
            sql_expression=f"nextval('{sequence_name}')",
            description=f"Next value from sequence: {sequence_name}",
        )

    @classmethod
    def json_object(cls, json_text: str) -> DefaultValue:
        escaped = json_text.replace("'", "''")
        return cls(
            kind=DefaultKind.LITERAL,
            sql_expression=f"'{escaped}'::jsonb",
            description=f"JSON object: {json_text}",
        )

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def is_valid_for(self, sql_type: str) -> bool:
        """Check whether this default fits a column of the given SQL type.

        Only the well-known defaults are checked; literals and custom
        expressions are assumed valid.
        """
        normalized_type = sql_type.upper()
        expression = self.sql_expression
        if expression in ("CURRENT_TIMESTAMP", "LOCALTIMESTAMP", "NOW()"):
            return "TIMESTAMP" in normalized_type
        if expression == "CURRENT_DATE":
            return normalized_type == "DATE"
        if expression == "CURRENT_TIME":
            return "TIME" in normalized_type
        if expression in ("gen_random_uuid()", "uuid_generate_v1()", "uuid_generate_v4()"):
            return normalized_type == "UUID"
        if expression in ("'{}'::jsonb", "'[]'::jsonb"):
            return "JSON" in normalized_type
        if expression == "ARRAY[]":
            return "[]" in normalized_type
        if expression in ("0", "1", "-1"):
            return any(marker in normalized_type for marker in _NUMERIC_TYPE_MARKERS)
        if expression == "''":
            return any(marker in normalized_type for marker in _STRING_TYPE_MARKERS)
        return True

    @property
    def required_extensions(self) -> list[str]:
        if self.sql_expression == "gen_random_uuid()":
            return ["pgcrypto"]
        if self.sql_expression in ("uuid_generate_v1()", "uuid_generate_v4()"):
            return ["uuid-ossp"]
        return []

    @property
    def warnings(self) -> list[str]:
        if self.sql_expression == "uuid_generate_v1()":
            return [
                "UUID v1 may leak MAC address information",
                "Consider UUID v4 for privacy",
            ]
        if "RANDOM()" in self.sql_expression.upper():
            return [
                "Random values are not deterministic",
                "May cause issues with replication",
            ]
        return []

    def __str__(self) -> str:
        return self.sql_expression


def _function(expression: str, description: str) -> DefaultValue:
    return DefaultValue(
        kind=DefaultKind.FUNCTION, sql_expression=expression, description=description
    )


def _literal(expression: str, description: str) -> DefaultValue:
    return DefaultValue(
        kind=DefaultKind.LITERAL, sql_expression=expression, description=description
    )


CURRENT_TIMESTAMP = _function("CURRENT_TIMESTAMP", "Current timestamp with timezone")
LOCAL_TIMESTAMP = _function("LOCALTIMESTAMP", "Current timestamp without timezone")
CURRENT_DATE = _function("CURRENT_DATE", "Current date (year-month-day only)")
CURRENT_TIME = _function("CURRENT_TIME", "Current time with timezone")
NOW = _function("NOW()", "Current timestamp (NOW function)")
GEN_RANDOM_UUID = _function(
    "gen_random_uuid()", "Generate random UUID (requires pgcrypto extension)"
)
UUID_V1 = _function(
    "uuid_generate_v1()", "Generate UUID v1 (requires uuid-ossp extension)"
)
UUID_V4 = _function(
    "uuid_generate_v4()", "Generate UUID v4 (requires uuid-ossp extension)"
)
EMPTY_ARRAY = _literal("ARRAY[]", "Empty array")
EMPTY_JSON_OBJECT = _literal("'{}'::jsonb", "Empty JSON object")
EMPTY_JSON_ARRAY = _literal("'[]'::jsonb", "Empty JSON array")
ZERO = _literal("0", "Zero")
ONE = _literal("1", "One")
EMPTY_STRING = _literal("''", "Empty string")

_KNOWN_FUNCTIONS: dict[str, DefaultValue] = {
    d.sql_expression.upper(): d
    for d in (
        CURRENT_TIMESTAMP,
        LOCAL_TIMESTAMP,
        CURRENT_DATE,
        CURRENT_TIME,
        NOW,
        GEN_RANDOM_UUID,
        UUID_V1,
        UUID_V4,
    )
}


def _scalar_to_fields(value: str | int | float | bool) -> dict[str, Any]:
    if isinstance(value, bool):
        default = DefaultValue.boolean(value)
    elif isinstance(value, (int, float)):
        default = DefaultValue.number(value)
    else:
        text = value.strip()
        known = _KNOWN_FUNCTIONS.get(text.upper())
        if known is not None:
            default = known
        elif text.upper() == "NULL":
            default = DefaultValue.null()
        elif text.upper() in ("TRUE", "FALSE"):
            default = DefaultValue.boolean(text.upper() == "TRUE")
        elif text.startswith("'") or text.upper().startswith("NEXTVAL("):
            default = DefaultValue(
                kind=DefaultKind.LITERAL
                if text.startswith("'")
                else DefaultKind.FUNCTION,
                sql_expression=text,
                description=f"Parsed default: {text}",
            )
        else:
            default = DefaultValue.expression(text)
    return default.model_dump()
