"""Column type model for PostgreSQL tables.

A column type is a single pydantic model discriminated by ``kind``. The
parameters a kind accepts (length, precision/scale, element type, type
name) are checked after validation, so every instance renders a valid
base SQL type through :attr:`ColumnType.sql_type`.

Key Components:
    - ColumnKind: Enumeration of the supported type families
    - ColumnType: A concrete column type; compared and hashed by its SQL rendering

Column types can be written in YAML either as SQL type text or as a mapping:

    columns:
      - name: id
        type: uuid
      - name: title
        type: varchar(255)
      - name: price
        type: {kind: decimal, precision: 10, scale: 2}
      - name: tags
        type: text[]

Example:
    >>> ColumnType.parse("varchar(255)").sql_type
    'VARCHAR(255)'
    >>> ColumnType(kind="array", element="integer").sql_type
    'INTEGER[]'
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import Field, model_validator

from ddlforge.architecture.base import ConfigBaseModel
from ddlforge.onto import BaseEnum


class ColumnKind(BaseEnum):
    """Families of PostgreSQL column types."""

    TEXT = "text"
    VARCHAR = "varchar"
    CHAR = "char"
    SMALLINT = "smallint"
    INTEGER = "integer"
    BIGINT = "bigint"
    SERIAL = "serial"
    BIGSERIAL = "bigserial"
    DECIMAL = "decimal"
    NUMERIC = "numeric"
    REAL = "real"
    DOUBLE_PRECISION = "double precision"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    TIMESTAMPTZ = "timestamptz"
    INTERVAL = "interval"
    UUID = "uuid"
    JSON = "json"
    JSONB = "jsonb"
    BYTEA = "bytea"
    INET = "inet"
    CIDR = "cidr"
    MACADDR = "macaddr"
    POINT = "point"
    LINE = "line"
    BOX = "box"
    CIRCLE = "circle"
    ARRAY = "array"
    ENUM = "enum"
    CUSTOM = "custom"


NUMERIC_KINDS = frozenset(
    {
        ColumnKind.SMALLINT,
        ColumnKind.INTEGER,
        ColumnKind.BIGINT,
        ColumnKind.SERIAL,
        ColumnKind.BIGSERIAL,
        ColumnKind.DECIMAL,
        ColumnKind.NUMERIC,
        ColumnKind.REAL,
        ColumnKind.DOUBLE_PRECISION,
    }
)

TEXTUAL_KINDS = frozenset({ColumnKind.TEXT, ColumnKind.VARCHAR, ColumnKind.CHAR})

# Kinds taking an optional fractional-second precision, e.g. TIMESTAMP(3)
FRACTIONAL_SECOND_KINDS = frozenset(
    {ColumnKind.TIME, ColumnKind.TIMESTAMP, ColumnKind.TIMESTAMPTZ, ColumnKind.INTERVAL}
)
MAX_FRACTIONAL_SECONDS = 6

# Kinds whose SQL rendering differs from the upper-cased kind value
_RENDERED_NAMES: dict[ColumnKind, str] = {
    ColumnKind.TIMESTAMPTZ: "TIMESTAMP WITH TIME ZONE",
}

# Alternative spellings accepted by ColumnType.parse
_ALIASES: dict[str, ColumnKind] = {
    "int": ColumnKind.INTEGER,
    "int2": ColumnKind.SMALLINT,
    "int4": ColumnKind.INTEGER,
    "int8": ColumnKind.BIGINT,
    "serial4": ColumnKind.SERIAL,
    "serial8": ColumnKind.BIGSERIAL,
    "bool": ColumnKind.BOOLEAN,
    "float4": ColumnKind.REAL,
    "float8": ColumnKind.DOUBLE_PRECISION,
    "double": ColumnKind.DOUBLE_PRECISION,
    "character varying": ColumnKind.VARCHAR,
    "character": ColumnKind.CHAR,
    "timestamp without time zone": ColumnKind.TIMESTAMP,
    "timestamp with time zone": ColumnKind.TIMESTAMPTZ,
    "time without time zone": ColumnKind.TIME,
}

_TYPE_TEXT = re.compile(r"^(?P<base>[a-zA-Z_][a-zA-Z0-9_ ]*?)\s*(\((?P<args>[^)]*)\))?$")
_ZONED_TIME_TEXT = re.compile(
    r"^(?P<base>timestamp|time)\s*\((?P<args>\s*\d+\s*)\)"
    r"\s+(?P<zone>with(?:out)?\s+time\s+zone)$",
    re.IGNORECASE,
)


def _parse_type_text(text: str) -> dict[str, Any]:
    """Turn SQL type text such as ``varchar(255)`` or ``text[]`` into model fields."""
    stripped = text.strip()
    if stripped.endswith("[]"):
        return {"kind": ColumnKind.ARRAY, "element": _parse_type_text(stripped[:-2])}

    zoned = _ZONED_TIME_TEXT.match(stripped)
    if zoned is not None:
        base, args = f"{zoned.group('base')} {zoned.group('zone')}", zoned.group("args")
    else:
        match = _TYPE_TEXT.match(stripped)
        if match is None:
            return {"kind": ColumnKind.CUSTOM, "name": stripped}
        base, args = match.group("base"), match.group("args")

    base = " ".join(base.lower().split())
    kind = _ALIASES.get(base)
    if kind is None and base in ColumnKind and base not in ("array", "enum", "custom"):
        kind = ColumnKind(base)
    if kind is None:
        return {"kind": ColumnKind.CUSTOM, "name": stripped}

    fields: dict[str, Any] = {"kind": kind}
    if args:
        values = [int(a) for a in args.split(",") if a.strip()]
        if kind in (ColumnKind.DECIMAL, ColumnKind.NUMERIC):
            fields["precision"] = values[0]
            if len(values) > 1:
                fields["scale"] = values[1]
        elif kind in FRACTIONAL_SECOND_KINDS:
            fields["precision"] = values[0]
        else:
            fields["length"] = values[0]
    return fields


class ColumnType(ConfigBaseModel):
    """A PostgreSQL column type.

    Attributes:
        kind: Type family
        length: Character length for varchar/char
        precision: Total digits for decimal/numeric, fractional-second digits
            for time, timestamp, timestamptz and interval
        scale: Fractional digits for decimal/numeric (requires precision)
        element: Element type for arrays
        name: Type name for enum and custom types
    """

    kind: ColumnKind = Field(..., description="Type family")
    length: int | None = Field(
        default=None, gt=0, description="Character length (varchar, char)"
    )
    precision: int | None = Field(
        default=None,
        ge=0,
        description="Total digits (decimal, numeric) or fractional-second digits (time types)",
    )
    scale: int | None = Field(
        default=None, ge=0, description="Fractional digits (decimal, numeric)"
    )
    element: ColumnType | None = Field(
        default=None, description="Element type of an array"
    )
    name: str | None = Field(default=None, description="Enum or custom type name")

    @model_validator(mode="before")
    @classmethod
    def parse_type_text(cls, data: Any) -> Any:
        """Accept SQL type text in place of a mapping."""
        if isinstance(data, str):
            return _parse_type_text(data)
        return data

    @model_validator(mode="after")
    def check_discriminated_shape(self) -> ColumnType:
        """Enforce the parameters each kind accepts."""
        if self.length is not None and self.kind not in (
            ColumnKind.VARCHAR,
            ColumnKind.CHAR,
        ):
            raise ValueError(f"length is only valid for varchar and char, not {self.kind}")
        if self.kind == ColumnKind.CHAR and self.length is None:
            raise ValueError("char requires a length")
        if self.kind in (ColumnKind.DECIMAL, ColumnKind.NUMERIC):
            if self.precision == 0:
                raise ValueError(f"{self.kind} precision must be at least 1")
            if self.scale is not None:
                if self.precision is None:
                    raise ValueError(f"{self.kind} scale requires a precision")
                if self.scale > self.precision:
                    raise ValueError(
                        f"{self.kind} scale {self.scale} exceeds precision {self.precision}"
                    )
        elif self.kind in FRACTIONAL_SECOND_KINDS:
            if self.scale is not None:
                raise ValueError(f"scale is only valid for decimal and numeric, not {self.kind}")
            if self.precision is not None and self.precision > MAX_FRACTIONAL_SECONDS:
                raise ValueError(
                    f"{self.kind} precision {self.precision} exceeds "
                    f"{MAX_FRACTIONAL_SECONDS} fractional-second digits"
                )
        elif self.precision is not None or self.scale is not None:
            raise ValueError(
                "precision and scale are only valid for decimal, numeric and "
                f"time types, not {self.kind}"
            )
        if (self.kind == ColumnKind.ARRAY) != (self.element is not None):
            raise ValueError("element is required for array types and only for them")
        if self.kind in (ColumnKind.ENUM, ColumnKind.CUSTOM):
            if not self.name or not self.name.strip():
                raise ValueError(f"{self.kind} type requires a name")
        elif self.name is not None:
            raise ValueError(f"name is only valid for enum and custom types, not {self.kind}")
        return self

    @classmethod
    def parse(cls, text: str) -> ColumnType:
        """Build a column type from SQL type text; unknown names become custom types."""
        return cls.model_validate(text)

    @property
    def sql_type(self) -> str:
        """Base SQL rendering of the type."""
        if self.kind == ColumnKind.ARRAY:
            assert self.element is not None
            return f"{self.element.sql_type}[]"
        if self.kind in (ColumnKind.ENUM, ColumnKind.CUSTOM):
            assert self.name is not None
            return self.name
        base = _RENDERED_NAMES.get(self.kind, self.kind.value.upper())
        if self.kind in FRACTIONAL_SECOND_KINDS and self.precision is not None:
            head, _, zone = base.partition(" ")
            return f"{head}({self.precision}) {zone}".rstrip()
        if self.length is not None:
            return f"{base}({self.length})"
        if self.precision is not None:
            if self.scale is not None:
                return f"{base}({self.precision},{self.scale})"
            return f"{base}({self.precision})"
        return base

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_KINDS

    @property
    def is_textual(self) -> bool:
        return self.kind in TEXTUAL_KINDS

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ColumnType):
            return NotImplemented
        return self.sql_type == other.sql_type

    def __hash__(self) -> int:
        return hash(self.sql_type)

    def __str__(self) -> str:
        return self.sql_type


ColumnType.model_rebuild()
