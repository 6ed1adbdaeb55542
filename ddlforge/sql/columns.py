"""Column constraint and column definition builders."""

from __future__ import annotations

from ddlforge.architecture.column import ColumnSchema


def build_column_constraints(
    column: ColumnSchema,
    has_composite_pk: bool = False,
    skip_primary_key: bool = False,
    explicit_nullability: bool = False,
) -> list[str]:
    """Inline constraint fragments of a column, in rendering order.

    The order is PRIMARY KEY, NULL/NOT NULL, UNIQUE, DEFAULT, CHECK, COLLATE.
    A primary key column never renders ``NULL`` and never renders ``UNIQUE``.

    Args:
        column: Column to render
        has_composite_pk: The table key spans several columns and is rendered
            as a separate ``PRIMARY KEY (...)`` line
        skip_primary_key: Suppress the inline ``PRIMARY KEY`` (ADD COLUMN contexts)
        explicit_nullability: Always render ``NULL`` or ``NOT NULL``

    Returns:
        list[str]: Constraint fragments to be joined with single spaces
    """
    parts: list[str] = []
    inline_pk = column.is_primary_key and not has_composite_pk and not skip_primary_key
    if inline_pk:
        parts.append("PRIMARY KEY")

    if explicit_nullability:
        if column.is_primary_key or not column.is_nullable:
            parts.append("NOT NULL")
        else:
            parts.append("NULL")
    elif not column.is_nullable and not column.is_primary_key:
        parts.append("NOT NULL")

    if column.is_unique and not column.is_primary_key:
        parts.append("UNIQUE")
    if column.default is not None:
        parts.append(f"DEFAULT {column.default.sql_expression}")
    for check in column.checks:
        parts.append(f"CHECK ({check})")
    if column.collation:
        parts.append(f'COLLATE "{column.collation}"')
    return parts


def build_column_definition(
    column: ColumnSchema,
    has_composite_pk: bool = False,
    skip_primary_key: bool = False,
    explicit_nullability: bool = False,
) -> str:
    """``<name> <type> <constraints...>``."""
    constraints = build_column_constraints(
        column,
        has_composite_pk=has_composite_pk,
        skip_primary_key=skip_primary_key,
        explicit_nullability=explicit_nullability,
    )
    return " ".join([column.name, column.sql_type, *constraints])
