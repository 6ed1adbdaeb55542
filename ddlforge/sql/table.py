"""Table-level statement builders.

Each public function takes a :class:`TableSchema` and returns SQL text
(one statement, or a list of statements for builders that may emit none
or several). None of them mutates the schema.
"""

from __future__ import annotations

from ddlforge.architecture.column import ColumnSchema
from ddlforge.architecture.table import TableSchema
from ddlforge.sql.columns import build_column_definition
from ddlforge.sql.util import escape_literal, guarded_block, quote_literal

# ---------------------------------------------------------------------------
# CREATE / DROP
# ---------------------------------------------------------------------------


def build_create_table(
    schema: TableSchema,
    if_not_exists: bool = False,
    explicit_nullability: bool = False,
) -> str:
    """``CREATE TABLE [IF NOT EXISTS] <name> (...) [PARTITION BY ...];``.

    Composite detection uses the effective primary key, i.e. the declared
    key with partition columns folded in. A composite key is rendered as a
    trailing ``PRIMARY KEY (...)`` line, which is always the last line of
    the body. Table constraints come right after the columns.

    Raises:
        ConfigurationError: If a table constraint or the partition strategy
            is malformed (empty column list, unusable constraint name)
    """
    for constraint in schema.constraints:
        constraint.validate()
    if schema.partition is not None:
        schema.partition.validate()

    primary_key = schema.effective_primary_key
    composite = len(primary_key) > 1

    lines = [
        "  "
        + build_column_definition(
            column,
            has_composite_pk=composite,
            explicit_nullability=explicit_nullability,
        )
        for column in schema.columns
    ]
    lines.extend(f"  {constraint.to_sql()}" for constraint in schema.constraints)
    if composite:
        lines.append(f"  PRIMARY KEY ({', '.join(primary_key)})")

    head = "CREATE TABLE IF NOT EXISTS" if if_not_exists else "CREATE TABLE"
    tail = ")"
    if schema.partition is not None:
        tail += f" {schema.partition.to_sql()}"
    return f"{head} {schema.name} (\n" + ",\n".join(lines) + f"\n{tail};"


def build_drop_table(schema: TableSchema) -> str:
    return f"DROP TABLE IF EXISTS {schema.name} CASCADE;"


# ---------------------------------------------------------------------------
# ALTER TABLE ... ADD COLUMN
# ---------------------------------------------------------------------------


def _addable_columns(schema: TableSchema) -> list[ColumnSchema]:
    # a column cannot be turned into a primary key inline, so key columns are skipped
    return [c for c in schema.columns if not c.is_primary_key]


def _add_column_statement(
    schema: TableSchema,
    column: ColumnSchema,
    if_not_exists: bool,
    explicit_nullability: bool,
) -> str:
    definition = build_column_definition(
        column, skip_primary_key=True, explicit_nullability=explicit_nullability
    )
    guard = "IF NOT EXISTS " if if_not_exists else ""
    return f"ALTER TABLE {schema.name} ADD COLUMN {guard}{definition};"


def build_add_columns(
    schema: TableSchema, explicit_nullability: bool = False
) -> list[str]:
    """One ``ALTER TABLE ... ADD COLUMN IF NOT EXISTS ...;`` per non-key column."""
    return [
        _add_column_statement(schema, column, True, explicit_nullability)
        for column in _addable_columns(schema)
    ]


def build_add_columns_guarded(
    schema: TableSchema, explicit_nullability: bool = False
) -> list[str]:
    """A single DO block adding each non-key column unless it already exists.

    Returns:
        list[str]: The DO block, or an empty list when there is nothing to add
    """
    guards = [
        (
            "SELECT 1 FROM information_schema.columns "
            f"WHERE table_name = {quote_literal(schema.name)} "
            f"AND column_name = {quote_literal(column.name)}",
            _add_column_statement(schema, column, False, explicit_nullability),
        )
        for column in _addable_columns(schema)
    ]
    if not guards:
        return []
    return [guarded_block(guards)]


def build_add_constraints_guarded(schema: TableSchema) -> list[str]:
    """A single DO block adding each table constraint unless one of that name exists."""
    for constraint in schema.constraints:
        constraint.validate()
    guards = [
        (
            f"SELECT 1 FROM pg_constraint WHERE conname = {quote_literal(constraint.name)}",
            f"ALTER TABLE {schema.name} ADD {constraint.to_sql()};",
        )
        for constraint in schema.constraints
    ]
    if not guards:
        return []
    return [guarded_block(guards)]


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


def build_table_comment(schema: TableSchema) -> list[str]:
    if not schema.comment:
        return []
    return [f"COMMENT ON TABLE {schema.name} IS '{escape_literal(schema.comment)}';"]


def build_column_comments(schema: TableSchema) -> list[str]:
    return [
        f"COMMENT ON COLUMN {schema.name}.{c.name} IS '{escape_literal(c.comment)}';"
        for c in schema.columns
        if c.comment
    ]


def build_constraint_comments(schema: TableSchema) -> list[str]:
    return [
        f"COMMENT ON CONSTRAINT {c.name} ON {schema.name} "
        f"IS '{escape_literal(c.comment)}';"
        for c in schema.constraints
        if c.comment
    ]
