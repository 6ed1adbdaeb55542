"""CREATE INDEX builders."""

from __future__ import annotations

import logging

from ddlforge.architecture.index import DatabaseIndex
from ddlforge.architecture.onto import IndexMethod
from ddlforge.architecture.table import TableSchema
from ddlforge.errors import ConfigurationError
from ddlforge.sql.util import escape_literal

logger = logging.getLogger(__name__)


def _column_spec(index: DatabaseIndex, column: str) -> str:
    spec = column
    if index.op_class:
        spec += f" {index.op_class}"
    if index.descending:
        spec += " DESC"
    if index.nulls_first is not None:
        spec += " NULLS FIRST" if index.nulls_first else " NULLS LAST"
    return spec


def build_index(
    schema: TableSchema, index: DatabaseIndex, comments: bool = True
) -> list[str]:
    """Render one index and its optional comment.

    ``CREATE [UNIQUE] INDEX [CONCURRENTLY] IF NOT EXISTS <name> ON <table>
    [USING <method>] (<keys>) [INCLUDE (...)] [WITH (...)] [TABLESPACE t]
    [WHERE <condition>];`` with ``USING`` omitted for btree.

    Args:
        schema: Table the index belongs to
        index: Index to render
        comments: Whether to render ``COMMENT ON INDEX``

    Returns:
        list[str]: The CREATE INDEX statement, followed by its comment if any

    Raises:
        ConfigurationError: If the index breaks a method restriction or
            references columns the table does not have
    """
    index.validate()
    known = set(schema.column_names)
    for column in [*index.columns, *index.include]:
        if column not in known:
            raise ConfigurationError(
                f"Index on table {schema.name} references unknown column '{column}'"
            )

    name = index.effective_name(schema.name)
    parts = ["CREATE"]
    if index.unique:
        parts.append("UNIQUE")
    parts.append("INDEX")
    if index.concurrent:
        parts.append("CONCURRENTLY")
    parts.append(f"IF NOT EXISTS {name} ON {schema.name}")
    if index.method != IndexMethod.BTREE:
        parts.append(f"USING {index.method}")
    if index.expression is not None:
        parts.append(f"({index.expression})")
    else:
        parts.append(f"({', '.join(_column_spec(index, c) for c in index.columns)})")
    if index.include:
        parts.append(f"INCLUDE ({', '.join(index.include)})")
    params = index.rendered_storage_parameters
    if params:
        parts.append(f"WITH ({', '.join(params)})")
    if index.tablespace:
        parts.append(f"TABLESPACE {index.tablespace}")
    if index.condition:
        parts.append(f"WHERE {index.condition}")

    statements = [" ".join(parts) + ";"]
    if comments and index.comment:
        statements.append(
            f"COMMENT ON INDEX {name} IS '{escape_literal(index.comment)}';"
        )
    return statements


def build_indexes(schema: TableSchema, comments: bool = True) -> list[str]:
    statements: list[str] = []
    for index in schema.indexes:
        statements.extend(build_index(schema, index, comments=comments))
    logger.debug("Rendered %d index(es) for %s", len(schema.indexes), schema.name)
    return statements
