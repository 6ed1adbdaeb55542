"""Stateless SQL builders and the SQL formatter."""

from ddlforge.sql.columns import build_column_constraints, build_column_definition
from ddlforge.sql.foreign_key import build_foreign_key, build_foreign_keys
from ddlforge.sql.format import format_sql
from ddlforge.sql.index import build_index, build_indexes
from ddlforge.sql.rls import build_policy, build_rls
from ddlforge.sql.table import (
    build_add_columns,
    build_add_columns_guarded,
    build_add_constraints_guarded,
    build_column_comments,
    build_constraint_comments,
    build_create_table,
    build_drop_table,
    build_table_comment,
)

__all__ = [
    "build_add_columns",
    "build_add_columns_guarded",
    "build_add_constraints_guarded",
    "build_column_comments",
    "build_column_constraints",
    "build_column_definition",
    "build_constraint_comments",
    "build_create_table",
    "build_drop_table",
    "build_foreign_key",
    "build_foreign_keys",
    "build_index",
    "build_indexes",
    "build_policy",
    "build_rls",
    "build_table_comment",
    "format_sql",
]
