"""Row-level security builders."""

from __future__ import annotations

from ddlforge.architecture.policy import RlsPolicy
from ddlforge.architecture.table import TableSchema
from ddlforge.errors import ConfigurationError
from ddlforge.sql.util import escape_literal


def build_policy(schema: TableSchema, policy: RlsPolicy) -> str:
    """``CREATE POLICY <name> ON <table> [AS RESTRICTIVE] FOR <cmd> [TO ...] USING (...) [WITH CHECK (...)];``.

    An empty role list renders no TO clause.

    Raises:
        ConfigurationError: If a WITH CHECK condition is set on a SELECT or
            DELETE policy, which PostgreSQL rejects
    """
    if policy.check_condition and not policy.command.allows_check:
        raise ConfigurationError(
            f"WITH CHECK is not allowed on {policy.command.sql_command} "
            f"policy {policy.name} on {schema.name}"
        )
    sql = f"CREATE POLICY {policy.name} ON {schema.name}"
    if not policy.permissive:
        sql += " AS RESTRICTIVE"
    sql += f" FOR {policy.command.sql_command}"
    if policy.roles:
        sql += f" TO {', '.join(policy.roles)}"
    sql += f" USING ({policy.condition})"
    if policy.check_condition:
        sql += f" WITH CHECK ({policy.check_condition})"
    return sql + ";"


def build_rls(schema: TableSchema, comments: bool = True) -> list[str]:
    """RLS enable statement, then each policy followed by its comment."""
    statements: list[str] = []
    if schema.enable_rls:
        statements.append(f"ALTER TABLE {schema.name} ENABLE ROW LEVEL SECURITY;")
    for policy in schema.policies:
        statements.append(build_policy(schema, policy))
        if comments and policy.comment:
            statements.append(
                f"COMMENT ON POLICY {policy.name} ON {schema.name} "
                f"IS '{escape_literal(policy.comment)}';"
            )
    return statements
