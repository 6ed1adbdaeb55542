"""Foreign key constraint builders."""

from __future__ import annotations

from ddlforge.architecture.foreign_key import ForeignKey
from ddlforge.architecture.onto import ForeignKeyAction
from ddlforge.architecture.table import TableSchema
from ddlforge.errors import ConfigurationError
from ddlforge.sql.util import escape_literal


def build_foreign_key(schema: TableSchema, fk: ForeignKey) -> str:
    """``ALTER TABLE <t> ADD CONSTRAINT <name> FOREIGN KEY (<col>) REFERENCES ...;``.

    ``NO ACTION`` is the PostgreSQL default and is not rendered.

    Raises:
        ConfigurationError: If the target table is empty
    """
    if not fk.references_table.strip():
        raise ConfigurationError(
            f"Foreign key on {schema.name}.{fk.column} has no target table"
        )
    sql = (
        f"ALTER TABLE {schema.name} ADD CONSTRAINT {fk.effective_name(schema.name)} "
        f"FOREIGN KEY ({fk.column}) "
        f"REFERENCES {fk.references_table}({fk.references_column})"
    )
    if fk.on_delete != ForeignKeyAction.NO_ACTION:
        sql += f" ON DELETE {fk.on_delete.sql_clause}"
    if fk.on_update != ForeignKeyAction.NO_ACTION:
        sql += f" ON UPDATE {fk.on_update.sql_clause}"
    if fk.deferrable:
        sql += " DEFERRABLE"
        if fk.initially_deferred:
            sql += " INITIALLY DEFERRED"
    if fk.not_valid:
        sql += " NOT VALID"
    return sql + ";"


def build_foreign_keys(schema: TableSchema, comments: bool = True) -> list[str]:
    """Foreign key statements in column order.

    Foreign keys are matched to columns by name; when several target the
    same column the first one wins.

    Raises:
        ConfigurationError: If a foreign key names a column the table does not
            have, or has an empty target table
    """
    known = set(schema.column_names)
    for fk in schema.foreign_keys:
        if fk.column not in known:
            raise ConfigurationError(
                f"Foreign key on table {schema.name} references unknown column '{fk.column}'"
            )

    statements: list[str] = []
    for column in schema.columns:
        fk = next((f for f in schema.foreign_keys if f.column == column.name), None)
        if fk is None:
            continue
        statements.append(build_foreign_key(schema, fk))
        if comments and fk.comment:
            statements.append(
                f"COMMENT ON CONSTRAINT {fk.effective_name(schema.name)} "
                f"ON {schema.name} IS '{escape_literal(fk.comment)}';"
            )
    return statements
