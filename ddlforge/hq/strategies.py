"""Migration strategies.

A strategy turns one table schema into the ordered statements of one
migration mode. Every strategy is a fold over a fixed sequence of step
functions; a step reads the schema and the generator configuration and
returns the statements it contributes, possibly none. Steps share no
state, so the same schema and configuration always yield the same text.

Key Components:
    - create_only, create_if_not_exists, create_or_alter, alter_only,
      drop_and_recreate: One function per MigrationMode
    - STRATEGIES: Lookup from MigrationMode to strategy function
    - run_strategy: Dispatch on the configured mode

Steps per mode:
    - create-only: CREATE TABLE followed by the tail steps (indexes,
      foreign keys, RLS, comments)
    - create-if-not-exists: CREATE TABLE IF NOT EXISTS, then the tail steps
    - create-or-alter: CREATE TABLE IF NOT EXISTS, the guarded ADD COLUMN and
      ADD CONSTRAINT blocks, then the tail steps
    - alter-only: the guarded ADD COLUMN and ADD CONSTRAINT blocks only
    - drop-and-recreate: DROP TABLE ... CASCADE, then the create-only steps
"""

from __future__ import annotations

import logging
from functools import reduce
from typing import Callable

from ddlforge.architecture.table import TableSchema
from ddlforge.hq.config import GeneratorConfig
from ddlforge.onto import MigrationMode
from ddlforge.sql.foreign_key import build_foreign_keys
from ddlforge.sql.index import build_indexes
from ddlforge.sql.rls import build_rls
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

logger = logging.getLogger(__name__)

Step = Callable[[TableSchema, GeneratorConfig], list[str]]

STATEMENT_SEPARATOR = "\n\n"

# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def create_table_step(schema: TableSchema, config: GeneratorConfig) -> list[str]:
    return [
        build_create_table(
            schema, explicit_nullability=config.use_explicit_nullability
        )
    ]


def create_table_if_not_exists_step(
    schema: TableSchema, config: GeneratorConfig
) -> list[str]:
    return [
        build_create_table(
            schema,
            if_not_exists=True,
            explicit_nullability=config.use_explicit_nullability,
        )
    ]


def drop_table_step(schema: TableSchema, config: GeneratorConfig) -> list[str]:
    return [build_drop_table(schema)]


def add_columns_step(schema: TableSchema, config: GeneratorConfig) -> list[str]:
    migration = config.migration
    if migration.enable_column_dropping:
        logger.info(
            "Column dropping for %s is not generated: it requires the live table definition",
            schema.name,
        )
    if not migration.enable_column_adding:
        return []
    if migration.generate_do_blocks:
        return build_add_columns_guarded(
            schema, explicit_nullability=config.use_explicit_nullability
        )
    return build_add_columns(
        schema, explicit_nullability=config.use_explicit_nullability
    )


def add_constraints_step(schema: TableSchema, config: GeneratorConfig) -> list[str]:
    migration = config.migration
    if migration.enable_constraint_modification and migration.generate_do_blocks:
        return build_add_constraints_guarded(schema)
    return []


def indexes_step(schema: TableSchema, config: GeneratorConfig) -> list[str]:
    if not config.migration.enable_index_creation:
        return []
    return build_indexes(schema, comments=config.generate_comments)


def foreign_keys_step(schema: TableSchema, config: GeneratorConfig) -> list[str]:
    return build_foreign_keys(schema, comments=config.generate_comments)


def rls_step(schema: TableSchema, config: GeneratorConfig) -> list[str]:
    return build_rls(schema, comments=config.generate_comments)


def comments_step(schema: TableSchema, config: GeneratorConfig) -> list[str]:
    if not config.generate_comments:
        return []
    return (
        build_table_comment(schema)
        + build_column_comments(schema)
        + build_constraint_comments(schema)
    )


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

_TAIL_STEPS: tuple[Step, ...] = (indexes_step, foreign_keys_step, rls_step, comments_step)
_ALTER_STEPS: tuple[Step, ...] = (add_columns_step, add_constraints_step)


def run_steps(
    steps: tuple[Step, ...], schema: TableSchema, config: GeneratorConfig
) -> str:
    """Fold the steps into one list of statements and join them with blank lines."""
    statements: list[str] = reduce(
        lambda acc, step: acc + step(schema, config), steps, []
    )
    return STATEMENT_SEPARATOR.join(statements)


def create_only(schema: TableSchema, config: GeneratorConfig) -> str:
    return run_steps((create_table_step, *_TAIL_STEPS), schema, config)


def create_if_not_exists(schema: TableSchema, config: GeneratorConfig) -> str:
    return run_steps((create_table_if_not_exists_step, *_TAIL_STEPS), schema, config)


def create_or_alter(schema: TableSchema, config: GeneratorConfig) -> str:
    return run_steps(
        (create_table_if_not_exists_step, *_ALTER_STEPS, *_TAIL_STEPS), schema, config
    )


def alter_only(schema: TableSchema, config: GeneratorConfig) -> str:
    return run_steps(_ALTER_STEPS, schema, config)


def drop_and_recreate(schema: TableSchema, config: GeneratorConfig) -> str:
    return run_steps((drop_table_step,), schema, config) + (
        STATEMENT_SEPARATOR + create_only(schema, config)
    )


STRATEGIES: dict[MigrationMode, Callable[[TableSchema, GeneratorConfig], str]] = {
    MigrationMode.CREATE_ONLY: create_only,
    MigrationMode.CREATE_IF_NOT_EXISTS: create_if_not_exists,
    MigrationMode.CREATE_OR_ALTER: create_or_alter,
    MigrationMode.ALTER_ONLY: alter_only,
    MigrationMode.DROP_AND_RECREATE: drop_and_recreate,
}


def run_strategy(schema: TableSchema, config: GeneratorConfig) -> str:
    """Generate the statements of the configured migration mode."""
    strategy = STRATEGIES[config.migration.mode]
    logger.debug("Generating %s for table %s", config.migration.mode, schema.name)
    return strategy(schema, config)
