"""Generator and migration configuration.

Both models load from YAML like every other definition class:

    format_sql: true
    add_timestamps: true
    migration:
      mode: create-or-alter
      generate_do_blocks: true

Key Components:
    - MigrationConfig: Migration mode and the switches that shape ALTER output
    - GeneratorConfig: Options for one compilation
"""

from __future__ import annotations

from pydantic import Field

from ddlforge.architecture.base import ConfigBaseModel
from ddlforge.onto import MigrationMode

POSTGRES_MAX_IDENTIFIER_LENGTH = 63


class MigrationConfig(ConfigBaseModel):
    """Migration behaviour for generated DDL.

    Attributes:
        mode: Migration strategy
        enable_column_adding: Emit the ADD COLUMN block in alter modes
        enable_column_dropping: Accepted for completeness; dropping columns
            needs the live schema, which is never inspected
        enable_index_creation: Emit CREATE INDEX statements
        enable_constraint_modification: Emit guarded ADD CONSTRAINT blocks for
            table constraints in alter modes
        generate_do_blocks: Guard ADD COLUMN with a DO block instead of
            ``ADD COLUMN IF NOT EXISTS``
        max_identifier_length: Identifier length above which a warning is logged
    """

    mode: MigrationMode = Field(default=MigrationMode.CREATE_ONLY)
    enable_column_adding: bool = True
    enable_column_dropping: bool = False
    enable_index_creation: bool = True
    enable_constraint_modification: bool = True
    generate_do_blocks: bool = True
    max_identifier_length: int = Field(default=POSTGRES_MAX_IDENTIFIER_LENGTH, gt=0)


class GeneratorConfig(ConfigBaseModel):
    """Options for compiling table schemas.

    Attributes:
        format_sql: Run the output through the SQL formatter
        enable_rls_by_default: Enable RLS on tables that do not say otherwise
        add_timestamps: Append created_at/updated_at columns unless present
        use_explicit_nullability: Always render NULL or NOT NULL
        generate_comments: Emit COMMENT ON statements
        validate_schema: Run the schema validator before generation
        migration: Migration configuration
    """

    format_sql: bool = True
    enable_rls_by_default: bool = False
    add_timestamps: bool = False
    use_explicit_nullability: bool = False
    generate_comments: bool = True
    validate_schema: bool = True
    migration: MigrationConfig = Field(default_factory=MigrationConfig)
