"""Build step: compile every table of a YAML definition file.

A definition file holds either a list of tables or a mapping with a
``tables`` key:

    tables:
      - name: users
        enable_rls: true
        columns:
          - {name: id, type: uuid, primary_key: true, default: gen_random_uuid()}
          - {name: email, type: text, nullable: false, unique: true}

Tables are compiled independently. A table that fails to load or compile
is logged and skipped; the others are still written. The output goes to
``<stem>.schema.sql`` next to the input unless another path is given.

Key Components:
    - SchemaBuilder: Loads, compiles and writes the tables of one file
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ddlforge.architecture.table import TableSchema
from ddlforge.errors import DDLForgeError
from ddlforge.hq.compiler import SchemaCompiler
from ddlforge.hq.config import GeneratorConfig

logger = logging.getLogger(__name__)

SQL_EXTENSION = ".schema.sql"


class SchemaBuilder:
    """Compiles the table definitions of YAML files into SQL files.

    Attributes:
        config: Generator configuration shared by every table
        compiler: Compiler used for each table
    """

    def __init__(self, config: GeneratorConfig | None = None):
        self.config = config if config is not None else GeneratorConfig()
        self.compiler = SchemaCompiler(self.config)

    @staticmethod
    def output_path(source: Path | str) -> Path:
        """``<stem>.schema.sql`` next to the source file."""
        source = Path(source)
        return source.with_name(source.stem + SQL_EXTENSION)

    @staticmethod
    def read_tables(source: Path | str) -> list[dict[str, Any]]:
        """Raw table definitions of a YAML file."""
        with open(source) as f:
            data = yaml.safe_load(f)
        if data is None:
            return []
        if isinstance(data, dict):
            data = data.get("tables", [])
        if not isinstance(data, list):
            raise ValueError(
                f"Expected a list of tables in {source}, got {type(data).__name__}"
            )
        return data

    def load_table(self, raw: dict[str, Any]) -> TableSchema:
        """Build a table schema, applying the configured RLS default."""
        if isinstance(raw, dict) and "enable_rls" not in raw:
            raw = {**raw, "enable_rls": self.config.enable_rls_by_default}
        return TableSchema.model_validate(raw)

    def compile_tables(self, tables: list[dict[str, Any]]) -> str:
        """Compile each table, skipping the ones that fail.

        Returns:
            str: SQL of the compiled tables separated by blank lines
        """
        chunks: list[str] = []
        for position, raw in enumerate(tables):
            label = raw.get("name", f"#{position}") if isinstance(raw, dict) else position
            try:
                schema = self.load_table(raw)
                sql = self.compiler.compile(schema)
            except (ValidationError, DDLForgeError) as e:
                logger.warning("Skipping schema generation for table %s: %s", label, e)
                continue
            if sql:
                chunks.append(sql)
        return "\n\n".join(chunks)

    def build(self, source: Path | str, output: Path | str | None = None) -> Path | None:
        """Compile a definition file and write the SQL.

        Args:
            source: YAML definition file
            output: Output file; defaults to ``<stem>.schema.sql`` next to the source

        Returns:
            Path | None: Written file, or None when no table produced SQL
        """
        content = self.compile_tables(self.read_tables(source))
        if not content:
            logger.info("No tables generated for %s", source)
            return None
        target = Path(output) if output is not None else self.output_path(source)
        target.write_text(content + "\n")
        logger.info("Generated schema file: %s", target)
        return target
