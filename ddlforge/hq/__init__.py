"""High-level orchestration modules for ddlforge.

This package wires the validator, the migration strategies and the
formatter into a compiler, and the compiler into a file build step.
"""

from ddlforge.hq.builder import SchemaBuilder
from ddlforge.hq.compiler import SchemaCompiler, with_timestamps
from ddlforge.hq.config import GeneratorConfig, MigrationConfig
from ddlforge.hq.strategies import STRATEGIES, run_strategy
from ddlforge.hq.validator import SchemaValidator

__all__ = [
    "GeneratorConfig",
    "MigrationConfig",
    "STRATEGIES",
    "SchemaBuilder",
    "SchemaCompiler",
    "SchemaValidator",
    "run_strategy",
    "with_timestamps",
]
