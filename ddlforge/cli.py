"""Command line entry point.

    ddlforge tables/users.yaml
    ddlforge tables/*.yaml --config ddlforge.yaml --mode create-or-alter
    ddlforge tables/users.yaml -o build/users.sql -v
"""

from __future__ import annotations

import argparse
import logging
import sys

from ddlforge.hq.builder import SchemaBuilder
from ddlforge.hq.config import GeneratorConfig
from ddlforge.onto import MigrationMode

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ddlforge",
        description="Generate PostgreSQL DDL from YAML table definitions",
    )
    parser.add_argument("sources", nargs="+", help="YAML table definition files")
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="output file (single source only); defaults to <stem>.schema.sql",
    )
    parser.add_argument("-c", "--config", default=None, help="generator config YAML")
    parser.add_argument(
        "-m",
        "--mode",
        choices=[m.value for m in MigrationMode],
        default=None,
        help="migration mode, overrides the config file",
    )
    parser.add_argument(
        "--no-format", action="store_true", help="skip SQL formatting"
    )
    parser.add_argument(
        "--timestamps",
        action="store_true",
        help="add created_at/updated_at columns",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="debug logging"
    )
    return parser


def load_config(args: argparse.Namespace) -> GeneratorConfig:
    """Generator config from the config file with command line overrides applied."""
    config = (
        GeneratorConfig.from_yaml(args.config) if args.config else GeneratorConfig()
    )
    changes: dict = {}
    if args.no_format:
        changes["format_sql"] = False
    if args.timestamps:
        changes["add_timestamps"] = True
    if args.mode is not None:
        changes["migration"] = config.migration.evolve(mode=MigrationMode(args.mode))
    return config.evolve(**changes) if changes else config


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.output is not None and len(args.sources) > 1:
        parser.error("--output requires a single source file")

    builder = SchemaBuilder(load_config(args))
    written = 0
    for source in args.sources:
        if builder.build(source, output=args.output) is not None:
            written += 1
    logger.debug("Wrote %d of %d schema file(s)", written, len(args.sources))
    return 0 if written else 1


if __name__ == "__main__":
    sys.exit(main())
