# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""CLI for collecting diagnostic codes from local repository checkouts."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from dcc.assembler import build_index
from dcc.collector import Collector
from dcc.config import CollectorConfig, ConfigError, load_config
from dcc.extractor import CollectorError
from dcc.families import REPOSITORIES, RepositorySpec
from dcc.link_resolver import ResolutionWarning, UrlResolver
from dcc.link_validator import MarkdownValidator, ValidationWarning
from dcc.model import Family
from dcc.persistence import PersistenceError
from dcc.storage import JsonDirectoryPersistence

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR: str = "./errors"


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="dcc")
    subparsers = parser.add_subparsers(dest="command", required=True)

    collect_parser = subparsers.add_parser("collect")
    for repository in REPOSITORIES:
        collect_parser.add_argument(
            f"--{repository.name}",
            dest=f"repo_{repository.name}",
            metavar="PATH",
            help=f"Path to the {repository.name} repository checkout.",
        )
    collect_parser.add_argument(
        "--output",
        "-o",
        default=DEFAULT_OUTPUT_DIR,
        help="Output directory for per-prefix files and index.json.",
    )
    collect_parser.add_argument(
        "--config",
        required=False,
        help="Path to a collector config JSON file with per-prefix URL templates.",
    )
    collect_parser.add_argument(
        "--resolve-urls",
        action="store_true",
        help="Follow error URL redirects to record canonical documentation URLs.",
    )
    collect_parser.add_argument(
        "--validate-urls",
        action="store_true",
        help="Report markdown documentation URLs that return 404 (requires --config).",
    )
    collect_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Summary output format.",
    )

    subparsers.add_parser("list-families")
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.command == "collect":
        return _run_collect(args=args, stdout=stdout, stderr=stderr)
    if args.command == "list-families":
        _write_family_table(stdout=stdout)
        return 0

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _run_collect(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run collect command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    selected: list[tuple[RepositorySpec, Path]] = []
    for repository in REPOSITORIES:
        raw_path = getattr(args, f"repo_{repository.name}")
        if raw_path is None:
            continue
        root_path = Path(raw_path)
        if not root_path.is_dir():
            logger.warning(f"Repository path does not exist (repo={repository.name} path={root_path})")
            stderr.write(f"Repository path does not exist: {root_path}\n")
            return 2
        selected.append((repository, root_path))
    if not selected:
        logger.warning("No repositories specified")
        stderr.write("No repositories specified. Use --help for usage.\n")
        return 2

    config: CollectorConfig | None = None
    if args.config:
        try:
            config = load_config(Path(args.config))
        except ConfigError as exc:
            stderr.write(f"Invalid config: {exc}\n")
            return 2
    if args.validate_urls and config is None:
        logger.warning("URL validation requested without a config file; skipping")

    result = Collector(config=config).collect(selected)
    families = result.families
    logger.info(
        f"Collection completed (repos={len(selected)} families={len(families)} "
        f"errors={len(result.errors)})"
    )

    resolution_warnings: list[ResolutionWarning] = []
    if args.resolve_urls:
        families, resolution_warnings = resolve_family_urls(families, UrlResolver())

    validation_warnings: list[ValidationWarning] = []
    if args.validate_urls and config is not None:
        validation_warnings = validate_family_urls(families, MarkdownValidator(config))

    try:
        persisted = JsonDirectoryPersistence(Path(args.output)).persist(families)
    except PersistenceError as exc:
        stderr.write(f"Failed to write output: {exc}\n")
        return 2
    logger.info(
        f"Output written (output_dir={persisted.location} families={persisted.family_count} "
        f"records={persisted.record_count})"
    )

    _write_errors(
        errors=result.errors,
        resolution_warnings=resolution_warnings,
        validation_warnings=validation_warnings,
        stderr=stderr,
    )
    if args.format == "json":
        _write_json(families=families, stdout=stdout)
    else:
        _write_summary_table(families=families, stdout=stdout)
    return 0


def resolve_family_urls(
    families: list[Family], resolver: UrlResolver
) -> tuple[list[Family], list[ResolutionWarning]]:
    """Enrich every family's records with resolved URLs.

    Args:
        families: Assembled families.
        resolver: Resolver shared across families.

    Returns:
        Re-assembled families and the resolver's accumulated warnings.
    """
    enriched: list[Family] = []
    for family in families:
        records = resolver.resolve_records(family.records)
        enriched.append(Family(descriptor=family.descriptor, records=tuple(records)))
    return enriched, list(resolver.warnings)


def validate_family_urls(
    families: list[Family], validator: MarkdownValidator
) -> list[ValidationWarning]:
    """Probe markdown URLs of every family and return accumulated warnings."""
    for family in families:
        validator.validate(family.prefix, family.records)
    if validator.warnings:
        logger.warning(f"Documentation issues found (count={len(validator.warnings)})")
    return list(validator.warnings)


def _write_errors(
    errors: list[CollectorError],
    resolution_warnings: list[ResolutionWarning],
    validation_warnings: list[ValidationWarning],
    stderr: TextIO,
) -> None:
    """Write recoverable errors and warnings to stderr."""
    for error in errors:
        stderr.write(f"collector_error: {error}\n")
    for warning in resolution_warnings:
        stderr.write(f"resolution_warning: {warning}\n")
    for warning in validation_warnings:
        stderr.write(f"validation_warning: {warning}\n")


def _write_json(families: list[Family], stdout: TextIO) -> None:
    """Write the family index as JSON.

    Args:
        families: Collected families.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps({"prefixes": build_index(families)}, indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_summary_table(families: list[Family], stdout: TextIO) -> None:
    """Write one summary row per collected family."""
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    table = Table(show_header=True, expand=True)
    table.add_column("prefix", overflow="fold")
    table.add_column("repo", overflow="fold")
    table.add_column("count", justify="right")
    table.add_column("resolved", justify="right")
    table.add_column("description", ratio=3, overflow="fold")
    for family in families:
        resolved = sum(1 for record in family.records if record.resolved_url)
        table.add_row(
            family.prefix,
            family.descriptor.repo,
            str(family.count),
            str(resolved),
            family.descriptor.description,
        )
    console.print(table)


def _write_family_table(stdout: TextIO) -> None:
    """Write the static family configuration."""
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    table = Table(show_header=True, expand=True)
    table.add_column("repo", overflow="fold")
    table.add_column("prefix", overflow="fold")
    table.add_column("pattern", overflow="fold")
    table.add_column("passes", ratio=2, overflow="fold")
    table.add_column("description", ratio=2, overflow="fold")
    for repository in REPOSITORIES:
        for family_spec in repository.families:
            table.add_row(
                repository.name,
                family_spec.prefix,
                family_spec.pattern,
                ", ".join(
                    f"{extraction_pass.label} ({extraction_pass.role})"
                    for extraction_pass in family_spec.passes
                ),
                family_spec.description,
            )
    console.print(table)


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
