"""Command-line interface.

Commands:
- clean: run one cleanup cycle for a build output directory
- sweep: remove explicit paths under a project root

Exit codes: 0 success, 1 per-path deletion errors, 2 configuration error,
3 safety violation.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from build_janitor import __version__
from build_janitor.cleanup import CleanupOrchestrator, CleanupResult, SweepEntry, sweep_paths
from build_janitor.config import load_cleanup_options
from build_janitor.errors import ConfigurationError, LedgerError, SafetyViolationError
from build_janitor.hosts import StaticBuildReport
from build_janitor.utils.logging import JanitorLogger
from build_janitor.utils.setup_logging import setup_logging

EXIT_OK = 0
EXIT_DELETE_ERRORS = 1
EXIT_CONFIG_ERROR = 2
EXIT_SAFETY_VIOLATION = 3


def read_asset_manifest(path: Optional[Path]) -> list[str]:
    """Read the current build's asset names.

    Accepts a JSON list of names, a JSON object with an ``assets`` list (of
    names or ``{"name": ...}`` entries), or plain text with one name per line.

    Raises:
        ConfigurationError: If the file cannot be read or has the wrong shape
    """
    if path is None:
        return []
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigurationError(f"Cannot read asset manifest {path}: {e}") from e

    stripped = text.strip()
    if not stripped.startswith(("[", "{")):
        return [line.strip() for line in text.splitlines() if line.strip()]

    try:
        data = json.loads(stripped)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid asset manifest {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("assets", [])
    if not isinstance(data, list):
        raise ConfigurationError(f"Asset manifest {path} must be a list of names")

    assets = []
    for item in data:
        if isinstance(item, dict) and isinstance(item.get("name"), str):
            assets.append(item["name"])
        elif isinstance(item, str):
            assets.append(item)
        else:
            raise ConfigurationError(f"Invalid asset entry in {path}: {item!r}")
    return assets


def print_cleanup_summary(console: Console, result: CleanupResult, dry_run: bool) -> None:
    """Render a cleanup result as a table."""
    table = Table(title="Dry run" if dry_run else "Cleanup", show_header=True)
    table.add_column("Path")
    table.add_column("Status", style="bold")
    for entry in result.entries:
        table.add_row(escape(entry.path), entry.mode.value if dry_run else "removed")
    for path in result.skipped:
        table.add_row(escape(path), "skipped", style="yellow")
    console.print(table)
    console.print(f"{result.total_deleted} path(s), {result.bytes_freed} bytes")
    for error in result.errors:
        console.print(error, style="red", markup=False)


def print_sweep_summary(console: Console, entries: list[SweepEntry]) -> None:
    table = Table(title="Sweep", show_header=True)
    table.add_column("Path")
    table.add_column("Result", style="bold")
    for entry in entries:
        table.add_row(escape(str(entry.path)), entry.output)
    console.print(table)


def cmd_clean(args: argparse.Namespace, console: Console) -> int:
    """Run one cleanup cycle."""
    options = load_cleanup_options(
        args.project,
        config_file=args.config,
        overrides={
            "dry_run": True if args.dry_run else None,
            "verbose": True if args.verbose else None,
        },
    )
    assets = read_asset_manifest(args.assets)
    janitor = CleanupOrchestrator(options, logger=JanitorLogger(options.namespace))
    janitor.bind(args.output)

    report = StaticBuildReport(
        assets=assets,
        errors=["build reported errors"] if args.errors else [],
    )
    result = asyncio.run(janitor.run_once(report))

    if args.json:
        console.print_json(json.dumps(result.to_dict()))
    else:
        print_cleanup_summary(console, result, options.dry_run)
    return EXIT_OK if result.success else EXIT_DELETE_ERRORS


def cmd_sweep(args: argparse.Namespace, console: Console) -> int:
    """Remove explicit paths under a project root."""
    entries = sweep_paths(
        args.paths,
        args.root,
        exclude=args.exclude or (),
        dry_run=args.dry_run,
        allow_outside=args.allow_outside,
        logger=JanitorLogger() if args.verbose else None,
    )
    print_sweep_summary(console, entries)
    if entries and entries[0].output.startswith("project root must be"):
        return EXIT_CONFIG_ERROR
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="build-janitor",
        description="Remove stale build output without touching anything outside the boundary",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    clean_parser = subparsers.add_parser("clean", help="Run one cleanup cycle")
    clean_parser.add_argument("--output", type=Path, required=True, help="Build output directory")
    clean_parser.add_argument(
        "--assets",
        type=Path,
        help="Asset manifest of the current build (JSON list or one name per line)",
    )
    clean_parser.add_argument(
        "--project",
        type=Path,
        default=Path.cwd(),
        help="Project directory holding .build-janitor.json (default: cwd)",
    )
    clean_parser.add_argument("--config", type=Path, help="Explicit options file")
    clean_parser.add_argument("--dry-run", action="store_true", help="Only report what would be removed")
    clean_parser.add_argument("--verbose", action="store_true", help="Log every removed path")
    clean_parser.add_argument("--errors", action="store_true", help="Treat the build as failed")
    clean_parser.add_argument("--json", action="store_true", help="Output the result as JSON")

    sweep_parser = subparsers.add_parser("sweep", help="Remove paths under a project root")
    sweep_parser.add_argument("paths", nargs="+", help="Paths relative to --root")
    sweep_parser.add_argument("--root", required=True, help="Absolute project root")
    sweep_parser.add_argument(
        "--exclude",
        action="append",
        help="Child name kept inside a removed directory (repeatable)",
    )
    sweep_parser.add_argument("--dry-run", action="store_true", help="Only report what would be removed")
    sweep_parser.add_argument(
        "--allow-outside",
        action="store_true",
        help="Allow removing paths outside the project root",
    )
    sweep_parser.add_argument("--verbose", action="store_true", help="Log every entry")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_CONFIG_ERROR

    setup_logging(debug=args.debug)
    console = Console()
    err_console = Console(stderr=True)

    try:
        if args.command == "clean":
            return cmd_clean(args, console)
        return cmd_sweep(args, console)
    except SafetyViolationError as e:
        err_console.print(str(e), style="bold red", markup=False)
        return EXIT_SAFETY_VIOLATION
    except (ConfigurationError, LedgerError) as e:
        err_console.print(f"Error: {e}", style="bold red", markup=False)
        return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    sys.exit(main())
