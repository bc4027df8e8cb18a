"""Command-line interface for convex-codemod."""

import argparse
import asyncio
import logging
import sys

from convex_codemod.errors import ProjectError
from convex_codemod.migrator import DEFAULT_JOBS, migrate_project
from convex_codemod.models import DEFAULT_API_ALIAS

logger = logging.getLogger(__name__)


def setup_logging(verbosity: int = 0):
    """Configure logging to stderr."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="convex-codemod",
        description=(
            'Rewrite string function references like useQuery("messages:list") '
            "to useQuery(api.messages.list)"
        ),
    )
    parser.add_argument(
        "--project",
        "-p",
        default=".",
        help="Project directory containing package.json (default: .)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report which files would change without writing them",
    )
    parser.add_argument(
        "--alias",
        default=DEFAULT_API_ALIAS,
        help=f"Local name for the generated api object (default: {DEFAULT_API_ALIAS})",
    )
    parser.add_argument(
        "--api-import",
        default=None,
        help="Module to import api from in files without a generated import",
    )
    parser.add_argument(
        "--all-literals",
        action="store_true",
        help="Rewrite every matching string, not only arguments of known calls",
    )
    parser.add_argument(
        "--jobs",
        "-j",
        type=int,
        default=DEFAULT_JOBS,
        help=f"Files to rewrite concurrently (default: {DEFAULT_JOBS})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for debug output)",
    )
    return parser


async def run_cli(args: list[str]) -> int:
    """Run the CLI with the given arguments.

    Args:
        args: Command-line arguments (without program name)

    Returns:
        Exit code (0 if every file was rewritten, non-zero otherwise)
    """
    try:
        parsed = create_parser().parse_args(args)
    except SystemExit as e:
        return e.code if e.code else 0

    setup_logging(parsed.verbose)

    try:
        result = await migrate_project(
            parsed.project,
            dry_run=parsed.dry_run,
            convex_api_alias=parsed.alias,
            generated_api_import=parsed.api_import,
            match_all_literals=parsed.all_literals,
            jobs=parsed.jobs,
        )
    except ProjectError as e:
        logger.error(f"Invalid project: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.to_json())

    changed = len(result.changed_files)
    verb = "would change" if result.dry_run else "changed"
    print(f"{changed} files {verb}, {len(result.errors)} errors", file=sys.stderr)
    if changed:
        print(
            "Review the diff: this codemod is best effort and may need manual fixes",
            file=sys.stderr,
        )
    return 1 if result.errors else 0


def main():
    """Entry point for the CLI."""
    exit_code = asyncio.run(run_cli(sys.argv[1:]))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
