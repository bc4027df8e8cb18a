"""Migrate a whole project from string references to `api` references."""

import asyncio
import logging
from pathlib import Path

from convex_codemod.catalog import build_catalog
from convex_codemod.errors import CodemodError
from convex_codemod.file_finder import (
    find_other_files,
    find_react_files,
    find_server_files,
)
from convex_codemod.models import (
    DEFAULT_API_ALIAS,
    FileResult,
    MigrationResult,
    RewriteError,
    RewriteKind,
    RewriteOptions,
)
from convex_codemod.project import ensure_convex_project, get_functions_dir
from convex_codemod.rewriter import rewrite_file

logger = logging.getLogger(__name__)

DEFAULT_JOBS = 8


def _process_file(
    path: Path, options: RewriteOptions, dry_run: bool
) -> FileResult | RewriteError:
    """Rewrite one file and write it back, recording any failure."""
    kind = options.kind or "generic"
    try:
        new_source = rewrite_file(path, options)
        if new_source is not None and not dry_run:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(new_source)
        return FileResult(path=str(path), kind=kind, changed=new_source is not None)
    except CodemodError as e:
        logger.error(f"Failed to rewrite {path}: {e}")
        return RewriteError(path=str(path), error=str(e), phase=e.phase)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read or write {path}: {e}")
        return RewriteError(path=str(path), error=str(e), phase="io")


def classify_files(
    react_files: list[Path], server_files: list[Path], other_files: list[Path]
) -> list[tuple[Path, RewriteKind]]:
    """Pair each file with its kind; a file is only rewritten once."""
    targets: dict[Path, RewriteKind] = {}
    batches = (("react", react_files), ("server", server_files), (None, other_files))
    for kind, files in batches:
        for path in files:
            if path in targets:
                logger.warning(
                    f"{path} matches several kinds, "
                    f"treating it as {targets[path] or 'generic'}"
                )
                continue
            targets[path] = kind
    return list(targets.items())


async def migrate_project(
    project: Path | str,
    dry_run: bool = False,
    convex_api_alias: str = DEFAULT_API_ALIAS,
    generated_api_import: str | None = None,
    match_all_literals: bool = False,
    jobs: int = DEFAULT_JOBS,
) -> MigrationResult:
    """Rewrite every file in a Convex project that uses string references.

    Files are rewritten concurrently on worker threads. A file that fails
    is reported in the result and left untouched; the others still go
    ahead.

    Args:
        project: Root of the project (the directory with package.json)
        dry_run: Compute the rewrites without writing any file
        convex_api_alias: Local name to import `api` as
        generated_api_import: Path to import `api` from in generic files
        match_all_literals: Rewrite every matching string, not only
            arguments of known calls
        jobs: Maximum number of files rewritten at once

    Returns:
        MigrationResult listing every file touched and every failure

    Raises:
        ProjectError: If `project` isn't a Convex project
    """
    project = Path(project)
    logger.info(f"Migrating {project}")
    ensure_convex_project(project)

    functions_dir = get_functions_dir(project)
    catalog = build_catalog(functions_dir)

    react_files = find_react_files(project, functions_dir)
    server_files = find_server_files(project, functions_dir)
    other_files = find_other_files(
        project, functions_dir, catalog, exclude=[*react_files, *server_files]
    )
    targets = classify_files(react_files, server_files, other_files)

    semaphore = asyncio.Semaphore(max(jobs, 1))

    async def run(path: Path, kind: RewriteKind) -> FileResult | RewriteError:
        options = RewriteOptions(
            kind=kind,
            function_prefixes=catalog,
            convex_api_alias=convex_api_alias,
            generated_api_import=generated_api_import,
            match_all_literals=match_all_literals,
        )
        async with semaphore:
            return await asyncio.to_thread(_process_file, path, options, dry_run)

    outcomes = await asyncio.gather(*(run(path, kind) for path, kind in targets))

    files = [o for o in outcomes if isinstance(o, FileResult)]
    errors = [o for o in outcomes if isinstance(o, RewriteError)]
    result = MigrationResult(
        project=str(project),
        functions_dir=str(functions_dir),
        function_prefixes=list(catalog),
        files=files,
        errors=errors,
        dry_run=dry_run,
    )
    logger.info(
        f"Migration complete: {len(result.changed_files)} files changed, {len(errors)} errors"
    )
    return result
