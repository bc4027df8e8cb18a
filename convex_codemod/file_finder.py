"""Select which files in a project to rewrite, and as what kind."""

import logging
import subprocess
from pathlib import Path
from typing import Iterable

from convex_codemod.catalog import DECLARATION_SUFFIXES, GENERATED_DIR
from convex_codemod.errors import ProjectError
from convex_codemod.models import IMPORT_RULES

logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".mts", ".cts")


def should_transform(file_path: Path | str, functions_dir: Path | str) -> bool:
    """Check whether a file is a candidate for rewriting.

    Generated code, the schema, config files, declaration files and
    anything that isn't JavaScript/TypeScript are left alone.
    """
    path = Path(file_path)
    if not path.is_file():
        return False
    if path.suffix not in SOURCE_EXTENSIONS:
        return False
    if "node_modules" in path.parts:
        return False

    base = path.name
    if base.startswith("."):
        return False
    if base.endswith(".config.js") or base.endswith(DECLARATION_SUFFIXES):
        return False

    try:
        rel_path = path.resolve().relative_to(Path(functions_dir).resolve())
    except ValueError:
        return True
    if rel_path.parts[0] == GENERATED_DIR:
        return False
    if rel_path.as_posix() == "schema.ts":
        return False
    return True


def git_grep(project: Path | str, patterns: Iterable[str]) -> list[Path]:
    """List tracked files containing any of `patterns` (fixed strings).

    Raises:
        ProjectError: If git is unavailable or the search fails
    """
    patterns = list(patterns)
    if not patterns:
        return []

    cmd = ["git", "-c", "core.quotePath=false", "grep", "-l", "-F"]
    for pattern in patterns:
        cmd.extend(["-e", pattern])
    try:
        result = subprocess.run(cmd, cwd=project, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise ProjectError("git is required to find files to rewrite") from e

    # git grep exits with 1 when nothing matches
    if result.returncode == 1:
        return []
    if result.returncode != 0:
        raise ProjectError(f"git grep failed: {result.stderr.strip()}")
    return [Path(project) / line for line in result.stdout.splitlines() if line]


def _find_files(
    project: Path | str, functions_dir: Path | str, patterns: Iterable[str]
) -> list[Path]:
    patterns = list(patterns)
    files = [f for f in git_grep(project, patterns) if should_transform(f, functions_dir)]
    logger.info(f"Found {len(files)} files matching {patterns[:3]}")
    return files


def find_react_files(project: Path | str, functions_dir: Path | str) -> list[Path]:
    """Files importing from `/_generated/react`."""
    return _find_files(project, functions_dir, [IMPORT_RULES["react"].path_fragment])


def find_server_files(project: Path | str, functions_dir: Path | str) -> list[Path]:
    """Files importing from `/_generated/server`."""
    return _find_files(project, functions_dir, [IMPORT_RULES["server"].path_fragment])


def find_other_files(
    project: Path | str,
    functions_dir: Path | str,
    function_prefixes: Iterable[str],
    exclude: Iterable[Path] = (),
) -> list[Path]:
    """Best effort search for other files with a string naming a function.

    Looks for both `"prefix` and `'prefix`.
    """
    patterns = []
    for prefix in function_prefixes:
        patterns.append(f'"{prefix}')
        patterns.append(f"'{prefix}")
    excluded = set(exclude)
    return [f for f in _find_files(project, functions_dir, patterns) if f not in excluded]
