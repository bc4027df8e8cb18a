"""Build the catalog of function reference prefixes from a functions directory."""

import logging
import os
from pathlib import Path, PurePosixPath

from convex_codemod.errors import ProjectError
from convex_codemod.models import ReferenceCatalog

logger = logging.getLogger(__name__)

GENERATED_DIR = "_generated"

# Files in the functions directory that never define functions
NON_FUNCTION_FILES = {"README.md", "schema.ts", "_generated.ts", "tsconfig.json"}

DECLARATION_SUFFIXES = (".d.ts", ".d.mts", ".d.cts")


def is_entry_point(rel_path: str) -> bool:
    """Check whether a file (relative to the functions dir) holds functions.

    Args:
        rel_path: Path relative to the functions directory, "/"-separated

    Returns:
        True if the file contributes a reference prefix
    """
    path = PurePosixPath(rel_path)
    base = path.name

    if path.parts[0] == GENERATED_DIR and len(path.parts) > 1:
        return False
    if any(part.startswith(".") for part in path.parts):
        return False
    if base in NON_FUNCTION_FILES:
        return False
    if rel_path.endswith(".config.js"):
        return False
    if ".test." in base:
        return False
    if base.endswith(DECLARATION_SUFFIXES):
        return False
    # Spaces can't appear in a reference segment
    if " " in rel_path:
        return False
    return True


def reference_prefix(rel_path: str) -> str:
    """Strip the extension: "dir/messages.ts" -> "dir/messages"."""
    path = PurePosixPath(rel_path)
    return str(path.with_suffix(""))


def _walk_files(root: Path):
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for filename in sorted(filenames):
            yield Path(dirpath) / filename


def build_catalog(root_dir: Path | str) -> ReferenceCatalog:
    """Derive reference prefixes from every function module under `root_dir`.

    Args:
        root_dir: The project's functions directory

    Returns:
        ReferenceCatalog of extension-stripped relative paths

    Raises:
        ProjectError: If the directory doesn't exist
    """
    root = Path(root_dir)
    if not root.is_dir():
        raise ProjectError(f"Functions directory not found: {root}")

    prefixes = []
    for file_path in _walk_files(root):
        rel_path = file_path.relative_to(root).as_posix()
        if not is_entry_point(rel_path):
            logger.debug(f"Skipping non-function file: {rel_path}")
            continue
        prefixes.append(reference_prefix(rel_path))

    catalog = ReferenceCatalog(sorted(set(prefixes)))
    logger.info(f"Found {len(catalog)} function modules in {root}")
    return catalog
