"""Locate the pieces of a Convex project."""

import json
import logging
from pathlib import Path

from convex_codemod.errors import ProjectError

logger = logging.getLogger(__name__)

DEFAULT_FUNCTIONS_DIR = "convex"


def _read_json(path: Path) -> dict:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ProjectError(f"Invalid JSON in {path}: {e}") from e


def ensure_convex_project(project: Path | str) -> None:
    """Check that `project` has a package.json depending on convex.

    Raises:
        ProjectError: If package.json is missing or doesn't list convex
    """
    package_json = Path(project) / "package.json"
    if not package_json.is_file():
        raise ProjectError(f"No package.json found in {project}")

    contents = _read_json(package_json)
    for section in ("dependencies", "devDependencies"):
        if "convex" in (contents.get(section) or {}):
            logger.info(f"Found convex in {section} of {package_json}")
            return
    raise ProjectError("Convex not found in project dependencies")


def get_functions_dir_name(project: Path | str) -> str:
    """Read the functions directory from convex.json, defaulting to "convex"."""
    convex_json = Path(project) / "convex.json"
    if not convex_json.is_file():
        return DEFAULT_FUNCTIONS_DIR
    functions = _read_json(convex_json).get("functions")
    if not functions:
        return DEFAULT_FUNCTIONS_DIR
    logger.info(f"Using functions directory from convex.json: {functions}")
    return functions


def get_functions_dir(project: Path | str) -> Path:
    return Path(project) / get_functions_dir_name(project)
