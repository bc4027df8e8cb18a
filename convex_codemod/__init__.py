"""Rewrite Convex string function references into `api` references."""

from convex_codemod.catalog import build_catalog
from convex_codemod.errors import (
    CodemodError,
    EditConflictError,
    ProjectError,
    SourceParseError,
    UnsupportedImportError,
)
from convex_codemod.migrator import migrate_project
from convex_codemod.models import (
    FunctionReference,
    ReferenceCatalog,
    RewriteOptions,
)
from convex_codemod.rewriter import rewrite, rewrite_file

__all__ = [
    # Catalog
    "build_catalog",
    "ReferenceCatalog",
    "FunctionReference",
    # Rewriting
    "RewriteOptions",
    "rewrite",
    "rewrite_file",
    "migrate_project",
    # Errors
    "CodemodError",
    "EditConflictError",
    "ProjectError",
    "SourceParseError",
    "UnsupportedImportError",
]
