"""Source rewriting from string function references to `api` references."""

from convex_codemod.rewriter.imports import relocate_imports
from convex_codemod.rewriter.references import (
    assemble_member_expression,
    find_call_arguments,
    find_string_literals,
    rewrite_references,
)
from convex_codemod.rewriter.transform import rewrite, rewrite_file

__all__ = [
    # Import relocation
    "relocate_imports",
    # Reference rewriting
    "assemble_member_expression",
    "find_call_arguments",
    "find_string_literals",
    "rewrite_references",
    # Whole-file rewriting
    "rewrite",
    "rewrite_file",
]
