"""Replace string function references with `api` property accesses."""

import logging
from typing import Iterable, Iterator

from tree_sitter import Node

from convex_codemod.models import (
    GENERATED_API_FRAGMENT,
    GENERATED_REACT_MEMBERS,
    FunctionReference,
    ImportSpec,
    ReferenceCatalog,
)
from convex_codemod.rewriter.imports import import_source, parse_specifier
from convex_codemod.syntax import SourceDocument, render_import

logger = logging.getLogger(__name__)

# Plain function calls that take a function reference
FUNCTION_CALLEES = (*GENERATED_REACT_MEMBERS, "runQuery", "runMutation", "runAction")

# Method calls that take a function reference
METHOD_CALLEES = (
    # actions
    "runQuery",
    "runMutation",
    "runAction",
    # scheduler
    "runAt",
    "runAfter",
    # optimistic updates
    "getQuery",
    "getAllQueries",
    "setQuery",
)

# Parents whose string children are never function references
NON_REFERENCE_PARENTS = {
    "import_statement",
    "export_statement",
    "import_specifier",
    "export_specifier",
    "import_require_clause",
    "literal_type",
    "property_signature",
    "public_field_definition",
    "method_definition",
}


def assemble_member_expression(parts: list[str]) -> str:
    """Join ["api", "messages", "list"] into `api.messages.list`."""
    if not parts:
        raise ValueError("Must have at least one part")
    if len(parts) == 1:
        return parts[0]
    return f"{assemble_member_expression(parts[:-1])}.{parts[-1]}"


def _callee_matches(document: SourceDocument, callee: Node, functions: set[str]) -> bool:
    if callee.type == "identifier":
        return document.text_of(callee) in functions
    if callee.type == "member_expression":
        prop = callee.child_by_field_name("property")
        return (
            prop is not None
            and prop.type == "property_identifier"
            and document.text_of(prop) in METHOD_CALLEES
        )
    return False


def find_call_arguments(
    document: SourceDocument,
    extra_callees: Iterable[str] = (),
) -> Iterator[Node]:
    """Yield string arguments of calls that take function references.

    Args:
        document: Parsed file to search
        extra_callees: More function names to treat like hooks, e.g. the
            local aliases of relocated hooks
    """
    functions = {*FUNCTION_CALLEES, *extra_callees}
    for node in document.walk():
        if node.type != "call_expression":
            continue
        callee = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if callee is None or arguments is None or arguments.type != "arguments":
            continue
        if not _callee_matches(document, callee, functions):
            continue
        for argument in arguments.named_children:
            if argument.type == "string":
                yield argument


def _is_dynamic_import(document: SourceDocument, arguments: Node) -> bool:
    call = arguments.parent
    callee = call.child_by_field_name("function") if call is not None else None
    if callee is None:
        return False
    return callee.type == "import" or document.text_of(callee) == "require"


def find_string_literals(document: SourceDocument) -> Iterator[Node]:
    """Yield every string literal in an expression position."""
    for node in document.walk():
        if node.type != "string":
            continue
        parent = node.parent
        if parent is None or parent.type in NON_REFERENCE_PARENTS:
            continue
        if parent.type == "pair" and parent.child_by_field_name("key") == node:
            continue
        if parent.type == "arguments" and _is_dynamic_import(document, parent):
            continue
        yield node


def has_api_import(document: SourceDocument, alias: str) -> bool:
    """Check whether the file already binds `alias` from a generated api module."""
    for node in document.top_level():
        if node.type != "import_statement":
            continue
        path = import_source(document, node)
        if path is None or GENERATED_API_FRAGMENT not in path:
            continue
        for child in document.walk(node):
            if child.type == "import_specifier":
                if parse_specifier(document, child).binding == alias:
                    return True
    return False


def rewrite_references(
    document: SourceDocument,
    catalog: ReferenceCatalog,
    alias: str,
    api_import_path: str,
    extra_callees: Iterable[str] = (),
    match_all_literals: bool = False,
) -> int:
    """Rewrite string function references into `alias.path.name`.

    "messages:list" becomes `api.messages.list` and a bare "messages"
    becomes `api.messages.default`. If anything was rewritten the file gets
    a single `import { api } from "<api_import_path>"`.

    Args:
        document: Parsed file to edit
        catalog: Known function reference prefixes
        alias: Local name of the `api` object
        api_import_path: Module to import `api` from
        extra_callees: More function names whose string arguments qualify
        match_all_literals: Rewrite any matching string literal, not only
            arguments of known calls

    Returns:
        Number of references rewritten
    """
    if match_all_literals:
        candidates = find_string_literals(document)
    else:
        candidates = find_call_arguments(document, extra_callees)

    replaced = 0
    for node in candidates:
        value = document.string_value(node)
        if value is None or catalog.match(value) is None:
            continue
        reference = FunctionReference.parse(value)
        expression = assemble_member_expression([alias, *reference.parts()])
        if node.parent is not None and node.parent.type == "jsx_attribute":
            expression = f"{{{expression}}}"
        document.replace(node, expression)
        replaced += 1
        logger.debug(f"Rewrote {value!r} to {expression}")

    if replaced:
        if has_api_import(document, alias):
            logger.info(f"`{alias}` is already imported, not adding another import")
        else:
            spec = ImportSpec("api", alias).render()
            document.prepend_statement(render_import([spec], api_import_path))
        logger.info(f"Rewrote {replaced} function references")
    return replaced
