"""Move hook imports out of generated modules into library modules."""

import logging

from tree_sitter import Node

from convex_codemod.errors import UnsupportedImportError
from convex_codemod.models import (
    GENERATED_API_FRAGMENT,
    AliasMap,
    GeneratedImportRule,
    ImportSpec,
)
from convex_codemod.syntax import SourceDocument, render_import

logger = logging.getLogger(__name__)


def import_source(document: SourceDocument, node: Node) -> str | None:
    """The module path of an import statement, if it is a plain string."""
    source = node.child_by_field_name("source")
    if source is None:
        return None
    return document.string_value(source)


def _named_imports(document: SourceDocument, node: Node, path: str) -> Node | None:
    """Return the `{ ... }` clause of an import of a generated module.

    Raises:
        UnsupportedImportError: For default or namespace imports
    """
    clause = next((c for c in node.named_children if c.type == "import_clause"), None)
    if clause is None:
        return None

    named_imports = None
    for child in clause.named_children:
        if child.type == "named_imports":
            named_imports = child
        elif child.type in ("identifier", "namespace_import"):
            raise UnsupportedImportError(
                f"Can only handle named imports like `import {{ useQuery }}` "
                f"from {path!r}, found `{document.text_of(child)}`"
            )
    return named_imports


def parse_specifier(document: SourceDocument, node: Node) -> ImportSpec:
    name_node = node.child_by_field_name("name")
    alias_node = node.child_by_field_name("alias")
    if name_node.type == "string":
        name = document.string_value(name_node)
    else:
        name = document.text_of(name_node)
    alias = document.text_of(alias_node) if alias_node is not None else None
    return ImportSpec(name, alias)


def relocate_imports(
    document: SourceDocument,
    rule: GeneratedImportRule,
    generated_api_import: str,
) -> tuple[AliasMap, str]:
    """Strip `rule.members` from generated imports and re-import them.

    Every import whose path contains `rule.path_fragment` loses the
    specifiers naming one of `rule.members` (the whole statement goes if
    nothing else is left). The removed bindings, aliases included, are
    re-imported from `rule.target_path` in one statement at the top of
    the file.

    Args:
        document: Parsed file to edit
        rule: Which members to move and where
        generated_api_import: Fallback path for the `api` import

    Returns:
        Tuple of (aliases that were moved, path to import `api` from). The
        path is derived from the first matching import, e.g.
        "../convex/_generated/react" -> "../convex/_generated/api".

    Raises:
        UnsupportedImportError: If a matching import is not a named import
    """
    aliases = AliasMap()
    api_import_path = None

    for node in document.top_level():
        if node.type != "import_statement":
            continue
        path = import_source(document, node)
        if path is None or rule.path_fragment not in path:
            continue

        if api_import_path is None:
            api_import_path = path.replace(rule.path_fragment, GENERATED_API_FRAGMENT)

        named_imports = _named_imports(document, node, path)
        if named_imports is None:
            continue

        recognized = []
        others = []
        for specifier in named_imports.named_children:
            if specifier.type != "import_specifier":
                continue
            spec = parse_specifier(document, specifier)
            if spec.imported_name in rule.members:
                recognized.append(spec)
            else:
                others.append(specifier)

        if not recognized:
            continue
        for spec in recognized:
            aliases.add(spec.imported_name, spec.binding)

        if others:
            kept = ", ".join(document.text_of(s) for s in others)
            document.replace(named_imports, f"{{ {kept} }}")
            logger.debug(f"Kept {len(others)} other imports from {path}")
        else:
            document.remove_statement(node)
            logger.debug(f"Removed import from {path}")

    if aliases:
        specifiers = [spec.render() for spec in aliases.specifiers()]
        document.prepend_statement(render_import(specifiers, rule.target_path))
        logger.info(f"Moved {', '.join(specifiers)} to {rule.target_path}")

    if api_import_path is None:
        logger.warning(
            f"No import matching {rule.path_fragment}, "
            f"falling back to {generated_api_import}"
        )
        api_import_path = generated_api_import
    return aliases, api_import_path
