"""Rewrite one source file from string references to `api` references."""

import logging
from dataclasses import replace
from pathlib import Path

from convex_codemod.models import (
    GENERATED_API_PLACEHOLDER,
    AliasMap,
    RewriteOptions,
)
from convex_codemod.rewriter.imports import relocate_imports
from convex_codemod.rewriter.references import rewrite_references
from convex_codemod.syntax import SourceDocument, dialect_for_path

logger = logging.getLogger(__name__)


def rewrite(source: str, options: RewriteOptions | None = None) -> str:
    """Rewrite a file's source text.

    React and server files first move hook imports off their generated
    module (`/_generated/react` or `/_generated/server`). Then every
    qualifying string reference is rewritten. Generic files only get the
    second step.

    Args:
        source: The file's source text
        options: Kind, prefixes, alias and import path to use

    Returns:
        The rewritten source text, identical to `source` if nothing matched

    Raises:
        SourceParseError: If the source doesn't parse
        UnsupportedImportError: If a generated import isn't a named import
        EditConflictError: If two rewrites overlap
    """
    options = options or RewriteOptions()
    document = SourceDocument.parse(source, options.dialect)

    api_import_path = options.generated_api_import or GENERATED_API_PLACEHOLDER
    aliases = AliasMap()
    rule = options.import_rule
    if rule is not None:
        aliases, api_import_path = relocate_imports(document, rule, api_import_path)
    elif options.generated_api_import is None:
        logger.debug(f"Generic file, `api` will be imported from {api_import_path}")

    rewrite_references(
        document,
        options.catalog,
        options.convex_api_alias,
        api_import_path,
        extra_callees=aliases.local_names(),
        match_all_literals=options.match_all_literals,
    )
    return document.render()


def rewrite_file(path: Path | str, options: RewriteOptions) -> str | None:
    """Rewrite a file on disk without writing it back.

    The grammar is picked from the file suffix; `options.dialect` is
    ignored.

    Returns:
        The new source text, or None if the file is unchanged
    """
    path = Path(path)
    with open(path, encoding="utf-8", newline="") as f:
        source = f.read()
    file_options = replace(options, dialect=dialect_for_path(path.name))
    result = rewrite(source, file_options)
    if result == source:
        logger.debug(f"No changes in {path}")
        return None
    logger.info(f"Rewrote {path}")
    return result
