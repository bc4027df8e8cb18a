"""Parse JavaScript/TypeScript with tree-sitter and apply byte-range edits.

A SourceDocument owns the parsed tree of one file. Rewrites never touch the
tree itself; they queue edits (replace, remove, insert) against byte offsets
of the original source and `render()` applies them all at once. Text that
no edit covers is reproduced byte for byte.
"""

import json
import logging
from dataclasses import dataclass
from typing import Iterator

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from convex_codemod.errors import EditConflictError, SourceParseError

logger = logging.getLogger(__name__)

LANGUAGES = {
    "tsx": Language(tree_sitter_typescript.language_tsx()),
    "typescript": Language(tree_sitter_typescript.language_typescript()),
}

# Suffixes parsed with the plain TypeScript grammar; `<T>x` casts are
# ambiguous with JSX so these must not go through the tsx grammar
TYPESCRIPT_SUFFIXES = (".ts", ".mts", ".cts")


def dialect_for_path(path: str) -> str:
    """Pick the grammar for a file name."""
    if path.endswith(TYPESCRIPT_SUFFIXES):
        return "typescript"
    return "tsx"


def js_string(value: str) -> str:
    """Render a double-quoted JavaScript string literal."""
    return json.dumps(value)


def render_import(specifiers: list[str], source: str) -> str:
    """Render `import { a, b as c } from "source";`."""
    return f"import {{ {', '.join(specifiers)} }} from {js_string(source)};"


@dataclass(frozen=True)
class Edit:
    start: int
    end: int
    text: bytes
    seq: int


class SourceDocument:
    """A parsed source file plus the edits queued against it."""

    def __init__(self, source: bytes, tree, dialect: str):
        self.source = source
        self.tree = tree
        self.dialect = dialect
        self._edits: list[Edit] = []

    @classmethod
    def parse(cls, text: str, dialect: str = "tsx") -> "SourceDocument":
        """Parse source text.

        Raises:
            SourceParseError: If the dialect is unknown or the tree has errors
        """
        language = LANGUAGES.get(dialect)
        if language is None:
            raise SourceParseError(f"Unknown dialect: {dialect}")

        source = text.encode("utf-8")
        tree = Parser(language).parse(source)
        document = cls(source, tree, dialect)
        if tree.root_node.has_error:
            error = document._first_error()
            line = error.start_point[0] + 1 if error is not None else "?"
            raise SourceParseError(f"Syntax error near line {line} ({dialect})")
        return document

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def edited(self) -> bool:
        return bool(self._edits)

    def _first_error(self) -> Node | None:
        for node in self.walk():
            if node.type == "ERROR" or node.is_missing:
                return node
        return None

    def walk(self, node: Node | None = None) -> Iterator[Node]:
        """Yield `node` and all its descendants in document order."""
        stack = [node if node is not None else self.root]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def top_level(self) -> list[Node]:
        return list(self.root.children)

    def text_of(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8")

    def string_value(self, node: Node) -> str | None:
        """The contents of a quoted string node, escapes left as written."""
        if node.type != "string":
            return None
        return self.text_of(node)[1:-1]

    # Edits

    def replace(self, node: Node, text: str) -> None:
        self._add(node.start_byte, node.end_byte, text)

    def insert(self, offset: int, text: str) -> None:
        self._add(offset, offset, text)

    def remove_statement(self, node: Node) -> None:
        """Remove a statement together with the rest of its line."""
        end = node.end_byte
        while end < len(self.source) and self.source[end : end + 1] in (b" ", b"\t"):
            end += 1
        if self.source[end : end + 2] == b"\r\n":
            end += 2
        elif self.source[end : end + 1] == b"\n":
            end += 1
        self._add(node.start_byte, end, "")

    def prepend_statement(self, text: str) -> None:
        """Insert a statement at the top of the program.

        The statement goes after any hashbang line and directive prologue
        ("use client";), ahead of the first import when there is one.
        """
        children = self.top_level()
        body_start = 0
        for index, child in enumerate(children):
            if child.type == "comment":
                continue
            if child.type == "hash_bang_line" or self._is_directive(child):
                body_start = index + 1
                continue
            break

        body = children[body_start:]
        anchor = next((c for c in body if c.type == "import_statement"), None)
        if anchor is None and body:
            anchor = body[0]
        if anchor is not None:
            self.insert(anchor.start_byte, f"{text}\n")
        elif children:
            self.insert(children[-1].end_byte, f"\n{text}")
        else:
            self.insert(len(self.source), f"{text}\n")

    def _is_directive(self, node: Node) -> bool:
        if node.type != "expression_statement":
            return False
        named = node.named_children
        return len(named) == 1 and named[0].type == "string"

    def _add(self, start: int, end: int, text: str) -> None:
        self._edits.append(Edit(start, end, text.encode("utf-8"), len(self._edits)))

    def render(self) -> str:
        """Apply every queued edit and return the new source text.

        Raises:
            EditConflictError: If two edits overlap
        """
        if not self._edits:
            return self.source.decode("utf-8")

        chunks: list[bytes] = []
        cursor = 0
        for edit in sorted(self._edits, key=lambda e: (e.start, e.end, e.seq)):
            if edit.start < cursor:
                raise EditConflictError(
                    f"Overlapping edits at byte {edit.start} (previous edit ends at {cursor})"
                )
            chunks.append(self.source[cursor : edit.start])
            chunks.append(edit.text)
            cursor = edit.end
        chunks.append(self.source[cursor:])
        logger.debug(f"Applied {len(self._edits)} edits")
        return b"".join(chunks).decode("utf-8")
