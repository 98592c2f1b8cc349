"""Syntax layer: visitor contract plus the tree-sitter Kotlin adapter.

Rules only see :class:`ImportReference` and :class:`ThrowSite` values
delivered through :class:`SyntaxVisitor`; nothing outside this module
touches tree-sitter types.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from tree_sitter import Language, Parser

from layerlint.findings import Location

if TYPE_CHECKING:
    from pathlib import Path

    from tree_sitter import Node as TSNode

logger = logging.getLogger(__name__)

KOTLIN_EXTENSIONS: frozenset[str] = frozenset({".kt", ".kts"})

# Grammar releases differ in naming; both generations are accepted.
_IMPORT_TYPES = frozenset({"import", "import_header"})
_PATH_TYPES = frozenset({"qualified_identifier", "identifier"})
_PACKAGE_TYPE = "package_header"
_JUMP_TYPE = "jump_expression"
_THROW_TYPE = "throw_expression"


class ParserUnavailableError(RuntimeError):
    """Raised when the Kotlin grammar package is not installed."""


# ---------------------------------------------------------------------------
# Visitor contract
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ImportReference:
    """An import directive; ``imported_path`` is ``None`` when unreadable."""

    imported_path: str | None
    location: Location


@dataclass(frozen=True)
class ThrowSite:
    """A ``throw`` expression."""

    location: Location


class SyntaxVisitor(Protocol):
    def visit_import(self, ref: ImportReference) -> None: ...

    def visit_throw(self, site: ThrowSite) -> None: ...


class SyntaxTree(Protocol):
    def accept(self, visitor: SyntaxVisitor) -> None:
        """Walk the tree depth-first, calling *visitor* in source order."""
        ...


@dataclass(frozen=True)
class ParsedFile:
    """One source file ready for analysis."""

    path: str
    package_name: str
    tree: SyntaxTree


# ---------------------------------------------------------------------------
# tree-sitter adapter
# ---------------------------------------------------------------------------

_LANGUAGE: Language | None = None


def _load_kotlin() -> Language:
    global _LANGUAGE
    if _LANGUAGE is None:
        try:
            import tree_sitter_kotlin as tskotlin
        except ImportError as exc:
            msg = "tree-sitter-kotlin is not installed"
            raise ParserUnavailableError(msg) from exc
        _LANGUAGE = Language(tskotlin.language())
    return _LANGUAGE


def kotlin_available() -> bool:
    """Return True if the Kotlin grammar can be loaded."""
    try:
        _load_kotlin()
    except ParserUnavailableError:
        return False
    return True


def _text(node: TSNode) -> str:
    return node.text.decode("utf-8") if node.text else ""


def _location(node: TSNode) -> Location:
    # tree-sitter uses 0-based rows and columns.
    return Location(
        line=node.start_point.row + 1,
        column=node.start_point.column + 1,
        end_line=node.end_point.row + 1,
        end_column=node.end_point.column + 1,
    )


def _dotted_path(node: TSNode) -> str | None:
    for child in node.named_children:
        if child.type in _PATH_TYPES:
            # Identifiers may span lines, e.g. "com.example\n    .Foo".
            path = "".join(_text(child).split())
            return path or None
    return None


def _is_throw(node: TSNode) -> bool:
    if node.type == _THROW_TYPE:
        return True
    if node.type != _JUMP_TYPE or node.child_count == 0:
        return False
    return node.children[0].type == "throw"


class KotlinSyntaxTree:
    """:class:`SyntaxTree` backed by a tree-sitter Kotlin parse tree."""

    def __init__(self, root: TSNode) -> None:
        self._root = root

    def package_name(self) -> str:
        """Return the declared package, or ``""`` for the default package."""
        for child in self._root.children:
            if child.type == _PACKAGE_TYPE:
                return _dotted_path(child) or ""
        return ""

    def accept(self, visitor: SyntaxVisitor) -> None:
        # Explicit stack: deeply nested expressions must not hit the recursion limit.
        stack: list[TSNode] = [self._root]
        while stack:
            node = stack.pop()
            if node.type in _IMPORT_TYPES:
                path = _dotted_path(node)
                if path is None:
                    logger.debug("Import without a readable path at %s", _location(node))
                visitor.visit_import(ImportReference(imported_path=path, location=_location(node)))
                continue
            if _is_throw(node):
                visitor.visit_throw(ThrowSite(location=_location(node)))
            stack.extend(reversed(node.children))


def parse_kotlin_source(source: str, path: str) -> ParsedFile:
    """Parse Kotlin *source* text that was read from *path*."""
    parser = Parser(_load_kotlin())
    tree = KotlinSyntaxTree(parser.parse(source.encode("utf-8")).root_node)
    return ParsedFile(path=path, package_name=tree.package_name(), tree=tree)


def parse_kotlin(file_path: Path) -> ParsedFile:
    """Read and parse a Kotlin file.

    Raises ``OSError``/``UnicodeDecodeError`` when the file cannot be read and
    :class:`ParserUnavailableError` when the grammar is missing.
    """
    content = file_path.read_text(encoding="utf-8")
    return parse_kotlin_source(content, file_path.as_posix())
