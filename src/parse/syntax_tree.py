"""Tree-sitter based parsing and structural editing for Go source files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from tree_sitter import Language, Parser
from tree_sitter_go import language as get_go_language

from errors import ParseError

if TYPE_CHECKING:
    from tree_sitter import Node, Tree

_PARSER: Parser | None = None


def _get_parser() -> Parser:
    """Initialize and return the Tree-sitter parser with Go language."""
    global _PARSER
    if _PARSER is None:
        lang = Language(get_go_language())
        _PARSER = Parser(lang)

    return _PARSER


def node_text(source_bytes: bytes, node: Node) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode(
        "utf8", errors="replace"
    )


def node_key(node: Node) -> tuple[int, int, str]:
    """Stable identity for a node within one parse."""
    return (node.start_byte, node.end_byte, node.type)


@dataclass(frozen=True)
class TextEdit:
    """Replace ``source[start:end]`` with ``replacement``."""

    start: int
    end: int
    replacement: str


@dataclass
class SourceFile:
    """One parsed Go file plus the pending edits made against it.

    The tree itself is immutable; mutations are recorded as byte-span edits
    anchored to tree nodes and applied in one go by :meth:`render`.
    """

    path: Path
    source: bytes
    tree: Tree
    edits: list[TextEdit] = field(default_factory=list)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    @property
    def changed(self) -> bool:
        return bool(self.edits)

    def text(self, node: Node) -> str:
        return node_text(self.source, node)

    def position(self, node: Node) -> tuple[int, int]:
        """Return the 1-based (line, column) of a node; column counts bytes."""
        return node.start_point[0] + 1, node.start_point[1] + 1

    def replace(self, node: Node, replacement: str) -> None:
        self._add(TextEdit(node.start_byte, node.end_byte, replacement))

    def insert(self, offset: int, text: str) -> None:
        self._add(TextEdit(offset, offset, text))

    def delete(self, start: int, end: int) -> None:
        self._add(TextEdit(start, end, ""))

    def _add(self, edit: TextEdit) -> None:
        for existing in self.edits:
            if _overlaps(existing, edit):
                msg = (
                    f"{self.path}: overlapping edits at bytes "
                    f"{existing.start}-{existing.end} and {edit.start}-{edit.end}"
                )
                raise ValueError(msg)
        self.edits.append(edit)

    def render(self) -> bytes:
        """Apply all pending edits to the original bytes."""
        out = self.source
        # Inserts at the same offset keep their recording order.
        ordered = sorted(
            enumerate(self.edits),
            key=lambda item: (item[1].start, item[1].end, item[0]),
            reverse=True,
        )
        for _, edit in ordered:
            out = out[: edit.start] + edit.replacement.encode("utf8") + out[edit.end :]
        return out


def _overlaps(a: TextEdit, b: TextEdit) -> bool:
    if a.start == a.end or b.start == b.end:
        # A pure insert only conflicts when it lands strictly inside a span.
        point, span = (a, b) if a.start == a.end else (b, a)
        return span.start < point.start < span.end
    return a.start < b.end and b.start < a.end


def parse_source(source_bytes: bytes) -> Tree:
    return _get_parser().parse(source_bytes)


def has_syntax_errors(source_bytes: bytes) -> bool:
    return parse_source(source_bytes).root_node.has_error


def load_source_file(file_path: Path) -> SourceFile:
    """Read and parse a Go file.

    Raises:
        ParseError: If the file cannot be read or does not parse cleanly.
    """
    try:
        source_bytes = file_path.read_bytes()
    except OSError as exc:
        msg = f"cannot read {file_path}: {exc}"
        raise ParseError(msg) from exc

    tree = parse_source(source_bytes)
    if tree.root_node.has_error:
        msg = f"syntax errors in {file_path}"
        raise ParseError(msg)

    return SourceFile(path=file_path, source=source_bytes, tree=tree)


__all__ = [
    "SourceFile",
    "TextEdit",
    "has_syntax_errors",
    "load_source_file",
    "node_key",
    "node_text",
    "parse_source",
]
