"""Provenance literals injected into rewritten calls.

The replacement implementation reports where the original call lived. The
location and the call's verbatim text are joined by a marker token instead of
a real newline; consumers substitute the marker when printing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node

    from parse.syntax_tree import SourceFile
    from rules.config import RewriteRule

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\v": "\\v",
}


def go_string_literal(value: str) -> str:
    """Quote ``value`` as a Go interpreted string literal.

    Line breaks and other control characters are escaped so the literal
    always fits on one line and decodes back to exactly ``value``.
    """
    out = ['"']
    for char in value:
        escaped = _ESCAPES.get(char)
        if escaped is not None:
            out.append(escaped)
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\x{ord(char):02x}")
        else:
            out.append(char)
    out.append('"')
    return "".join(out)


@dataclass(frozen=True)
class ProvenanceRecord:
    location: str
    text: str | None
    marker: str
    placeholder: str

    @property
    def value(self) -> str:
        if self.text is None:
            return self.placeholder
        return f"{self.location}{self.marker}{self.text}"

    def literal(self) -> str:
        return go_string_literal(self.value)


def call_source_text(source_bytes: bytes | None, node: Node) -> str | None:
    """Return the exact source of ``node``, or None when it is unavailable."""
    if source_bytes is None or node.end_byte > len(source_bytes):
        return None
    try:
        return source_bytes[node.start_byte : node.end_byte].decode("utf8")
    except UnicodeDecodeError:
        return None


def build_provenance(
    source: SourceFile,
    call: Node,
    rule: RewriteRule,
    *,
    display_path: str,
    source_bytes: bytes | None,
) -> ProvenanceRecord:
    line, col = source.position(call)
    return ProvenanceRecord(
        location=f"{display_path}:{line}:{col}",
        text=call_source_text(source_bytes, call),
        marker=rule.newline_marker,
        placeholder=rule.placeholder,
    )


__all__ = [
    "ProvenanceRecord",
    "build_provenance",
    "call_source_text",
    "go_string_literal",
]
