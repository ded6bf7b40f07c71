"""Import table extraction for Go files."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node

    from parse.syntax_tree import SourceFile

_MAJOR_VERSION = re.compile(r"^v[0-9]+$")


@dataclass(frozen=True)
class ImportSpec:
    """A single ``import_spec`` node and the name it binds in the file."""

    node: Node
    declaration: Node
    path: str
    alias: str | None

    @property
    def local_name(self) -> str:
        if self.alias is not None:
            return self.alias
        return default_package_name(self.path)

    @property
    def is_qualifying(self) -> bool:
        """True when the import binds a name usable as ``name.Member``."""
        return self.alias not in ("_", ".")

    @property
    def in_list(self) -> bool:
        parent = self.node.parent
        return parent is not None and parent.type == "import_spec_list"


def default_package_name(import_path: str) -> str:
    """Guess the package name Go binds for an unaliased import.

    Examples:
        >>> default_package_name("io")
        'io'
        >>> default_package_name("github.com/AdamKorcz/bugdetectors/io")
        'io'
        >>> default_package_name("example.com/mod/v2")
        'mod'
    """
    parts = [part for part in import_path.split("/") if part]
    if not parts:
        return ""
    if len(parts) >= 2 and _MAJOR_VERSION.match(parts[-1]):
        return parts[-2]
    return parts[-1]


def _unquote(literal: str) -> str:
    if len(literal) >= 2 and literal[0] in "\"`" and literal[-1] == literal[0]:
        return literal[1:-1]
    return literal


def _spec_from_node(source: SourceFile, node: Node, declaration: Node) -> ImportSpec:
    path_node = node.child_by_field_name("path")
    name_node = node.child_by_field_name("name")
    path = _unquote(source.text(path_node)) if path_node is not None else ""
    alias = source.text(name_node) if name_node is not None else None
    return ImportSpec(node=node, declaration=declaration, path=path, alias=alias)


def extract_import_specs(source: SourceFile) -> list[ImportSpec]:
    """Return every import spec of the file in source order."""
    specs: list[ImportSpec] = []
    for declaration in source.root.children:
        if declaration.type != "import_declaration":
            continue
        for child in declaration.named_children:
            if child.type == "import_spec":
                specs.append(_spec_from_node(source, child, declaration))
            elif child.type == "import_spec_list":
                specs.extend(
                    _spec_from_node(source, spec, declaration)
                    for spec in child.named_children
                    if spec.type == "import_spec"
                )
    return specs


def import_names_for(specs: list[ImportSpec], import_path: str) -> set[str]:
    """Local names under which ``import_path`` can be used as a qualifier."""
    return {
        spec.local_name
        for spec in specs
        if spec.path == import_path and spec.is_qualifying
    }


__all__ = [
    "ImportSpec",
    "default_package_name",
    "extract_import_specs",
    "import_names_for",
]
