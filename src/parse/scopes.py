"""Lexical scope resolution of package qualifiers in Go files.

A selector such as ``io.ReadAll`` only refers to the ``io`` package when no
enclosing scope declares a local ``io`` (a parameter, a ``:=`` variable, a
range variable and so on). The walker below tracks Go's block scopes and the
point at which each declaration's scope begins, and reports every selector or
qualified type whose qualifier still resolves to a file-level import.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tree_sitter import Node

    from parse.syntax_tree import SourceFile

_SCOPE_NODES = frozenset(
    {
        "function_declaration",
        "method_declaration",
        "func_literal",
        "block",
        "if_statement",
        "for_statement",
        "expression_switch_statement",
        "type_switch_statement",
        "select_statement",
        "expression_case",
        "type_case",
        "default_case",
        "communication_case",
    }
)

_PARAMETER_DECLS = frozenset(
    {
        "parameter_declaration",
        "variadic_parameter_declaration",
        "type_parameter_declaration",
    }
)

_FUNCTION_NODES = frozenset(
    {"function_declaration", "method_declaration", "func_literal"}
)

_PACKAGE_SPECS = frozenset({"var_spec", "const_spec", "type_spec", "type_alias"})


@dataclass(frozen=True)
class PackageRef:
    """A ``<qualifier>.<member>`` reference resolved to an imported package."""

    name: str
    member: str
    qualifier: Node
    expression: Node
    locals_in_scope: frozenset[str] = frozenset()

    @property
    def is_call(self) -> bool:
        """True when the reference is the callee of a call expression."""
        parent = self.expression.parent
        if parent is None or parent.type != "call_expression":
            return False
        callee = parent.child_by_field_name("function")
        return callee is not None and callee.id == self.expression.id

    @property
    def call(self) -> Node | None:
        return self.expression.parent if self.is_call else None


class _ScopeWalker:
    def __init__(
        self,
        source: SourceFile,
        package_names: set[str],
        probe_names: frozenset[str],
    ) -> None:
        self.source = source
        self.package_names = package_names
        self.probe_names = probe_names
        self.scopes: list[set[str]] = [set()]
        self.refs: list[PackageRef] = []

    def is_bound(self, name: str) -> bool:
        return any(name in scope for scope in self.scopes)

    def bind(self, node: Node | None) -> None:
        if node is None:
            return
        if node.type in ("identifier", "type_identifier"):
            self.scopes[-1].add(self.source.text(node))
        elif node.type == "expression_list":
            for child in node.named_children:
                if child.type == "identifier":
                    self.scopes[-1].add(self.source.text(child))

    def bind_all(self, nodes: Iterable[Node]) -> None:
        for node in nodes:
            self.bind(node)

    def walk(self, node: Node) -> None:
        if node.type in _SCOPE_NODES:
            self.scopes.append(set())
            try:
                self._dispatch(node)
            finally:
                self.scopes.pop()
        else:
            self._dispatch(node)

    def walk_children(self, node: Node, skip: Iterable[Node] = ()) -> None:
        skipped = {child.id for child in skip}
        for child in node.children:
            if child.id not in skipped:
                self.walk(child)

    def _dispatch(self, node: Node) -> None:
        kind = node.type
        if kind in _FUNCTION_NODES:
            self._walk_function(node)
        elif kind == "selector_expression":
            self._record(
                node,
                node.child_by_field_name("operand"),
                node.child_by_field_name("field"),
            )
            self.walk_children(node)
        elif kind == "qualified_type":
            self._record(
                node,
                node.child_by_field_name("package"),
                node.child_by_field_name("name"),
            )
        elif kind == "short_var_declaration":
            self._walk_then_bind(node, node.child_by_field_name("left"))
        elif kind in ("var_spec", "const_spec"):
            names = node.children_by_field_name("name")
            self.walk_children(node, skip=names)
            self.bind_all(names)
        elif kind in ("type_spec", "type_alias"):
            name = node.child_by_field_name("name")
            self.bind(name)
            self.walk_children(node, skip=[name] if name is not None else [])
        elif kind in _PARAMETER_DECLS:
            # Parameters outside a signature, e.g. in a function type.
            self.walk_children(node, skip=node.children_by_field_name("name"))
        elif kind in ("range_clause", "receive_statement"):
            left = node.child_by_field_name("left")
            if _declares(node):
                self._walk_then_bind(node, left)
            else:
                self.walk_children(node)
        elif kind == "type_switch_statement":
            self._walk_type_switch(node)
        else:
            self.walk_children(node)

    def _walk_then_bind(self, node: Node, left: Node | None) -> None:
        self.walk_children(node, skip=[left] if left is not None else [])
        self.bind(left)

    def _walk_function(self, node: Node) -> None:
        # Parameter and result types resolve in the enclosing scope; the
        # names they declare are visible from the body onwards.
        type_parameters = node.child_by_field_name("type_parameters")
        if type_parameters is not None:
            for decl in _declarations(type_parameters):
                self.bind_all(decl.children_by_field_name("name"))
                self.walk_children(decl, skip=decl.children_by_field_name("name"))

        declared: list[Node] = []
        for field_name in ("receiver", "parameters", "result"):
            child = node.child_by_field_name(field_name)
            if child is None:
                continue
            if child.type != "parameter_list":
                self.walk(child)
                continue
            for decl in _declarations(child):
                names = decl.children_by_field_name("name")
                self.walk_children(decl, skip=names)
                declared.extend(names)
        self.bind_all(declared)

        body = node.child_by_field_name("body")
        if body is not None:
            self.walk(body)

    def _walk_type_switch(self, node: Node) -> None:
        alias = node.child_by_field_name("alias")
        initializer = node.child_by_field_name("initializer")
        value = node.child_by_field_name("value")
        header = [child for child in (initializer, value) if child is not None]
        for child in header:
            self.walk(child)
        self.bind(alias)
        skip = [*header, alias] if alias is not None else header
        self.walk_children(node, skip=skip)

    def _record(
        self,
        expression: Node,
        qualifier: Node | None,
        member: Node | None,
    ) -> None:
        if qualifier is None or member is None:
            return
        if qualifier.type not in ("identifier", "package_identifier"):
            return
        name = self.source.text(qualifier)
        if name not in self.package_names or self.is_bound(name):
            return
        visible = frozenset(
            probe for probe in self.probe_names if self.is_bound(probe)
        )
        self.refs.append(
            PackageRef(
                name=name,
                member=self.source.text(member),
                qualifier=qualifier,
                expression=expression,
                locals_in_scope=visible,
            )
        )


def _declares(node: Node) -> bool:
    return any(child.type == ":=" for child in node.children)


def _declarations(parameter_list: Node) -> list[Node]:
    return [
        child
        for child in parameter_list.named_children
        if child.type in _PARAMETER_DECLS
    ]


def collect_package_refs(
    source: SourceFile,
    package_names: set[str],
    *,
    probe_names: Iterable[str] = (),
) -> list[PackageRef]:
    """Find every reference through a package qualifier in ``package_names``.

    Args:
        source: Parsed file to walk.
        package_names: Local names that file-level imports bind.
        probe_names: Extra names whose local binding state is recorded on
            each reference (see ``PackageRef.locals_in_scope``).

    Returns:
        References in source order. Qualifiers shadowed by a local
        declaration are not included.
    """
    if not package_names:
        return []
    walker = _ScopeWalker(source, package_names, frozenset(probe_names))
    walker.walk(source.root)
    return walker.refs


def _package_specs(declaration: Node) -> Iterable[Node]:
    for child in declaration.named_children:
        if child.type in _PACKAGE_SPECS:
            yield child
        elif child.type == "var_spec_list":
            yield from _package_specs(child)


def find_package_declaration(source: SourceFile, name: str) -> Node | None:
    """Return the identifier declaring ``name`` in the package block, if any.

    Package-level names are visible throughout the file regardless of where
    they are declared, so this looks at every top-level function, var, const
    and type declaration rather than at the scope of a particular call.
    """
    for node in source.root.named_children:
        if node.type == "function_declaration":
            idents = [node.child_by_field_name("name")]
        elif node.type in ("var_declaration", "const_declaration", "type_declaration"):
            idents = [
                ident
                for spec in _package_specs(node)
                for ident in spec.children_by_field_name("name")
            ]
        else:
            continue
        for ident in idents:
            if ident is not None and source.text(ident) == name:
                return ident
    return None


__all__ = ["PackageRef", "collect_package_refs", "find_package_declaration"]
