"""Call-site rewriting for ``<pkg>.<Function>(...)`` expressions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from parse.syntax_tree import node_key
from rewrite.provenance import build_provenance

if TYPE_CHECKING:
    from tree_sitter import Node

    from parse.scopes import PackageRef
    from parse.syntax_tree import SourceFile
    from rules.config import RewriteRule

logger = logging.getLogger(__name__)

_TRIVIA = frozenset({"comment"})


@dataclass
class CallRewriter:
    """Rewrites every resolved target call in one file.

    ``refs`` are the package references of the unmodified tree; only those
    that are direct calls of the rule's target function are rewritten.
    """

    source: SourceFile
    rule: RewriteRule
    refs: list[PackageRef]
    display_path: str
    source_bytes: bytes | None = None
    matched: int = 0
    skipped: int = 0
    _targets: dict[tuple[int, int, str], PackageRef] = field(
        default_factory=dict, init=False
    )

    def __post_init__(self) -> None:
        for ref in self.refs:
            if ref.member == self.rule.target_function and ref.is_call:
                self._targets[node_key(ref.expression)] = ref

    def run(self) -> bool:
        """Rewrite all matches; return True if at least one call changed."""
        self._visit(self.source.root)
        self.skipped = len(self._targets) - self.matched
        return self.matched > 0

    def _visit(self, node: Node) -> None:
        if node.type == "call_expression" and self._try_rewrite(node):
            # Arguments of a rewritten call are not searched again.
            return
        for child in node.children:
            self._visit(child)

    def _try_rewrite(self, call: Node) -> bool:
        callee = call.child_by_field_name("function")
        arguments = call.child_by_field_name("arguments")
        if callee is None or arguments is None:
            return False
        ref = self._targets.get(node_key(callee))
        if ref is None:
            return False

        line, col = self.source.position(call)
        if self.rule.replacement_alias in ref.locals_in_scope:
            logger.warning(
                "%s:%d:%d: local '%s' shadows the replacement package; "
                "call left unchanged",
                self.display_path,
                line,
                col,
                self.rule.replacement_alias,
            )
            return False
        if any(child.type == "..." for child in arguments.children):
            logger.warning(
                "%s:%d:%d: variadic call cannot take an extra argument; "
                "call left unchanged",
                self.display_path,
                line,
                col,
            )
            return False

        provenance = build_provenance(
            self.source,
            call,
            self.rule,
            display_path=self.display_path,
            source_bytes=self.source_bytes,
        )
        self.source.replace(ref.qualifier, self.rule.replacement_alias)
        _append_argument(self.source, arguments, provenance.literal())
        self.matched += 1
        logger.debug(
            "%s:%d:%d: rewrote %s",
            self.display_path,
            line,
            col,
            self.source.text(callee),
        )
        return True


def _append_argument(source: SourceFile, arguments: Node, literal: str) -> None:
    """Add ``literal`` as the last argument of an ``argument_list`` node."""
    significant = [
        child
        for child in arguments.children
        if child.type not in _TRIVIA and child.type != ")"
    ]
    last = significant[-1] if significant else None
    if last is None or last.type == "(":
        offset = last.end_byte if last is not None else arguments.start_byte + 1
        source.insert(offset, literal)
    elif last.type == ",":
        source.insert(last.end_byte, f" {literal},")
    else:
        source.insert(last.end_byte, f", {literal}")


__all__ = ["CallRewriter"]
