"""Structural reconciliation of a file's import declarations."""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from rewrite.models import ImportDecision
from rewrite.provenance import go_string_literal

if TYPE_CHECKING:
    from parse.go_imports import ImportSpec
    from parse.syntax_tree import SourceFile
    from rules.config import RewriteRule


def decide_import(*, uses_other_members: bool, skipped_calls: int) -> ImportDecision:
    """Keep the original import whenever anything still refers to it."""
    if uses_other_members or skipped_calls > 0:
        return ImportDecision.ADD_IMPORT
    return ImportDecision.REPLACE_IMPORT


def target_specs(specs: list[ImportSpec], rule: RewriteRule) -> list[ImportSpec]:
    return [
        spec
        for spec in specs
        if spec.path == rule.target_module and spec.is_qualifying
    ]


def has_replacement_import(specs: list[ImportSpec], rule: RewriteRule) -> bool:
    return any(
        spec.path == rule.replacement_path
        and spec.local_name == rule.replacement_alias
        for spec in specs
    )


def alias_conflict(specs: list[ImportSpec], rule: RewriteRule) -> ImportSpec | None:
    """Return an import that already binds the alias to another package."""
    for spec in specs:
        if (
            spec.is_qualifying
            and spec.local_name == rule.replacement_alias
            and spec.path != rule.replacement_path
        ):
            return spec
    return None


def replacement_spec(rule: RewriteRule) -> str:
    return f"{rule.replacement_alias} {go_string_literal(rule.replacement_path)}"


def apply_import_decision(
    source: SourceFile,
    specs: list[ImportSpec],
    rule: RewriteRule,
    decision: ImportDecision,
) -> bool:
    """Edit the import declarations for ``decision``; return True if changed."""
    targets = target_specs(specs, rule)
    present = has_replacement_import(specs, rule)

    if decision is ImportDecision.ADD_IMPORT:
        if present or not targets:
            return False
        _insert_after(source, targets[0], replacement_spec(rule))
        return True

    if not targets:
        return False
    if present:
        _delete_specs(source, targets, specs)
        return True
    source.replace(targets[0].node, replacement_spec(rule))
    if len(targets) > 1:
        _delete_specs(source, targets[1:], specs)
    return True


def _line_bounds(data: bytes, start: int, end: int) -> tuple[int, int]:
    line_start = data.rfind(b"\n", 0, start) + 1
    line_end = data.find(b"\n", end)
    if line_end == -1:
        line_end = len(data)
    return line_start, line_end


def _insert_after(source: SourceFile, anchor: ImportSpec, spec_text: str) -> None:
    data = source.source
    node = anchor.node
    if not anchor.in_list:
        source.replace(node, f"(\n\t{source.text(node)}\n\t{spec_text}\n)")
        return

    line_start, line_end = _line_bounds(data, node.start_byte, node.end_byte)
    prefix = data[line_start : node.start_byte]
    indent = prefix.decode("utf8") if not prefix.strip() else "\t"
    rest = data[node.end_byte : line_end].strip()
    # Keep a trailing line comment attached to the spec it annotates.
    offset = line_end if rest.startswith(b"//") else node.end_byte
    source.insert(offset, f"\n{indent}{spec_text}")


def _delete_specs(
    source: SourceFile,
    doomed: list[ImportSpec],
    specs: list[ImportSpec],
) -> None:
    by_declaration: dict[int, list[ImportSpec]] = defaultdict(list)
    for spec in specs:
        by_declaration[spec.declaration.id].append(spec)

    doomed_ids = {spec.node.id for spec in doomed}
    handled: set[int] = set()
    for spec in doomed:
        declaration = spec.declaration
        emptied = all(
            sibling.node.id in doomed_ids
            for sibling in by_declaration[declaration.id]
        )
        if emptied:
            if declaration.id not in handled:
                _delete_span(source, declaration.start_byte, declaration.end_byte)
                handled.add(declaration.id)
            continue
        _delete_span(source, spec.node.start_byte, spec.node.end_byte)


def _delete_span(source: SourceFile, start: int, end: int) -> None:
    """Delete a span, taking its whole line when nothing else shares it."""
    data = source.source
    line_start, line_end = _line_bounds(data, start, end)
    before = data[line_start:start]
    after = data[end:line_end]
    if not before.strip() and not after.strip():
        source.delete(line_start, min(line_end + 1, len(data)))
        return

    # Drop a separating semicolon so "a; b" does not become "; b".
    stripped = after.lstrip(b" \t")
    if stripped.startswith(b";"):
        end += len(after) - len(stripped) + 1
    source.delete(start, end)


__all__ = [
    "alias_conflict",
    "apply_import_decision",
    "decide_import",
    "has_replacement_import",
    "replacement_spec",
    "target_specs",
]
