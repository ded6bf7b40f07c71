"""Per-file and per-tree rewrite driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from errors import ParseError
from parse.go_imports import extract_import_specs, import_names_for
from parse.scopes import collect_package_refs, find_package_declaration
from parse.syntax_tree import load_source_file
from rewrite.calls import CallRewriter
from rewrite.emit import render, unified_diff, write_atomic
from rewrite.imports import alias_conflict, apply_import_decision, decide_import
from rewrite.models import RewriteOutcome
from rewrite.usage import uses_other_members
from scan.files import find_go_files

if TYPE_CHECKING:
    from pathlib import Path

    from rules.config import RewriterConfig, RewriteRule

logger = logging.getLogger(__name__)


@dataclass
class RewriteSummary:
    outcomes: list[RewriteOutcome] = field(default_factory=list)

    @property
    def files_scanned(self) -> int:
        return len(self.outcomes)

    @property
    def files_rewritten(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.changed)

    @property
    def calls_rewritten(self) -> int:
        return sum(outcome.matched for outcome in self.outcomes)


def _display_path(path: Path, root: Path | None, rule: RewriteRule) -> str:
    if rule.location_style == "relative" and root is not None:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            pass
    return str(path)


def rewrite_file(
    path: Path,
    rule: RewriteRule,
    *,
    root: Path | None = None,
    use_gofmt: bool = False,
    dry_run: bool = False,
) -> RewriteOutcome:
    """Rewrite target calls in one Go file.

    Files that cannot be read or parsed, that do not import the target
    package, or that contain no target call are left untouched.

    Raises:
        EmitError: If the rewritten file cannot be rendered or written.
    """
    outcome = RewriteOutcome(path=str(path))

    try:
        source = load_source_file(path)
    except ParseError as exc:
        logger.debug("skipping %s: %s", path, exc)
        outcome.error = str(exc)
        return outcome

    specs = extract_import_specs(source)
    package_names = import_names_for(specs, rule.target_module)
    if not package_names:
        return outcome

    conflict = alias_conflict(specs, rule)
    if conflict is not None:
        line, _ = source.position(conflict.node)
        msg = (
            f"{path}:{line}: '{rule.replacement_alias}' already names "
            f"import \"{conflict.path}\""
        )
        logger.warning("skipping %s", msg)
        outcome.error = msg
        return outcome

    declared = find_package_declaration(source, rule.replacement_alias)
    if declared is not None:
        line, _ = source.position(declared)
        msg = (
            f"{path}:{line}: '{rule.replacement_alias}' is already declared "
            "in the package block"
        )
        logger.warning("skipping %s", msg)
        outcome.error = msg
        return outcome

    refs = collect_package_refs(
        source, package_names, probe_names=[rule.replacement_alias]
    )
    other_usage = uses_other_members(refs, rule.target_function)

    rewriter = CallRewriter(
        source=source,
        rule=rule,
        refs=refs,
        display_path=_display_path(path, root, rule),
        source_bytes=source.source,
    )
    rewrote = rewriter.run()
    outcome.skipped = rewriter.skipped
    if not rewrote:
        return outcome

    outcome.matched = rewriter.matched
    outcome.decision = decide_import(
        uses_other_members=other_usage,
        skipped_calls=rewriter.skipped,
    )
    outcome.imports_changed = apply_import_decision(
        source, specs, rule, outcome.decision
    )

    output = render(source, use_gofmt=use_gofmt)
    outcome.text = output.decode("utf8", errors="replace")
    if dry_run:
        outcome.diff = unified_diff(path, source.source, output)
    else:
        write_atomic(path, output)
        outcome.written = True

    logger.info(
        "%s: rewrote %d call(s), %s",
        path,
        outcome.matched,
        outcome.decision.value,
    )
    return outcome


def rewrite_tree(
    root: Path,
    config: RewriterConfig,
    *,
    dry_run: bool = False,
) -> RewriteSummary:
    """Rewrite every eligible Go file under ``root``, one file at a time."""
    summary = RewriteSummary()
    for file_path in find_go_files(
        root,
        deny=config.deny,
        include_patterns=config.include,
        exclude_patterns=config.exclude,
        nested_gitignore=config.nested_gitignore,
    ):
        summary.outcomes.append(
            rewrite_file(
                file_path,
                config.rule,
                root=root,
                use_gofmt=config.gofmt,
                dry_run=dry_run,
            )
        )
    return summary


__all__ = ["RewriteSummary", "rewrite_file", "rewrite_tree"]
