"""Call-site rewriting and import reconciliation."""

from rewrite.calls import CallRewriter
from rewrite.imports import apply_import_decision, decide_import
from rewrite.models import ImportDecision, RewriteOutcome
from rewrite.pipeline import RewriteSummary, rewrite_file, rewrite_tree
from rewrite.usage import uses_other_members

__all__ = [
    "CallRewriter",
    "ImportDecision",
    "RewriteOutcome",
    "RewriteSummary",
    "apply_import_decision",
    "decide_import",
    "rewrite_file",
    "rewrite_tree",
    "uses_other_members",
]
