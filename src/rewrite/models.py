"""Per-file rewrite models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ImportDecision(str, Enum):
    """How a file's import list is reconciled after a rewrite."""

    REPLACE_IMPORT = "replace_import"
    ADD_IMPORT = "add_import"


class RewriteOutcome(BaseModel):
    """Result of running the rewriter over one file."""

    path: str
    matched: int = Field(default=0, description="Call sites rewritten")
    skipped: int = Field(
        default=0,
        description="Target call sites left untouched (nested or alias conflict)",
    )
    decision: ImportDecision | None = None
    imports_changed: bool = False
    written: bool = False
    text: str | None = Field(
        default=None,
        exclude=True,
        description="Final serialized source when the file changed",
    )
    diff: str | None = Field(default=None, exclude=True)
    error: str | None = None

    @property
    def changed(self) -> bool:
        return self.matched > 0


__all__ = ["ImportDecision", "RewriteOutcome"]
