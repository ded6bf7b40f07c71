"""Exception types shared across the rewriter."""

from __future__ import annotations


class RewriteError(Exception):
    """Base class for rewriter failures."""


class ParseError(RewriteError):
    """Raised when a source file cannot be read or parsed; the file is skipped."""


class EmitError(RewriteError):
    """Raised when rewritten source cannot be produced or written; fatal."""


__all__ = ["EmitError", "ParseError", "RewriteError"]
