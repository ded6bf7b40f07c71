"""Serialization and atomic replacement of rewritten files."""

from __future__ import annotations

import difflib
import logging
import os
import shutil
import stat
import subprocess
import tempfile
from typing import TYPE_CHECKING

from errors import EmitError
from parse.syntax_tree import has_syntax_errors

if TYPE_CHECKING:
    from pathlib import Path

    from parse.syntax_tree import SourceFile

logger = logging.getLogger(__name__)

GOFMT = "gofmt"


def gofmt_available() -> bool:
    return shutil.which(GOFMT) is not None


def run_gofmt(source_bytes: bytes, path: Path) -> bytes:
    """Format Go source with gofmt read from stdin."""
    try:
        completed = subprocess.run(  # noqa: S603
            [GOFMT],
            input=source_bytes,
            capture_output=True,
            check=False,
        )
    except OSError as exc:
        msg = f"{path}: failed to run gofmt: {exc}"
        raise EmitError(msg) from exc

    if completed.returncode != 0:
        detail = completed.stderr.decode("utf8", errors="replace").strip()
        msg = f"{path}: gofmt rejected rewritten source: {detail}"
        raise EmitError(msg)
    return completed.stdout


def render(source: SourceFile, *, use_gofmt: bool = False) -> bytes:
    """Produce the final bytes for a rewritten file.

    Raises:
        EmitError: If the rewritten source no longer parses.
    """
    output = source.render()
    if has_syntax_errors(output):
        msg = f"{source.path}: rewritten source has syntax errors"
        raise EmitError(msg)
    if use_gofmt:
        if gofmt_available():
            output = run_gofmt(output, source.path)
        else:
            logger.debug("gofmt not found on PATH; writing unformatted output")
    return output


def unified_diff(path: Path, before: bytes, after: bytes) -> str:
    return "".join(
        difflib.unified_diff(
            before.decode("utf8", errors="replace").splitlines(keepends=True),
            after.decode("utf8", errors="replace").splitlines(keepends=True),
            fromfile=f"a/{path.name}",
            tofile=f"b/{path.name}",
        )
    )


def write_atomic(path: Path, payload: bytes) -> None:
    """Replace ``path`` with ``payload`` via a temp file in the same directory.

    Raises:
        EmitError: On any write failure; the original file is left in place.
    """
    tmp_name: str | None = None
    try:
        mode = path.stat().st_mode
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_name, stat.S_IMODE(mode))
        os.replace(tmp_name, path)
    except OSError as exc:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        msg = f"failed to write {path}: {exc}"
        raise EmitError(msg) from exc


__all__ = ["gofmt_available", "render", "run_gofmt", "unified_diff", "write_atomic"]
