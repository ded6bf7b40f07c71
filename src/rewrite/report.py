"""JSONL report of per-file rewrite outcomes."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from rewrite.models import RewriteOutcome


def write_report(path: Path, outcomes: Sequence[RewriteOutcome]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        for outcome in outcomes:
            payload = outcome.model_dump(mode="json")
            f.write(orjson.dumps(payload, option=orjson.OPT_SORT_KEYS))
            f.write(b"\n")


__all__ = ["write_report"]
