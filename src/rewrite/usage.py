"""Read-only check for other uses of the target package."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from parse.scopes import PackageRef


def uses_other_members(refs: Iterable[PackageRef], target_function: str) -> bool:
    """Report whether the target package is needed for more than target calls.

    ``refs`` must come from the unmodified tree. Anything except a direct call
    of ``target_function`` counts: other members (``io.EOF``, ``io.Reader``)
    as well as the target function used as a value (``f := io.ReadAll``).
    """
    return any(
        ref.member != target_function or not ref.is_call for ref in refs
    )


__all__ = ["uses_other_members"]
