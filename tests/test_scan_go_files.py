from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from rules.config import DEFAULT_DENY
from scan.files import _build_gitignore_matcher, find_go_files, is_denied

if TYPE_CHECKING:
    from pathlib import Path


def _touch(root: Path, relative_path: str) -> None:
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("package x\n", encoding="utf-8")


def _found(root: Path, **kwargs: object) -> list[str]:
    return [
        path.relative_to(root).as_posix()
        for path in find_go_files(root, **kwargs)  # type: ignore[arg-type]
    ]


def test_find_go_files_skips_tests_and_other_languages(tmp_path: Path) -> None:
    _touch(tmp_path, "b/main.go")
    _touch(tmp_path, "a/lib.go")
    _touch(tmp_path, "a/lib_test.go")
    _touch(tmp_path, "a/notes.txt")
    _touch(tmp_path, "a/gen.go.orig")

    assert _found(tmp_path) == ["a/lib.go", "b/main.go"]


def test_find_go_files_applies_deny_list(tmp_path: Path) -> None:
    _touch(tmp_path, "app/main.go")
    _touch(tmp_path, "pkg/mod/golang.org/x/sys/unix.go")
    _touch(tmp_path, "pkg/mod/github.com/mattn/go-sqlite3@v1.14.0/sqlite3.go")

    assert _found(tmp_path, deny=list(DEFAULT_DENY)) == ["app/main.go"]
    assert len(_found(tmp_path)) == 3


def test_find_go_files_include_and_exclude(tmp_path: Path) -> None:
    _touch(tmp_path, "cmd/tool/main.go")
    _touch(tmp_path, "internal/gen/zz_generated.go")
    _touch(tmp_path, "internal/core/core.go")

    assert _found(tmp_path, include_patterns=["internal/*"]) == [
        "internal/core/core.go",
        "internal/gen/zz_generated.go",
    ]
    assert _found(tmp_path, exclude_patterns=["internal/gen/*"]) == [
        "cmd/tool/main.go",
        "internal/core/core.go",
    ]


def test_find_go_files_respects_root_gitignore(tmp_path: Path) -> None:
    _touch(tmp_path, "keep.go")
    _touch(tmp_path, "build/out.go")
    (tmp_path / ".gitignore").write_text("build/\n", encoding="utf-8")

    assert _found(tmp_path) == ["keep.go"]


def test_is_denied_matches_substrings() -> None:
    assert is_denied("vendor/golang.org/x/net/http2.go", ["golang.org"])
    assert not is_denied("internal/golang/x.go", ["golang.org"])
    assert not is_denied("anything.go", None)


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_find_go_files_skips_symlinked_dirs(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _touch(repo_root, "pkg/module.go")

    external_root = tmp_path / "external"
    _touch(external_root, "leak.go")

    symlink_dir = repo_root / "linked"
    symlink_dir.symlink_to(external_root, target_is_directory=True)

    results = _found(repo_root)

    assert "pkg/module.go" in results
    assert "linked/leak.go" not in results


@pytest.mark.skipif(
    os.name == "nt",
    reason="Symlink semantics vary on Windows test runners.",
)
def test_nested_gitignore_skips_symlinked_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _touch(repo_root, "pkg/module.go")
    (repo_root / ".gitignore").write_text("*.bin\n", encoding="utf-8")

    external_root = tmp_path / "external"
    external_root.mkdir()
    (external_root / "outside.gitignore").write_text(
        "pkg/module.go\n", encoding="utf-8"
    )

    symlink_gitignore = repo_root / "linked.gitignore"
    symlink_gitignore.symlink_to(external_root / "outside.gitignore")

    matcher = _build_gitignore_matcher(repo_root, nested_gitignore=True)
    assert matcher is not None
    assert matcher(str(repo_root / "pkg" / "module.go")) is False
