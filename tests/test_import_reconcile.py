from __future__ import annotations

from pathlib import Path

import pytest

from parse.go_imports import extract_import_specs
from parse.syntax_tree import SourceFile, has_syntax_errors, parse_source
from rewrite.imports import apply_import_decision, decide_import
from rewrite.models import ImportDecision
from rewrite.pipeline import rewrite_file
from rules.config import RewriteRule

REPLACEMENT = 'io2 "github.com/AdamKorcz/bugdetectors/io"'


def _apply(text: str, decision: ImportDecision) -> tuple[bool, str]:
    data = text.encode("utf-8")
    source = SourceFile(path=Path("x.go"), source=data, tree=parse_source(data))
    changed = apply_import_decision(
        source, extract_import_specs(source), RewriteRule(), decision
    )
    return changed, source.render().decode("utf-8")


@pytest.mark.parametrize(
    ("other", "skipped", "expected"),
    [
        (False, 0, ImportDecision.REPLACE_IMPORT),
        (True, 0, ImportDecision.ADD_IMPORT),
        (False, 2, ImportDecision.ADD_IMPORT),
        (True, 1, ImportDecision.ADD_IMPORT),
    ],
)
def test_decide_import(other: bool, skipped: int, expected: ImportDecision) -> None:
    assert decide_import(uses_other_members=other, skipped_calls=skipped) is expected


def test_add_into_semicolon_separated_list() -> None:
    changed, out = _apply(
        'package p\n\nimport ("io"; "os")\n', ImportDecision.ADD_IMPORT
    )

    assert changed is True
    assert out == f'package p\n\nimport ("io"\n\t{REPLACEMENT}; "os")\n'
    assert not has_syntax_errors(out.encode())


def test_add_keeps_trailing_comment_on_its_spec() -> None:
    changed, out = _apply(
        'package p\n\nimport (\n\t"io" // stdlib\n\t"os"\n)\n',
        ImportDecision.ADD_IMPORT,
    )

    assert changed is True
    assert out == (
        "package p\n\nimport (\n"
        '\t"io" // stdlib\n'
        f"\t{REPLACEMENT}\n"
        '\t"os"\n'
        ")\n"
    )


def test_add_is_noop_when_replacement_present() -> None:
    source = f'package p\n\nimport (\n\t"io"\n\t{REPLACEMENT}\n)\n'

    changed, out = _apply(source, ImportDecision.ADD_IMPORT)

    assert changed is False
    assert out == source


def test_replace_with_existing_replacement_on_one_line() -> None:
    changed, out = _apply(
        f'package p\n\nimport ("io"; {REPLACEMENT})\n',
        ImportDecision.REPLACE_IMPORT,
    )

    assert changed is True
    assert out == f"package p\n\nimport ( {REPLACEMENT})\n"
    assert not has_syntax_errors(out.encode())


def test_replace_removes_emptied_declaration() -> None:
    changed, out = _apply(
        f'package p\n\nimport "io"\nimport {REPLACEMENT}\n\nvar x = 1\n',
        ImportDecision.REPLACE_IMPORT,
    )

    assert changed is True
    assert out == f"package p\n\nimport {REPLACEMENT}\n\nvar x = 1\n"


def test_blank_and_dot_imports_are_untouched() -> None:
    changed, out = _apply(
        'package p\n\nimport (\n\t_ "io"\n\t"io"\n)\n',
        ImportDecision.REPLACE_IMPORT,
    )

    assert changed is True
    assert out == f'package p\n\nimport (\n\t_ "io"\n\t{REPLACEMENT}\n)\n'


def test_two_qualifying_imports_of_target_collapse(tmp_path: Path) -> None:
    path = tmp_path / "two.go"
    path.write_text(
        "package p\n"
        "\n"
        'import "io"\n'
        'import stdio "io"\n'
        "\n"
        "func f(a, b interface{}) {\n"
        "\tio.ReadAll(a)\n"
        "\tstdio.ReadAll(b)\n"
        "}\n",
        encoding="utf-8",
    )

    outcome = rewrite_file(path, RewriteRule())

    assert outcome.matched == 2
    assert path.read_text(encoding="utf-8") == (
        "package p\n"
        "\n"
        f"import {REPLACEMENT}\n"
        "\n"
        "func f(a, b interface{}) {\n"
        f'\tio2.ReadAll(a, "{path}:7:2NEW_LINEio.ReadAll(a)")\n'
        f'\tio2.ReadAll(b, "{path}:8:2NEW_LINEstdio.ReadAll(b)")\n'
        "}\n"
    )
