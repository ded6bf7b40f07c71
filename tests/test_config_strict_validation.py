from __future__ import annotations

from pathlib import Path

import pytest

from rules.config import DEFAULT_DENY, ConfigError, load_config


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "iorewrite.toml").write_text(toml_content, encoding="utf-8")


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert config.rule.target_module == "io"
    assert config.rule.target_function == "ReadAll"
    assert config.rule.replacement_path == "github.com/AdamKorcz/bugdetectors/io"
    assert config.rule.replacement_alias == "io2"
    assert config.rule.newline_marker == "NEW_LINE"
    assert config.deny == list(DEFAULT_DENY)
    assert config.gofmt is True


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_rule_key_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[rule]
target_module = "io"
bogus = true
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "deny = [")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "rule_body",
    [
        'replacement_alias = "not valid"',
        'replacement_alias = "_"',
        'target_function = "1ReadAll"',
        'newline_marker = ""',
        'location_style = "sideways"',
    ],
)
def test_invalid_rule_values_rejected(tmp_path: Path, rule_body: str) -> None:
    _write_config(tmp_path, f"[rule]\n{rule_body}\n")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_empty_deny_entry_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, 'deny = ["vendor/", ""]')

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
deny = ["third_party/"]
exclude = ["gen/**"]
gofmt = false

[rule]
target_module = "io/ioutil"
replacement_alias = "ioutil2"
location_style = "relative"
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.deny == ["third_party/"]
    assert config.exclude == ["gen/**"]
    assert config.gofmt is False
    assert config.rule.target_module == "io/ioutil"
    assert config.rule.replacement_alias == "ioutil2"
    assert config.rule.location_style == "relative"
    assert config.rule.target_function == "ReadAll"


def test_explicit_config_path_must_exist(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path, tmp_path / "missing.toml")


def test_explicit_config_path_overrides_root_file(tmp_path: Path) -> None:
    _write_config(tmp_path, "gofmt = true")
    other = tmp_path / "other.toml"
    other.write_text("gofmt = false\n", encoding="utf-8")

    config = load_config(tmp_path, other)

    assert config.gofmt is False
