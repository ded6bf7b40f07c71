from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import tomllib
from pydantic import BaseModel, ConfigDict, Field, field_validator

from errors import RewriteError

CONFIG_FILENAME = "iorewrite.toml"

DEFAULT_DENY = ("golang.org", "github.com/mattn/go-sqlite3")

LocationStyle = Literal["absolute", "relative"]


class RewriteRule(BaseModel):
    """Which call to find and what to turn it into."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    target_module: str = Field(
        default="io",
        description="Import path of the package whose function is replaced",
    )
    target_function: str = Field(
        default="ReadAll",
        description="Name of the function whose call sites are rewritten",
    )
    replacement_path: str = Field(
        default="github.com/AdamKorcz/bugdetectors/io",
        description="Import path of the package providing the replacement",
    )
    replacement_alias: str = Field(
        default="io2",
        description="Name the replacement package is imported under",
    )
    newline_marker: str = Field(
        default="NEW_LINE",
        description="Token separating the location from the call text",
    )
    placeholder: str = Field(
        default="Could not generate code",
        description="Provenance text used when the call text is unavailable",
    )
    location_style: LocationStyle = Field(
        default="absolute",
        description="Render provenance paths absolute or relative to the root",
    )

    @field_validator("target_function", "replacement_alias")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not v.isidentifier() or v == "_":
            msg = f"'{v}' is not a valid Go identifier"
            raise ValueError(msg)
        return v

    @field_validator("newline_marker")
    @classmethod
    def validate_marker(cls, v: str) -> str:
        if not v or "\n" in v or "\r" in v:
            msg = "newline_marker must be a non-empty token without line breaks"
            raise ValueError(msg)
        return v


class RewriterConfig(BaseModel):
    """Configuration for an iorewrite run."""

    model_config = ConfigDict(extra="forbid")

    rule: RewriteRule = Field(
        default_factory=RewriteRule,
        description="Call-site rewrite rule",
    )
    deny: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DENY),
        description="Path substrings of dependencies that are never rewritten",
    )
    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to include (empty = all Go files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to exclude",
    )
    nested_gitignore: bool = Field(
        default=False,
        description=(
            "Enable nested .gitignore composition (default: false for root-only)"
        ),
    )
    gofmt: bool = Field(
        default=True,
        description="Pipe rewritten files through gofmt when it is on PATH",
    )

    @field_validator("deny", mode="before")
    @classmethod
    def validate_deny(cls, v: Any) -> Any:
        """Reject empty substrings, which would deny every path."""
        if v is None:
            return []
        if isinstance(v, list) and any(
            isinstance(item, str) and not item for item in v
        ):
            msg = "deny entries must be non-empty strings"
            raise ValueError(msg)
        return v


class ConfigError(RewriteError):
    """Raised when config file exists but cannot be parsed."""


def load_config(root: Path, config_path: Path | None = None) -> RewriterConfig:
    """Load configuration from iorewrite.toml if it exists.

    An explicit ``config_path`` must exist; the default file under ``root``
    is optional.
    """
    if config_path is None:
        config_path = Path(root) / CONFIG_FILENAME
        if not config_path.is_file():
            return RewriterConfig()
    elif not config_path.is_file():
        msg = f"Config file not found: {config_path}"
        raise ConfigError(msg)

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        return RewriterConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e
