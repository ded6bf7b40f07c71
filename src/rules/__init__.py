"""Rewrite rules and configuration."""

from rules.config import (
    CONFIG_FILENAME,
    ConfigError,
    RewriterConfig,
    RewriteRule,
    load_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "RewriteRule",
    "RewriterConfig",
    "load_config",
]
