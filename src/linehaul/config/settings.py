"""
Application settings and configuration management.

Supports loading from:
1. A YAML config file (linehaul.yaml, or the path in LINEHAUL_CONFIG)
2. Environment variables (fallback)
"""

import logging
import os
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml

from .constants import (
    CONFIG_PATH_ENV,
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_STYLE,
    LOG_LEVEL_ENV,
    LOG_STYLE_ENV,
)

logger = logging.getLogger(__name__)

VALID_LOG_STYLES = frozenset(["json", "readable"])


@dataclass
class Settings:
    """
    Runtime settings for an ingestion run.

    Attributes:
        log_level: Level directives, e.g. "info" or "info,linehaul.pipeline=trace"
        log_style: Log rendering, either "json" or "readable"
        ignored_user_agents: Extra regex patterns for user agents to ignore
    """

    log_level: str = DEFAULT_LOG_LEVEL
    log_style: str = DEFAULT_LOG_STYLE
    ignored_user_agents: list[str] = field(default_factory=list)

    def validate(self) -> list[str]:
        """Validate settings values. Returns list of errors."""
        errors = []

        if self.log_style not in VALID_LOG_STYLES:
            errors.append(
                f"log_style must be one of {', '.join(sorted(VALID_LOG_STYLES))}, "
                f"got {self.log_style!r}"
            )
        if not self.log_level.strip():
            errors.append("log_level must not be empty")
        for pattern in self.ignored_user_agents:
            if not isinstance(pattern, str) or not pattern:
                errors.append(f"ignored_user_agents entries must be strings: {pattern!r}")
                continue
            try:
                re.compile(pattern)
            except re.error as e:
                errors.append(f"ignored_user_agents pattern {pattern!r} is invalid: {e}")

        return errors

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "log_level": self.log_level,
            "log_style": self.log_style,
            "ignored_user_agents": list(self.ignored_user_agents),
        }

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "Settings":
        """Create Settings from a configuration dictionary (e.g., from YAML)."""
        logging_config = config.get("logging", {}) or {}
        ua_config = config.get("user_agents", {}) or {}

        return cls(
            log_level=str(logging_config.get("level", DEFAULT_LOG_LEVEL)),
            log_style=str(logging_config.get("style", DEFAULT_LOG_STYLE)).lower(),
            ignored_user_agents=list(ua_config.get("ignored", []) or []),
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        return cls(
            log_level=os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
            log_style=os.environ.get(LOG_STYLE_ENV, DEFAULT_LOG_STYLE).lower(),
        )


# Default config file path
DEFAULT_CONFIG_PATH = Path("linehaul.yaml")


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed configuration (empty dict for an empty file)

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If the document is not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        config = yaml.safe_load(f)

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping: {path}")
    return config


@lru_cache
def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Get cached settings instance.

    Loads from the YAML config file if available, otherwise from env vars.
    LINEHAUL_LOG still overrides the file's log level when set, so a
    single environment setting controls verbosity.

    Args:
        config_path: Optional path to the YAML config file

    Returns:
        Settings instance
    """
    if config_path:
        path = Path(config_path)
    else:
        path = Path(os.environ.get(CONFIG_PATH_ENV, str(DEFAULT_CONFIG_PATH)))

    if path.exists():
        try:
            settings = Settings.from_dict(load_config_file(path))
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning(
                f"Failed to load config from {path}: {e}; "
                "falling back to environment variables"
            )
            return Settings.from_env()

        if LOG_LEVEL_ENV in os.environ:
            settings.log_level = os.environ[LOG_LEVEL_ENV]
        return settings

    return Settings.from_env()


def clear_settings_cache() -> None:
    """Clear the cached settings (useful for testing)."""
    get_settings.cache_clear()
