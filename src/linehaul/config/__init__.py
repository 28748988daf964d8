"""Configuration module."""

from .constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_STYLE,
    HTTP_METHODS,
    LOG_LEVEL_ENV,
    MAX_PRIORITY,
    NIL,
    SYSLOG_SEVERITIES,
)
from .settings import Settings, clear_settings_cache, get_settings, load_config_file

__all__ = [
    # Wire format
    "NIL",
    "MAX_PRIORITY",
    "SYSLOG_SEVERITIES",
    "HTTP_METHODS",
    # Logging defaults
    "LOG_LEVEL_ENV",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_LOG_STYLE",
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "load_config_file",
]
