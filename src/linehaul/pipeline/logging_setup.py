"""
Process-wide logging configuration.

Configured once at startup from a single level setting (LINEHAUL_LOG) and
a rendering style:

    LogStyle.JSON      one JSON object per record, for log shippers
    LogStyle.READABLE  compact single-line text, for terminals

Level settings accept a default level plus per-logger overrides:

    LINEHAUL_LOG=info
    LINEHAUL_LOG=warning,linehaul.pipeline=trace

Structured fields travel on the record's "context" attribute, set either
with extra={"context": {...}} or through a bound ContextAdapter.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from enum import Enum
from typing import IO, Optional

from ..config.constants import DEFAULT_LOG_LEVEL, PACKAGE_VERSION

# Below DEBUG; used for per-line drops that are expected and frequent
TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_LEVEL_NAMES = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
    "off": logging.CRITICAL + 10,
}

# Marks handlers installed by configure_logging so reconfiguring replaces them
_HANDLER_FLAG = "_linehaul_handler"


class LogStyle(Enum):
    """Log rendering style."""

    JSON = "json"
    READABLE = "readable"


def parse_level(value: str) -> int:
    """
    Convert a level name or number to a logging level.

    Raises:
        ValueError: If the level is unknown
    """
    value = value.strip().lower()
    if value.isdigit():
        return int(value)
    if value not in _LEVEL_NAMES:
        raise ValueError(
            f"Unknown log level: {value!r}. "
            f"Use one of: {', '.join(_LEVEL_NAMES)}"
        )
    return _LEVEL_NAMES[value]


def parse_level_directives(spec: str) -> tuple[int, dict[str, int]]:
    """
    Parse "level[,logger=level...]" into a root level and per-logger levels.

    Examples:
        >>> parse_level_directives("info,linehaul.pipeline=trace")
        (20, {'linehaul.pipeline': 5})

    Raises:
        ValueError: If a directive names an unknown level
    """
    root_level = parse_level(DEFAULT_LOG_LEVEL)
    overrides: dict[str, int] = {}

    for directive in spec.split(","):
        directive = directive.strip()
        if not directive:
            continue
        if "=" in directive:
            name, level = directive.split("=", 1)
            overrides[name.strip()] = parse_level(level)
        else:
            root_level = parse_level(directive)

    return root_level, overrides


def _context(record: logging.LogRecord) -> dict:
    context = getattr(record, "context", None)
    return context if isinstance(context, dict) else {}


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
            "version": PACKAGE_VERSION,
        }
        for key, value in _context(record).items():
            payload.setdefault(key, value)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


class ReadableFormatter(logging.Formatter):
    """Compact text: "time LEVEL name: message key=value ..."."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-5s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        context = _context(record)
        if context:
            pairs = " ".join(f"{key}={value!r}" for key, value in context.items())
            # The traceback, if any, stays on its own lines below the pairs
            first, sep, rest = text.partition("\n")
            text = f"{first} {pairs}{sep}{rest}"
        return text


class ContextAdapter(logging.LoggerAdapter):
    """
    Logger bound to structured fields.

    Bound fields are merged into record.context; fields passed per call in
    extra={"context": {...}} take precedence.
    """

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        context = dict(self.extra or {})
        context.update(extra.get("context") or {})
        extra["context"] = context
        kwargs["extra"] = extra
        return msg, kwargs

    def trace(self, msg, *args, **kwargs):
        self.log(TRACE, msg, *args, **kwargs)


def configure_logging(
    style: LogStyle = LogStyle.READABLE,
    level: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> logging.Logger:
    """
    Configure the root logger.

    Safe to call more than once: handlers from an earlier call are replaced.

    Args:
        style: Rendering style
        level: Level directives (default: "debug")
        stream: Output stream (default: stdout)

    Returns:
        The configured root logger

    Raises:
        ValueError: If the level directives are invalid
    """
    root_level, overrides = parse_level_directives(level or DEFAULT_LOG_LEVEL)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(
        JSONFormatter() if style is LogStyle.JSON else ReadableFormatter()
    )
    setattr(handler, _HANDLER_FLAG, True)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, _HANDLER_FLAG, False):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(root_level)

    for name, logger_level in overrides.items():
        logging.getLogger(name).setLevel(logger_level)

    return root
