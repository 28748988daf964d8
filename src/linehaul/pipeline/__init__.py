"""Pipeline driver and logging configuration."""

from .driver import (
    ProcessingStats,
    line_context,
    process,
    process_event,
    process_file,
    process_line,
    process_reader,
)
from .logging_setup import (
    TRACE,
    ContextAdapter,
    JSONFormatter,
    LogStyle,
    ReadableFormatter,
    configure_logging,
    parse_level,
    parse_level_directives,
)

__all__ = [
    # Driver
    "process",
    "process_line",
    "process_event",
    "process_reader",
    "process_file",
    "line_context",
    "ProcessingStats",
    # Logging
    "TRACE",
    "LogStyle",
    "configure_logging",
    "parse_level",
    "parse_level_directives",
    "ContextAdapter",
    "JSONFormatter",
    "ReadableFormatter",
]
