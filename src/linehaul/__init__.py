"""
linehaul: turns CDN syslog streams into package download events.

Usage:
    from linehaul import process_file

    for event in process_file("edge.log.gz"):
        if event.package is not None:
            print(event.package.name, event.client.installer)
"""

from .config.constants import PACKAGE_VERSION
from .events import Event, Package, parse_event
from .ingestion import (
    DecompressionError,
    IgnoredUserAgent,
    InvalidUserAgent,
    LinehaulError,
    ParseError,
    SyslogMessage,
    parse_syslog,
)
from .pipeline import (
    LogStyle,
    ProcessingStats,
    configure_logging,
    process,
    process_file,
    process_reader,
)
from .ua import UserAgent, UserAgentParser, parse_user_agent

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    # Models
    "SyslogMessage",
    "Event",
    "Package",
    "UserAgent",
    # Parsing stages
    "parse_syslog",
    "parse_event",
    "parse_user_agent",
    "UserAgentParser",
    # Pipeline
    "process",
    "process_reader",
    "process_file",
    "ProcessingStats",
    # Logging
    "LogStyle",
    "configure_logging",
    # Exceptions
    "LinehaulError",
    "ParseError",
    "IgnoredUserAgent",
    "InvalidUserAgent",
    "DecompressionError",
]
