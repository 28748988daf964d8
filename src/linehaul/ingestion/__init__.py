"""
Ingestion layer: decompression, line splitting and syslog framing.

Usage:
    from linehaul.ingestion import parse_syslog, read_decompressed, split_lines

    with open("edge.log.gz", "rb") as f:
        for line in split_lines(read_decompressed(f)):
            envelope = parse_syslog(line)
            print(envelope.hostname, envelope.message)
"""

from .exceptions import (
    DecompressionError,
    IgnoredUserAgent,
    InvalidUserAgent,
    LinehaulError,
    ParseError,
    UserAgentError,
)
from .file_utils import open_file_checked, read_decompressed, split_lines
from .syslog import SyslogMessage, parse_syslog, parse_timestamp

__all__ = [
    # Exceptions
    "LinehaulError",
    "ParseError",
    "UserAgentError",
    "IgnoredUserAgent",
    "InvalidUserAgent",
    "DecompressionError",
    # File utilities
    "open_file_checked",
    "read_decompressed",
    "split_lines",
    # Syslog framing
    "SyslogMessage",
    "parse_syslog",
    "parse_timestamp",
]
