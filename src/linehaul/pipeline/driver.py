"""
Pipeline driver.

Runs each input line through syslog framing and event parsing, in input
order, yielding zero or one Event per line. Per-line failures never
escape: each dropped line produces exactly one log record.

    ParseError          ERROR  (malformed envelope or event)
    IgnoredUserAgent    TRACE  (excluded traffic, not a data-quality problem)
    InvalidUserAgent    TRACE  (unparseable client, tracked by volume)

Only DecompressionError, raised when the input container is unreadable,
reaches the caller.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional, Union

from ..events.models import Event
from ..events.parser import parse_event
from ..ingestion.exceptions import IgnoredUserAgent, InvalidUserAgent, ParseError
from ..ingestion.file_utils import open_file_checked, read_decompressed, split_lines
from ..ingestion.syslog import SyslogMessage, parse_syslog
from ..ua.parser import UserAgentParser
from .logging_setup import ContextAdapter

logger = logging.getLogger(__name__)


@dataclass
class ProcessingStats:
    """Counters for one processing run."""

    lines: int = 0
    events: int = 0
    parse_errors: int = 0
    ignored_user_agents: int = 0
    invalid_user_agents: int = 0

    @property
    def dropped(self) -> int:
        return self.parse_errors + self.ignored_user_agents + self.invalid_user_agents

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            "lines": self.lines,
            "events": self.events,
            "dropped": self.dropped,
            "parse_errors": self.parse_errors,
            "ignored_user_agents": self.ignored_user_agents,
            "invalid_user_agents": self.invalid_user_agents,
        }


@contextmanager
def line_context(log: logging.Logger, **fields) -> Iterator[ContextAdapter]:
    """
    Bind diagnostic fields to a logger for the duration of one line.

    The adapter is detached on exit, whatever the outcome, so fields never
    leak into records for the next line.
    """
    adapter = ContextAdapter(log, fields)
    try:
        yield adapter
    finally:
        adapter.extra = {}


def process_event(
    envelope: SyslogMessage,
    log: ContextAdapter,
    ua_parser: Optional[UserAgentParser] = None,
    stats: Optional[ProcessingStats] = None,
) -> Optional[Event]:
    """
    Parse an envelope's message into an Event, logging any drop.

    Returns:
        The Event, or None if the line was dropped
    """
    try:
        return parse_event(
            envelope.message,
            default_timestamp=envelope.occurred_at,
            ua_parser=ua_parser,
        )
    except IgnoredUserAgent:
        log.trace("skipping for ignored user agent")
        if stats is not None:
            stats.ignored_user_agents += 1
    except InvalidUserAgent:
        log.trace("skipping for invalid user agent")
        if stats is not None:
            stats.invalid_user_agents += 1
    except ParseError as e:
        log.error("invalid event", extra={"context": {"error": e.message}})
        if stats is not None:
            stats.parse_errors += 1
    return None


def process_line(
    line: str,
    log: Optional[logging.Logger] = None,
    ua_parser: Optional[UserAgentParser] = None,
    stats: Optional[ProcessingStats] = None,
) -> Optional[Event]:
    """
    Run one line through the full pipeline.

    Args:
        line: A single decoded, non-empty line
        log: Diagnostic sink (default: this module's logger)
        ua_parser: User-agent parser (default: the cached default parser)
        stats: Counters to update

    Returns:
        The Event, or None if the line was dropped
    """
    log = log or logger
    if stats is not None:
        stats.lines += 1

    with line_context(log, line=line) as line_log:
        try:
            envelope = parse_syslog(line)
        except ParseError as e:
            line_log.error(
                "could not parse as syslog message",
                extra={"context": {"error": e.message}},
            )
            if stats is not None:
                stats.parse_errors += 1
            return None

    with line_context(log, raw_event=envelope.message) as event_log:
        event = process_event(envelope, event_log, ua_parser=ua_parser, stats=stats)

    if event is not None and stats is not None:
        stats.events += 1
    return event


def process(
    lines: Iterable[str],
    log: Optional[logging.Logger] = None,
    ua_parser: Optional[UserAgentParser] = None,
    stats: Optional[ProcessingStats] = None,
) -> Iterator[Event]:
    """
    Lazily turn lines into Events, skipping lines that fail any stage.

    Args:
        lines: Decoded lines in input order
        log: Diagnostic sink (default: this module's logger)
        ua_parser: User-agent parser (default: the cached default parser)
        stats: Counters to update as lines are consumed

    Yields:
        Events, in input order
    """
    for line in lines:
        event = process_line(line, log=log, ua_parser=ua_parser, stats=stats)
        if event is not None:
            yield event


def process_reader(
    file: BinaryIO,
    log: Optional[logging.Logger] = None,
    ua_parser: Optional[UserAgentParser] = None,
    stats: Optional[ProcessingStats] = None,
    source: Optional[str] = None,
) -> Iterator[Event]:
    """
    Decompress a gzip stream and process its lines.

    The whole container is decompressed before the first line is parsed.

    Args:
        file: Binary handle on gzip data
        log: Diagnostic sink (default: this module's logger)
        ua_parser: User-agent parser (default: the cached default parser)
        stats: Counters to update
        source: Input name for error messages

    Yields:
        Events, in input order

    Raises:
        DecompressionError: If the container is corrupt or truncated
    """
    data = read_decompressed(file, source=source)
    yield from process(
        split_lines(data, log=log or logger),
        log=log,
        ua_parser=ua_parser,
        stats=stats,
    )


def process_file(
    file_path: Union[str, Path],
    log: Optional[logging.Logger] = None,
    ua_parser: Optional[UserAgentParser] = None,
    stats: Optional[ProcessingStats] = None,
) -> Iterator[Event]:
    """
    Process a gzip file on disk. See process_reader().

    Raises:
        FileNotFoundError: If the file doesn't exist
        DecompressionError: If the container is corrupt or truncated
    """
    with open_file_checked(file_path) as f:
        yield from process_reader(
            f, log=log, ua_parser=ua_parser, stats=stats, source=str(file_path)
        )
