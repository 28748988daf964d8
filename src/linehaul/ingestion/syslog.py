"""
Syslog envelope parser.

Decodes one framed line into its header fields and the free-text message
that follows them:

    <134>1 2023-01-01T00:00:00Z edge-1 cdn - - GET /packages/... 200 ...
    ^pri ^ver ^timestamp       ^host  ^app ^pid ^msgid ^message

Header fields are single-space separated. "-" marks an absent field.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from dateutil import parser as date_parser

from ..config.constants import MAX_PRIORITY, NIL, SYSLOG_SEVERITIES
from .exceptions import ParseError

_PRIORITY_RE = re.compile(
    r"<(?P<priority>0|[1-9][0-9]{0,2})>(?:(?P<version>[1-9][0-9]?) )?"
)

_TIMESTAMP_RE = re.compile(
    r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(?:\.[0-9]{1,9})?(?:Z|[+-][0-9]{2}:[0-9]{2})$"
)

_PROCESS_ID_RE = re.compile(r"^(?:0|[1-9][0-9]*)$")

# timestamp, hostname, app-name, procid, msgid
_HEADER_FIELD_COUNT = 5


def parse_timestamp(token: str) -> datetime:
    """
    Parse an RFC 3339 timestamp into a timezone-aware UTC datetime.

    Args:
        token: Timestamp string (e.g., "2023-01-01T00:00:00.123Z")

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ValueError: If the token is not an RFC 3339 timestamp
    """
    if not _TIMESTAMP_RE.match(token):
        raise ValueError(f"Not an RFC 3339 timestamp: {token!r}")

    value = token
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"

    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        # Older interpreters reject some fractional widths
        dt = date_parser.isoparse(token)

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _nil(token: str) -> Optional[str]:
    return None if token == NIL else token


@dataclass(frozen=True)
class SyslogMessage:
    """
    One syslog line split into header and message.

    Optional header fields are None when the line carried the NIL token.
    The timestamp is kept as the validated wire token so the line can be
    re-serialized exactly; use occurred_at for the parsed value.
    """

    priority: int
    timestamp: Optional[str]
    hostname: Optional[str]
    app_name: Optional[str]
    process_id: Optional[int]
    message_id: Optional[str]
    message: str
    version: Optional[int] = None

    @property
    def facility(self) -> int:
        return self.priority // 8

    @property
    def severity(self) -> int:
        return self.priority % 8

    @property
    def severity_name(self) -> str:
        return SYSLOG_SEVERITIES[self.severity]

    @property
    def occurred_at(self) -> Optional[datetime]:
        """Parsed header timestamp, or None when absent."""
        if self.timestamp is None:
            return None
        return parse_timestamp(self.timestamp)

    def to_line(self) -> str:
        """Re-serialize the envelope into its wire form."""
        prefix = f"<{self.priority}>"
        if self.version is not None:
            prefix += f"{self.version} "

        fields = [
            self.timestamp,
            self.hostname,
            self.app_name,
            str(self.process_id) if self.process_id is not None else None,
            self.message_id,
        ]
        header = " ".join(NIL if value is None else value for value in fields)
        return f"{prefix}{header} {self.message}"

    def to_dict(self) -> dict:
        """Convert to dictionary representation."""
        return {
            "priority": self.priority,
            "version": self.version,
            "timestamp": self.timestamp,
            "hostname": self.hostname,
            "app_name": self.app_name,
            "process_id": self.process_id,
            "message_id": self.message_id,
            "message": self.message,
        }

    @classmethod
    def from_line(cls, line: str) -> "SyslogMessage":
        """Parse a syslog line. See parse_syslog()."""
        return parse_syslog(line)


def parse_syslog(line: str) -> SyslogMessage:
    """
    Parse one line into a SyslogMessage.

    Args:
        line: A single log line without its trailing newline

    Returns:
        SyslogMessage with all header fields validated

    Raises:
        ParseError: If any header field fails its grammar. Partial
            envelopes are never returned.
    """
    match = _PRIORITY_RE.match(line)
    if not match:
        raise ParseError("Missing or malformed syslog priority", line_content=line)

    priority = int(match.group("priority"))
    if priority > MAX_PRIORITY:
        raise ParseError(f"Syslog priority out of range: {priority}", line_content=line)

    version = match.group("version")

    # maxsplit keeps the message verbatim, including its own spaces
    parts = line[match.end():].split(" ", _HEADER_FIELD_COUNT)
    if len(parts) <= _HEADER_FIELD_COUNT:
        raise ParseError("Truncated syslog header", line_content=line)

    timestamp, hostname, app_name, process_id, message_id, message = parts

    if timestamp != NIL:
        try:
            parse_timestamp(timestamp)
        except ValueError:
            raise ParseError(
                f"Invalid syslog timestamp: {timestamp!r}", line_content=line
            )

    for name, token in (
        ("hostname", hostname),
        ("app_name", app_name),
        ("message_id", message_id),
    ):
        if not token:
            raise ParseError(f"Empty syslog {name}", line_content=line)

    if process_id != NIL and not _PROCESS_ID_RE.match(process_id):
        raise ParseError(f"Invalid syslog process id: {process_id!r}", line_content=line)

    return SyslogMessage(
        priority=priority,
        version=int(version) if version is not None else None,
        timestamp=_nil(timestamp),
        hostname=_nil(hostname),
        app_name=_nil(app_name),
        process_id=int(process_id) if process_id != NIL else None,
        message_id=_nil(message_id),
        message=message,
    )
