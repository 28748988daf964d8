"""
Download event parser.

Decodes the message body of a syslog envelope. Fields are whitespace
separated and the final field, the client identification, takes the rest
of the line. Two layouts are accepted:

    full:    TIMESTAMP CLIENT_ADDR METHOD PATH STATUS BYTES REFERRER TLS_PROTO TLS_CIPHER UA
    compact: METHOD PATH STATUS BYTES REFERRER TLS_PROTO UA

The compact layout starts with an HTTP method and takes its timestamp from
the envelope. "-" marks an absent field in either layout. A line that ends
in whitespace right after the last fixed field has an empty client field.

Example (compact):
    GET /packages/py3/f/foo/foo-1.0-py3-none-any.whl 200 4096 - TLSv1.3 "pip/23.0 {...}"
"""

import ipaddress
import re
from datetime import datetime
from typing import Optional

from ..config.constants import HTTP_METHODS, NIL
from ..ingestion.exceptions import ParseError
from ..ingestion.syslog import parse_timestamp
from ..ua.parser import UserAgentParser, parse_user_agent
from .models import Event
from .packages import package_from_path

FULL_FIELDS = (
    "timestamp",
    "client_address",
    "method",
    "request_path",
    "status_code",
    "bytes_sent",
    "referrer",
    "tls_protocol",
    "tls_cipher",
)

COMPACT_FIELDS = (
    "method",
    "request_path",
    "status_code",
    "bytes_sent",
    "referrer",
    "tls_protocol",
)

_METHOD_RE = re.compile(r"^[A-Z]+$")
_STATUS_RE = re.compile(r"^[1-5][0-9]{2}$")
_BYTES_RE = re.compile(r"^[0-9]+$")


def _optional(token: str) -> Optional[str]:
    return None if token == NIL else token


def decode_user_agent(raw: str, message: str = "") -> str:
    """
    Decode the trailing client identification field.

    A quoted field must close with an unescaped quote and nothing after it;
    inside, \\" and \\\\ are unescaped. An unquoted field is taken as-is.

    Args:
        raw: Remainder of the line after the last fixed field
        message: Full message, for error context

    Returns:
        The decoded user-agent string

    Raises:
        ParseError: If a quoted field is unterminated or has trailing data
    """
    raw = raw.rstrip()
    if not raw.startswith('"'):
        return raw

    chars = []
    index = 1
    while index < len(raw):
        char = raw[index]
        if char == "\\" and index + 1 < len(raw):
            following = raw[index + 1]
            if following in ('"', "\\"):
                chars.append(following)
            else:
                chars.append(char + following)
            index += 2
            continue
        if char == '"':
            if index != len(raw) - 1:
                raise ParseError(
                    "Unexpected data after quoted user agent", line_content=message
                )
            return "".join(chars)
        chars.append(char)
        index += 1

    raise ParseError("Unterminated quoted user agent", line_content=message)


def _parse_fields(values: dict[str, str], message: str) -> dict:
    """Validate each fixed field's shape and convert it."""
    fields: dict = {}

    timestamp = values.get("timestamp")
    if timestamp is not None and timestamp != NIL:
        try:
            fields["occurred_at"] = parse_timestamp(timestamp)
        except ValueError:
            raise ParseError(f"Invalid timestamp: {timestamp!r}", line_content=message)

    client_address = values.get("client_address", NIL)
    if client_address != NIL:
        try:
            ipaddress.ip_address(client_address)
        except ValueError:
            raise ParseError(
                f"Invalid client address: {client_address!r}", line_content=message
            )
    fields["client_address"] = _optional(client_address)

    method = values["method"]
    if method != NIL and not _METHOD_RE.match(method):
        raise ParseError(f"Invalid HTTP method: {method!r}", line_content=message)
    fields["method"] = _optional(method)

    path = values["request_path"]
    if path != NIL and not path.startswith("/"):
        raise ParseError(f"Invalid request path: {path!r}", line_content=message)
    fields["request_path"] = _optional(path)

    status = values["status_code"]
    if status != NIL and not _STATUS_RE.match(status):
        raise ParseError(f"Invalid status code: {status!r}", line_content=message)
    fields["status_code"] = int(status) if status != NIL else None

    bytes_sent = values["bytes_sent"]
    if bytes_sent != NIL and not _BYTES_RE.match(bytes_sent):
        raise ParseError(f"Invalid byte count: {bytes_sent!r}", line_content=message)
    fields["bytes_sent"] = int(bytes_sent) if bytes_sent != NIL else None

    for name in ("referrer", "tls_protocol", "tls_cipher"):
        fields[name] = _optional(values.get(name, NIL))

    return fields


def parse_event(
    message: str,
    default_timestamp: Optional[datetime] = None,
    ua_parser: Optional[UserAgentParser] = None,
) -> Event:
    """
    Parse a syslog message body into a download Event.

    Every fixed field is validated before the user agent is classified,
    so a malformed line is reported as ParseError even when its client
    would be ignored.

    Args:
        message: The envelope's message body
        default_timestamp: Timestamp used by the compact layout
            (normally the envelope timestamp)
        ua_parser: User-agent parser (default: the cached default parser)

    Returns:
        Event with package set when the path references a distribution

    Raises:
        ParseError: If a field violates its required shape
        IgnoredUserAgent: If the client is excluded traffic
        InvalidUserAgent: If the client string matches no grammar
    """
    head = message.split(None, 1)
    if head and head[0] in HTTP_METHODS:
        names = COMPACT_FIELDS
    else:
        names = FULL_FIELDS

    tokens = message.split(None, len(names))
    if len(tokens) == len(names) and message[-1:].isspace():
        # Separator present, client field empty
        tokens.append("")
    if len(tokens) <= len(names):
        raise ParseError(
            f"Expected {len(names) + 1} fields, got {len(tokens)}",
            line_content=message,
        )

    values = dict(zip(names, tokens))
    fields = _parse_fields(values, message)
    fields.setdefault("occurred_at", default_timestamp)

    user_agent = decode_user_agent(tokens[-1], message)
    client = parse_user_agent(user_agent, parser=ua_parser)

    return Event(
        client=client,
        package=package_from_path(fields["request_path"]),
        **fields,
    )
