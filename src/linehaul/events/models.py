"""
Data models for download events.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..ua.models import UserAgent


@dataclass(frozen=True)
class Package:
    """
    Distribution file identified from a request path.

    Attributes:
        name: Project name
        version: Release version
        filename: Distribution file name
        type: Distribution kind (e.g., 'bdist_wheel', 'sdist'), None if unknown
    """

    name: str
    version: Optional[str]
    filename: str
    type: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "version": self.version,
            "filename": self.filename,
            "type": self.type,
        }


@dataclass(frozen=True)
class Event:
    """
    One successfully classified download request.

    Request attributes are None when the log line carried the "-" token.
    package is None for requests that do not reference a distribution file;
    such events are still valid and callers may filter them out.
    """

    occurred_at: Optional[datetime]
    client_address: Optional[str]
    method: Optional[str]
    request_path: Optional[str]
    status_code: Optional[int]
    bytes_sent: Optional[int]
    referrer: Optional[str]
    tls_protocol: Optional[str]
    tls_cipher: Optional[str]
    client: UserAgent
    package: Optional[Package] = None

    @property
    def is_download(self) -> bool:
        """True when the request references a distribution file."""
        return self.package is not None

    def to_dict(self) -> dict:
        """
        Convert to a JSON-serializable dictionary.

        Returns:
            Dictionary with nested package and client records
        """
        return {
            "occurred_at": self.occurred_at.isoformat() if self.occurred_at else None,
            "client_address": self.client_address,
            "method": self.method,
            "request_path": self.request_path,
            "status_code": self.status_code,
            "bytes_sent": self.bytes_sent,
            "referrer": self.referrer,
            "tls_protocol": self.tls_protocol,
            "tls_cipher": self.tls_cipher,
            "package": self.package.to_dict() if self.package else None,
            "client": self.client.to_dict(),
        }

    @classmethod
    def from_message(
        cls,
        message: str,
        default_timestamp: Optional[datetime] = None,
    ) -> "Event":
        """Parse an event from a syslog message body. See parse_event()."""
        from .parser import parse_event

        return parse_event(message, default_timestamp=default_timestamp)
