"""
Custom exceptions for the ingestion module.

Per-line outcomes (ParseError, IgnoredUserAgent, InvalidUserAgent) are
raised inside the parsing stages and handled by the pipeline driver, which
turns each into a dropped line plus one log record. DecompressionError is
the only one that escapes a whole invocation.
"""

from ..config.constants import MAX_ERROR_CONTENT_LENGTH


def _truncate(content: str) -> str:
    """Truncate long lines for readability."""
    if len(content) > MAX_ERROR_CONTENT_LENGTH:
        return content[:MAX_ERROR_CONTENT_LENGTH] + "..."
    return content


class LinehaulError(Exception):
    """
    Base exception for all ingestion-related errors.

    All other ingestion exceptions inherit from this class,
    allowing for broad exception catching when needed.
    """

    pass


class ParseError(LinehaulError):
    """
    Raised when a syslog envelope or event line is malformed.

    Attributes:
        line_content: The content of the problematic line (optional)
        message: Detailed error message
    """

    def __init__(self, message: str, line_content: str | None = None):
        self.line_content = line_content
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with line context."""
        if self.line_content:
            return f"{self.message} ({_truncate(self.line_content)!r})"
        return self.message


class UserAgentError(LinehaulError):
    """
    Base class for user-agent classification drops.

    Attributes:
        user_agent: The raw client identification string
        reason: Why the user agent was dropped (optional)
    """

    def __init__(self, user_agent: str, reason: str | None = None):
        self.user_agent = user_agent
        self.reason = reason
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        label = type(self).__name__
        if self.reason:
            return f"{label}: {_truncate(self.user_agent)!r} - {self.reason}"
        return f"{label}: {_truncate(self.user_agent)!r}"


class IgnoredUserAgent(UserAgentError):
    """Raised for traffic intentionally excluded (monitors, health checks, bots)."""

    pass


class InvalidUserAgent(UserAgentError):
    """Raised when a user agent is present but no known grammar accepts it."""

    pass


class DecompressionError(LinehaulError):
    """
    Raised when the compressed input cannot be read.

    Fatal for the whole invocation.

    Attributes:
        source: Name of the input (file path or "<stream>")
        reason: Underlying error text
    """

    def __init__(self, message: str, source: str | None = None, reason: str | None = None):
        self.source = source
        self.reason = reason
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [self.message]
        if self.source:
            parts.append(f"source='{self.source}'")
        if self.reason:
            parts.append(f"reason: {self.reason}")
        return " - ".join(parts)
