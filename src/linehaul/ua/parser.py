"""
User-agent classification.

Decodes a raw client identification string into a UserAgent, or raises
one of the two drop outcomes:

    IgnoredUserAgent   traffic excluded on purpose (bots, probes)
    InvalidUserAgent   present but no known grammar accepts it

Alternatives are tried in a fixed order and the first match wins:
ignore table, structured payload, legacy signatures, then the fallback.
"""

import logging
from functools import lru_cache
from typing import Iterable, Optional, Sequence

from ..config.constants import NIL
from ..ingestion.exceptions import IgnoredUserAgent, InvalidUserAgent
from .matchers import Matcher, PatternMatcher, SignatureRule, StructuredForm
from .models import UserAgent
from .rules import IGNORED_MATCHERS, SIGNATURE_RULES

logger = logging.getLogger(__name__)


class UserAgentParser:
    """
    Ordered rule table for user-agent classification.

    Usage:
        parser = UserAgentParser(extra_ignored=[r"^my-monitor/"])
        ua = parser.parse('pip/23.0 {"installer":{"name":"pip","version":"23.0"}}')
        ua.installer.name  # 'pip'
    """

    def __init__(
        self,
        ignored: Optional[Sequence[Matcher]] = None,
        signatures: Optional[Sequence[SignatureRule]] = None,
        extra_ignored: Iterable[str] = (),
    ):
        """
        Initialize the parser.

        Args:
            ignored: Ignore matchers (default: rules.IGNORED_MATCHERS)
            signatures: Legacy grammars in priority order
                (default: rules.SIGNATURE_RULES)
            extra_ignored: Additional regex patterns to ignore, e.g. from
                configuration
        """
        self.ignored: list[Matcher] = list(
            IGNORED_MATCHERS if ignored is None else ignored
        )
        self.ignored.extend(PatternMatcher(pattern) for pattern in extra_ignored)
        self.signatures: list[SignatureRule] = list(
            SIGNATURE_RULES if signatures is None else signatures
        )
        self.structured = StructuredForm()

    def is_ignored(self, user_agent: str) -> bool:
        """Check the ignore table only."""
        return any(matcher.matches(user_agent) for matcher in self.ignored)

    def parse(self, user_agent: Optional[str]) -> UserAgent:
        """
        Classify a user-agent string.

        Args:
            user_agent: Raw client identification string

        Returns:
            Decoded UserAgent

        Raises:
            IgnoredUserAgent: If an ignore matcher accepts the string,
                however parseable it otherwise is
            InvalidUserAgent: If the string is empty or no grammar accepts it
        """
        if user_agent is None or not user_agent.strip() or user_agent == NIL:
            raise InvalidUserAgent(user_agent or "", reason="empty user agent")

        if self.is_ignored(user_agent):
            raise IgnoredUserAgent(user_agent)

        parsed = self.structured.parse(user_agent)
        if parsed is not None:
            return parsed
        # A corrupt payload must not be rescued by a loose legacy grammar
        if self.structured.looks_structured(user_agent):
            raise InvalidUserAgent(user_agent, reason="malformed structured payload")

        for rule in self.signatures:
            parsed = rule.parse(user_agent)
            if parsed is not None:
                return parsed

        raise InvalidUserAgent(user_agent, reason="no matching grammar")


@lru_cache(maxsize=None)
def default_parser(extra_ignored: tuple[str, ...] = ()) -> UserAgentParser:
    """
    Get the cached parser built from the default tables.

    Args:
        extra_ignored: Extra ignore patterns (a tuple, so it can be cached)
    """
    parser = UserAgentParser(extra_ignored=extra_ignored)
    logger.debug(
        f"Loaded user agent rules: {len(parser.ignored)} ignore matchers, "
        f"{len(parser.signatures)} signatures"
    )
    return parser


def parse_user_agent(
    user_agent: Optional[str],
    parser: Optional[UserAgentParser] = None,
) -> UserAgent:
    """
    Classify a user-agent string with the default (or a given) parser.

    See UserAgentParser.parse() for outcomes.
    """
    return (parser or default_parser()).parse(user_agent)
