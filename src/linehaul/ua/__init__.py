"""User-agent classification for download clients."""

from .matchers import (
    LiteralMatcher,
    Matcher,
    PatternMatcher,
    PrefixMatcher,
    SignatureRule,
    StructuredForm,
)
from .models import Distro, Implementation, Installer, LibC, System, UserAgent
from .parser import UserAgentParser, default_parser, parse_user_agent
from .rules import IGNORED_MATCHERS, SIGNATURE_RULES

__all__ = [
    # Models
    "UserAgent",
    "Installer",
    "Implementation",
    "System",
    "Distro",
    "LibC",
    # Matchers
    "Matcher",
    "LiteralMatcher",
    "PrefixMatcher",
    "PatternMatcher",
    "SignatureRule",
    "StructuredForm",
    # Default tables
    "IGNORED_MATCHERS",
    "SIGNATURE_RULES",
    # Parsing
    "UserAgentParser",
    "default_parser",
    "parse_user_agent",
]
