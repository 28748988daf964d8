"""
Matchers for user-agent classification.

Three families, all tried against the whole client identification string:

- Ignore matchers (LiteralMatcher, PrefixMatcher, PatternMatcher) answer
  "is this traffic we deliberately exclude?"
- StructuredForm decodes "name/version {json}" payloads.
- SignatureRule decodes one legacy "name/version [tokens...]" grammar.
"""

import json
import re
from abc import ABC, abstractmethod
from typing import Any, Optional

from .models import (
    Distro,
    Implementation,
    Installer,
    LibC,
    System,
    UserAgent,
    user_agent_from_captures,
)


class Matcher(ABC):
    """Predicate over a raw user-agent string."""

    @abstractmethod
    def matches(self, user_agent: str) -> bool:
        pass


class LiteralMatcher(Matcher):
    """Matches the whole string, case-insensitively by default."""

    def __init__(self, value: str, case_sensitive: bool = False):
        self.value = value
        self.case_sensitive = case_sensitive
        self._needle = value if case_sensitive else value.lower()

    def matches(self, user_agent: str) -> bool:
        candidate = user_agent.strip()
        if not self.case_sensitive:
            candidate = candidate.lower()
        return candidate == self._needle

    def __repr__(self) -> str:
        return f"LiteralMatcher({self.value!r})"


class PrefixMatcher(Matcher):
    """Matches strings starting with a prefix, case-insensitively."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self._needle = prefix.lower()

    def matches(self, user_agent: str) -> bool:
        return user_agent.lower().startswith(self._needle)

    def __repr__(self) -> str:
        return f"PrefixMatcher({self.prefix!r})"


class PatternMatcher(Matcher):
    """Matches when a regex is found anywhere in the string."""

    def __init__(self, pattern: str, flags: int = re.IGNORECASE):
        self.pattern = pattern
        self._regex = re.compile(pattern, flags)

    def matches(self, user_agent: str) -> bool:
        return self._regex.search(user_agent) is not None

    def __repr__(self) -> str:
        return f"PatternMatcher({self.pattern!r})"


class SignatureRule:
    """
    One legacy client grammar.

    The pattern must match the whole string. Named groups map onto
    UserAgent fields (see models.CAPTURE_FIELDS); fixed values fill fields
    the tool implies but does not print, such as the installer name.

    Example:
        SignatureRule(
            "pex",
            r"pex/(?P<installer_version>\\S+)",
            installer_name="pex",
        )
    """

    def __init__(self, name: str, pattern: str, **fixed: str):
        self.name = name
        self.pattern = pattern
        self.fixed = fixed
        self._regex = re.compile(pattern)
        # Fail at table load time rather than on the first matching line
        user_agent_from_captures({group: None for group in self._regex.groupindex})
        user_agent_from_captures(dict(fixed))

    def parse(self, user_agent: str) -> Optional[UserAgent]:
        """
        Decode the user agent if this rule's grammar accepts it.

        Returns:
            UserAgent, or None when the pattern does not match
        """
        match = self._regex.fullmatch(user_agent)
        if match is None:
            return None

        captures = dict(self.fixed)
        for group, value in match.groupdict().items():
            if value is not None:
                captures[group] = value
        return user_agent_from_captures(captures)

    def __repr__(self) -> str:
        return f"SignatureRule({self.name!r})"


class MalformedPayload(ValueError):
    """A structured payload has a known key with the wrong type."""


_STRUCTURED_RE = re.compile(
    r"(?P<name>[A-Za-z][\w.+-]*)/(?P<version>\S+) (?P<payload>\{.*\})", re.DOTALL
)

# "name/version {" with anything after: a payload was attempted, well-formed or not
_STRUCTURED_SHAPE_RE = re.compile(r"[A-Za-z][\w.+-]*/\S+ \{")


def _string(data: dict, key: str) -> Optional[str]:
    value = data.get(key)
    if value is None or isinstance(value, str):
        return value
    raise MalformedPayload(f"{key} must be a string, got {type(value).__name__}")


def _section(data: dict, key: str) -> Optional[dict]:
    value = data.get(key)
    if value is None or isinstance(value, dict):
        return value
    raise MalformedPayload(f"{key} must be an object, got {type(value).__name__}")


class StructuredForm:
    """
    Decoder for self-describing client payloads.

    Modern installers send "name/version {json}", e.g.:

        pip/23.0 {"installer":{"name":"pip","version":"23.0"},
                  "implementation":{"name":"CPython","version":"3.11.1"},
                  "system":{"name":"Linux","release":"6.1.0"},
                  "cpu":"x86_64","ci":null,"python":"3.11.1"}

    Unknown keys are ignored; absent keys leave fields empty.
    """

    def looks_structured(self, user_agent: str) -> bool:
        """True when the string carries a payload, even a corrupt one."""
        return _STRUCTURED_SHAPE_RE.match(user_agent.strip()) is not None

    def parse(self, user_agent: str) -> Optional[UserAgent]:
        """
        Decode a structured user agent.

        Returns:
            UserAgent, or None when no well-formed payload is present
        """
        match = _STRUCTURED_RE.fullmatch(user_agent.strip())
        if match is None:
            return None

        try:
            data = json.loads(match.group("payload"))
        except (ValueError, RecursionError):
            # RecursionError: pathologically nested payloads
            return None
        if not isinstance(data, dict):
            return None

        try:
            return self._from_payload(data, match.group("name"), match.group("version"))
        except MalformedPayload:
            return None

    def _from_payload(self, data: dict[str, Any], name: str, version: str) -> UserAgent:
        installer_data = _section(data, "installer")
        if installer_data is not None:
            installer = Installer(
                name=_string(installer_data, "name"),
                version=_string(installer_data, "version"),
            )
        else:
            installer = Installer(name=name, version=version)

        python = _string(data, "python")

        implementation = None
        implementation_data = _section(data, "implementation")
        if implementation_data is not None:
            implementation = Implementation(
                name=_string(implementation_data, "name"),
                version=_string(implementation_data, "version") or python,
            )
        elif python is not None:
            implementation = Implementation(version=python)

        system = None
        system_data = _section(data, "system")
        if system_data is not None:
            system = System(
                name=_string(system_data, "name"),
                release=_string(system_data, "release"),
            )

        distro = None
        distro_data = _section(data, "distro")
        if distro_data is not None:
            libc_data = _section(distro_data, "libc")
            distro = Distro(
                name=_string(distro_data, "name"),
                version=_string(distro_data, "version"),
                id=_string(distro_data, "id"),
                libc=(
                    LibC(
                        lib=_string(libc_data, "lib"),
                        version=_string(libc_data, "version"),
                    )
                    if libc_data is not None
                    else None
                ),
            )

        ci = data.get("ci")
        if ci is not None and not isinstance(ci, bool):
            raise MalformedPayload(f"ci must be a boolean, got {type(ci).__name__}")

        return UserAgent(
            installer=installer,
            implementation=implementation,
            system=system,
            distro=distro,
            cpu=_string(data, "cpu"),
            ci=bool(ci),
            python=python,
            tls_protocol=_string(data, "tls_protocol"),
            openssl_version=_string(data, "openssl_version"),
            setuptools_version=_string(data, "setuptools_version"),
            rustc_version=_string(data, "rustc_version"),
        )
