"""
Data models for decoded client metadata.

Every field is optional: old or minimal clients report little more than a
name/version pair.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Installer:
    """Tool that performed the download."""

    name: Optional[str] = None
    version: Optional[str] = None


@dataclass(frozen=True)
class Implementation:
    """Language runtime executing the installer."""

    name: Optional[str] = None
    version: Optional[str] = None


@dataclass(frozen=True)
class LibC:
    lib: Optional[str] = None
    version: Optional[str] = None


@dataclass(frozen=True)
class Distro:
    name: Optional[str] = None
    version: Optional[str] = None
    id: Optional[str] = None
    libc: Optional[LibC] = None


@dataclass(frozen=True)
class System:
    name: Optional[str] = None
    release: Optional[str] = None


@dataclass(frozen=True)
class UserAgent:
    """
    Structured metadata decoded from a client identification string.

    Attributes:
        installer: Installing tool name/version
        implementation: Runtime name/version
        system: Operating system name/release
        distro: Linux distribution details
        cpu: Machine architecture (e.g., "x86_64")
        ci: True when the client reported a CI environment
        python: Python version reported by the client
        tls_protocol: TLS protocol reported by the client library
        openssl_version: OpenSSL version string
        setuptools_version: setuptools version on the client
        rustc_version: rustc version on the client
    """

    installer: Optional[Installer] = None
    implementation: Optional[Implementation] = None
    system: Optional[System] = None
    distro: Optional[Distro] = None
    cpu: Optional[str] = None
    ci: bool = False
    python: Optional[str] = None
    tls_protocol: Optional[str] = None
    openssl_version: Optional[str] = None
    setuptools_version: Optional[str] = None
    rustc_version: Optional[str] = None

    def to_dict(self) -> dict:
        """
        Convert to dictionary representation.

        Nested records become dicts; absent records stay None.
        """
        return {
            "installer": _record_dict(self.installer),
            "implementation": _record_dict(self.implementation),
            "system": _record_dict(self.system),
            "distro": _distro_dict(self.distro),
            "cpu": self.cpu,
            "ci": self.ci,
            "python": self.python,
            "tls_protocol": self.tls_protocol,
            "openssl_version": self.openssl_version,
            "setuptools_version": self.setuptools_version,
            "rustc_version": self.rustc_version,
        }


def _record_dict(record) -> Optional[dict]:
    if record is None:
        return None
    return {name: getattr(record, name) for name in record.__dataclass_fields__}


def _distro_dict(distro: Optional[Distro]) -> Optional[dict]:
    if distro is None:
        return None
    return {
        "name": distro.name,
        "version": distro.version,
        "id": distro.id,
        "libc": _record_dict(distro.libc),
    }


# Field names accepted as named groups in signature patterns
CAPTURE_FIELDS = frozenset(
    [
        "installer_name",
        "installer_version",
        "implementation_name",
        "implementation_version",
        "system_name",
        "system_release",
        "distro_name",
        "distro_version",
        "cpu",
        "python",
    ]
)


def user_agent_from_captures(captures: dict[str, Optional[str]]) -> UserAgent:
    """
    Build a UserAgent from flat "record_field" captures.

    Records whose captures are all missing stay None.

    Args:
        captures: Mapping such as {"installer_name": "pip", "system_name": "Linux"}

    Returns:
        UserAgent populated from the captures present
    """
    unknown = set(captures) - CAPTURE_FIELDS
    if unknown:
        raise ValueError(f"Unknown capture fields: {', '.join(sorted(unknown))}")

    def pair(cls, prefix: str, first: str, second: str):
        a = captures.get(f"{prefix}_{first}")
        b = captures.get(f"{prefix}_{second}")
        if a is None and b is None:
            return None
        return cls(**{first: a, second: b})

    return UserAgent(
        installer=pair(Installer, "installer", "name", "version"),
        implementation=pair(Implementation, "implementation", "name", "version"),
        system=pair(System, "system", "name", "release"),
        distro=pair(Distro, "distro", "name", "version"),
        cpu=captures.get("cpu"),
        python=captures.get("python"),
    )
