"""
Package identification from request paths.

Two distribution path layouts are recognised:

    /packages/{python_version}/{letter}/{project}/{filename}
    /packages/{hh}/{hh}/{digest}/{filename}

The project name comes from the path when present, otherwise from the
filename. Paths that match neither layout, or files that are not
distributions (signatures, metadata), yield no package.
"""

import re
import urllib.parse
from typing import Optional

from .models import Package

_PROJECT_PATH_RE = re.compile(
    r"^/packages/(?P<python_version>[^/]+)/(?P<letter>[^/])/(?P<project>[^/]+)/(?P<filename>[^/]+)$"
)

_HASHED_PATH_RE = re.compile(
    r"^/packages/[0-9a-f]{2}/[0-9a-f]{2}/[0-9a-f]+/(?P<filename>[^/]+)$"
)

# Suffix -> distribution type. Checked in order, so ".tar.gz" wins over ".gz".
DISTRIBUTION_SUFFIXES = (
    (".whl", "bdist_wheel"),
    (".egg", "bdist_egg"),
    (".exe", "bdist_wininst"),
    (".msi", "bdist_msi"),
    (".dmg", "bdist_dmg"),
    (".rpm", "bdist_rpm"),
    (".tar.gz", "sdist"),
    (".tar.bz2", "sdist"),
    (".tar.xz", "sdist"),
    (".tar.Z", "sdist"),
    (".tgz", "sdist"),
    (".tar", "sdist"),
    (".zip", "sdist"),
)

# "foo-1.0.win32-py2.7" / "foo-1.0.win-amd64" -> "foo-1.0"
_WINDOWS_PLATFORM_RE = re.compile(r"\.(?:win32|win-amd64|win-arm64)(?:-py\d\.\d+)?$")

# "foo-1.0.noarch" -> "foo-1.0"
_RPM_ARCH_RE = re.compile(r"\.(?:noarch|src|i[3-6]86|x86_64|aarch64)$")

# Lazy name, version starts at the first "-<digit>"
_NAME_VERSION_RE = re.compile(r"^(?P<name>.+?)-(?P<version>\d.*)$")

# Types whose trailing "-segment"s are not part of the version
_TAGGED_TYPES = frozenset(["bdist_wheel", "bdist_egg", "bdist_dmg", "bdist_rpm"])


def normalize_project_name(name: str) -> str:
    """Normalize a project name for comparison (PEP 503)."""
    return re.sub(r"[-_.]+", "-", name).lower()


def distribution_type(filename: str) -> Optional[str]:
    """
    Determine the distribution type from a filename's suffix.

    Returns:
        Distribution type, or None if the file is not a distribution
    """
    for suffix, dist_type in DISTRIBUTION_SUFFIXES:
        if filename.endswith(suffix) and len(filename) > len(suffix):
            return dist_type
    return None


def _strip_suffix(filename: str) -> str:
    for suffix, _ in DISTRIBUTION_SUFFIXES:
        if filename.endswith(suffix):
            return filename[: -len(suffix)]
    return filename


def _clean_stem(stem: str, dist_type: str) -> str:
    if dist_type in ("bdist_wininst", "bdist_msi"):
        return _WINDOWS_PLATFORM_RE.sub("", stem)
    if dist_type == "bdist_rpm":
        return _RPM_ARCH_RE.sub("", stem)
    return stem


def _trim_version(version: str, dist_type: str) -> str:
    if dist_type in _TAGGED_TYPES:
        return version.split("-", 1)[0]
    return version


def parse_filename(
    filename: str,
    project: Optional[str] = None,
) -> Optional[Package]:
    """
    Identify a distribution file.

    Args:
        filename: Distribution file name (URL-decoded)
        project: Project name from the path, if the layout carries one

    Returns:
        Package, or None if the file is not a distribution

    Examples:
        >>> parse_filename("foo-1.2.3-py3-none-any.whl", "foo")
        Package(name='foo', version='1.2.3', filename='foo-1.2.3-py3-none-any.whl', type='bdist_wheel')
        >>> parse_filename("foo_bar-2.0.tar.gz").name
        'foo_bar'
    """
    dist_type = distribution_type(filename)
    if dist_type is None:
        return None

    stem = _clean_stem(_strip_suffix(filename), dist_type)

    if project is not None:
        prefix = stem[: len(project)]
        rest = stem[len(project) + 1 :]
        if (
            normalize_project_name(prefix) == normalize_project_name(project)
            and stem[len(project) : len(project) + 1] == "-"
            and rest
        ):
            version = _trim_version(rest, dist_type)
        else:
            match = _NAME_VERSION_RE.match(stem)
            version = _trim_version(match.group("version"), dist_type) if match else None
        return Package(name=project, version=version, filename=filename, type=dist_type)

    if dist_type in ("bdist_wheel", "bdist_egg"):
        # Name and version never contain "-" in these formats
        parts = stem.split("-")
        if len(parts) >= 2:
            return Package(
                name=parts[0], version=parts[1], filename=filename, type=dist_type
            )
        return Package(name=stem, version=None, filename=filename, type=dist_type)

    match = _NAME_VERSION_RE.match(stem)
    if match is None:
        return Package(name=stem, version=None, filename=filename, type=dist_type)

    return Package(
        name=match.group("name"),
        version=_trim_version(match.group("version"), dist_type),
        filename=filename,
        type=dist_type,
    )


def package_from_path(path: Optional[str]) -> Optional[Package]:
    """
    Derive the requested distribution from a request path.

    Query strings are ignored and path segments are URL-decoded.

    Args:
        path: Request path (e.g., "/packages/py3/f/foo/foo-1.0-py3-none-any.whl")

    Returns:
        Package, or None when the path does not reference a distribution
    """
    if not path:
        return None

    path = path.split("?", 1)[0]

    match = _PROJECT_PATH_RE.match(path)
    if match:
        project = urllib.parse.unquote(match.group("project"))
        filename = urllib.parse.unquote(match.group("filename"))
        return parse_filename(filename, project=project)

    match = _HASHED_PATH_RE.match(path)
    if match:
        return parse_filename(urllib.parse.unquote(match.group("filename")))

    return None
