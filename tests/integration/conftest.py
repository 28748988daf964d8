"""
Fixtures for integration tests: gzip log files on disk.
"""

import pytest

from tests.conftest import ENVELOPE_HEADER, PIP_USER_AGENT_FIELD, gzip_bytes

SIMPLE_INDEX_LINE = f"{ENVELOPE_HEADER} GET /simple/foo/ 200 1024 - TLSv1.3 " + PIP_USER_AGENT_FIELD


def generate_lines(count: int) -> list[str]:
    """Generate download lines for distinct releases of one project."""
    return [
        f"{ENVELOPE_HEADER} GET /packages/source/f/foo/foo-1.{n}.tar.gz 200 {100 + n} "
        "- TLSv1.3 " + PIP_USER_AGENT_FIELD
        for n in range(count)
    ]


@pytest.fixture
def isolated_env(monkeypatch, tmp_path):
    """No linehaul environment settings and a clean working directory."""
    for name in ("LINEHAUL_LOG", "LINEHAUL_LOG_STYLE", "LINEHAUL_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def log_file(tmp_path, mixed_lines):
    """A gzip log file holding one line of each outcome plus blank lines."""
    path = tmp_path / "edge-1.log.gz"
    path.write_bytes(gzip_bytes("\n\n".join(mixed_lines) + "\n"))
    return path


@pytest.fixture
def corrupt_file(tmp_path):
    """A .gz file that is not gzip data."""
    path = tmp_path / "corrupt.log.gz"
    path.write_bytes(b"definitely not gzip")
    return path
