"""
Shared fixtures and sample log lines.
"""

import gzip
import io
import logging

import pytest

from linehaul.config.settings import clear_settings_cache

# pip's structured user agent, as escaped inside the quoted log field
PIP_USER_AGENT_FIELD = (
    r'"pip/23.0 {\"installer\":{\"name\":\"pip\",\"version\":\"23.0\"},'
    r'\"python\":\"3.11.1\"}"'
)

ENVELOPE_HEADER = "<134>1 2023-01-01T00:00:00Z edge-1 cdn - -"

DOWNLOAD_MESSAGE = (
    "GET /packages/py3/f/foo/foo-1.2.3-py3-none-any.whl 200 4096 - TLSv1.3 "
    + PIP_USER_AGENT_FIELD
)

DOWNLOAD_LINE = f"{ENVELOPE_HEADER} {DOWNLOAD_MESSAGE}"

BOT_LINE = (
    f"{ENVELOPE_HEADER} GET /packages/py3/f/foo/foo-1.2.3-py3-none-any.whl "
    '200 4096 - TLSv1.3 "GoogleBot/2.1"'
)

BAD_STATUS_LINE = (
    f"{ENVELOPE_HEADER} GET /packages/py3/f/foo/foo-1.2.3-py3-none-any.whl "
    "OK 4096 - TLSv1.3 " + PIP_USER_AGENT_FIELD
)

INVALID_UA_LINE = (
    f"{ENVELOPE_HEADER} GET /packages/py3/f/foo/foo-1.2.3-py3-none-any.whl "
    '200 4096 - TLSv1.3 "definitely not a client"'
)

BAD_PRIORITY_LINE = "<abc>1 2023-01-01T00:00:00Z edge-1 cdn - - GET / 200 0 - - -"


def gzip_bytes(text: str) -> bytes:
    """Compress text the way the CDN delivers log files."""
    return gzip.compress(text.encode("utf-8"))


@pytest.fixture
def download_line() -> str:
    return DOWNLOAD_LINE


@pytest.fixture
def mixed_lines() -> list[str]:
    """One of each outcome: event, ignored, Error, invalid, bad envelope."""
    return [DOWNLOAD_LINE, BOT_LINE, BAD_STATUS_LINE, INVALID_UA_LINE, BAD_PRIORITY_LINE]


@pytest.fixture
def gzip_stream(mixed_lines):
    """A gzip stream holding mixed_lines with blank lines between them."""
    return io.BytesIO(gzip_bytes("\n\n".join(mixed_lines) + "\n"))


@pytest.fixture
def capture_logger() -> logging.Logger:
    """Logger injected into the pipeline, capturing everything down to TRACE."""
    logger = logging.getLogger("linehaul.tests.capture")
    logger.setLevel(1)
    return logger


@pytest.fixture(autouse=True)
def reset_settings():
    """Settings are cached per process; start every test clean."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo configure_logging() so handlers and levels don't leak between tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    known = {
        name: logger.level
        for name, logger in logging.Logger.manager.loggerDict.items()
        if isinstance(logger, logging.Logger)
    }
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)
    for name, logger in logging.Logger.manager.loggerDict.items():
        if isinstance(logger, logging.Logger):
            logger.setLevel(known.get(name, logging.NOTSET))
