"""
Shared file utilities for the ingestion module.

Decompresses gzip input and splits it into decoded text lines.
"""

import gzip
import logging
import zlib
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from .exceptions import DecompressionError

logger = logging.getLogger(__name__)


def read_decompressed(
    file: BinaryIO,
    source: Optional[str] = None,
) -> bytes:
    """
    Read and fully decompress a gzip stream.

    Args:
        file: Binary file handle positioned at the start of the gzip data
        source: Name of the input for error messages

    Returns:
        The decompressed bytes

    Raises:
        DecompressionError: If the container is corrupt or truncated
    """
    try:
        with gzip.GzipFile(fileobj=file, mode="rb") as gz:
            return gz.read()
    except (gzip.BadGzipFile, EOFError, zlib.error, OSError) as e:
        raise DecompressionError(
            "Could not decompress input",
            source=source or "<stream>",
            reason=str(e) or type(e).__name__,
        ) from e


def split_lines(
    data: bytes,
    log: Optional[logging.Logger] = None,
) -> Iterator[str]:
    """
    Split decompressed bytes on newlines and decode each line as UTF-8.

    Empty lines are discarded silently. Lines that are not valid UTF-8 are
    dropped with a warning carrying a lossy rendering of the bytes.

    Args:
        data: Decompressed content
        log: Logger receiving the invalid-line warnings (default: module logger)

    Yields:
        Non-empty decoded lines, in input order
    """
    for raw in data.split(b"\n"):
        if not raw:
            continue

        try:
            line = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            (log or logger).warning(
                "skipping invalid line",
                extra={
                    "context": {
                        "line": raw.decode("utf-8", errors="replace"),
                        "error": str(e),
                    }
                },
            )
            continue

        yield line


def open_file_checked(file_path: Union[str, Path]) -> BinaryIO:
    """
    Open an input file for binary reading.

    Args:
        file_path: Path to the gzip file

    Returns:
        Open binary file handle

    Raises:
        FileNotFoundError: If file doesn't exist
        PermissionError: If file cannot be read
    """
    path = Path(file_path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    return open(path, "rb")
