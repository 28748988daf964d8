"""
Unit tests for file_utils decompression and line splitting.

Tests cover:
- Gzip streams and files
- DecompressionError for corrupt or truncated containers
- Silent removal of empty lines
- Warning and skip for invalid UTF-8 lines
- FileNotFoundError handling
"""

import gzip
import io
import logging
from pathlib import Path

import pytest

from linehaul.ingestion import DecompressionError
from linehaul.ingestion.file_utils import open_file_checked, read_decompressed, split_lines


class TestReadDecompressed:
    """Tests for read_decompressed function."""

    def test_gzip_stream(self) -> None:
        """Test decompressing an in-memory stream."""
        data = read_decompressed(io.BytesIO(gzip.compress(b"line 1\nline 2\n")))
        assert data == b"line 1\nline 2\n"

    def test_empty_container(self) -> None:
        """Test a valid gzip container holding nothing."""
        assert read_decompressed(io.BytesIO(gzip.compress(b""))) == b""

    def test_not_gzip(self) -> None:
        """Test DecompressionError for content that is not gzip."""
        with pytest.raises(DecompressionError) as exc_info:
            read_decompressed(io.BytesIO(b"This is not gzip content"), source="edge.log.gz")

        assert exc_info.value.source == "edge.log.gz"
        assert "edge.log.gz" in str(exc_info.value)

    def test_truncated_container(self) -> None:
        """Test DecompressionError for a container cut off mid-stream."""
        compressed = gzip.compress(b"x" * 10000)

        with pytest.raises(DecompressionError) as exc_info:
            read_decompressed(io.BytesIO(compressed[: len(compressed) // 2]))

        assert exc_info.value.source == "<stream>"

    def test_corrupt_body(self) -> None:
        """Test DecompressionError when the deflate data is damaged."""
        compressed = bytearray(gzip.compress(b"hello world " * 100))
        for index in range(12, len(compressed) - 8):
            compressed[index] ^= 0xFF

        with pytest.raises(DecompressionError):
            read_decompressed(io.BytesIO(bytes(compressed)))


class TestSplitLines:
    """Tests for split_lines function."""

    def test_lines_in_order(self) -> None:
        assert list(split_lines(b"a\nb\nc")) == ["a", "b", "c"]

    def test_empty_lines_skipped_silently(self, caplog) -> None:
        """Test that blank lines produce neither output nor logs."""
        with caplog.at_level(logging.DEBUG):
            lines = list(split_lines(b"\na\n\n\nb\n"))

        assert lines == ["a", "b"]
        assert caplog.records == []

    def test_carriage_return_kept(self) -> None:
        """Test that only '\\n' separates lines."""
        assert list(split_lines(b"a\r\nb")) == ["a\r", "b"]

    def test_invalid_utf8_warns_and_skips(self, caplog) -> None:
        """Test that an undecodable line is dropped with one warning."""
        with caplog.at_level(logging.WARNING):
            lines = list(split_lines(b"good\nbad \xff\xfe line\nalso good"))

        assert lines == ["good", "also good"]
        assert len(caplog.records) == 1

        record = caplog.records[0]
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "skipping invalid line"
        assert record.context["line"] == "bad �� line"
        assert "utf-8" in record.context["error"]

    def test_injected_logger(self, caplog) -> None:
        """Test that warnings go to the given logger."""
        log = logging.getLogger("linehaul.tests.split")

        with caplog.at_level(logging.WARNING):
            list(split_lines(b"\xff", log=log))

        assert [record.name for record in caplog.records] == ["linehaul.tests.split"]

    def test_multibyte_characters(self) -> None:
        assert list(split_lines("naïve/1.0\n".encode("utf-8"))) == ["naïve/1.0"]


class TestOpenFileChecked:
    """Tests for open_file_checked function."""

    def test_opens_binary(self, tmp_path: Path) -> None:
        test_file = tmp_path / "edge.log.gz"
        test_file.write_bytes(gzip.compress(b"hello"))

        with open_file_checked(test_file) as f:
            assert read_decompressed(f) == b"hello"

    def test_file_not_found(self, tmp_path: Path) -> None:
        """Test FileNotFoundError for non-existent file."""
        non_existent = tmp_path / "does_not_exist.log.gz"

        with pytest.raises(FileNotFoundError) as exc_info:
            open_file_checked(non_existent)

        assert "File not found" in str(exc_info.value)
