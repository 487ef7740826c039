# tests/test_validation.py
"""
Tests for utils.validation - upload checks and read errors.
"""

import pytest

from utils.validation import (
    DocumentReadError,
    ResourceMonitor,
    detect_extension_type,
    ensure_readable,
    has_pdf_signature,
    read_document_bytes,
    validate_file_content,
)


class TestValidateFileContent:
    """Tests for validate_file_content"""

    def test_valid_pdf(self):
        assert validate_file_content(b"%PDF-1.7 ...", "pdf") == (True, None)

    def test_missing_signature_only_warns(self, caplog):
        assert validate_file_content(b"garbage", "pdf") == (True, None)
        assert "signature" in caplog.text

    def test_empty_upload(self):
        is_valid, error = validate_file_content(b"", "txt")
        assert not is_valid
        assert "empty" in error

    def test_too_large(self):
        is_valid, error = validate_file_content(b"x" * (2 * 1024 * 1024), "txt", max_size_mb=1)
        assert not is_valid
        assert "too large" in error


class TestReadErrors:
    """Tests for readable-path checks"""

    def test_missing_path(self, tmp_path):
        with pytest.raises(DocumentReadError) as exc:
            ensure_readable(str(tmp_path / "nope.pdf"))
        assert exc.value.reason == "file not found"

    def test_directory(self, tmp_path):
        with pytest.raises(DocumentReadError):
            read_document_bytes(str(tmp_path))

    def test_reads_bytes(self, write_bytes):
        assert read_document_bytes(write_bytes("a.txt", b"abc")) == b"abc"


class TestHelpers:
    """Tests for small helpers"""

    def test_signature(self):
        assert has_pdf_signature(b"%PDF-1.4")
        assert not has_pdf_signature(b"PK\x03\x04")

    def test_extension_type(self):
        assert detect_extension_type("a.TXT") == "txt"
        assert detect_extension_type("a.png") is None
        assert detect_extension_type(None) is None

    def test_resource_monitor_does_not_swallow(self):
        with pytest.raises(ValueError):
            with ResourceMonitor("test"):
                raise ValueError("boom")
