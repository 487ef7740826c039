# tests/test_raw_stream_scanner.py
"""
Tests for processors.raw_stream_scanner - byte-level fallback extraction.
"""

import zlib

import pytest

from engine.config import FallbackOptions
from models.segment_types import FallbackStage
from processors.raw_stream_scanner import (
    RawStreamScanner,
    decompress_flate,
    segment_blob,
    unescape_pdf_string,
)
from utils.validation import DocumentReadError


# =============================================================================
# Tests: Literal String Unescaping
# =============================================================================

class TestUnescape:
    """Tests for unescape_pdf_string"""

    def test_control_escapes(self):
        assert unescape_pdf_string(r"a\nb\rc\td") == "a\nb\rc\td"

    def test_parentheses(self):
        assert unescape_pdf_string(r"f\(x\)") == "f(x)"

    def test_octal(self):
        assert unescape_pdf_string(r"\101\102") == "AB"

    def test_escaped_backslash_is_not_reinterpreted(self):
        assert unescape_pdf_string(r"C:\\new") == "C:\\new"

    def test_unknown_escape_kept(self):
        assert unescape_pdf_string(r"\q") == r"\q"


# =============================================================================
# Tests: Fragment Extraction
# =============================================================================

class TestExtractFragments:
    """Tests for RawStreamScanner.extract_fragments"""

    def test_show_text_operators(self):
        content = b"1 0 obj\nstream\nBT (Hello) Tj ET\nBT (World) Tj ET\nendstream\nendobj"
        assert RawStreamScanner().extract_fragments(content) == ["Hello", "World"]

    def test_show_text_array_drops_kerning(self):
        content = b"stream\nBT [(Wor) -120 (ld)] TJ ET\nendstream"
        assert RawStreamScanner().extract_fragments(content) == ["World"]

    def test_array_without_strings_keeps_raw_content(self):
        content = b"stream\n[<48656c6c6f>] TJ\nendstream"
        assert RawStreamScanner().extract_fragments(content) == ["<48656c6c6f>"]

    def test_escaped_parenthesis_inside_literal(self):
        content = b"stream\n(f\\(x\\) = 1) Tj\nendstream"
        assert RawStreamScanner().extract_fragments(content) == ["f(x) = 1"]

    def test_blank_fragments_skipped(self):
        content = b"stream\n(   ) Tj (Text) Tj\nendstream"
        assert RawStreamScanner().extract_fragments(content) == ["Text"]

    def test_operators_outside_streams_ignored(self):
        assert RawStreamScanner().extract_fragments(b"(Loose) Tj") == []

    def test_compressed_stream_inflated(self):
        content = b"stream\n" + zlib.compress(b"BT (Packed) Tj ET") + b"\nendstream"
        assert RawStreamScanner().extract_fragments(content) == ["Packed"]

    def test_inflate_can_be_disabled(self):
        content = b"stream\n" + zlib.compress(b"BT (Packed) Tj ET") + b"\nendstream"
        scanner = RawStreamScanner(FallbackOptions(inflate_streams=False))
        assert scanner.extract_fragments(content) == []

    def test_oversized_region_not_inflated(self):
        content = b"stream\n" + zlib.compress(b"BT (Packed) Tj ET") + b"\nendstream"
        scanner = RawStreamScanner(FallbackOptions(max_stream_bytes=4))
        assert scanner.extract_fragments(content) == []


class TestDecompressFlate:
    """Tests for decompress_flate framings"""

    def test_zlib(self):
        assert decompress_flate(zlib.compress(b"data")) == b"data"

    def test_raw_deflate(self):
        compressor = zlib.compressobj(wbits=-15)
        raw = compressor.compress(b"data") + compressor.flush()
        assert decompress_flate(raw) == b"data"

    def test_leading_junk_byte(self):
        assert decompress_flate(b"\x00" + zlib.compress(b"data")) == b"data"

    def test_not_compressed(self):
        assert decompress_flate(b"\x00" * 8) is None

    def test_empty(self):
        assert decompress_flate(b"") is None


# =============================================================================
# Tests: Blob Segmentation
# =============================================================================

class TestSegmentBlob:
    """Tests for segment_blob tiers"""

    def test_blank_line_paragraphs(self):
        result = segment_blob("First para.\n\nSecond para.")
        assert result.stage == FallbackStage.PARAGRAPH_SPLIT
        assert [s.text for s in result.segments] == ["First para.", "Second para."]

    def test_crlf_blank_line(self):
        result = segment_blob("One\r\n\r\nTwo")
        assert [s.text for s in result.segments] == ["One", "Two"]

    def test_sentences_without_blank_lines(self):
        result = segment_blob("One. Two! Three? Four")
        assert result.stage == FallbackStage.SENTENCE_SPLIT
        assert [s.text for s in result.segments] == ["One.", "Two!", "Three?", "Four"]

    def test_whole_blob(self):
        result = segment_blob("no boundary at all")
        assert result.stage == FallbackStage.WHOLE_BLOB
        assert [s.text for s in result.segments] == ["no boundary at all"]

    def test_empty_blob(self):
        result = segment_blob("  \n ")
        assert result.stage == FallbackStage.EMPTY
        assert result.segments == []

    def test_segments_on_page_one_without_payloads(self):
        result = segment_blob("A. B.")
        assert all(s.pageNumber == 1 for s in result.segments)
        assert all(s.positionData is None and s.styleData is None for s in result.segments)


# =============================================================================
# Tests: File Scanning
# =============================================================================

class TestScanFile:
    """Tests for RawStreamScanner.scan_file"""

    def test_recovers_text_from_file(self, write_bytes):
        path = write_bytes("broken.pdf", b"%PDF-1.4\nstream\n(Hello) Tj\nendstream\n")
        result = RawStreamScanner().scan_file(path)
        assert [s.text for s in result.segments] == ["Hello"]

    def test_blank_lines_inside_literals_split_paragraphs(self, write_bytes):
        path = write_bytes("broken.pdf", b"stream\n(Para one\\n\\nPara two) Tj\nendstream")
        result = RawStreamScanner().scan_file(path)
        assert result.stage == FallbackStage.PARAGRAPH_SPLIT
        assert [s.text for s in result.segments] == ["Para one", "Para two"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentReadError):
            RawStreamScanner().scan_file(str(tmp_path / "missing.pdf"))
