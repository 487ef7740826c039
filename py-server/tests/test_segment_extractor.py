# tests/test_segment_extractor.py
"""
Tests for extractors.segment_extractor - type dispatch and persistence rows.
"""

import uuid

import pytest

from engine.segmentation_engine import SegmentationEngine
from extractors.segment_extractor import build_segment_rows, detect_file_type, extract_segments
from models.segment_types import ExtractedSegment


@pytest.fixture
def engine():
    with SegmentationEngine() as segmentation_engine:
        yield segmentation_engine


class TestDetectFileType:
    """Tests for extension-based type detection"""

    @pytest.mark.parametrize("name,expected", [
        ("report.pdf", "pdf"),
        ("REPORT.PDF", "pdf"),
        ("notes.txt", "txt"),
        ("letter.docx", "docx"),
    ])
    def test_known_types(self, name, expected):
        assert detect_file_type(name) == expected

    @pytest.mark.parametrize("name", ["notes.md", "README", "data.csv"])
    def test_unknown_type_is_plain_text(self, name):
        assert detect_file_type(name) == "txt"


class TestExtractSegments:
    """Tests for extract_segments dispatch"""

    @pytest.mark.asyncio
    async def test_pdf_goes_through_engine(self, engine, make_pdf):
        segments = await extract_segments(make_pdf([[(72, 720, "Hello")]]), engine)
        assert [s.text for s in segments] == ["Hello"]
        assert segments[0].positionData is not None

    @pytest.mark.asyncio
    async def test_text_file_split_on_blank_lines(self, engine, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("First block\n\nSecond block", encoding="utf-8")

        segments = await extract_segments(str(path), engine)

        assert [s.text for s in segments] == ["First block", "Second block"]
        assert all(s.pageNumber == 1 and s.positionData is None for s in segments)

    @pytest.mark.asyncio
    async def test_explicit_type_overrides_extension(self, engine, tmp_path):
        path = tmp_path / "upload.bin"
        path.write_text("only block", encoding="utf-8")
        segments = await extract_segments(str(path), engine, file_type="txt")
        assert [s.text for s in segments] == ["only block"]

    @pytest.mark.asyncio
    async def test_markdown_file_split_on_blank_lines(self, engine, tmp_path):
        path = tmp_path / "notes.md"
        path.write_text("First block\n\nSecond block", encoding="utf-8")

        segments = await extract_segments(str(path), engine)

        assert [s.text for s in segments] == ["First block", "Second block"]
        assert [s.pageNumber for s in segments] == [1, 1]

    @pytest.mark.asyncio
    async def test_docx_yields_no_segments(self, engine, tmp_path):
        path = tmp_path / "letter.docx"
        path.write_bytes(b"PK\x03\x04")
        assert await extract_segments(str(path), engine) == []


class TestBuildSegmentRows:
    """Tests for persistence row construction"""

    def test_rows_follow_segment_order(self):
        segments = [
            ExtractedSegment(text="a", pageNumber=1, positionData='{"x":1.0}', styleData='{"fontSize":12.0}'),
            ExtractedSegment(text="b", pageNumber=2),
        ]
        rows = build_segment_rows("doc-1", segments)

        assert [row.index for row in rows] == [0, 1]
        assert [row.sourceText for row in rows] == ["a", "b"]
        assert [row.pageNumber for row in rows] == [1, 2]
        assert all(row.documentId == "doc-1" for row in rows)
        assert rows[0].positionData == '{"x":1.0}'
        assert rows[1].positionData is None
        assert rows[1].styleData is None

    def test_fresh_uuid_per_row(self):
        rows = build_segment_rows("doc", [ExtractedSegment(text="x")] * 3)
        ids = [row.id for row in rows]
        assert len(set(ids)) == 3
        for row_id in ids:
            assert uuid.UUID(row_id).version == 4

    def test_empty_string_payload_stored_as_none(self):
        rows = build_segment_rows("doc", [ExtractedSegment(text="x", positionData="", styleData="")])
        assert rows[0].positionData is None
        assert rows[0].styleData is None

    def test_no_segments(self):
        assert build_segment_rows("doc", []) == []
