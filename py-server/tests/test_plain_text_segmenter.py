# tests/test_plain_text_segmenter.py
"""
Tests for processors.plain_text_segmenter.
"""

from processors.plain_text_segmenter import segment_plain_text, segment_text_file


class TestPlainTextSegmenter:
    """Tests for blank-line splitting"""

    def test_two_blocks(self):
        segments = segment_plain_text("First block\nstill first\n\nSecond block")
        assert [s.text for s in segments] == ["First block\nstill first", "Second block"]
        assert all(s.pageNumber == 1 for s in segments)
        assert all(s.positionData is None and s.styleData is None for s in segments)

    def test_runs_of_newlines_and_crlf(self):
        segments = segment_plain_text("a\r\n\r\n\r\nb\n\n\n\nc")
        assert [s.text for s in segments] == ["a", "b", "c"]

    def test_whitespace_blocks_dropped(self):
        assert [s.text for s in segment_plain_text("\n\n  \n\nx\n\n")] == ["x"]

    def test_empty_text(self):
        assert segment_plain_text("") == []

    def test_file_with_invalid_utf8(self, write_bytes):
        path = write_bytes("notes.txt", b"caf\xe9\n\nok")
        segments = segment_text_file(path)
        assert [s.text for s in segments] == ["caf\ufffd", "ok"]
