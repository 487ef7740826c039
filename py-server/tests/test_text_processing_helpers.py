# tests/test_text_processing_helpers.py
"""
Tests for processors.text_processing_helpers - character to run accumulation.
Character dicts follow pdfplumber's ``page.chars`` shape.
"""

from dataclasses import fields

from processors.text_processing_helpers import FontTable, StyledRun, TextRunAccumulator


def char(text, x0, top=100.0, size=12.0, fontname="Helvetica", color=(0,)):
    return {
        "text": text,
        "fontname": fontname,
        "size": size,
        "non_stroking_color": color,
        "x0": x0,
        "x1": x0 + size * 0.5,
        "top": top,
        "bottom": top + size,
    }


def accumulate(chars):
    accumulator = TextRunAccumulator()
    for c in chars:
        accumulator.process_char(c)
    return accumulator.finalize()


class TestTextRunAccumulator:
    """Tests for run boundaries"""

    def test_adjacent_chars_form_one_run(self):
        runs = accumulate([char("H", 10), char("i", 16)])
        assert [r.text for r in runs] == ["Hi"]
        assert runs[0].x0 == 10
        assert runs[0].x1 == 22

    def test_font_change_starts_new_run(self):
        runs = accumulate([char("A", 10), char("B", 16, fontname="Helvetica-Bold")])
        assert [(r.text, r.font_name) for r in runs] == [("A", "Helvetica"), ("B", "Helvetica-Bold")]

    def test_subset_tags_share_a_run(self):
        runs = accumulate([char("A", 10, fontname="ABCDEF+Lato"), char("B", 16, fontname="GHIJKL+Lato")])
        assert [(r.text, r.font_name) for r in runs] == [("AB", "Lato")]

    def test_baseline_change_starts_new_run(self):
        runs = accumulate([char("A", 10, top=100), char("B", 16, top=130)])
        assert [r.text for r in runs] == ["A", "B"]

    def test_word_gap_inserts_space(self):
        runs = accumulate([char("a", 10), char("b", 20)])
        assert [r.text for r in runs] == ["a b"]

    def test_column_jump_starts_new_run(self):
        runs = accumulate([char("a", 10), char("b", 200)])
        assert [r.text for r in runs] == ["a", "b"]

    def test_leading_whitespace_dropped(self):
        runs = accumulate([char(" ", 4), char("x", 10)])
        assert [r.text for r in runs] == ["x"]

    def test_incomplete_chars_ignored(self):
        runs = accumulate([{"text": "x"}, char("y", 10)])
        assert [r.text for r in runs] == ["y"]

    def test_finalize_resets(self):
        accumulator = TextRunAccumulator()
        accumulator.process_char(char("x", 10))
        assert len(accumulator.finalize()) == 1
        assert accumulator.finalize() == []

    def test_runs_keep_only_text_and_geometry(self):
        names = {f.name for f in fields(StyledRun)}
        assert names == {"text", "font_name", "font_size", "color", "x0", "top", "x1", "bottom"}


class TestFontTable:
    """Tests for fontFaceId assignment"""

    def test_ids_in_first_seen_order(self):
        table = FontTable()
        assert table.face_id("Helvetica") == 0
        assert table.face_id("Times-Roman") == 1
        assert table.face_id("Helvetica") == 0
        assert table.names == ["Helvetica", "Times-Roman"]
