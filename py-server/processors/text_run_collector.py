"""Text-Run Collector

Flattens the structural object model into positioned TextRuns, one list per
page. Pure transform: glyph strings are percent-decoded, whitespace-only
items are dropped, and the typographic record is mapped onto run style.
"""

import logging
from typing import List, Optional
from urllib.parse import unquote

from models.segment_types import ParsedDocument, ParsedPage, TextItem, TextRun

logger = logging.getLogger(__name__)

DEFAULT_FONT_SIZE = 12.0

# Typographic record layout: [fontFaceId, fontSize, bold, italic]
TS_FONT_SIZE = 1
TS_BOLD = 2
TS_ITALIC = 3


def decode_glyph_string(encoded: str) -> str:
    """Percent/URI-decode a glyph string as emitted by the structural parser."""
    return unquote(encoded)


def _typography_flag(typography: List[float], index: int) -> bool:
    return len(typography) > index and bool(typography[index])


def collect_item_run(item: TextItem, default_font_size: float = DEFAULT_FONT_SIZE) -> Optional[TextRun]:
    """
    Convert one text item into a TextRun, or None when it carries no text.

    Every glyph string of the item is decoded and concatenated; style comes
    from the first run's typographic record.
    """
    if not item.R:
        return None

    text = "".join(decode_glyph_string(run.T) for run in item.R)
    if not text.strip():
        return None

    typography = item.R[0].TS
    font_size = typography[TS_FONT_SIZE] if len(typography) > TS_FONT_SIZE else 0

    return TextRun(
        text=text,
        x=item.x,
        y=item.y,
        width=item.w or 0.0,
        fontSize=font_size or default_font_size,
        fontWeight="bold" if _typography_flag(typography, TS_BOLD) else "normal",
        fontStyle="italic" if _typography_flag(typography, TS_ITALIC) else "normal",
    )


def collect_page_runs(page: ParsedPage, default_font_size: float = DEFAULT_FONT_SIZE) -> List[TextRun]:
    """Collect the non-blank runs of one page in source emission order."""
    runs = []
    for item in page.texts:
        run = collect_item_run(item, default_font_size)
        if run is not None:
            runs.append(run)
    return runs


def collect_document_runs(document: ParsedDocument, default_font_size: float = DEFAULT_FONT_SIZE) -> List[List[TextRun]]:
    """Collect runs for every page; index i holds page i + 1."""
    pages_runs = [collect_page_runs(page, default_font_size) for page in document.pages]
    total_runs = sum(len(runs) for runs in pages_runs)
    logger.debug(f"Collected {total_runs} text runs from {len(pages_runs)} pages")
    return pages_runs
