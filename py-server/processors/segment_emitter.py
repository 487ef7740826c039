"""
Segment emission: turns grouped paragraphs into translation segments with
serialized geometry and style, and provides the page-concatenation fallback
used when grouping yields nothing.
"""

import logging
from typing import List, Optional

from engine.config import SegmentationOptions
from models.segment_types import ExtractedSegment, StyleData, TextRun
from processors.text_grouping import Paragraph

logger = logging.getLogger(__name__)


def build_style_data(anchor: TextRun, options: SegmentationOptions) -> StyleData:
    """Representative style of a paragraph: the anchor run plus fixed constants."""
    return StyleData(
        fontSize=anchor.fontSize,
        fontWeight=anchor.fontWeight,
        fontStyle=anchor.fontStyle,
        fontFamily=options.font_family,
        color=options.color,
        textAlign=options.text_align,
        lineHeight=options.line_height,
    )


class SegmentEmitter:
    """Emits ExtractedSegments for one document, page by page."""

    def __init__(self, options: Optional[SegmentationOptions] = None):
        self.options = options or SegmentationOptions()

    def emit_paragraph(self, paragraph: Paragraph, page_number: int) -> Optional[ExtractedSegment]:
        """Segment for one paragraph, or None when its trimmed text is empty."""
        text = paragraph.text
        if not text:
            return None

        return ExtractedSegment(
            text=text,
            pageNumber=page_number,
            positionData=paragraph.bounding_box.model_dump_json(),
            styleData=build_style_data(paragraph.anchor, self.options).model_dump_json(),
        )

    def emit_page(self, paragraphs: List[Paragraph], page_number: int) -> List[ExtractedSegment]:
        segments = []
        for paragraph in paragraphs:
            segment = self.emit_paragraph(paragraph, page_number)
            if segment is not None:
                segments.append(segment)
        return segments


def concatenate_pages(pages_runs: List[List[TextRun]]) -> List[ExtractedSegment]:
    """
    One segment per page holding all of its run texts, space-joined in
    emission order. No geometry or style is attached.
    """
    segments = []
    for page_index, runs in enumerate(pages_runs):
        text = " ".join(run.text for run in runs).strip()
        if text:
            segments.append(ExtractedSegment(text=text, pageNumber=page_index + 1))

    logger.debug(f"Page concatenation produced {len(segments)} segments")
    return segments
