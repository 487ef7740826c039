"""Layout Processor for SegmentationEngine

Structured path of the extraction pipeline: structural parse, text-run
collection, line/paragraph grouping and segment emission, plus the
page-concatenation fallback for documents that group into nothing.
"""

import logging
from typing import List, Optional, TYPE_CHECKING

from engine.base_processor import BaseProcessor
from engine.config import SegmentationOptions
from models.segment_types import ExtractedSegment, ParsedDocument, TextRun
from processors.segment_emitter import SegmentEmitter, concatenate_pages
from processors.structural_parser import ParseOutcome, StructuralPdfParser
from processors.text_grouping import group_text_runs
from processors.text_run_collector import collect_document_runs

if TYPE_CHECKING:
    from engine.segmentation_engine import SegmentationEngine

logger = logging.getLogger(__name__)


class LayoutProcessor(BaseProcessor):
    """
    Geometric segmentation processor.

    parse() is blocking and is run off the event loop by the engine; the
    remaining steps are pure transforms over one call's own buffers.
    """

    def __init__(self, engine: 'SegmentationEngine', options: Optional[SegmentationOptions] = None):
        super().__init__(engine)
        self.options = options or SegmentationOptions()
        self.parser: Optional[StructuralPdfParser] = None
        self.emitter: Optional[SegmentEmitter] = None

    def initialize(self) -> None:
        """Create the parser and emitter from engine configuration"""
        self.parser = StructuralPdfParser(self.engine.config.points_per_page_unit)
        self.emitter = SegmentEmitter(self.options)
        super().initialize()

    def cleanup(self) -> None:
        self.parser = None
        self.emitter = None
        super().cleanup()

    @property
    def enabled(self) -> bool:
        return self.options.enabled

    def parse(self, file_path: str) -> ParseOutcome:
        return self.parser.parse(file_path)

    def collect(self, document: ParsedDocument) -> List[List[TextRun]]:
        return collect_document_runs(document, self.options.default_font_size)

    def emit_paragraphs(self, pages_runs: List[List[TextRun]]) -> List[ExtractedSegment]:
        """Group every page and emit one segment per non-empty paragraph, page by page."""
        segments: List[ExtractedSegment] = []
        for page_index, runs in enumerate(pages_runs):
            paragraphs = group_text_runs(runs, self.options)
            page_segments = self.emitter.emit_page(paragraphs, page_index + 1)
            logger.debug(f"Page {page_index + 1}: {len(page_segments)} segments")
            segments.extend(page_segments)
        return segments

    def concatenate(self, pages_runs: List[List[TextRun]]) -> List[ExtractedSegment]:
        return concatenate_pages(pages_runs)
