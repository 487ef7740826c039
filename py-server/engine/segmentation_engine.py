"""
Segmentation Engine - Core Coordinator

The SegmentationEngine turns one PDF into an ordered list of translation
segments. It owns the processors, bounds the structural parse with a
timeout and walks the fallback chain as an explicit state machine:

    STRUCTURAL_PARSE -> GEOMETRIC_GROUPING -> PAGE_CONCATENATION
        -> BYTE_LEVEL_SCAN -> PARAGRAPH_SPLIT | SENTENCE_SPLIT | WHOLE_BLOB | EMPTY

A failed parse (data error, exception or timeout) and a grouping exception
jump straight to BYTE_LEVEL_SCAN; every other tier hands over to the next
one when it produces no segments.

Usage:
    >>> from engine.segmentation_engine import SegmentationEngine
    >>> from engine.config import EngineConfig
    >>>
    >>> engine = SegmentationEngine(EngineConfig(parse_timeout_seconds=60))
    >>> segments = await engine.extract('document.pdf')
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from engine.base_processor import ProcessorRegistry
from engine.config import EngineConfig
from engine.fallback_processor import FallbackProcessor
from engine.layout_processor import LayoutProcessor
from models.segment_types import (
    ExtractedSegment,
    ExtractionResult,
    FallbackStage,
    ParseFailureKind,
)
from processors.structural_parser import ParseOutcome
from utils.validation import (
    PdfValidationError,
    ProcessingTimeoutError,
    ResourceMonitor,
    ensure_readable,
)

logger = logging.getLogger(__name__)


class SegmentationEngine:
    """
    Long-lived extraction component, built once per process.

    Concurrent extract() calls share only the immutable configuration and
    the stateless processors; each call owns its runs, lines and paragraphs.

    Example:
        >>> with SegmentationEngine() as engine:
        ...     result = engine.extract_sync('document.pdf')
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Args:
            config: Engine configuration (uses defaults if None)

        Raises:
            PdfValidationError: If configuration is invalid
        """
        self.config = config or EngineConfig.default()

        if not self.config.validate():
            raise PdfValidationError("Invalid engine configuration")

        self._processors = ProcessorRegistry()
        self._processors.register('layout', LayoutProcessor(self, self.config.get_segmentation_options()))
        self._processors.register('fallback', FallbackProcessor(self, self.config.get_fallback_options()))
        self._processors.initialize_all()

        logger.debug(f"SegmentationEngine initialized: {self.config!r}")

    def __enter__(self) -> 'SegmentationEngine':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        """Release processors. Idempotent."""
        self._processors.cleanup_all()

    # Public API - Extraction

    async def extract(self, file_path: str) -> List[ExtractedSegment]:
        """
        Extract segments from a PDF in reading order.

        Never raises for content problems; an empty list means nothing to
        translate.

        Raises:
            DocumentReadError: If the file is missing or unreadable
        """
        result = await self.extract_with_trace(file_path)
        return result.segments

    async def extract_with_trace(self, file_path: str) -> ExtractionResult:
        """
        Extract segments and record every fallback stage visited.

        Raises:
            DocumentReadError: If the file is missing or unreadable
        """
        ensure_readable(file_path)
        trace: List[FallbackStage] = []

        with ResourceMonitor(f"Extraction of {Path(file_path).name}"):
            segments = await self._run_layout_path(file_path, trace)
            if segments:
                return self._finish(segments, trace)

            stage = FallbackStage.BYTE_LEVEL_SCAN
            trace.append(stage)
            if not self.fallback_processor.enabled:
                logger.warning("Fallback extraction disabled, returning no segments")
                trace.append(FallbackStage.EMPTY)
                return self._finish([], trace)

            blob = await asyncio.to_thread(self.fallback_processor.scan, file_path)
            trace.append(blob.stage)
            return self._finish(blob.segments, trace)

    def extract_sync(self, file_path: str) -> List[ExtractedSegment]:
        """Blocking wrapper around extract() for callers without an event loop."""
        return asyncio.run(self.extract(file_path))

    # Structured path

    async def _run_layout_path(self, file_path: str, trace: List[FallbackStage]) -> List[ExtractedSegment]:
        """Structural parse, grouping and page concatenation; [] hands over to the byte-level scan."""
        layout = self.layout_processor
        if not layout.enabled:
            logger.info("Layout extraction disabled, using fallback")
            return []

        trace.append(FallbackStage.STRUCTURAL_PARSE)
        outcome = await self._parse_structure(file_path)
        if not outcome.succeeded:
            logger.warning(f"Structural parse failed ({outcome.failure_kind.value}), using fallback")
            return []

        document = outcome.document
        trace.append(FallbackStage.GEOMETRIC_GROUPING)
        try:
            pages_runs = layout.collect(document)
            segments = layout.emit_paragraphs(pages_runs)
        except Exception as e:
            logger.error(f"Error processing PDF data: {e}", exc_info=True)
            return []

        if segments:
            logger.info(f"Extracted {len(segments)} segments from PDF")
            return segments

        trace.append(FallbackStage.PAGE_CONCATENATION)
        logger.info("No paragraphs found, concatenating page text")
        return layout.concatenate(pages_runs)

    async def _parse_structure(self, file_path: str) -> ParseOutcome:
        """Run the blocking parser in a worker thread; expiry counts as a failed parse."""
        timeout = self.parse_timeout_seconds
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.layout_processor.parse, file_path),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            # The worker thread cannot be cancelled; its late result is discarded
            logger.error(f"Structural parse timed out after {timeout}s for {Path(file_path).name}")
            outcome = ParseOutcome()
            outcome.reject(
                ProcessingTimeoutError(f"Structural parse timed out after {timeout} seconds"),
                ParseFailureKind.TIMEOUT,
            )
            return outcome

    def _finish(self, segments: List[ExtractedSegment], trace: List[FallbackStage]) -> ExtractionResult:
        if not segments and trace[-1] != FallbackStage.EMPTY:
            trace.append(FallbackStage.EMPTY)
        stage = trace[-1]
        logger.info(f"Extraction finished at {stage.value} with {len(segments)} segments")
        return ExtractionResult(segments=segments, stage=stage, trace=trace)

    # Public API - Processor Access

    @property
    def parse_timeout_seconds(self) -> Optional[float]:
        """Layout processor override, else the engine-wide parse timeout."""
        override = self.layout_processor.options.timeout_seconds
        return override if override is not None else self.config.parse_timeout_seconds

    @property
    def layout_processor(self) -> LayoutProcessor:
        processor = self._processors.get('layout')
        if processor is None:
            raise RuntimeError("LayoutProcessor not registered")
        return processor

    @property
    def fallback_processor(self) -> FallbackProcessor:
        processor = self._processors.get('fallback')
        if processor is None:
            raise RuntimeError("FallbackProcessor not registered")
        return processor

    # Status and Debugging

    def get_status(self) -> Dict[str, Any]:
        return {
            'processors': self._processors.processor_names,
            'processors_ready': self._processors.validate_all(),
            'config': self.config.to_dict(),
        }

    def __repr__(self) -> str:
        return f"SegmentationEngine({self._processors.processor_names}, {self.config!r})"
