"""Fallback Processor for SegmentationEngine

Byte-level recovery used when the structured path yields nothing.
"""

import logging
from typing import Optional, TYPE_CHECKING

from engine.base_processor import BaseProcessor
from engine.config import FallbackOptions
from processors.raw_stream_scanner import BlobSegmentation, RawStreamScanner

if TYPE_CHECKING:
    from engine.segmentation_engine import SegmentationEngine

logger = logging.getLogger(__name__)


class FallbackProcessor(BaseProcessor):
    """Wraps the raw stream scanner with engine configuration"""

    def __init__(self, engine: 'SegmentationEngine', options: Optional[FallbackOptions] = None):
        super().__init__(engine)
        self.options = options or FallbackOptions()
        self.scanner: Optional[RawStreamScanner] = None

    def initialize(self) -> None:
        self.scanner = RawStreamScanner(self.options)
        super().initialize()

    def cleanup(self) -> None:
        self.scanner = None
        super().cleanup()

    @property
    def enabled(self) -> bool:
        return self.options.enabled

    def scan(self, file_path: str) -> BlobSegmentation:
        """
        Raises:
            DocumentReadError: If the file cannot be read
        """
        logger.info('Using fallback text extraction method')
        return self.scanner.scan_file(file_path)
