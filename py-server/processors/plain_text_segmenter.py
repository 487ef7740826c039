"""Blank-line segmentation for plain-text documents."""

import logging
import re
from typing import List

from models.segment_types import ExtractedSegment
from utils.validation import read_document_bytes

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK_PATTERN = re.compile(r'\n\n+')


def segment_plain_text(text: str) -> List[ExtractedSegment]:
    """One page-1 segment per block separated by two or more newlines."""
    normalized = text.replace('\r\n', '\n')
    blocks = (block.strip() for block in PARAGRAPH_BREAK_PATTERN.split(normalized))
    return [ExtractedSegment(text=block, pageNumber=1) for block in blocks if block]


def segment_text_file(file_path: str) -> List[ExtractedSegment]:
    """
    Read a UTF-8 text file (undecodable bytes replaced) and segment it.

    Raises:
        DocumentReadError: If the file cannot be read
    """
    content = read_document_bytes(file_path).decode('utf-8', errors='replace')
    segments = segment_plain_text(content)
    logger.info(f"Text file split into {len(segments)} segments")
    return segments
