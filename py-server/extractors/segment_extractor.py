"""
Document Segment Extractor

Ingestion boundary: picks the segmenter for an uploaded document's type and
shapes the resulting segments into rows for the persistence layer.
"""

import asyncio
import logging
import uuid
from typing import List, Optional

from engine.segmentation_engine import SegmentationEngine
from models.segment_types import ExtractedSegment, FileType, SegmentRow
from processors.plain_text_segmenter import segment_text_file
from utils.validation import VALIDATION_CONSTANTS, detect_extension_type

logger = logging.getLogger(__name__)


def detect_file_type(file_path: str) -> FileType:
    """Document type from the file extension; anything unrecognised is plain text."""
    return detect_extension_type(file_path) or VALIDATION_CONSTANTS['DEFAULT_DOCUMENT_TYPE']


async def extract_segments(
    file_path: str,
    engine: SegmentationEngine,
    file_type: Optional[FileType] = None
) -> List[ExtractedSegment]:
    """
    Segment a document on disk.

    PDFs go through the segmentation engine, text files through the
    blank-line segmenter. DOCX content is not parsed and yields no segments.
    An empty list is a valid "nothing to translate" result, not an error.

    Raises:
        DocumentReadError: If the file cannot be read
    """
    file_type = file_type or detect_file_type(file_path)

    if file_type == 'pdf':
        return await engine.extract(file_path)

    if file_type == 'txt':
        return await asyncio.to_thread(segment_text_file, file_path)

    logger.warning(f"No segmenter for {file_type} documents, {file_path} yields no segments")
    return []


def build_segment_rows(document_id: str, segments: List[ExtractedSegment]) -> List[SegmentRow]:
    """One persistence row per segment; index is the segment's array position."""
    rows = [
        SegmentRow(
            id=str(uuid.uuid4()),
            documentId=document_id,
            index=index,
            pageNumber=segment.pageNumber,
            sourceText=segment.text,
            positionData=segment.positionData or None,
            styleData=segment.styleData or None,
        )
        for index, segment in enumerate(segments)
    ]
    logger.debug(f"Built {len(rows)} segment rows for document {document_id}")
    return rows
