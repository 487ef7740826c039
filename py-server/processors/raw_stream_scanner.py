"""
Raw Stream Scanner

Byte-level fallback used when structural parsing fails. Scans the file's
``stream ... endstream`` regions for text-showing operators, unescapes the
literal strings they show and cuts the recovered blob into segments:

1. blank-line paragraphs, when the blob contains a blank-line boundary
2. otherwise sentences (terminal ``.``, ``!`` or ``?`` followed by whitespace)
3. otherwise the whole blob as a single segment

Nothing here knows about pages or layout; every segment lands on page 1
without geometry or style.
"""

import logging
import re
import zlib
from dataclasses import dataclass, field
from typing import List, Optional

from constants.pdf_operators import (
    CONTROL_ESCAPES,
    ENDSTREAM,
    SHOW_TEXT,
    SHOW_TEXT_ARRAY,
    STREAM,
)
from engine.config import FallbackOptions
from models.segment_types import ExtractedSegment, FallbackStage
from utils.validation import read_document_bytes

logger = logging.getLogger(__name__)

STREAM_REGION_PATTERN = re.compile(
    (STREAM + r'\s*(.*?)\s*' + ENDSTREAM).encode('ascii'),
    re.DOTALL,
)

# Literal strings may contain escaped parentheses; unescaped nested pairs are not supported
_LITERAL = r'\(((?:[^()\\]|\\.)+)\)'
TEXT_OPERATOR_PATTERN = re.compile(
    _LITERAL + r'\s*' + SHOW_TEXT + r'|\[([^\]]+)\]\s*' + SHOW_TEXT_ARRAY,
    re.DOTALL,
)
ARRAY_LITERAL_PATTERN = re.compile(r'\(((?:[^()\\]|\\.)*)\)', re.DOTALL)
ESCAPE_PATTERN = re.compile(r'\\(?:([nrt()\\])|([0-7]{3}))')

BLANK_LINE_PATTERN = re.compile(r'\n\s*\n|\r\n\s*\r\n')
SENTENCE_BOUNDARY_PATTERN = re.compile(r'(?<=[.!?])\s+')


def unescape_pdf_string(raw: str) -> str:
    """
    Resolve the escapes of a PDF literal string.

    Handles ``\\n``, ``\\r``, ``\\t``, ``\\(``, ``\\)``, ``\\\\`` and
    three-digit octal codes in a single pass; other backslashes are kept.
    """
    def replace(match: re.Match) -> str:
        simple, octal = match.groups()
        if octal is not None:
            return chr(int(octal, 8))
        return CONTROL_ESCAPES.get(simple, simple)

    return ESCAPE_PATTERN.sub(replace, raw)


def decompress_flate(data: bytes) -> Optional[bytes]:
    """Decompress FlateDecode (zlib) data, trying several framings in turn"""
    if not data:
        return None

    strategies = [
        lambda: zlib.decompress(data),
        # Raw deflate without zlib header
        lambda: zlib.decompress(data, -15),
    ]

    # Stray bytes between the keyword and the compressed data
    for skip in [1, 2, 3, 4]:
        if len(data) > skip:
            strategies.extend([
                lambda s=skip: zlib.decompress(data[s:]),
                lambda s=skip: zlib.decompress(data[s:], -15),
            ])

    # Truncated streams (trailing whitespace trimmed off the checksum)
    strategies.append(lambda: zlib.decompressobj().decompress(data))

    for strategy in strategies:
        try:
            result = strategy()
        except zlib.error:
            continue
        if result:
            return result

    return None


@dataclass
class BlobSegmentation:
    """Segments cut from a recovered text blob and the tier that produced them"""
    segments: List[ExtractedSegment] = field(default_factory=list)
    stage: FallbackStage = FallbackStage.EMPTY


def segment_blob(blob: str) -> BlobSegmentation:
    """Cut a recovered blob into page-1 segments, coarsening until something sticks."""
    if not blob.strip():
        return BlobSegmentation()

    if BLANK_LINE_PATTERN.search(blob):
        paragraphs = [p.strip() for p in BLANK_LINE_PATTERN.split(blob)]
        paragraphs = [p for p in paragraphs if p]
        if paragraphs:
            return BlobSegmentation(
                segments=[ExtractedSegment(text=p, pageNumber=1) for p in paragraphs],
                stage=FallbackStage.PARAGRAPH_SPLIT,
            )

    sentences = [s.strip() for s in SENTENCE_BOUNDARY_PATTERN.split(blob)]
    sentences = [s for s in sentences if s]
    if len(sentences) > 1:
        return BlobSegmentation(
            segments=[ExtractedSegment(text=s, pageNumber=1) for s in sentences],
            stage=FallbackStage.SENTENCE_SPLIT,
        )

    return BlobSegmentation(
        segments=[ExtractedSegment(text=blob.strip(), pageNumber=1)],
        stage=FallbackStage.WHOLE_BLOB,
    )


class RawStreamScanner:
    """Regex-level text recovery from PDF content streams."""

    def __init__(self, options: Optional[FallbackOptions] = None):
        self.options = options or FallbackOptions()

    def scan_file(self, file_path: str) -> BlobSegmentation:
        """
        Recover segments from a file's raw bytes.

        Raises:
            DocumentReadError: If the file cannot be read
        """
        content = read_document_bytes(file_path)
        fragments = self.extract_fragments(content)
        result = segment_blob(" ".join(fragments))

        if result.segments:
            logger.info(f"Fallback extracted {len(result.segments)} segments ({result.stage.value})")
        else:
            logger.warning("No text found in PDF using fallback method")
        return result

    def extract_fragments(self, content: bytes) -> List[str]:
        """Non-blank unescaped strings shown by text operators, in file order."""
        fragments: List[str] = []
        for match in STREAM_REGION_PATTERN.finditer(content):
            region = match.group(1)
            found = self._scan_region(region.decode('utf-8', errors='replace'))

            if not found and self.options.inflate_streams:
                found = self._scan_compressed_region(region)

            fragments.extend(found)

        logger.debug(f"Raw scan recovered {len(fragments)} text fragments")
        return fragments

    def _scan_compressed_region(self, region: bytes) -> List[str]:
        if len(region) > self.options.max_stream_bytes:
            logger.debug(f"Skipping inflate of {len(region)} byte stream region")
            return []

        inflated = decompress_flate(region)
        if inflated is None:
            return []
        return self._scan_region(inflated.decode('utf-8', errors='replace'))

    def _scan_region(self, text: str) -> List[str]:
        fragments = []
        for match in TEXT_OPERATOR_PATTERN.finditer(text):
            literal, array = match.groups()
            if literal is not None:
                cleaned = unescape_pdf_string(literal)
            else:
                # Kerning numbers between the strings are dropped
                pieces = ARRAY_LITERAL_PATTERN.findall(array)
                if pieces:
                    cleaned = "".join(unescape_pdf_string(piece) for piece in pieces)
                else:
                    cleaned = unescape_pdf_string(array)

            if cleaned.strip():
                fragments.append(cleaned)
        return fragments
