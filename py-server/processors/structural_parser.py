"""Structural PDF Parser

Turns PDF bytes into the page/text-item object model consumed by the
text-run collector. Backed by pdfplumber (pdfminer.six), which reports
characters in content-stream order; characters are folded into text items
and their coordinates converted from points to page units.

Every parse settles a ParseOutcome exactly once: either *data ready*
(carrying the ParsedDocument) or *data error* (carrying the exception).
"""

import logging
import threading
from typing import Optional
from urllib.parse import quote

import pdfplumber
from pdfminer.psparser import PSException
from pdfplumber.utils.exceptions import MalformedPDFException, PdfminerException

from models.segment_types import (
    ParseFailureKind,
    ParsedDocument,
    ParsedPage,
    TextItem,
    TextItemRun,
)
from processors.text_processing_helpers import FontTable, StyledRun, TextRunAccumulator
from utils.font_mapping import get_font_flags

logger = logging.getLogger(__name__)

COORDINATE_PRECISION = 3
FONT_SIZE_PRECISION = 2

# pdfminer syntax errors, raw or as wrapped by pdfplumber.open
STRUCTURAL_PARSE_ERRORS = (PSException, PdfminerException, MalformedPDFException)


class ParseOutcome:
    """
    One-shot resolution of a structural parse.

    The first call to resolve() or reject() wins; later calls are ignored
    and reported through their return value.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._settled = False
        self.document: Optional[ParsedDocument] = None
        self.error: Optional[BaseException] = None
        self.failure_kind: Optional[ParseFailureKind] = None

    def resolve(self, document: ParsedDocument) -> bool:
        """Settle with a parsed document (the "data ready" event)."""
        with self._lock:
            if self._settled:
                logger.warning("Ignoring data-ready event: parse outcome already settled")
                return False
            self._settled = True
            self.document = document
            return True

    def reject(self, error: BaseException, kind: ParseFailureKind = ParseFailureKind.DATA_ERROR) -> bool:
        """Settle with an error (the "data error" event)."""
        with self._lock:
            if self._settled:
                logger.warning(f"Ignoring data-error event ({kind.value}): parse outcome already settled")
                return False
            self._settled = True
            self.error = error
            self.failure_kind = kind
            return True

    @property
    def settled(self) -> bool:
        return self._settled

    @property
    def succeeded(self) -> bool:
        return self._settled and self.document is not None

    def __repr__(self) -> str:
        if not self._settled:
            return "ParseOutcome(pending)"
        if self.document is not None:
            return f"ParseOutcome(ready, {len(self.document.pages)} pages)"
        return f"ParseOutcome({self.failure_kind.value}: {self.error})"


class StructuralPdfParser:
    """
    pdfplumber-backed structural parser.

    Stateless between calls: each parse() owns its accumulator and font table.
    """

    def __init__(self, points_per_page_unit: float = 16.0):
        """
        Args:
            points_per_page_unit: PDF points per output page unit
        """
        if points_per_page_unit <= 0:
            raise ValueError("points_per_page_unit must be positive")
        self.points_per_page_unit = points_per_page_unit

    def parse(self, file_path: str) -> ParseOutcome:
        """
        Parse a PDF file into the structural object model.

        Never raises for malformed input: failures settle the outcome as a
        data error (pdfminer syntax errors) or an exception (anything else).
        """
        outcome = ParseOutcome()
        try:
            document = self._load_document(file_path)
        except STRUCTURAL_PARSE_ERRORS as e:
            logger.warning(f"PDF parsing error: {e}")
            outcome.reject(e, ParseFailureKind.DATA_ERROR)
        except Exception as e:
            logger.error(f"Structural parser raised: {e}", exc_info=True)
            outcome.reject(e, ParseFailureKind.EXCEPTION)
        else:
            outcome.resolve(document)
        return outcome

    def _load_document(self, file_path: str) -> ParsedDocument:
        fonts = FontTable()
        pages = []

        with pdfplumber.open(file_path) as pdf:
            for page_index, page in enumerate(pdf.pages):
                accumulator = TextRunAccumulator()
                for char in page.chars:
                    accumulator.process_char(char)

                items = [self._to_text_item(run, fonts) for run in accumulator.finalize()]
                logger.debug(f"Page {page_index + 1}: {len(page.chars)} chars -> {len(items)} text items")

                pages.append(ParsedPage(
                    width=self._to_units(page.width),
                    height=self._to_units(page.height),
                    texts=items,
                ))

        logger.info(f"PDF parsed, pages: {len(pages)}")
        return ParsedDocument(pages=pages, fonts=fonts.names)

    def _to_text_item(self, run: StyledRun, fonts: FontTable) -> TextItem:
        is_bold, is_italic = get_font_flags(run.font_name)
        typography = [
            fonts.face_id(run.font_name),
            round(run.font_size, FONT_SIZE_PRECISION),
            1 if is_bold else 0,
            1 if is_italic else 0,
        ]
        return TextItem(
            x=self._to_units(run.x0),
            y=self._to_units(run.top),
            w=self._to_units(run.width),
            R=[TextItemRun(T=quote(run.text, safe=""), TS=typography)],
        )

    def _to_units(self, points: float) -> float:
        return round(float(points) / self.points_per_page_unit, COORDINATE_PRECISION)
