"""
Pydantic models for the Document Segmentation API
Field names follow the JSON shapes consumed by the review UI
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Literal
from enum import Enum

FontWeight = Literal["normal", "bold"]
FontStyle = Literal["normal", "italic"]
TextAlign = Literal["left", "center", "right"]
FileType = Literal["pdf", "docx", "txt"]


class FallbackStage(str, Enum):
    """States of the extraction fallback chain, in degradation order"""
    STRUCTURAL_PARSE = "structural-parse"
    GEOMETRIC_GROUPING = "geometric-grouping"
    PAGE_CONCATENATION = "page-concatenation"
    BYTE_LEVEL_SCAN = "byte-level-scan"
    PARAGRAPH_SPLIT = "paragraph-split"
    SENTENCE_SPLIT = "sentence-split"
    WHOLE_BLOB = "whole-blob"
    EMPTY = "empty"


class ParseFailureKind(str, Enum):
    """How the structural parser failed"""
    DATA_ERROR = "data-error"    # Parser reported the document as malformed
    EXCEPTION = "exception"      # Parser raised something unexpected
    TIMEOUT = "timeout"          # Parser did not settle in time


# Structural object model (what the structural parser hands to the collector)
class TextItemRun(BaseModel):
    """Glyph string with its typographic record"""
    T: str  # Percent-encoded glyph string
    TS: List[float] = Field(default_factory=lambda: [0, 0, 0, 0])  # [fontFaceId, fontSize, bold, italic]

class TextItem(BaseModel):
    """Positioned text item in page units (y grows downward)"""
    x: float
    y: float
    w: float = 0.0
    R: List[TextItemRun] = Field(default_factory=list)

class ParsedPage(BaseModel):
    """One page of the structural object model"""
    width: float = 0.0
    height: float = 0.0
    texts: List[TextItem] = Field(default_factory=list)

class ParsedDocument(BaseModel):
    """Page list produced by a successful structural parse"""
    pages: List[ParsedPage] = Field(default_factory=list)
    fonts: List[str] = Field(default_factory=list)  # fontFaceId -> normalized font name


# Pipeline models
class TextRun(BaseModel):
    """
    Decoded text fragment on one page.
    Created by the collector and discarded at the end of one extraction call.
    """
    text: str
    x: float
    y: float
    width: float = 0.0
    fontSize: float = 12.0
    fontWeight: FontWeight = "normal"
    fontStyle: FontStyle = "normal"


class PositionData(BaseModel):
    """Paragraph geometry - serialized as {x, y, width, height}"""
    x: float
    y: float
    width: float
    height: float

class StyleData(BaseModel):
    """Representative paragraph style - serialized in this field order"""
    fontSize: float
    fontWeight: FontWeight = "normal"
    fontStyle: FontStyle = "normal"
    fontFamily: str = "Helvetica"
    color: str = "#000000"
    textAlign: TextAlign = "left"
    lineHeight: float = 1.2

class ExtractedSegment(BaseModel):
    """Translation unit produced by one extraction call"""
    text: str
    pageNumber: int = 1
    positionData: Optional[str] = None  # JSON-encoded PositionData
    styleData: Optional[str] = None     # JSON-encoded StyleData


class ExtractionResult(BaseModel):
    """Segments plus the fallback stages visited while producing them"""
    segments: List[ExtractedSegment] = Field(default_factory=list)
    stage: FallbackStage = FallbackStage.EMPTY
    trace: List[FallbackStage] = Field(default_factory=list)


# Persistence boundary
class SegmentRow(BaseModel):
    """Row handed to the persistence layer for one extracted segment"""
    id: str
    documentId: str
    index: int
    pageNumber: int
    sourceText: str
    positionData: Optional[str] = None
    styleData: Optional[str] = None


# API models
class ExtractSegmentsResponse(BaseModel):
    """Response model for the extract-segments endpoint"""
    documentId: str
    fileType: FileType
    segmentCount: int
    segments: List[SegmentRow] = Field(default_factory=list)

class ErrorResponse(BaseModel):
    """Error response model"""
    error: str
    detail: Optional[str] = None
