"""
Document Segmentation Components

Stateful processors and algorithms of the extraction pipeline:

- StructuralPdfParser: pdfplumber-backed parse into the page/text-item model
- TextRunAccumulator: Character-to-item accumulation with styling
- Text-run collector: Text items to positioned TextRuns
- LineGrouper / ParagraphGrouper: Geometric grouping in reading order
- SegmentEmitter: Paragraphs to segments with position and style payloads
- RawStreamScanner: Byte-level fallback over content streams
- Plain-text segmenter: Blank-line splitting for .txt documents

These differ from utils/ which contains pure, stateless functions.
"""

from processors.structural_parser import StructuralPdfParser, ParseOutcome
from processors.text_processing_helpers import TextRunAccumulator
from processors.text_run_collector import collect_document_runs
from processors.text_grouping import LineGrouper, ParagraphGrouper, group_text_runs
from processors.segment_emitter import SegmentEmitter, concatenate_pages
from processors.raw_stream_scanner import RawStreamScanner, segment_blob
from processors.plain_text_segmenter import segment_plain_text, segment_text_file

__version__ = "1.0.0"
__all__ = [
    'StructuralPdfParser',
    'ParseOutcome',
    'TextRunAccumulator',
    'collect_document_runs',
    'LineGrouper',
    'ParagraphGrouper',
    'group_text_runs',
    'SegmentEmitter',
    'concatenate_pages',
    'RawStreamScanner',
    'segment_blob',
    'segment_plain_text',
    'segment_text_file',
]
