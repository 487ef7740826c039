"""PDF Text Grouping Engine

Groups the positioned text runs of one page into lines and paragraphs,
recovering reading order from runs that PDF content streams may emit in any
order. Grouping is purely vertical-proximity based:

1. Runs are sorted top-to-bottom, with runs on the same visual row
   (|dy| < row tie tolerance) ordered left-to-right.
2. Consecutive sorted runs whose y differs by more than the line break
   threshold start a new line.
3. Consecutive lines whose y gap exceeds the paragraph break threshold
   start a new paragraph.

Each paragraph keeps an anchor (first line's first run) used for geometry
and as the representative style of the whole paragraph.
"""

import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Callable, List, Optional

from engine.config import SegmentationOptions
from models.segment_types import PositionData, TextRun

logger = logging.getLogger(__name__)


@dataclass
class Line:
    """Runs sharing approximately the same y, in left-to-right order."""
    runs: List[TextRun] = field(default_factory=list)

    @property
    def y(self) -> float:
        return self.runs[0].y if self.runs else 0.0

    @property
    def text(self) -> str:
        return " ".join(run.text for run in self.runs)

    @property
    def right_edge(self) -> float:
        return max(run.x + (run.width or 0.0) for run in self.runs)


@dataclass
class Paragraph:
    """Consecutive lines without a qualifying vertical break."""
    lines: List[Line] = field(default_factory=list)

    @property
    def anchor(self) -> TextRun:
        """First run of the first line: supplies position and style."""
        return self.lines[0].runs[0]

    @property
    def x(self) -> float:
        return self.anchor.x

    @property
    def y(self) -> float:
        return self.lines[0].y

    @property
    def text(self) -> str:
        return " ".join(line.text for line in self.lines).strip()

    @property
    def bounding_box(self) -> PositionData:
        """
        Approximate paragraph geometry.

        Width spans from the anchor to the furthest right edge of the last
        line only, and height runs from the anchor to the last line's y
        without that line's own height, so tall paragraphs are
        under-estimated. Downstream layout rendering expects exactly this.
        """
        last_line = self.lines[-1]
        return PositionData(
            x=self.x,
            y=self.y,
            width=last_line.right_edge - self.x,
            height=last_line.y - self.y,
        )


def _reading_order_comparator(row_tie_tolerance: float) -> Callable[[TextRun, TextRun], float]:
    def compare(a: TextRun, b: TextRun) -> float:
        y_diff = a.y - b.y
        if abs(y_diff) < row_tie_tolerance:
            return a.x - b.x
        return y_diff
    return compare


def sort_reading_order(runs: List[TextRun], row_tie_tolerance: float = 0.5) -> List[TextRun]:
    """
    Stable sort of runs by y, ties on the same row broken by x.

    Uses the pairwise comparison rather than a key so that rows are judged
    by the distance between the two runs being compared.
    """
    return sorted(runs, key=cmp_to_key(_reading_order_comparator(row_tie_tolerance)))


class LineGrouper:
    """Clusters the runs of one page into horizontal lines."""

    def __init__(self, options: Optional[SegmentationOptions] = None):
        self.options = options or SegmentationOptions()

    def group(self, runs: List[TextRun]) -> List[Line]:
        sorted_runs = sort_reading_order(runs, self.options.row_tie_tolerance)

        lines: List[Line] = []
        current = Line()
        last_y: Optional[float] = None

        for run in sorted_runs:
            if last_y is not None and abs(run.y - last_y) > self.options.line_break_threshold:
                if current.runs:
                    lines.append(current)
                    current = Line()
            current.runs.append(run)
            last_y = run.y

        if current.runs:
            lines.append(current)

        return lines


class ParagraphGrouper:
    """Clusters consecutive lines into paragraphs using vertical gaps."""

    def __init__(self, options: Optional[SegmentationOptions] = None):
        self.options = options or SegmentationOptions()

    def group(self, lines: List[Line]) -> List[Paragraph]:
        paragraphs: List[Paragraph] = []
        current = Paragraph()

        for line_index, line in enumerate(lines):
            previous_y = lines[line_index - 1].y if line_index > 0 else line.y
            y_gap = line.y - previous_y

            if current.lines and y_gap > self.options.paragraph_break_threshold:
                paragraphs.append(current)
                current = Paragraph()

            current.lines.append(line)

        if current.lines:
            paragraphs.append(current)

        return paragraphs


def group_text_runs(runs: List[TextRun], options: Optional[SegmentationOptions] = None) -> List[Paragraph]:
    """Group one page's runs into paragraphs in top-to-bottom order."""
    if not runs:
        return []

    lines = LineGrouper(options).group(runs)
    paragraphs = ParagraphGrouper(options).group(lines)
    logger.debug(f"Grouped {len(runs)} runs into {len(lines)} lines and {len(paragraphs)} paragraphs")
    return paragraphs
