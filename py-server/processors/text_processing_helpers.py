"""
Text Processing Helper Classes and Functions

Character-to-item accumulation used by the structural parser. Characters
arrive in content-stream order (pdfplumber ``page.chars``) and are folded
into positioned text items with a single font, size and colour.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from utils.font_mapping import normalize_font_name

logger = logging.getLogger(__name__)

BASELINE_TOLERANCE = 0.5
FONT_SIZE_TOLERANCE = 0.01
SPACE_GAP_MULTIPLIER = 0.25
FONT_SIZE_MULTIPLIER_FORWARD_JUMP = 2.0
POSITION_BACKWARDS_TOLERANCE = 1.0


@dataclass
class StyledRun:
    """Contiguous run of characters with consistent styling properties."""
    text: str
    font_name: str
    font_size: float
    color: Optional[Any]
    x0: float
    top: float
    x1: float
    bottom: float

    @property
    def width(self) -> float:
        return self.x1 - self.x0


class TextRunAccumulator:
    """Stateful accumulator for building StyledRuns from characters."""

    def __init__(self):
        self.current_run_data: Optional[Dict] = None
        self.completed_runs: List[StyledRun] = []

    def process_char(self, char: Dict):
        """Process a single character, accumulating runs or starting new ones."""
        fontname = char.get("fontname")
        size = char.get("size")
        color = char.get("non_stroking_color")
        x0 = char.get("x0")
        x1 = char.get("x1")
        top = char.get("top")
        bottom = char.get("bottom")
        text = char.get("text")

        if not text or size is None or x0 is None or top is None:
            return

        x1 = x0 if x1 is None else x1
        bottom = top if bottom is None else bottom

        normalized_fontname = normalize_font_name(fontname or "")

        # Leading whitespace never opens a run
        if self.current_run_data is None and not text.strip():
            return

        should_start_new_run = (
            self.current_run_data is None
            or self.current_run_data["font_name"] != normalized_fontname
            or abs(self.current_run_data["font_size"] - size) > FONT_SIZE_TOLERANCE
            or self.current_run_data["color"] != color
            or abs(self.current_run_data["top"] - top) > BASELINE_TOLERANCE
            or abs(self.current_run_data["bottom"] - bottom) > BASELINE_TOLERANCE
        )

        if not should_start_new_run:
            gap = x0 - self.current_run_data["x1"]
            # Column jumps and backward moves mark explicit repositioning
            if gap > size * FONT_SIZE_MULTIPLIER_FORWARD_JUMP or gap < -POSITION_BACKWARDS_TOLERANCE:
                should_start_new_run = True
            elif gap > size * SPACE_GAP_MULTIPLIER and not self.current_run_data["text"].endswith(" ") and text.strip():
                self.current_run_data["text"] += " "

        if should_start_new_run:
            if self.current_run_data:
                self._finalize_current_run()

            if not text.strip():
                return

            self.current_run_data = {
                "text": text,
                "font_name": normalized_fontname,
                "font_size": size,
                "color": color,
                "x0": x0,
                "top": top,
                "x1": x1,
                "bottom": bottom,
            }
        else:
            self.current_run_data["text"] += text
            self.current_run_data["x1"] = max(self.current_run_data["x1"], x1)

    def _finalize_current_run(self):
        """Convert current run data to StyledRun and add to completed runs."""
        if self.current_run_data:
            run = StyledRun(
                text=self.current_run_data["text"].rstrip(),
                font_name=self.current_run_data["font_name"],
                font_size=self.current_run_data["font_size"],
                color=self.current_run_data["color"],
                x0=self.current_run_data["x0"],
                top=self.current_run_data["top"],
                x1=self.current_run_data["x1"],
                bottom=self.current_run_data["bottom"],
            )
            self.completed_runs.append(run)
            self.current_run_data = None

    def finalize(self) -> List[StyledRun]:
        """Finalize any remaining run and return all completed runs."""
        if self.current_run_data:
            self._finalize_current_run()
        result = self.completed_runs
        self.completed_runs = []
        return result


class FontTable:
    """Assigns stable fontFaceIds to normalized font names within one document."""

    def __init__(self):
        self._ids: Dict[str, int] = {}

    def face_id(self, font_name: str) -> int:
        if font_name not in self._ids:
            self._ids[font_name] = len(self._ids)
        return self._ids[font_name]

    @property
    def names(self) -> List[str]:
        return list(self._ids.keys())
