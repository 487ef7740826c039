"""
Font name utilities for the structural parser
Derives the bold/italic flags of a text item from its PDF font name
"""

import re
from functools import lru_cache
from typing import Tuple

BOLD_INDICATORS = ('bold', 'black', 'heavy', 'extrabold', 'ultrabold', 'semibold', 'demibold')
ITALIC_INDICATORS = ('italic', 'oblique', 'slant')

# Subset tag: six uppercase letters and a plus sign (ABCDEF+Lato-Bold)
SUBSET_PREFIX = re.compile(r'^[A-Z]{6}\+')

@lru_cache(maxsize=256)
def normalize_font_name(font_name: str) -> str:
    """Normalize font name by removing the PDF subset tag.

    Fonts embedded as different subsets of the same face are then treated
    as identical. Names without a tag are returned unchanged.
    """
    if not font_name:
        return ""

    return SUBSET_PREFIX.sub('', font_name)

@lru_cache(maxsize=256)
def get_font_flags(font_name: str) -> Tuple[bool, bool]:
    """
    Extract (is_bold, is_italic) from a font name

    Numeric weights (e.g. "Inter_700wght") count as bold from 600 upward.
    """
    if not font_name:
        return False, False

    font_name_lower = font_name.lower()

    is_bold = False
    weight_match = re.search(r'(\d{3})(?:wght)?', font_name_lower)
    if weight_match:
        weight_val = int(weight_match.group(1))
        if 100 <= weight_val <= 900 and weight_val % 100 == 0:
            is_bold = weight_val >= 600

    if not is_bold:
        is_bold = any(indicator in font_name_lower for indicator in BOLD_INDICATORS)

    # Descriptor suffixes like ",Bold" or "-BoldItalic" are covered by the substring checks
    is_italic = any(indicator in font_name_lower for indicator in ITALIC_INDICATORS)

    return is_bold, is_italic
