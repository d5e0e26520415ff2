#!/usr/bin/env python3
"""
MARK CLASSIFIER - Map raw cell values to a semantic status
Drives grid styling, markup colouring and aggregate inclusion

STATUS MAPPING:
None / ""            -> empty
"A" (any case)       -> absent
"NA" (any case)      -> not_attempted
finite decimal       -> valid (out_of_range flag when < 0 or > max mark)
anything else        -> invalid (shown verbatim, no styling)

EDGE CASES HANDLED:
- Numbers arrive as int/float from the store or as text from the grid
- "nan", "inf" and "8kg" are opaque text, not numbers
- Out-of-range numbers are flagged for a warning style, never rejected

Priority: HIGH - Used by every renderer
Dependencies: data_models.py for MarkStatus
"""

import math
import re
from typing import Optional

from .data_models import FormatConfig, MarkStatus, cell_to_text

DEFAULT_CONFIG = FormatConfig()

_DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

# Grid styling tokens per status
STATUS_STYLES = {
    MarkStatus.EMPTY: "empty",
    MarkStatus.ABSENT: "absent",
    MarkStatus.NOT_ATTEMPTED: "not_attempted",
    MarkStatus.VALID: "valid",
    MarkStatus.INVALID: "text",
}
OUT_OF_RANGE_STYLE = "warning"


def parse_mark(value) -> Optional[float]:
    """Numeric value of a cell, None when it is not a finite decimal number"""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # int beyond float range
            return None
        return number if math.isfinite(number) else None
    text = str(value).strip()
    if not _DECIMAL_PATTERN.match(text):
        return None
    number = float(text)
    return number if math.isfinite(number) else None


def classify(value, config: FormatConfig = DEFAULT_CONFIG) -> MarkStatus:
    """Status of a cell value; never raises"""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return MarkStatus.EMPTY
    if isinstance(value, str) and value.strip() == "":
        return MarkStatus.EMPTY

    text = str(value).strip().upper()
    if text == config.absent_marker.upper():
        return MarkStatus.ABSENT
    if text == config.not_attempted_marker.upper():
        return MarkStatus.NOT_ATTEMPTED
    if parse_mark(value) is not None:
        return MarkStatus.VALID
    return MarkStatus.INVALID


def is_out_of_range(value, config: FormatConfig = DEFAULT_CONFIG) -> bool:
    """True for numeric marks below zero or above the configured maximum"""
    number = parse_mark(value)
    if number is None:
        return False
    return number < 0 or number > config.max_mark


def mark_style(value, config: FormatConfig = DEFAULT_CONFIG) -> str:
    """Styling token for the entry grid"""
    status = classify(value, config)
    if status is MarkStatus.VALID and is_out_of_range(value, config):
        return OUT_OF_RANGE_STYLE
    return STATUS_STYLES[status]


def normalize_entry(raw) -> Optional[str]:
    """
    Normalize a value typed into the grid before it is saved

    Trims and upper-cases; "" and "-" clear the cell; numbers are
    canonicalized ("08" -> "8", "7.50" -> "7.5").
    """
    if raw is None:
        return None
    text = str(raw).strip().upper()
    if text in ("", "-"):
        return None
    number = parse_mark(text)
    if number is not None:
        return cell_to_text(number)
    return text


def entry_changed(current, original) -> bool:
    """True when an edit differs from the stored value after normalization"""
    return normalize_entry(current) != normalize_entry(original)


__all__ = [
    "parse_mark",
    "classify",
    "is_out_of_range",
    "mark_style",
    "normalize_entry",
    "entry_changed",
    "STATUS_STYLES",
    "OUT_OF_RANGE_STYLE",
]
