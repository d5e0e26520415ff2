#!/usr/bin/env python3
"""
AGGREGATE CALCULATOR - Per-student totals and averages across test slots
Derived on every render, never stored

CALCULATION RULES:
✅ Only finite numeric cells count (markers and blanks are skipped, not zero-filled)
✅ total = sum of numeric cells, average = total / count
✅ No numeric cells -> total and average are absent (shown as "-" or blank, never 0)

DISPLAY ROUNDING (kept as-is for compatibility with earlier exports):
- Total: one decimal place, trailing ".0" stripped   (7.0 -> "7", 7.5 -> "7.5")
- Average: always one decimal place                  (7.0 -> "7.0")

Priority: HIGH - Master sheet Total/Avg columns
Dependencies: mark_classifier.py for numeric parsing
"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Iterable, Mapping, Optional, Union

from .data_models import CellAccessor, FormatConfig, MarkAggregate, ReportColumn, StudentRecord
from .mark_classifier import parse_mark

DEFAULT_CONFIG = FormatConfig()

_ONE_PLACE = Decimal("0.1")
# Wide enough for any finite float at one decimal place
_WIDE_CONTEXT = Context(prec=400)


def aggregate(
    row: Union[StudentRecord, Mapping[str, object]],
    slot_keys: Iterable[str],
    cell_accessor: Optional[CellAccessor] = None,
) -> MarkAggregate:
    """
    Count, sum and mean the numeric cells of a row over the given slot keys

    Args:
        row: StudentRecord or a plain mapping of column key -> value
        slot_keys: Column keys to include
        cell_accessor: Reads each cell of a StudentRecord; stored marks when None

    Returns:
        MarkAggregate with total/average None when no numeric cell exists
    """
    slot_keys = list(slot_keys)
    if isinstance(row, StudentRecord) and cell_accessor is not None:
        values = {key: cell_accessor(row, ReportColumn(header=key, key=key)) for key in slot_keys}
    else:
        values = row.marks if isinstance(row, StudentRecord) else row

    total = 0.0
    count = 0
    for key in slot_keys:
        number = parse_mark(values.get(key))
        if number is None:
            continue
        total += number
        count += 1

    if count == 0:
        return MarkAggregate(count=0, total=None, average=None)
    return MarkAggregate(count=count, total=total, average=total / count)


def round_one_place(value: float) -> Decimal:
    """Half-up rounding of the exact float value to one decimal place"""
    if not math.isfinite(value):
        return Decimal(value)
    return Decimal(value).quantize(_ONE_PLACE, rounding=ROUND_HALF_UP, context=_WIDE_CONTEXT)


def format_total(result: MarkAggregate, config: FormatConfig = DEFAULT_CONFIG) -> str:
    """Total with one decimal place and trailing '.0' stripped"""
    if not result.has_values:
        return config.missing_placeholder
    text = str(round_one_place(result.total))
    if text.endswith(".0"):
        text = text[:-2]
    if text == "-0":
        text = "0"
    return text


def format_average(result: MarkAggregate, config: FormatConfig = DEFAULT_CONFIG) -> str:
    """Average always shown with exactly one decimal place"""
    if not result.has_values:
        return config.missing_placeholder
    text = str(round_one_place(result.average))
    if text == "-0.0":
        text = "0.0"
    return text


def _workbook_number(value: Decimal) -> Union[int, float]:
    if not value.is_finite():
        return float(value)
    return int(value) if value == value.to_integral_value() else float(value)


def workbook_total(result: MarkAggregate) -> Optional[Union[int, float]]:
    """Numeric total cell value for workbooks, None (blank) when absent"""
    if not result.has_values:
        return None
    return _workbook_number(round_one_place(result.total))


def workbook_average(result: MarkAggregate) -> Optional[Union[int, float]]:
    """Numeric average cell value for workbooks, None (blank) when absent"""
    if not result.has_values:
        return None
    return _workbook_number(round_one_place(result.average))


__all__ = [
    "aggregate",
    "round_one_place",
    "format_total",
    "format_average",
    "workbook_total",
    "workbook_average",
]
