#!/usr/bin/env python3
"""
FORMATTERS - Name, date and roll-number normalizers
Pure string transforms used at entry time and by every renderer

TRANSFORMS:
✅ title_case: "  ALI   khan " -> "Ali Khan" (idempotent)
✅ shorten_name: "Muhammad Ali" -> "M Ali", "Muhammad" stays "Muhammad"
✅ format_display_date: "2025-11-24" -> "24-11-2025"
✅ format_header_date: "2025-11-24" -> "24/11/2025"
✅ natural_sort_key: "2" < "10", "a1" == "A1"

Priority: HIGH - Shared by renderers and roster loading
"""

import re
from typing import List, Sequence, Tuple

from .data_models import StudentRecord

# Full honorific forms abbreviated in compact tables
HONORIFIC_FORMS = ("Muhammad", "Mohammad")
HONORIFIC_ABBREVIATION = "M"

_DIGIT_RUN = re.compile(r"(\d+)")


def title_case(text) -> str:
    """Collapse whitespace, trim, lower-case, then capitalise each word"""
    if not isinstance(text, str):
        return ""
    words = re.sub(r"\s+", " ", text).strip().lower().split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def shorten_name(
    name,
    forms: Sequence[str] = HONORIFIC_FORMS,
    abbreviation: str = HONORIFIC_ABBREVIATION,
) -> str:
    """
    Abbreviate honorific full forms anywhere in a name

    A name that is exactly one of the forms (any case) is kept in full,
    otherwise every case-insensitive occurrence is replaced.
    """
    if not name:
        return ""
    trimmed = str(name).strip()
    alternatives = "|".join(re.escape(form) for form in forms)
    if not alternatives:
        return trimmed
    if re.fullmatch(f"(?:{alternatives})", trimmed, flags=re.IGNORECASE):
        return trimmed
    for form in forms:
        trimmed = re.sub(re.escape(form), abbreviation, trimmed, flags=re.IGNORECASE)
    return trimmed


def _reorder_iso_date(iso_date, separator: str) -> str:
    if not iso_date:
        return ""
    parts = str(iso_date).split("-")
    if len(parts) != 3:
        return str(iso_date)
    year, month, day = parts
    return f"{day}{separator}{month}{separator}{year}"


def format_display_date(iso_date) -> str:
    """YYYY-MM-DD -> DD-MM-YYYY, no calendar validation"""
    return _reorder_iso_date(iso_date, "-")


def format_header_date(iso_date) -> str:
    """YYYY-MM-DD -> DD/MM/YYYY for workbook headers"""
    return _reorder_iso_date(iso_date, "/")


def natural_sort_key(value) -> List[Tuple[int, int, str]]:
    """
    Sort key comparing digit runs numerically and text case-insensitively

    Digit runs sort before text at the same position, so "1" < "1a" < "2" < "10".
    """
    text = "" if value is None else str(value)
    key = []
    for token in _DIGIT_RUN.split(text):
        if token and _DIGIT_RUN.fullmatch(token):
            key.append((0, int(token), token))
        else:
            key.append((1, 0, token.casefold()))
    return key


def sort_roster(students: Sequence[StudentRecord]) -> List[StudentRecord]:
    """Roster ordered by natural comparison on roll number (stable)"""
    return sorted(students, key=lambda s: natural_sort_key(s.roll_no))


__all__ = [
    "HONORIFIC_FORMS",
    "HONORIFIC_ABBREVIATION",
    "title_case",
    "shorten_name",
    "format_display_date",
    "format_header_date",
    "natural_sort_key",
    "sort_roster",
]
