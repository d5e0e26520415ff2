#!/usr/bin/env python3
"""
TEXT RENDERER - Fixed-width monospace tables for chat paste targets
Bold title line plus a ``` fenced block that WhatsApp-style apps show in monospace

LAYOUT:
✅ Header row:  No | Name | <columns...>
✅ Separator:   dashes matching each column width
✅ One row per student, in roster order

COLUMN WIDTHS:
- Roll:  max(minimum, longest roll number), left-aligned
- Name:  exactly name_width_cap, shorter names padded, longer names cut
- Marks: fixed width, right-aligned (5 single-test, 3 master)

Empty marks render as "-". Nothing is escaped; roll numbers and marks are
short alphanumeric tokens.

Priority: HIGH - Clipboard plain-text payload
Dependencies: formatters.py for name shortening
"""

import logging
from typing import List, Optional, Sequence

from .active_columns import active_slots
from .data_models import (
    CellAccessor,
    ExportContext,
    FormatConfig,
    ReportColumn,
    StudentRecord,
    default_cell_accessor,
)
from .formatters import format_display_date, shorten_name

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = FormatConfig()


def render_text_table(
    title: str,
    roster: Sequence[StudentRecord],
    columns: Sequence[ReportColumn],
    cell_accessor: CellAccessor = default_cell_accessor,
    config: FormatConfig = DEFAULT_CONFIG,
    compact: bool = False,
) -> str:
    """
    Render a monospace marks table

    Args:
        title: Title shown in bold above the block
        roster: Students in display order
        columns: Mark columns to show
        cell_accessor: Reads one cell for (student, column)
        config: Widths and placeholder
        compact: Master layout ("|" joins, 3-char marks) instead of single-test (" | ", 5-char)

    Returns:
        Text payload including the title line and code fences
    """
    if compact:
        joiner = "|"
        sep_joiner = "|"
        marks_width = config.master_marks_width
        roll_min = config.master_roll_width
    else:
        joiner = " | "
        sep_joiner = "-|-"
        marks_width = config.entry_marks_width
        roll_min = 2

    roll_width = max([roll_min] + [len(s.roll_no or "") for s in roster])
    name_width = config.name_width_cap

    def line(roll: str, name: str, marks: List[str]) -> str:
        return joiner.join([roll, name] + marks)

    header = line(
        "No".ljust(roll_width),
        "Name"[:name_width].ljust(name_width),
        [column.header.rjust(marks_width) for column in columns],
    )
    separator = sep_joiner.join(
        ["-" * roll_width, "-" * name_width] + ["-" * marks_width for _ in columns]
    )

    rows = [header, separator]
    for student in roster:
        name = shorten_name(student.name or "").strip()[:name_width]
        marks = []
        for column in columns:
            value = cell_accessor(student, column)
            text = str(value) if value not in (None, "") else config.missing_placeholder
            marks.append(text.rjust(marks_width))
        rows.append(line((student.roll_no or "").ljust(roll_width), name.ljust(name_width), marks))

    logger.debug(f"Rendered text table '{title}' with {len(roster)} rows")
    return f"*{title}*\n```\n" + "\n".join(rows) + "\n```"


def entry_title(context: ExportContext) -> str:
    """'Class 7 - Math Test 3 (24-11-2025)'"""
    title = f"Class {context.class_name} - {context.subject} Test {context.test_no}"
    formatted = format_display_date(context.test_date)
    if formatted:
        title += f" ({formatted})"
    return title


def master_title(context: ExportContext) -> str:
    """'Class 7 - Math Master Sheet'"""
    return f"Class {context.class_name} - {context.subject} Master Sheet"


def render_entry_text(
    roster: Sequence[StudentRecord],
    context: ExportContext,
    config: FormatConfig = DEFAULT_CONFIG,
) -> str:
    """Single-test table: No | Name | Marks, titled with the max marks"""
    column = ReportColumn.for_slot(context.subject, context.test_no, header="Marks")
    title = f"{entry_title(context)} (Out of {context.max_marks_label})"
    return render_text_table(title, roster, [column], config=config)


def render_master_text(
    roster: Sequence[StudentRecord],
    context: ExportContext,
    config: FormatConfig = DEFAULT_CONFIG,
    slot_numbers: Optional[Sequence[int]] = None,
) -> str:
    """Master table: one T<n> column per active test, no aggregates"""
    if slot_numbers is None:
        slot_numbers = active_slots(roster, context.subject, config.all_slot_numbers())
    columns = [ReportColumn.for_slot(context.subject, t) for t in slot_numbers]
    return render_text_table(master_title(context), roster, columns, config=config, compact=True)


__all__ = [
    "render_text_table",
    "entry_title",
    "master_title",
    "render_entry_text",
    "render_master_text",
]
