#!/usr/bin/env python3
"""
MARKUP RENDERER - HTML marks tables for spreadsheet / word processor paste
Jinja2 template rendering of the clipboard HTML payload

TABLE STRUCTURE:
✅ Title row spanning every column (optional sub-title, e.g. "(Out of 50)")
✅ Header row: Roll, Name, one header per mark column, Total/Avg in master mode
✅ Data rows in roster order with per-cell colour coding
   absent -> red, not attempted -> amber, everything else -> default

MASTER MODE:
- Total and Avg are always appended
- Aggregates use every slot key passed in, not just the visible columns,
  so a hidden test column still counts towards the totals

Names and roll numbers are inserted as-is (no HTML escaping); they come
from the same administrative data source as the rest of the sheet.

Priority: HIGH - Clipboard HTML payload
Dependencies: Jinja2, mark_classifier.py, aggregate_calculator.py
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader

from .active_columns import active_slots
from .aggregate_calculator import aggregate, format_average, format_total
from .data_models import (
    CellAccessor,
    ExportContext,
    FormatConfig,
    MarkStatus,
    ReportColumn,
    StudentRecord,
    default_cell_accessor,
    slot_key,
)
from .mark_classifier import classify
from .text_renderer import entry_title, master_title

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
TABLE_TEMPLATE = "marks_table.html"


class MarkupRenderer:
    """Render HTML marks tables from a roster"""

    def __init__(self, config: Optional[FormatConfig] = None, templates_dir: Optional[Path] = None):
        """
        Initialize markup renderer

        Args:
            config: Marker strings and colours
            templates_dir: Directory holding marks_table.html
        """
        self.config = config or FormatConfig()
        self.templates_dir = Path(templates_dir) if templates_dir else TEMPLATES_DIR

        # Cell text is trusted, see module docstring
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
        )

    def cell_color(self, value) -> str:
        """Colour for one cell value"""
        status = classify(value, self.config)
        if status is MarkStatus.ABSENT:
            return self.config.absent_color
        if status is MarkStatus.NOT_ATTEMPTED:
            return self.config.not_attempted_color
        return self.config.default_color

    def render_table(
        self,
        title: str,
        subtitle: Optional[str],
        roster: Sequence[StudentRecord],
        columns: Sequence[ReportColumn],
        cell_accessor: CellAccessor = default_cell_accessor,
        aggregate_keys: Optional[Sequence[str]] = None,
        roll_header: str = "Roll No",
        name_header: str = "Name",
        bold_marks: bool = False,
    ) -> str:
        """
        Render a marks table

        Args:
            title: Text of the spanning title row
            subtitle: Smaller text under the title, omitted when None
            roster: Students in display order
            columns: Visible mark columns
            cell_accessor: Reads one cell for (student, column)
            aggregate_keys: When given, Total/Avg columns are computed over these keys
            roll_header: Header label of the roll column
            name_header: Header label of the name column
            bold_marks: Bold the mark cells (single-test layout)

        Returns:
            HTML table string
        """
        show_aggregates = aggregate_keys is not None

        rows: List[Dict[str, Any]] = []
        for student in roster:
            cells = []
            for column in columns:
                value = cell_accessor(student, column)
                text = "" if value in (None, "") else str(value)
                cells.append({"text": text, "color": self.cell_color(value)})

            row = {"roll_no": student.roll_no, "name": student.name, "cells": cells}
            if show_aggregates:
                result = aggregate(student, aggregate_keys, cell_accessor)
                row["total"] = format_total(result, self.config)
                row["average"] = format_average(result, self.config)
            rows.append(row)

        template = self.env.get_template(TABLE_TEMPLATE)
        html = template.render(
            title=title,
            subtitle=subtitle,
            colspan=2 + len(columns) + (2 if show_aggregates else 0),
            roll_header=roll_header,
            name_header=name_header,
            column_headers=[column.header for column in columns],
            show_aggregates=show_aggregates,
            bold_marks=bold_marks,
            rows=rows,
        )
        logger.debug(f"Rendered markup table '{title}' with {len(rows)} rows")
        return html

    def render_entry(self, roster: Sequence[StudentRecord], context: ExportContext) -> str:
        """Single-test table: Roll No | Name | Marks (/max)"""
        label = context.max_marks_label
        column = ReportColumn.for_slot(context.subject, context.test_no, header=f"Marks (/{label})")
        return self.render_table(
            entry_title(context),
            f"(Out of {label})",
            roster,
            [column],
            bold_marks=True,
        )

    def render_master(
        self,
        roster: Sequence[StudentRecord],
        context: ExportContext,
        slot_numbers: Optional[Sequence[int]] = None,
    ) -> str:
        """Master table: active test columns plus Total/Avg over every slot"""
        all_slots = self.config.all_slot_numbers()
        if slot_numbers is None:
            slot_numbers = active_slots(roster, context.subject, all_slots)
        columns = [ReportColumn.for_slot(context.subject, t) for t in slot_numbers]
        return self.render_table(
            master_title(context),
            None,
            roster,
            columns,
            aggregate_keys=[slot_key(context.subject, t) for t in all_slots],
            roll_header="Roll",
        )


def render_markup_table(
    title: str,
    subtitle: Optional[str],
    roster: Sequence[StudentRecord],
    columns: Sequence[ReportColumn],
    cell_accessor: CellAccessor = default_cell_accessor,
    config: Optional[FormatConfig] = None,
    aggregate_keys: Optional[Sequence[str]] = None,
) -> str:
    """Module-level form of MarkupRenderer.render_table"""
    return MarkupRenderer(config).render_table(
        title, subtitle, roster, columns, cell_accessor, aggregate_keys=aggregate_keys
    )


def render_entry_markup(
    roster: Sequence[StudentRecord],
    context: ExportContext,
    config: Optional[FormatConfig] = None,
) -> str:
    return MarkupRenderer(config).render_entry(roster, context)


def render_master_markup(
    roster: Sequence[StudentRecord],
    context: ExportContext,
    config: Optional[FormatConfig] = None,
    slot_numbers: Optional[Sequence[int]] = None,
) -> str:
    return MarkupRenderer(config).render_master(roster, context, slot_numbers)


__all__ = [
    "MarkupRenderer",
    "render_markup_table",
    "render_entry_markup",
    "render_master_markup",
]
