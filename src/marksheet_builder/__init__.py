"""
Marksheet Builder - classroom marks formatting and export
Text tables for chat apps, HTML tables for spreadsheets, and .xlsx workbooks
"""

from .active_columns import active_slots, all_slot_numbers
from .aggregate_calculator import aggregate, format_average, format_total
from .data_models import (
    ExportContext,
    FormatConfig,
    MarkAggregate,
    MarkStatus,
    ReportColumn,
    SlotKey,
    StudentRecord,
    slot_key,
)
from .date_store import TestDateStore
from .formatters import format_display_date, shorten_name, sort_roster, title_case
from .mark_classifier import classify, is_out_of_range, normalize_entry
from .markup_renderer import MarkupRenderer, render_markup_table
from .report_generator import MarksheetReportGenerator
from .roster_loader import RosterLoader, load_roster
from .text_renderer import render_text_table
from .workbook_builder import build_workbook

__version__ = "1.0.0"

__all__ = [
    "active_slots",
    "all_slot_numbers",
    "aggregate",
    "format_average",
    "format_total",
    "ExportContext",
    "FormatConfig",
    "MarkAggregate",
    "MarkStatus",
    "ReportColumn",
    "SlotKey",
    "StudentRecord",
    "slot_key",
    "TestDateStore",
    "format_display_date",
    "shorten_name",
    "sort_roster",
    "title_case",
    "classify",
    "is_out_of_range",
    "normalize_entry",
    "MarkupRenderer",
    "render_markup_table",
    "MarksheetReportGenerator",
    "RosterLoader",
    "load_roster",
    "render_text_table",
    "build_workbook",
]
