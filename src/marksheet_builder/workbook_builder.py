#!/usr/bin/env python3
"""
WORKBOOK BUILDER - Single-sheet .xlsx exports of a class marks table
openpyxl workbook written to bytes for the file sink

SHEET LAYOUT:
Row 1: Title, merged across every used column
Row 2: Headers
Row 3+: One row per student in roster order

EXPORT TYPES:
✅ Single test:  Roll No | Name | Marks                   (widths 8 / 25 / 10)
✅ Master sheet: Roll No | Name | Test 1..N | Total | Avg  (widths 8 / 25 / 18 each / 10 / 10)
   Test headers carry the recorded test date: "Test 3 (24/11/2025)"

NAMING:
- Sheet title cut to 31 characters
- Filenames: Class_7_Math_Test_3_(24-11-2025).xlsx, Class_7_Math_Master_Sheet.xlsx

Priority: HIGH - Spreadsheet export
Dependencies: openpyxl, aggregate_calculator.py, formatters.py
"""

import logging
import re
from dataclasses import dataclass
from io import BytesIO
from typing import Callable, List, Optional, Sequence, Union

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter

from .aggregate_calculator import aggregate, workbook_average, workbook_total
from .data_models import (
    CellAccessor,
    ExportContext,
    FormatConfig,
    ReportColumn,
    StudentRecord,
    cell_to_text,
    default_cell_accessor,
    slot_key,
)
from .formatters import format_display_date, format_header_date
from .mark_classifier import parse_mark
from .text_renderer import entry_title, master_title

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = FormatConfig()

# Characters Excel rejects in sheet titles
_INVALID_SHEET_CHARS = re.compile(r"[\\/*?:\[\]]")

DateLookup = Callable[[str, str, int], Optional[str]]


@dataclass
class WorkbookArtifact:
    """Built workbook ready for a file sink"""

    filename: str
    sheet_name: str
    content: bytes


def sheet_title(name: str, config: FormatConfig = DEFAULT_CONFIG) -> str:
    """Sheet title with rejected characters replaced, cut to the format's limit"""
    cleaned = _INVALID_SHEET_CHARS.sub("_", name)
    return cleaned[: config.sheet_name_limit] or "Sheet1"


def entry_filename(context: ExportContext) -> str:
    """Class_7_Math_Test_3_(24-11-2025).xlsx, or Class_7_Marks.xlsx without a test"""
    if context.subject and context.test_no:
        filename = f"Class_{context.class_name}_{context.subject}_Test_{context.test_no}"
        formatted = format_display_date(context.test_date)
        if formatted:
            filename += f"_({formatted})"
    else:
        filename = f"Class_{context.class_name}_Marks"
    return f"{filename}.xlsx"


def master_filename(context: ExportContext) -> str:
    return f"Class_{context.class_name}_{context.subject}_Master_Sheet.xlsx"


def workbook_cell(value) -> Union[int, float, str, None]:
    """Numbers become numeric cells, markers and text stay text, blanks stay empty"""
    if value is None or value == "":
        return None
    number = parse_mark(value)
    if number is not None:
        return int(number) if number.is_integer() else number
    return cell_to_text(value)


def build_workbook(
    title: str,
    roster: Sequence[StudentRecord],
    columns: Sequence[ReportColumn],
    cell_accessor: CellAccessor = default_cell_accessor,
    sheet_name: str = "Sheet1",
    column_width: Optional[float] = None,
    aggregate_keys: Optional[Sequence[str]] = None,
    config: FormatConfig = DEFAULT_CONFIG,
) -> bytes:
    """
    Build a single-sheet workbook

    Args:
        title: Title row text, merged across all used columns
        roster: Students in display order
        columns: Mark columns; their headers become row 2
        cell_accessor: Reads one cell for (student, column)
        sheet_name: Sheet title, cut to the format limit
        column_width: Width of each mark column (None leaves the default)
        aggregate_keys: When given, numeric Total/Avg columns over these keys
        config: Column widths and sheet title limit

    Returns:
        .xlsx file content
    """
    headers: List[str] = ["Roll No", "Name"] + [column.header for column in columns]
    widths: List[Optional[float]] = [config.roll_col_width, config.name_col_width]
    widths += [column_width] * len(columns)
    if aggregate_keys is not None:
        headers += ["Total", "Avg"]
        widths += [config.aggregate_col_width, config.aggregate_col_width]

    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title(sheet_name, config)

    ws.append([title])
    ws.append(headers)
    for student in roster:
        row = [student.roll_no, student.name]
        row += [workbook_cell(cell_accessor(student, column)) for column in columns]
        if aggregate_keys is not None:
            result = aggregate(student, aggregate_keys, cell_accessor)
            row += [workbook_total(result), workbook_average(result)]
        ws.append(row)

    # Styling: bold title and headers
    ws.cell(row=1, column=1).font = Font(bold=True, size=14)
    ws.cell(row=1, column=1).alignment = Alignment(horizontal="center")
    for col_num in range(1, len(headers) + 1):
        ws.cell(row=2, column=col_num).font = Font(bold=True)

    last_col = len(headers)
    if last_col > 1:
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=last_col)

    for col_num, width in enumerate(widths, 1):
        if width is not None:
            ws.column_dimensions[get_column_letter(col_num)].width = width

    buffer = BytesIO()
    wb.save(buffer)
    logger.debug(f"Built workbook '{ws.title}' with {len(roster)} rows, {last_col} columns")
    return buffer.getvalue()


def _blank_cell(student: StudentRecord, column: ReportColumn) -> None:
    return None


def build_entry_workbook(
    roster: Sequence[StudentRecord],
    context: ExportContext,
    config: FormatConfig = DEFAULT_CONFIG,
) -> WorkbookArtifact:
    """Roll No | Name | Marks for one test (marks blank without a test)"""
    key = context.column_key
    if key:
        title = entry_title(context)
        name = f"{context.subject} T{context.test_no}"
        column = ReportColumn(header="Marks", key=key, test_no=context.test_no)
        accessor = default_cell_accessor
    else:
        title = f"Class {context.class_name}"
        name = f"Class {context.class_name}"
        column = ReportColumn(header="Marks", key="")
        accessor = _blank_cell

    content = build_workbook(
        title,
        roster,
        [column],
        accessor,
        sheet_name=name,
        column_width=config.entry_marks_col_width,
        config=config,
    )
    return WorkbookArtifact(entry_filename(context), sheet_title(name, config), content)


def master_headers(
    context: ExportContext,
    slot_numbers: Sequence[int],
    date_lookup: Optional[DateLookup] = None,
) -> List[ReportColumn]:
    """'Test N (DD/MM/YYYY)' when a date is on record, else 'Test N'"""
    columns = []
    for test_no in slot_numbers:
        iso_date = date_lookup(context.class_name, context.subject, test_no) if date_lookup else None
        header = f"Test {test_no}"
        if iso_date:
            header += f" ({format_header_date(iso_date)})"
        columns.append(ReportColumn.for_slot(context.subject, test_no, header=header))
    return columns


def build_master_workbook(
    roster: Sequence[StudentRecord],
    context: ExportContext,
    date_lookup: Optional[DateLookup] = None,
    config: FormatConfig = DEFAULT_CONFIG,
) -> WorkbookArtifact:
    """Every test slot with its date, then numeric Total/Avg over all slots"""
    slot_numbers = config.all_slot_numbers()
    name = f"{context.subject} Master"
    content = build_workbook(
        master_title(context),
        roster,
        master_headers(context, slot_numbers, date_lookup),
        sheet_name=name,
        column_width=config.master_test_col_width,
        aggregate_keys=[slot_key(context.subject, t) for t in slot_numbers],
        config=config,
    )
    return WorkbookArtifact(master_filename(context), sheet_title(name, config), content)


__all__ = [
    "WorkbookArtifact",
    "sheet_title",
    "entry_filename",
    "master_filename",
    "workbook_cell",
    "build_workbook",
    "build_entry_workbook",
    "master_headers",
    "build_master_workbook",
]
