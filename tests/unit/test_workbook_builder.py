"""
Unit Tests for Workbook Builder

Tests for:
- Title / header / data row layout
- Merged title and fixed column widths
- Master sheet date headers and numeric Total/Avg
- Sheet title and filename derivation
"""

from io import BytesIO

import pytest
from openpyxl import load_workbook

from marksheet_builder.data_models import ExportContext, FormatConfig, ReportColumn, StudentRecord
from marksheet_builder.workbook_builder import (
    build_entry_workbook,
    build_master_workbook,
    build_workbook,
    entry_filename,
    master_filename,
    sheet_title,
    workbook_cell,
)


def open_sheet(content):
    return load_workbook(BytesIO(content)).active


def rows_of(ws):
    return [list(row) for row in ws.iter_rows(values_only=True)]


class TestBuildWorkbook:
    """Tests for build_workbook"""

    def test_layout(self, scenario_roster):
        """Row 1 title, row 2 headers, rows 3+ students"""
        content = build_workbook(
            "My Title",
            scenario_roster,
            [ReportColumn(header="Marks", key="math_test_1")],
            sheet_name="Math T1",
            column_width=10,
        )
        ws = open_sheet(content)

        assert ws.title == "Math T1"
        assert rows_of(ws) == [
            ["My Title", None, None],
            ["Roll No", "Name", "Marks"],
            ["1", "Ali Khan", 10],
            ["2", "Sara", "A"],
        ]

    def test_title_merged_across_columns(self, scenario_roster):
        """Title merged A1:C1"""
        content = build_workbook("T", scenario_roster, [ReportColumn(header="Marks", key="math_test_1")])
        ws = open_sheet(content)
        assert [str(r) for r in ws.merged_cells.ranges] == ["A1:C1"]

    def test_column_widths(self, scenario_roster):
        """Roll 8, Name 25, marks as given"""
        content = build_workbook(
            "T", scenario_roster, [ReportColumn(header="Marks", key="math_test_1")], column_width=10
        )
        ws = open_sheet(content)
        assert ws.column_dimensions["A"].width == 8
        assert ws.column_dimensions["B"].width == 25
        assert ws.column_dimensions["C"].width == 10

    def test_workbook_cell(self):
        """Numbers numeric, markers text, blanks empty"""
        assert workbook_cell("10") == 10
        assert workbook_cell("7.5") == 7.5
        assert workbook_cell("NA") == "NA"
        assert workbook_cell("") is None
        assert workbook_cell(None) is None


class TestEntryWorkbook:
    """Tests for the single-test export"""

    def test_entry_export(self, scenario_roster, entry_context):
        """Title with date, sheet 'Math T1', dated filename"""
        artifact = build_entry_workbook(scenario_roster, entry_context)
        ws = open_sheet(artifact.content)

        assert artifact.filename == "Class_7_Math_Test_1_(24-11-2025).xlsx"
        assert artifact.sheet_name == "Math T1"
        assert ws.cell(row=1, column=1).value == "Class 7 - Math Test 1 (24-11-2025)"
        assert ws.cell(row=3, column=3).value == 10

    def test_without_test(self, scenario_roster):
        """Class-only export has a blank marks column"""
        artifact = build_entry_workbook(scenario_roster, ExportContext(class_name="7"))
        ws = open_sheet(artifact.content)

        assert artifact.filename == "Class_7_Marks.xlsx"
        assert ws.title == "Class 7"
        assert ws.cell(row=1, column=1).value == "Class 7"
        assert ws.cell(row=3, column=3).value is None


class TestMasterWorkbook:
    """Tests for the master sheet export"""

    def test_headers_with_dates(self, master_roster, master_context):
        """Dated tests show '(DD/MM/YYYY)', others plain"""
        dates = {3: "2025-11-24"}
        artifact = build_master_workbook(
            master_roster, master_context, date_lookup=lambda c, s, t: dates.get(t)
        )
        ws = open_sheet(artifact.content)
        headers = rows_of(ws)[1]

        assert headers[:5] == ["Roll No", "Name", "Test 1", "Test 2", "Test 3 (24/11/2025)"]
        assert headers[-3:] == ["Test 20", "Total", "Avg"]
        assert len(headers) == 24

    def test_all_slots_and_numeric_aggregates(self, master_roster, master_context):
        """Every slot is a column; Total/Avg numeric or blank"""
        artifact = build_master_workbook(master_roster, master_context)
        data = rows_of(open_sheet(artifact.content))[2:]

        assert data[0][:5] == ["1", "Muhammad Ali", 8, None, 10]
        assert data[0][-2:] == [18, 9]
        assert data[1][2] == "A"
        assert data[1][4] == "NA"
        assert data[1][-2:] == [None, None]

    def test_widths_and_merge(self, master_roster, master_context):
        """Test columns 18 wide, Total/Avg 10, title merged to the last column"""
        ws = open_sheet(build_master_workbook(master_roster, master_context).content)

        assert ws.column_dimensions["C"].width == 18
        assert ws.column_dimensions["V"].width == 18
        assert ws.column_dimensions["W"].width == 10
        assert ws.column_dimensions["X"].width == 10
        assert [str(r) for r in ws.merged_cells.ranges] == ["A1:X1"]

    def test_names(self, master_context):
        """Master filename and sheet title"""
        assert master_filename(master_context) == "Class_7_Math_Master_Sheet.xlsx"
        artifact = build_master_workbook([], master_context)
        assert artifact.sheet_name == "Math Master"


class TestNaming:
    """Tests for sheet titles and filenames"""

    def test_sheet_title_truncated(self):
        """Titles are cut to 31 characters"""
        long_name = "Pakistan Studies and Civics Extended T12"
        assert sheet_title(long_name) == long_name[:31]
        assert len(sheet_title(long_name)) == 31

    def test_sheet_title_invalid_chars(self):
        """Characters Excel rejects are replaced"""
        assert sheet_title("Math/Stats: T1") == "Math_Stats_ T1"

    def test_sheet_title_limit_config(self):
        """Limit comes from the config"""
        assert sheet_title("Computer T10", FormatConfig(sheet_name_limit=8)) == "Computer"

    @pytest.mark.parametrize(
        "context, expected",
        [
            (ExportContext(class_name="9", subject="Physics", test_no=4), "Class_9_Physics_Test_4.xlsx"),
            (
                ExportContext(class_name="9", subject="Physics", test_no=4, test_date="2025-01-05"),
                "Class_9_Physics_Test_4_(05-01-2025).xlsx",
            ),
            (ExportContext(class_name="9", subject="Physics"), "Class_9_Marks.xlsx"),
        ],
    )
    def test_entry_filename(self, context, expected):
        """Filename from class, subject, test and date"""
        assert entry_filename(context) == expected


class TestWorkbookAggregates:
    """Tests for Total/Avg with a custom accessor"""

    def test_aggregates_follow_cell_accessor(self):
        """Numeric Total/Avg use the accessor's values"""
        roster = [StudentRecord(id="1", name="A", roll_no="1", marks={"k1": "4", "k2": "6"})]

        def accessor(student, column):
            return "10" if column.key == "k1" else student.marks.get(column.key)

        content = build_workbook(
            "T",
            roster,
            [ReportColumn(header="T1", key="k1"), ReportColumn(header="T2", key="k2")],
            cell_accessor=accessor,
            aggregate_keys=["k1", "k2"],
        )
        assert rows_of(open_sheet(content))[2] == ["1", "A", 10, 6, 16, 8]
