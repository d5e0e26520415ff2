"""
Unit Tests for Data Models

Tests for:
- Slot key derivation
- StudentRecord coercion of store values
- ExportContext validation
"""

import pytest
from pydantic import ValidationError

from marksheet_builder.data_models import (
    ExportContext,
    FormatConfig,
    ReportColumn,
    SlotKey,
    StudentRecord,
    cell_to_text,
    slot_key,
)


class TestSlotKey:
    """Tests for slot key derivation"""

    def test_simple_subject(self):
        """Math, 1 -> math_test_1"""
        assert slot_key("Math", 1) == "math_test_1"

    def test_whitespace_replaced(self):
        """Whitespace runs become one underscore"""
        assert slot_key("Pakistan  Studies", 12) == "pakistan_studies_test_12"

    def test_slot_model(self):
        """SlotKey.column_name uses the same derivation"""
        assert SlotKey(subject="Pakistan Studies", test_no=3).column_name == "pakistan_studies_test_3"

    @pytest.mark.parametrize("test_no", [0, -1, 1.5, True])
    def test_invalid_test_number(self, test_no):
        """Only positive integers are test numbers"""
        with pytest.raises(ValueError):
            slot_key("Math", test_no)

    def test_report_column_for_slot(self):
        """Default header is T<n>"""
        column = ReportColumn.for_slot("Math", 4)
        assert column.header == "T4"
        assert column.key == "math_test_4"
        assert column.test_no == 4


class TestStudentRecord:
    """Tests for StudentRecord"""

    def test_store_values_coerced(self):
        """Numbers become display text, NaN and blanks become None"""
        student = StudentRecord(
            id=12,
            name="Ali",
            roll_no=3,
            marks={"math_test_1": 10.0, "math_test_2": 7.5, "math_test_3": float("nan"), "math_test_4": ""},
        )
        assert student.id == "12"
        assert student.roll_no == "3"
        assert student.marks == {
            "math_test_1": "10",
            "math_test_2": "7.5",
            "math_test_3": None,
            "math_test_4": None,
        }

    def test_missing_roll_no(self):
        """Missing roll number becomes empty text"""
        assert StudentRecord(id="1", name="A", roll_no=None).roll_no == ""

    def test_name_required(self):
        """A blank name fails validation"""
        with pytest.raises(ValidationError):
            StudentRecord(id="1", name=None)

    def test_mark_lookup(self):
        """Marks read by (subject, test) or SlotKey"""
        student = StudentRecord(id="1", name="A", marks={"urdu_test_2": "NA"})
        assert student.mark_for("Urdu", 2) == "NA"
        assert student.get_mark(SlotKey(subject="Urdu", test_no=2)) == "NA"
        assert student.mark_for("Urdu", 3) is None

    def test_cell_to_text(self):
        """Store values to text"""
        assert cell_to_text(8) == "8"
        assert cell_to_text(8.25) == "8.25"
        assert cell_to_text("A") == "A"
        assert cell_to_text(None) is None


class TestExportContext:
    """Tests for ExportContext"""

    def test_column_key(self):
        """Single-test contexts expose the column key"""
        context = ExportContext(class_name=7, subject="Math", test_no=2)
        assert context.class_name == "7"
        assert context.column_key == "math_test_2"
        assert ExportContext(class_name="7").column_key is None

    def test_bad_date(self):
        """Dates must be ISO"""
        with pytest.raises(ValidationError):
            ExportContext(class_name="7", test_date="24/11/2025")

    def test_blank_date(self):
        """Blank date means no date"""
        assert ExportContext(class_name="7", test_date="").test_date is None

    def test_max_marks_label(self):
        """Whole maximums print without decimals"""
        assert ExportContext(class_name="7", max_marks=50).max_marks_label == "50"
        assert ExportContext(class_name="7", max_marks=12.5).max_marks_label == "12.5"

    def test_config_markers(self):
        """Blank markers are rejected"""
        with pytest.raises(ValidationError):
            FormatConfig(absent_marker="  ")
