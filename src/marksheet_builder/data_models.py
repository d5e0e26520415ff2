#!/usr/bin/env python3
"""
DATA MODELS - Pydantic schemas for class rosters, test slots and export settings
Type-safe data structures shared by the classifier, aggregator and renderers

COMPREHENSIVE DATA VALIDATION:
✅ Student Records: id, display name, roll number, per-slot cell values
✅ Test Slots: (subject, test number) pairs with one derived column key
✅ Aggregates: count / total / average of the numeric cells in a row
✅ Format Config: widths, markers and colours used by every renderer
✅ Export Context: class, subject, test number, max marks and test date

VALIDATION RULES:
- Student ids and names are required, roll numbers default to ""
- Cell values are stored as display text ("10", "7.5", "A", "NA") or None
- Test numbers must be positive integers
- Test dates, when present, must be ISO "YYYY-MM-DD" strings

Priority: CRITICAL - Foundation for all formatting and export
Dependencies: Pydantic for validation
"""

import math
import re
from enum import Enum
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Subjects offered across classes 3-10
SUBJECTS = [
    "English",
    "Math",
    "Science",
    "Urdu",
    "Islamiat",
    "Sindhi",
    "Pakistan Studies",
    "Computer",
    "Chemistry",
    "Physics",
    "Biology",
]

CLASS_LEVELS = ["3", "4", "5", "6", "7", "8", "9", "10"]

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def slot_key(subject: str, test_no: int) -> str:
    """
    Derive the column key for a (subject, test number) slot

    "Pakistan Studies", 3 -> "pakistan_studies_test_3"
    """
    if isinstance(test_no, bool) or not isinstance(test_no, int) or test_no < 1:
        raise ValueError(f"Test number must be a positive integer, got: {test_no!r}")
    normalized = re.sub(r"\s+", "_", subject.lower())
    return f"{normalized}_test_{test_no}"


def cell_to_text(value) -> Optional[str]:
    """Coerce a raw store value (str, int, float, None, NaN) to stored cell text"""
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return str(int(value))
        return str(value)
    text = str(value)
    return text if text != "" else None


class MarkStatus(str, Enum):
    """Semantic status of a single mark cell"""
    EMPTY = "empty"
    ABSENT = "absent"
    NOT_ATTEMPTED = "not_attempted"
    VALID = "valid"
    INVALID = "invalid"


class SlotKey(BaseModel):
    """One addressable (subject, test number) position on a student row"""

    model_config = ConfigDict(frozen=True)

    subject: str = Field(..., description="Subject display name, e.g. 'Pakistan Studies'")
    test_no: int = Field(..., ge=1, description="Test number, 1-based")

    @property
    def column_name(self) -> str:
        """Column key used in the table store"""
        return slot_key(self.subject, self.test_no)


class StudentRecord(BaseModel):
    """A single student row from a class table"""

    id: str = Field(..., description="Opaque row identifier, unique per roster")
    name: str = Field(..., description="Display name")
    roll_no: str = Field("", description="Roll number, compared with natural ordering")
    marks: Dict[str, Optional[str]] = Field(
        default_factory=dict, description="Column key -> stored cell text"
    )

    @field_validator("id", "name", mode="before")
    @classmethod
    def coerce_required_text(cls, v):
        """Numeric ids/names from CSV become text"""
        text = cell_to_text(v)
        if text is None:
            raise ValueError("value is required")
        return text

    @field_validator("roll_no", mode="before")
    @classmethod
    def coerce_roll_no(cls, v):
        """Roll numbers are text; blanks become empty string"""
        return cell_to_text(v) or ""

    @field_validator("marks", mode="before")
    @classmethod
    def coerce_marks(cls, v):
        """Store every cell as display text or None"""
        if v is None:
            return {}
        return {str(key): cell_to_text(val) for key, val in dict(v).items()}

    def get_mark(self, slot: SlotKey) -> Optional[str]:
        """Stored value for a slot, None when empty"""
        return self.marks.get(slot.column_name)

    def mark_for(self, subject: str, test_no: int) -> Optional[str]:
        """Stored value for (subject, test number)"""
        return self.marks.get(slot_key(subject, test_no))


class ReportColumn(BaseModel):
    """A mark column as rendered in a table"""

    model_config = ConfigDict(frozen=True)

    header: str = Field(..., description="Header label shown to the reader")
    key: str = Field(..., description="Column key looked up on each StudentRecord")
    test_no: Optional[int] = Field(None, description="Test number when the column is a test slot")

    @classmethod
    def for_slot(cls, subject: str, test_no: int, header: Optional[str] = None) -> "ReportColumn":
        return cls(
            header=header if header is not None else f"T{test_no}",
            key=slot_key(subject, test_no),
            test_no=test_no,
        )


class MarkAggregate(BaseModel):
    """Count / total / average over the numeric cells of one row"""

    count: int = Field(0, ge=0, description="Number of numeric cells")
    total: Optional[float] = Field(None, description="Sum of numeric cells, None when count is 0")
    average: Optional[float] = Field(None, description="total / count, None when count is 0")

    @property
    def has_values(self) -> bool:
        return self.count > 0


class FormatConfig(BaseModel):
    """Formatting constants shared by the text, markup and workbook renderers"""

    name_width_cap: int = Field(12, ge=1, description="Name column width in text tables")
    absent_marker: str = Field("A", description="Marker for an absent student")
    not_attempted_marker: str = Field("NA", description="Marker for a test not attempted")
    absent_color: str = Field("#dc2626", description="Markup colour for absent cells")
    not_attempted_color: str = Field("#d97706", description="Markup colour for not-attempted cells")
    default_color: str = Field("#000000", description="Markup colour for every other cell")
    missing_placeholder: str = Field("-", description="Shown for empty marks and absent aggregates")

    max_tests: int = Field(20, ge=1, description="Test slots per subject")
    max_mark: float = Field(100, description="Numbers above this are flagged out of range")

    entry_marks_width: int = Field(5, ge=1, description="Marks column width, single-test text table")
    master_marks_width: int = Field(3, ge=1, description="Per-test column width, master text table")
    master_roll_width: int = Field(3, ge=1, description="Minimum roll column width, master text table")

    sheet_name_limit: int = Field(31, ge=1, description="Workbook sheet title limit")
    roll_col_width: float = Field(8, description="Workbook roll column width")
    name_col_width: float = Field(25, description="Workbook name column width")
    entry_marks_col_width: float = Field(10, description="Workbook marks column width, single test")
    master_test_col_width: float = Field(18, description="Workbook test column width, master sheet")
    aggregate_col_width: float = Field(10, description="Workbook Total/Avg column width")

    @field_validator("absent_marker", "not_attempted_marker")
    @classmethod
    def markers_not_blank(cls, v):
        if not v.strip():
            raise ValueError("markers must not be blank")
        return v.strip()

    def all_slot_numbers(self) -> List[int]:
        return list(range(1, self.max_tests + 1))


class ExportContext(BaseModel):
    """Which class/subject/test a report is produced for"""

    class_name: str = Field(..., description="Class level, e.g. '7'")
    subject: Optional[str] = Field(None, description="Subject display name")
    test_no: Optional[int] = Field(None, ge=1, description="Test number for single-test views")
    max_marks: float = Field(100, gt=0, description="Maximum marks for the test")
    test_date: Optional[str] = Field(None, description="ISO date of the test")

    @field_validator("class_name", mode="before")
    @classmethod
    def coerce_class_name(cls, v):
        return str(v)

    @field_validator("test_date")
    @classmethod
    def validate_test_date(cls, v):
        """Accept ISO dates only; blank means no date"""
        if v is None or v == "":
            return None
        if not ISO_DATE_PATTERN.match(v):
            raise ValueError(f'Test date must be in format "YYYY-MM-DD", got: {v}')
        return v

    @property
    def column_key(self) -> Optional[str]:
        """Column key for single-test views"""
        if self.subject and self.test_no:
            return slot_key(self.subject, self.test_no)
        return None

    @property
    def max_marks_label(self) -> str:
        """100.0 -> '100', 12.5 -> '12.5'"""
        return cell_to_text(float(self.max_marks)) or ""


CellAccessor = Callable[[StudentRecord, ReportColumn], Optional[str]]


def default_cell_accessor(student: StudentRecord, column: ReportColumn) -> Optional[str]:
    """Read a column's stored value from the student row"""
    return student.marks.get(column.key)


# Export all models
__all__ = [
    "SUBJECTS",
    "CLASS_LEVELS",
    "slot_key",
    "cell_to_text",
    "MarkStatus",
    "SlotKey",
    "StudentRecord",
    "ReportColumn",
    "MarkAggregate",
    "FormatConfig",
    "ExportContext",
    "CellAccessor",
    "default_cell_accessor",
]
