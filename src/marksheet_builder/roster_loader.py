#!/usr/bin/env python3
"""
ROSTER LOADER - CSV class tables into naturally sorted StudentRecord lists
Local stand-in for the remote table-per-class store

CSV FORMAT:
id, name, roll_no, <subject>_test_<n>, ...   (e.g. math_test_1, pakistan_studies_test_3)

LOADING RULES:
✅ Every cell read as text; "NA" stays the not-attempted marker, not a missing value
✅ Blank cells become empty (None)
✅ Numeric marks normalized for display (10.0 -> "10")
✅ Rows without a name are reported and skipped
✅ Roster sorted by roll number with natural ordering ("2" before "10")

UPDATES:
- initialize_roster: fresh class from a list of names (title-cased, roll 1..N)
- apply_mark_update: commit one edited cell, returns a new roster
- save_roster: write the roster back to CSV

Priority: HIGH - Roster provider for every report
Dependencies: pandas, pydantic
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union
from uuid import uuid4

import pandas as pd
from pydantic import ValidationError

from .data_models import SlotKey, StudentRecord, cell_to_text
from .formatters import sort_roster, title_case
from .mark_classifier import normalize_entry, parse_mark

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["name"]
BASE_COLUMNS = ["id", "name", "roll_no"]
MARK_COLUMN_PATTERN = re.compile(r"^.+_test_\d+$")


def _clean_cell(value) -> Optional[str]:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return None
    text = str(value).strip()
    return text if text != "" else None


def _display_mark(value: Optional[str]) -> Optional[str]:
    number = parse_mark(value)
    if number is not None:
        return cell_to_text(number)
    return value


class RosterLoader:
    """Load and validate a class roster CSV"""

    def __init__(self, csv_path: Union[str, Path]):
        self.csv_path = Path(csv_path)

        self.students: List[StudentRecord] = []
        self.mark_columns: List[str] = []

        # Validation results
        self.validation_errors: List[str] = []
        self.validation_warnings: List[str] = []

    def load(self) -> bool:
        """Load the roster; False when the file is unusable"""
        self.students = []
        self.validation_errors = []
        self.validation_warnings = []

        try:
            logger.info(f"📊 Loading roster from: {self.csv_path}")
            df = pd.read_csv(
                self.csv_path,
                dtype=str,
                keep_default_na=False,
                na_values=[""],
                encoding="utf-8-sig",
            )
        except Exception as e:
            self.validation_errors.append(f"Failed to load roster: {e}")
            logger.error(f"  ❌ Failed to load roster: {e}")
            return False

        df.columns = [str(col).strip() for col in df.columns]
        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            self.validation_errors.append(f"Roster missing critical columns: {missing}")
            logger.error(f"  ❌ Roster missing critical columns: {missing}")
            return False

        self.mark_columns = [col for col in df.columns if MARK_COLUMN_PATTERN.match(col)]
        ignored = [col for col in df.columns if col not in BASE_COLUMNS and col not in self.mark_columns]
        if ignored:
            self.validation_warnings.append(f"Ignored columns: {ignored}")
            logger.warning(f"  ⚠️ Ignored columns: {ignored}")

        students = []
        for index, row in df.iterrows():
            record_id = _clean_cell(row.get("id")) or str(index + 1)
            try:
                student = StudentRecord(
                    id=record_id,
                    name=_clean_cell(row.get("name")),
                    roll_no=_clean_cell(row.get("roll_no")) or "",
                    marks={col: _display_mark(_clean_cell(row[col])) for col in self.mark_columns},
                )
            except ValidationError as e:
                self.validation_warnings.append(f"Skipping row {index + 2}: {e.errors()[0]['msg']}")
                logger.warning(f"  ⚠️ Skipping row {index + 2}: {e.errors()[0]['msg']}")
                continue
            students.append(student)

        seen_ids = set()
        for student in students:
            if student.id in seen_ids:
                self.validation_warnings.append(f"Duplicate student id: {student.id}")
            seen_ids.add(student.id)

        self.students = sort_roster(students)
        logger.info(f"  ✅ Loaded {len(self.students)} students, {len(self.mark_columns)} mark columns")
        return True


def load_roster(csv_path: Union[str, Path]) -> List[StudentRecord]:
    """Load a roster CSV; raises ValueError when it cannot be used"""
    loader = RosterLoader(csv_path)
    if not loader.load():
        raise ValueError("; ".join(loader.validation_errors))
    return loader.students


def initialize_roster(names: Sequence[str]) -> List[StudentRecord]:
    """New class roster: roll numbers 1..N in the given order, title-cased names"""
    return [
        StudentRecord(id=str(uuid4()), name=title_case(name), roll_no=str(position))
        for position, name in enumerate(names, 1)
    ]


def apply_mark_update(
    roster: Sequence[StudentRecord],
    student_id: str,
    slot: Union[SlotKey, str],
    raw_value,
) -> List[StudentRecord]:
    """
    Commit one edited cell

    Args:
        roster: Current roster
        student_id: Row to update
        slot: SlotKey or column key
        raw_value: Value as typed; normalized before it is stored

    Returns:
        New roster list with the updated row replaced
    """
    column = slot.column_name if isinstance(slot, SlotKey) else slot
    value = normalize_entry(raw_value)

    updated = []
    found = False
    for student in roster:
        if student.id == student_id:
            marks = dict(student.marks)
            marks[column] = value
            student = student.model_copy(update={"marks": marks})
            found = True
        updated.append(student)

    if not found:
        raise KeyError(f"Student {student_id} not found")
    logger.debug(f"Set {column}={value!r} for student {student_id}")
    return updated


def save_roster(roster: Sequence[StudentRecord], csv_path: Union[str, Path]) -> Path:
    """Write a roster back to CSV (blank cells for empty marks)"""
    mark_columns: List[str] = []
    for student in roster:
        for key in student.marks:
            if key not in mark_columns:
                mark_columns.append(key)

    records: List[Dict[str, str]] = []
    for student in roster:
        record = {"id": student.id, "name": student.name, "roll_no": student.roll_no}
        for key in mark_columns:
            record[key] = student.marks.get(key) or ""
        records.append(record)

    path = Path(csv_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(records, columns=BASE_COLUMNS + mark_columns).to_csv(path, index=False)
    logger.info(f"💾 Saved {len(records)} students to {path}")
    return path


__all__ = [
    "RosterLoader",
    "load_roster",
    "initialize_roster",
    "apply_mark_update",
    "save_roster",
]
