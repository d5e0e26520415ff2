"""
Pytest Configuration and Fixtures

Provides common fixtures for all tests including:
- Sample class rosters
- Format config and export contexts
- Test date store
- Roster CSV files
"""

import pytest

from marksheet_builder.data_models import ExportContext, FormatConfig, StudentRecord
from marksheet_builder.date_store import TestDateStore


@pytest.fixture
def format_config():
    """Default formatting constants"""
    return FormatConfig()


@pytest.fixture
def scenario_roster():
    """Two-student roster with one math test"""
    return [
        StudentRecord(id="s1", name="Ali Khan", roll_no="1", marks={"math_test_1": "10"}),
        StudentRecord(id="s2", name="Sara", roll_no="2", marks={"math_test_1": "A"}),
    ]


@pytest.fixture
def master_roster():
    """Math marks recorded in tests 1 and 3 only, plus one English mark"""
    return [
        StudentRecord(
            id="s1",
            name="Muhammad Ali",
            roll_no="1",
            marks={"math_test_1": "8", "math_test_3": "10", "english_test_2": "7"},
        ),
        StudentRecord(
            id="s2",
            name="Sara Ahmed",
            roll_no="2",
            marks={"math_test_1": "A", "math_test_3": "NA"},
        ),
        StudentRecord(id="s3", name="Bilal", roll_no="10", marks={}),
    ]


@pytest.fixture
def entry_context():
    """Class 7 Math Test 1 out of 20, dated 24 Nov 2025"""
    return ExportContext(class_name="7", subject="Math", test_no=1, max_marks=20, test_date="2025-11-24")


@pytest.fixture
def master_context():
    """Class 7 Math master sheet"""
    return ExportContext(class_name="7", subject="Math")


@pytest.fixture
def date_store(tmp_path):
    """Date store persisted under the test's tmp directory"""
    return TestDateStore(tmp_path / "test_dates.json")


@pytest.fixture
def roster_csv(tmp_path):
    """Roster CSV in store order (unsorted roll numbers, mixed cell types)"""
    path = tmp_path / "class_7.csv"
    path.write_text(
        "id,name,roll_no,math_test_1,math_test_2,pakistan_studies_test_1,notes\n"
        "u10,Bilal Shah,10,9.0,,NA,late\n"
        "u2,Sara Ahmed,2,A,7.5,,\n"
        "u1,Muhammad Ali,1,10,na,15,\n",
        encoding="utf-8",
    )
    return path
