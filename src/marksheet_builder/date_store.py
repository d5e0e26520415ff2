#!/usr/bin/env python3
"""
TEST DATE STORE - Per-test dates kept in a small JSON key-value file
Keys follow the entry screen's format: date_{class}_{subject}_{test}

OPERATIONS:
✅ get / set a test date (ISO YYYY-MM-DD)
✅ lookup(class, subject, test) for master sheet headers
✅ date_or_today for the single-test view default

A missing or unreadable file is treated as an empty store.

Priority: MEDIUM - Only master sheet headers and entry titles use dates
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Dict, Optional

from .data_models import ISO_DATE_PATTERN

logger = logging.getLogger(__name__)


def date_key(class_name: str, subject: str, test_no: int) -> str:
    return f"date_{class_name}_{subject}_{test_no}"


class TestDateStore:
    """JSON-backed store of test dates"""

    # Not a pytest test class
    __test__ = False

    def __init__(self, path: Optional[Path] = None):
        """
        Args:
            path: JSON file to persist to; None keeps dates in memory only
        """
        self.path = Path(path) if path is not None else None
        self.dates: Dict[str, str] = {}
        self._load()

    def _load(self):
        if self.path is None or not self.path.exists():
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"⚠️ Could not read test dates from {self.path}: {e}")
            return
        if not isinstance(data, dict):
            logger.warning(f"⚠️ Ignoring test date file {self.path}: expected a JSON object")
            return
        self.dates = {str(k): str(v) for k, v in data.items() if v}
        logger.debug(f"Loaded {len(self.dates)} test dates from {self.path}")

    def _save(self):
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self.dates, f, indent=2, sort_keys=True)

    def get(self, class_name: str, subject: str, test_no: int) -> Optional[str]:
        """Recorded ISO date, None when none is saved"""
        return self.dates.get(date_key(class_name, subject, test_no))

    def set(self, class_name: str, subject: str, test_no: int, iso_date: str):
        """Record a test date and persist the store"""
        if not ISO_DATE_PATTERN.match(iso_date or ""):
            raise ValueError(f'Test date must be in format "YYYY-MM-DD", got: {iso_date}')
        self.dates[date_key(class_name, subject, test_no)] = iso_date
        self._save()
        logger.info(f"📅 Saved date {iso_date} for Class {class_name} {subject} Test {test_no}")

    def lookup(self, class_name: str, subject: str, test_no: int) -> Optional[str]:
        """Date-lookup provider for workbook headers"""
        return self.get(class_name, subject, test_no)

    def date_or_today(self, class_name: str, subject: str, test_no: int) -> str:
        """Recorded date, or today's date when none is saved"""
        return self.get(class_name, subject, test_no) or date.today().isoformat()


__all__ = ["date_key", "TestDateStore"]
