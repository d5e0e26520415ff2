#!/usr/bin/env python3
"""
Active-column filter for master sheet views
A test slot is active when at least one student has a value recorded in it
"""

from typing import Iterable, List, Optional, Sequence

from .data_models import FormatConfig, StudentRecord, slot_key


def all_slot_numbers(config: Optional[FormatConfig] = None) -> List[int]:
    """Every test slot number, 1..max_tests"""
    return (config or FormatConfig()).all_slot_numbers()


def active_slots(
    roster: Sequence[StudentRecord],
    subject: str,
    slot_numbers: Iterable[int],
) -> List[int]:
    """Slot numbers with at least one non-empty value, ascending"""
    active = []
    for test_no in sorted(set(slot_numbers)):
        key = slot_key(subject, test_no)
        if any(student.marks.get(key) not in (None, "") for student in roster):
            active.append(test_no)
    return active


__all__ = ["all_slot_numbers", "active_slots"]
