from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from ..errors import InvalidStatusError

"""Student domain model and AttendanceStatus enum.

A Student is the canonical record inferred from one spreadsheet row. Once a
roster is loaded the list of students is display metadata only; the mutable
attendance state lives in the AttendanceStore.
"""

__all__ = [
    "AttendanceStatus",
    "Student",
    "DEFAULT_COURSE",
    "DEFAULT_SEMESTER",
]

DEFAULT_COURSE = "N/A"
DEFAULT_SEMESTER = "N/A"

_PRESENT_MARKERS = frozenset({"P", "PRESENT"})


class AttendanceStatus(Enum):
    """Two-value attendance domain, stored in spreadsheets as P / A.

    Cells written by hand may contain other text; anything that is not a
    Present marker reads as ABSENT so unknown codes never leak into the store.
    """
    PRESENT = "P"
    ABSENT = "A"

    @property
    def code(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return "Present" if self is AttendanceStatus.PRESENT else "Absent"

    @classmethod
    def from_cell(cls, value: Any) -> AttendanceStatus:
        """Coerce a raw spreadsheet cell into the two-value domain."""
        if isinstance(value, AttendanceStatus):
            return value
        if value is None:
            return cls.ABSENT
        if str(value).strip().upper() in _PRESENT_MARKERS:
            return cls.PRESENT
        return cls.ABSENT

    @classmethod
    def parse(cls, text: str) -> AttendanceStatus:
        """Strict parse for operator input (P/A/Present/Absent)."""
        upper = text.strip().upper()
        if upper in _PRESENT_MARKERS:
            return cls.PRESENT
        if upper in ("A", "ABSENT"):
            return cls.ABSENT
        raise InvalidStatusError(f"invalid attendance status: {text!r}")


@dataclass(frozen=True)
class Student:
    """Canonical roster entry.

    `status` stays None between normalization and merge; every student handed
    out by the engine has it set.
    """
    id: str
    name: str
    course: str = DEFAULT_COURSE
    semester: str = DEFAULT_SEMESTER
    status: AttendanceStatus | None = None

    def with_status(self, status: AttendanceStatus) -> Student:
        return replace(self, status=status)
