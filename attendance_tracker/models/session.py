from __future__ import annotations

from dataclasses import dataclass, field

from .raw_table import RawTable
from .store import AttendanceStore
from .student import Student

"""Session state for one operator working on one roster.

State transitions: empty -> loaded (load/begin) -> marked (mark, repeated)
-> empty (save succeeds, or reset).

Engine calls take a Session and return a new one; the object passed in is
never mutated, so a failed call leaves the caller holding valid prior state.
"""

__all__ = [
    "Session",
]


@dataclass(frozen=True)
class Session:
    students: tuple[Student, ...] = ()
    store: AttendanceStore = field(default_factory=AttendanceStore)
    date_key: str | None = None
    source: RawTable | None = None  # None when the roster has no backing file

    @classmethod
    def empty(cls) -> Session:
        return cls()

    @property
    def is_loaded(self) -> bool:
        return bool(self.students)

    @property
    def source_name(self) -> str | None:
        return self.source.source_name if self.source is not None else None

    def find(self, student_id: str) -> Student | None:
        for student in self.students:
            if student.id == student_id:
                return student
        return None
