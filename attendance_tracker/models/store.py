from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

from ..errors import UnknownIdentifierError
from .student import AttendanceStatus, Student

"""In-memory attendance store (id -> status).

The store is the single mutable source of truth for a session. There is no
history and no undo: the latest mark for an id wins.

Precondition for mark(): initialize() has completed and no save projection is
reading the store. The engine never shares a store between sessions (it copies
before mutating), and callers must not issue marks while a load or save is in
flight.
"""

__all__ = [
    "AttendanceStore",
]


class AttendanceStore:
    def __init__(self) -> None:
        self._entries: dict[str, AttendanceStatus] = {}

    def initialize(self, students: Iterable[Student]) -> None:
        """Replace the whole mapping from a freshly merged roster."""
        entries: dict[str, AttendanceStatus] = {}
        for student in students:
            entries[student.id] = student.status or AttendanceStatus.ABSENT
        self._entries = entries

    def mark(self, student_id: str, status: AttendanceStatus) -> None:
        if student_id not in self._entries:
            raise UnknownIdentifierError(student_id)
        self._entries[student_id] = status

    def snapshot(self) -> Mapping[str, AttendanceStatus]:
        return MappingProxyType(dict(self._entries))

    def copy(self) -> AttendanceStore:
        clone = AttendanceStore()
        clone._entries = dict(self._entries)
        return clone

    def get(self, student_id: str) -> AttendanceStatus | None:
        return self._entries.get(student_id)

    def __contains__(self, student_id: object) -> bool:
        return student_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
