from __future__ import annotations

from dataclasses import dataclass

"""Attendance counts for the SUMMARY output line."""


@dataclass(frozen=True)
class AttendanceSummary:
    date_key: str  # "-" when no date is selected
    total: int
    present: int
    absent: int

    @property
    def present_ratio(self) -> float:
        if self.total == 0:
            return 0.0
        return self.present / self.total
