from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from ..excel.columns import ColumnMap, row_identifier
from ..models.raw_table import RawRow, numbered_rows
from ..models.student import AttendanceStatus, Student

"""Attendance merge engine.

The date column is both the write target and the read source of a file:
loading a sheet that already has a column for the date restores the marks
stored there instead of resetting everybody to Absent.

Merge mode is triggered by the presence of the date header itself. A sheet
whose first row happens to have a blank cell under the date still merges the
marks found on later rows.
"""

__all__ = [
    "collect_prior_marks",
    "merge_attendance",
]

logger = logging.getLogger(__name__)


def collect_prior_marks(rows: Sequence[RawRow], columns: ColumnMap) -> dict[str, Any] | None:
    """Raw cells under the date column keyed by row identifier.

    Returns None when the sheet has no column for the date (first time the
    date is marked). Blank cells are omitted so they fall back to the default.
    """
    if not columns.has_status_column:
        return None
    prior: dict[str, Any] = {}
    for position, row in numbered_rows(rows):
        value = row.get(columns.status)  # type: ignore[arg-type]
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        prior[row_identifier(row, columns.identifier, position)] = value
    return prior


def merge_attendance(
    students: Sequence[Student],
    prior: Mapping[str, Any] | None,
) -> list[Student]:
    """Populate status for every student.

    Prior value present -> coerced to P/A (unknown codes read as Absent);
    otherwise Absent.
    """
    prior = prior or {}
    merged: list[Student] = []
    unknown_codes = 0
    for student in students:
        if student.id in prior:
            raw = prior[student.id]
            status = AttendanceStatus.from_cell(raw)
            if status is AttendanceStatus.ABSENT and str(raw).strip().upper() not in ("A", "ABSENT"):
                unknown_codes += 1
        else:
            status = AttendanceStatus.ABSENT
        merged.append(student.with_status(status))
    if unknown_codes:
        logger.warning(f"{unknown_codes} unrecognized attendance code(s) read as Absent")
    return merged
