from __future__ import annotations

from ..models.attendance_summary import AttendanceSummary
from ..models.session import Session
from ..models.student import AttendanceStatus

"""Attendance counts and SUMMARY line rendering.

Format:
SUMMARY date={date} students={total} present={present} absent={absent} rate={pct}

render_summary_body renders the part after the label, for callers whose log
formatter adds the SUMMARY label itself.
"""

__all__ = [
    "SUMMARY_LABEL",
    "summarize",
    "render_summary_body",
    "render_summary_line",
]

SUMMARY_LABEL = "SUMMARY"


def summarize(session: Session) -> AttendanceSummary:
    snapshot = session.store.snapshot()
    present = sum(1 for status in snapshot.values() if status is AttendanceStatus.PRESENT)
    return AttendanceSummary(
        date_key=session.date_key or "-",
        total=len(snapshot),
        present=present,
        absent=len(snapshot) - present,
    )


def render_summary_body(summary: AttendanceSummary) -> str:
    """Key=value fields of the SUMMARY line, without the label.

    The rate is a whole-number percentage; an empty roster renders rate=0.
    """
    rate = round(summary.present_ratio * 100)
    return (
        f"date={summary.date_key} "
        f"students={summary.total} "
        f"present={summary.present} "
        f"absent={summary.absent} "
        f"rate={rate}"
    )


def render_summary_line(summary: AttendanceSummary) -> str:
    """Render a full SUMMARY line.

    Examples:
        >>> render_summary_line(AttendanceSummary("2024-01-01", total=4, present=3, absent=1))
        'SUMMARY date=2024-01-01 students=4 present=3 absent=1 rate=75'
    """
    return f"{SUMMARY_LABEL} {render_summary_body(summary)}"
