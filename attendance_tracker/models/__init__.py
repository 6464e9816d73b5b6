"""Domain models for the attendance tracker.

Students and the attendance status enum, the raw sheet representation used
for lossless write-back, the attendance store and the session that ties them
together.
"""

from .attendance_summary import AttendanceSummary
from .error_record import ErrorRecord
from .raw_table import RawRow, RawTable
from .session import Session
from .store import AttendanceStore
from .student import AttendanceStatus, Student

__all__ = [
    # Roster models
    "AttendanceStatus",
    "Student",
    "AttendanceStore",
    "Session",
    "AttendanceSummary",
    # Sheet models
    "RawRow",
    "RawTable",
    # Logging models
    "ErrorRecord",
]
