"""Attendance tracker: load a roster spreadsheet, mark attendance for a date,
write the roster back without losing any of its columns."""

__version__ = "0.1.0"
