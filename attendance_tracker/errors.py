from __future__ import annotations

"""Error taxonomy for the attendance reconciliation engine.

Every failure is local to the operation that raised it: the session passed
into an engine call is never modified, so the caller can retry or amend.
The CLI boundary maps these classes to log lines and exit codes.
"""

__all__ = [
    "AttendanceError",
    "LoadError",
    "ParseError",
    "DuplicateIdentifierError",
    "MissingDateError",
    "UnknownIdentifierError",
    "InvalidStatusError",
    "NoRosterError",
    "SerializeError",
    "EmptyRosterWarning",
]


class AttendanceError(Exception):
    """Base class for all engine failures."""

    error_type = "ATTENDANCE_ERROR"


class LoadError(AttendanceError):
    """Raised when a source file cannot be turned into a roster."""

    error_type = "LOAD_ERROR"


class ParseError(LoadError):
    """Raised when the source file cannot be decoded as a spreadsheet."""

    error_type = "PARSE_ERROR"


class DuplicateIdentifierError(LoadError):
    """Raised when two rows resolve to the same student identifier."""

    error_type = "DUPLICATE_IDENTIFIER"

    def __init__(self, identifiers: list[str]) -> None:
        self.identifiers = identifiers
        super().__init__(f"duplicate student identifiers: {identifiers}")


class MissingDateError(AttendanceError):
    """Raised when mark/load/save is invoked without a date key selected."""

    error_type = "MISSING_DATE"


class UnknownIdentifierError(AttendanceError):
    """Raised when mark targets an id that is not in the current roster."""

    error_type = "UNKNOWN_IDENTIFIER"

    def __init__(self, student_id: str) -> None:
        self.student_id = student_id
        super().__init__(f"unknown identifier: {student_id!r}")


class InvalidStatusError(AttendanceError, ValueError):
    """Raised when operator input is not a recognized attendance status."""

    error_type = "INVALID_STATUS"


class NoRosterError(AttendanceError):
    """Raised when save is requested before any roster was loaded."""

    error_type = "NO_ROSTER"


class SerializeError(AttendanceError):
    """Raised when the writer cannot produce an output file."""

    error_type = "SERIALIZE_ERROR"


class EmptyRosterWarning(UserWarning):
    """Informational: the source file held zero data rows."""
