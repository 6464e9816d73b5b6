from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for structured load/save failure logging.

Each record becomes one JSON line in the error log. The key set is fixed:
timestamp, file, date_key, operation, error_type, message.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: spreadsheet file name ("<none>" when the roster had no file)
        date_key: date key of the failed operation ("" when missing)
        operation: "load" | "mark" | "save"
        error_type: error classification in UPPER_SNAKE_CASE format
        message: human readable description
    """
    timestamp: str  # ISO8601 UTC
    file: str
    date_key: str
    operation: str
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, date_key: str, operation: str, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            date_key=date_key,
            operation=operation,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
