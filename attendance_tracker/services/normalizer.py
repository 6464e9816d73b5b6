from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from ..errors import DuplicateIdentifierError
from ..excel.columns import ColumnMap, cell_text, row_identifier
from ..models.raw_table import RawRow, numbered_rows
from ..models.student import DEFAULT_COURSE, DEFAULT_SEMESTER, Student

"""Record normalizer: RawRow sequence -> Student sequence.

Pure function of (rows, resolved columns). Row order is kept and the 1-based
row position drives the fallback id (temp-<n>) and name (Student <n>).
Blank spacer rows yield no student and are not counted.
"""

__all__ = [
    "normalize_rows",
]


def _text_or(row: RawRow, column: str | None, default: str) -> str:
    if column is None:
        return default
    return cell_text(row.get(column)) or default


def normalize_rows(rows: Sequence[RawRow], columns: ColumnMap) -> list[Student]:
    """Build canonical students; status is left unset for the merge step.

    Raises:
        DuplicateIdentifierError: two rows resolve to the same id
    """
    students: list[Student] = []
    for position, row in numbered_rows(rows):
        students.append(
            Student(
                id=row_identifier(row, columns.identifier, position),
                name=_text_or(row, columns.name, f"Student {position}"),
                course=_text_or(row, columns.course, DEFAULT_COURSE),
                semester=_text_or(row, columns.semester, DEFAULT_SEMESTER),
            )
        )

    counts = Counter(s.id for s in students)
    duplicates = [sid for sid, n in counts.items() if n > 1]
    if duplicates:
        raise DuplicateIdentifierError(duplicates)
    return students
