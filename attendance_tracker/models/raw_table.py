from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

"""RawTable model: one spreadsheet sheet as read from disk.

Rows are ordered mappings header -> cell value (None for empty cells). Only
the column resolver and the writer look inside them; everything else treats
them as opaque so unrecognized columns survive a load/save round trip.

`columns` are the keys used inside rows (unique, text). `header_labels` keeps
the header cells exactly as they were in the sheet (None for a blank header,
repeated names, date or number cells) so saving writes the same header row.
Blank spacer rows are kept in `rows` but carry no student.
"""

__all__ = [
    "RawRow",
    "RawTable",
    "is_blank_row",
    "numbered_rows",
]

RawRow = dict[str, Any]


def is_blank_row(row: RawRow) -> bool:
    return all(value is None for value in row.values())


def numbered_rows(rows: Sequence[RawRow]) -> Iterator[tuple[int, RawRow]]:
    """Yield (1-based position, row) for every non-blank row.

    Positions count student rows only, so a spacer row does not shift the
    fallback ids of the rows below it.
    """
    position = 0
    for row in rows:
        if is_blank_row(row):
            continue
        position += 1
        yield position, row


@dataclass(frozen=True)
class RawTable:
    sheet_name: str  # first sheet of the workbook ("Sheet1" for csv)
    columns: list[str]  # row keys, in sheet order
    rows: list[RawRow] = field(default_factory=list)
    source_name: str | None = None  # original file name
    file_format: str = "xlsx"  # xlsx | xls | csv
    header_labels: list[Any] = field(default_factory=list)  # header cells as found

    @property
    def is_empty(self) -> bool:
        return not any(not is_blank_row(row) for row in self.rows)

    def has_column(self, name: str) -> bool:
        return name in self.columns

    def header_label(self, column: str) -> Any:
        """Original header cell for a row key; unknown keys are their own label."""
        if column in self.columns and len(self.header_labels) == len(self.columns):
            return self.header_labels[self.columns.index(column)]
        return column
