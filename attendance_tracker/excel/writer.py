from __future__ import annotations

import io
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import pandas as pd

from ..errors import SerializeError
from ..models.raw_table import RawRow, RawTable, is_blank_row
from ..models.student import AttendanceStatus, Student
from .columns import resolve_columns, row_identifier

"""Spreadsheet writer: attendance store -> rows -> file bytes.

Round-trip guarantee: when the session started from a file, every row and
every column of that file is emitted in its original order under its original
header cell; only the cells under the date header of rows with a store entry
change. A date header that did not exist yet is appended after the existing
columns. Blank spacer rows are written back where they were.
"""

__all__ = [
    "CANONICAL_HEADERS",
    "XLSX_MEDIA_TYPE",
    "CSV_MEDIA_TYPE",
    "project_rows",
    "header_labels",
    "write_table",
]

logger = logging.getLogger(__name__)

CANONICAL_HEADERS = ("Roll No", "Name", "Course", "Semester")
XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv"


def _project_source(
    snapshot: Mapping[str, AttendanceStatus],
    date_key: str,
    table: RawTable,
    aliases: Mapping[str, Sequence[str]] | None,
) -> tuple[list[str], list[RawRow]]:
    columns = resolve_columns(table.columns, date_key, aliases)
    header = list(table.columns)
    if date_key not in header:
        header.append(date_key)

    rows: list[RawRow] = []
    updated = 0
    position = 0
    for source_row in table.rows:
        row = dict(source_row)
        if is_blank_row(source_row):
            rows.append(row)
            continue
        position += 1  # same numbering as numbered_rows
        status = snapshot.get(row_identifier(source_row, columns.identifier, position))
        if status is not None:
            row[date_key] = status.code
            updated += 1
        else:
            row.setdefault(date_key, None)
        rows.append(row)
    logger.debug(f"projected {updated}/{len(rows)} rows onto column '{date_key}'")
    return header, rows


def _synthesize(
    snapshot: Mapping[str, AttendanceStatus],
    date_key: str,
    students: Sequence[Student],
) -> tuple[list[str], list[RawRow]]:
    header = [*CANONICAL_HEADERS, date_key]
    rows: list[RawRow] = []
    for student in students:
        status = snapshot.get(student.id, AttendanceStatus.ABSENT)
        rows.append(
            {
                "Roll No": student.id,
                "Name": student.name,
                "Course": student.course,
                "Semester": student.semester,
                date_key: status.code,
            }
        )
    return header, rows


def project_rows(
    snapshot: Mapping[str, AttendanceStatus],
    date_key: str,
    table: RawTable | None = None,
    students: Sequence[Student] = (),
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> tuple[list[str], list[RawRow]]:
    """Project the store onto the original rows, or synthesize a sheet.

    Args:
        snapshot: read-only store mapping id -> status
        date_key: header of the attendance column to write
        table: rows as loaded, or None when no file backs the roster
        students: roster used only when synthesizing
        aliases: identifier alias override (same as used at load time)
    """
    if table is not None and not table.is_empty:
        return _project_source(snapshot, date_key, table, aliases)
    return _synthesize(snapshot, date_key, students)


def header_labels(columns: Sequence[str], table: RawTable | None) -> list[Any]:
    """Header cells to write for projected columns (source cells where known)."""
    if table is None or table.is_empty:
        return list(columns)
    return [table.header_label(column) for column in columns]


def write_table(
    columns: list[str],
    rows: list[RawRow],
    sheet_name: str = "Attendance",
    file_format: str = "xlsx",
    labels: Sequence[Any] | None = None,
) -> bytes:
    """Serialize one sheet. Raises SerializeError on any writer failure.

    `columns` are the row keys; `labels` (default: the keys) is the header row
    as written, where None leaves the header cell empty.
    """
    header = list(labels) if labels is not None else list(columns)
    try:
        # header goes in as a data row so blank, repeated and typed cells survive
        df = pd.DataFrame([header, *([row.get(c) for c in columns] for row in rows)], dtype=object)
        if file_format == "csv":
            return df.to_csv(index=False, header=False).encode("utf-8")
        buffer = io.BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=sheet_name[:31] or "Attendance", index=False, header=False)
        return buffer.getvalue()
    except Exception as e:  # pandas/openpyxl raise ValueError, TypeError, IllegalCharacterError...
        raise SerializeError(f"cannot write sheet '{sheet_name}': {e}") from e
