from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from ..models.raw_table import RawRow

"""Column resolver: heterogeneous sheet headers -> canonical fields.

Resolution is a single explicit step producing a ColumnMap. It is run again
for every load and every save (never cached) because the header set can
differ between the two, e.g. when save synthesizes a fresh sheet.

Header matching is case-sensitive and first-match-wins over each alias list.
"""

__all__ = [
    "DEFAULT_ALIASES",
    "ColumnMap",
    "resolve_columns",
    "cell_text",
    "row_identifier",
    "synthetic_id",
]

DEFAULT_ALIASES: dict[str, tuple[str, ...]] = {
    "identifier": ("rollno", "Roll No", "Roll", "ID"),
    "name": ("name", "Name", "Student Name"),
    "course": ("Course", "department"),
    "semester": ("semester", "Semester", "Sem"),
}


@dataclass(frozen=True)
class ColumnMap:
    """Resolved header name per canonical field (None = unresolved)."""
    identifier: str | None
    name: str | None
    course: str | None
    semester: str | None
    status: str | None  # header equal to the date key, if present

    @property
    def has_status_column(self) -> bool:
        return self.status is not None


def _first_present(headers: set[str], candidates: Iterable[str]) -> str | None:
    for candidate in candidates:
        if candidate in headers:
            return candidate
    return None


def resolve_columns(
    headers: Sequence[str],
    date_key: str | None,
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> ColumnMap:
    """Map the header set of a sheet to canonical fields.

    Parameters
    ----------
    headers: column names of the sheet (order irrelevant)
    date_key: attendance date; the status column is the header equal to it
    aliases: per-field priority lists overriding DEFAULT_ALIASES
    """
    table = dict(DEFAULT_ALIASES)
    if aliases:
        table.update({k: tuple(v) for k, v in aliases.items() if k in table})
    present = set(headers)
    return ColumnMap(
        identifier=_first_present(present, table["identifier"]),
        name=_first_present(present, table["name"]),
        course=_first_present(present, table["course"]),
        semester=_first_present(present, table["semester"]),
        status=date_key if date_key and date_key in present else None,
    )


def cell_text(value: Any) -> str:
    """Render a cell for use as identifier/display text ('' for empty).

    Integral floats lose their fraction so that a roll number read as 1.0
    from a sparse numeric column joins with the same roll number read as 1.
    """
    if value is None:
        return ""
    if not isinstance(value, str) and pd.isna(value):
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def synthetic_id(position: int) -> str:
    return f"temp-{position}"


def row_identifier(row: RawRow, column: str | None, position: int) -> str:
    """Identifier of the row at 1-based `position`.

    Shared by the normalizer and the writer so both sides derive the same id
    for a row, including rows that only get a synthetic id.
    """
    if column is not None:
        text = cell_text(row.get(column))
        if text:
            return text
    return synthetic_id(position)
