from __future__ import annotations

import io
from datetime import date, datetime
from pathlib import Path
from typing import Any, Union

import pandas as pd

from ..errors import ParseError
from ..models.raw_table import RawRow, RawTable

"""Spreadsheet reader: file -> RawTable.

- Only the first sheet is read; its first row is the header row.
- Cells are read as objects so every value keeps its own type (no column-wide
  float upcasting of roll numbers).
- Only truly empty cells become None. Strings such as "NA" or "N/A" that pandas
  treats as missing by default are kept verbatim so that saving writes them
  back unchanged.
- Header cells become unique text keys for the rows (blank -> "Unnamed: <i>",
  repeats -> "Name.1", dates -> ISO text); the cells themselves are kept as
  header_labels for the writer.
- Rows where every cell is empty stay in the table as spacers.
"""

__all__ = [
    "SUPPORTED_SUFFIXES",
    "SourceFile",
    "read_roster_file",
    "normalize_sheet",
]

SUPPORTED_SUFFIXES = {".xlsx": "xlsx", ".xlsm": "xlsx", ".xls": "xls", ".csv": "csv"}

# Either a path on disk or an in-memory upload (file name, content bytes)
SourceFile = Union[Path, str, tuple[str, bytes]]


def _file_format(name: str) -> str:
    suffix = Path(name).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ParseError(f"unsupported file type '{suffix or name}' (expected .xlsx, .xls or .csv)")
    return SUPPORTED_SUFFIXES[suffix]


def _read_frame(buffer: io.BytesIO, file_format: str) -> tuple[str, pd.DataFrame]:
    if file_format == "csv":
        df = pd.read_csv(
            buffer, header=None, dtype=object, keep_default_na=False, na_values=[""],
        )
        return "Sheet1", df
    engine = "openpyxl" if file_format == "xlsx" else "xlrd"
    with pd.ExcelFile(buffer, engine=engine) as xls:
        if not xls.sheet_names:
            raise ParseError("workbook has no sheets")
        name = xls.sheet_names[0]
        df = xls.parse(name, header=None, dtype=object, keep_default_na=False, na_values=[""])
    return str(name), df


def read_roster_file(source: SourceFile) -> RawTable:
    """Read the first sheet of a spreadsheet into a RawTable.

    Raises ParseError for unreadable content, unsupported types and missing
    files; the caller's session is never touched here.
    """
    if isinstance(source, tuple):
        name, content = source
    else:
        path = Path(source)
        name = path.name
        try:
            content = path.read_bytes()
        except OSError as e:
            raise ParseError(f"cannot read {path}: {e}") from e

    file_format = _file_format(name)
    try:
        sheet_name, df = _read_frame(io.BytesIO(content), file_format)
    except ParseError:
        raise
    except pd.errors.EmptyDataError:
        # csv with no content at all
        return RawTable(sheet_name="Sheet1", columns=[], rows=[], source_name=name, file_format=file_format)
    except ImportError as e:
        raise ParseError(f"cannot read {name}: {e}") from e
    except Exception as e:  # openpyxl/xlrd/csv decoding errors have no common base
        raise ParseError(f"cannot read {name} as a spreadsheet: {e}") from e

    return normalize_sheet(df, sheet_name, source_name=name, file_format=file_format)


def _header_text(value: Any, index: int) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return f"Unnamed: {index}"
    if isinstance(value, datetime):
        # date typed header cells (Excel dates) match ISO date keys
        if value.hour == value.minute == value.second == value.microsecond == 0:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    text = str(value).strip()
    return text or f"Unnamed: {index}"


def _dedupe(columns: list[str]) -> list[str]:
    seen: dict[str, int] = {}
    result: list[str] = []
    for col in columns:
        if col in seen:
            seen[col] += 1
            candidate = f"{col}.{seen[col]}"
            while candidate in seen:
                seen[col] += 1
                candidate = f"{col}.{seen[col]}"
            seen[candidate] = 0
            result.append(candidate)
        else:
            seen[col] = 0
            result.append(col)
    return result


def _header_label(value: Any) -> Any:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return None
    return value


def normalize_sheet(
    df: pd.DataFrame,
    sheet_name: str,
    source_name: str | None = None,
    file_format: str = "xlsx",
) -> RawTable:
    """Turn a header-less DataFrame into a RawTable using row 1 as header.

    Blank rows are kept in place; they hold no student but are written back.
    """
    if df.shape[0] == 0:
        return RawTable(sheet_name=sheet_name, columns=[], rows=[], source_name=source_name, file_format=file_format)

    header = df.iloc[0].tolist()
    columns = _dedupe([_header_text(v, i) for i, v in enumerate(header)])
    rows: list[RawRow] = []
    for _, raw in df.iloc[1:].iterrows():
        row: RawRow = {}
        for col, val in zip(columns, raw.tolist(), strict=False):
            row[col] = None if (not isinstance(val, str) and pd.isna(val)) else val
        rows.append(row)

    return RawTable(
        sheet_name=sheet_name,
        columns=columns,
        rows=rows,
        source_name=source_name,
        file_format=file_format,
        header_labels=[_header_label(v) for v in header],
    )
