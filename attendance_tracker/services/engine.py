from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from pathlib import Path

from ..errors import (
    DuplicateIdentifierError,
    EmptyRosterWarning,
    MissingDateError,
    NoRosterError,
)
from ..excel.columns import resolve_columns
from ..excel.reader import SourceFile, read_roster_file
from ..excel.writer import CSV_MEDIA_TYPE, XLSX_MEDIA_TYPE, header_labels, project_rows, write_table
from ..models.session import Session
from ..models.store import AttendanceStore
from ..models.student import AttendanceStatus, Student
from .merge import collect_prior_marks, merge_attendance
from .normalizer import normalize_rows

"""Engine API consumed by the presentation layer.

Every operation is a function of (session, arguments) returning a new session
plus a result. Failures raise and leave the caller's session untouched; load
and save are each all-or-nothing.

    load(session, file, date_key)  -> (Session, LoadResult)
    begin(session, students)       -> Session
    mark(session, id, status)      -> Session
    save(session, date_key)        -> (Session, SavedFile)
    reset(session)                 -> Session

Callers run these one at a time; mark must not be issued while a load or the
projection step of a save is outstanding.
"""

__all__ = [
    "LoadResult",
    "SavedFile",
    "load",
    "begin",
    "mark",
    "save",
    "reset",
    "current_roster",
    "search",
]

logger = logging.getLogger(__name__)

DEFAULT_SHEET_NAME = "Attendance"


@dataclass(frozen=True)
class LoadResult:
    students: tuple[Student, ...]
    date_key: str
    merged: bool  # True when prior marks were read from an existing date column
    notices: tuple[Warning, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.students


@dataclass(frozen=True)
class SavedFile:
    name: str
    content: bytes
    media_type: str

    def write_to(self, directory: Path) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / self.name
        target.write_bytes(self.content)
        return target


def _require_date(date_key: str | None) -> str:
    if date_key is None or not str(date_key).strip():
        raise MissingDateError("no date selected")
    return str(date_key)


def load(
    session: Session,
    source: SourceFile,
    date_key: str | None,
    aliases: Mapping[str, Sequence[str]] | None = None,
) -> tuple[Session, LoadResult]:
    """Read a roster file and reconcile it with marks already stored for date_key.

    Raises:
        MissingDateError: date_key empty
        ParseError: file cannot be decoded
        DuplicateIdentifierError: two rows share an identifier
    """
    date_key = _require_date(date_key)
    table = read_roster_file(source)
    columns = resolve_columns(table.columns, date_key, aliases)
    students = normalize_rows(table.rows, columns)
    prior = collect_prior_marks(table.rows, columns)
    merged = merge_attendance(students, prior)

    store = AttendanceStore()
    store.initialize(merged)

    notices: tuple[Warning, ...] = ()
    if not merged:
        notices = (EmptyRosterWarning(f"{table.source_name}: no data rows"),)
        logger.warning(f"{table.source_name}: no student data found")
    else:
        logger.info(
            f"loaded {len(merged)} students from {table.source_name} "
            f"(date={date_key} merge={'yes' if prior is not None else 'no'})"
        )
    if columns.identifier is None and merged:
        logger.warning("no identifier column found; using temporary ids")

    new_session = Session(students=tuple(merged), store=store, date_key=date_key, source=table)
    return new_session, LoadResult(
        students=tuple(merged),
        date_key=date_key,
        merged=prior is not None,
        notices=notices,
    )


def begin(session: Session, students: Iterable[Student], date_key: str | None = None) -> Session:
    """Start a session from a roster that has no backing file."""
    roster = tuple(s if s.status is not None else s.with_status(AttendanceStatus.ABSENT) for s in students)
    duplicates = [sid for sid, n in Counter(s.id for s in roster).items() if n > 1]
    if duplicates:
        raise DuplicateIdentifierError(duplicates)
    store = AttendanceStore()
    store.initialize(roster)
    return Session(students=roster, store=store, date_key=date_key, source=None)


def mark(session: Session, student_id: str | int, status: AttendanceStatus | str) -> Session:
    """Set one student's status; returns the updated session.

    Raises:
        MissingDateError: no date selected for the session
        UnknownIdentifierError: id not in the roster (no change made)
        InvalidStatusError: status text is not P/A/Present/Absent
    """
    _require_date(session.date_key)
    if isinstance(status, str):
        status = AttendanceStatus.parse(status)
    sid = str(student_id).strip()
    store = session.store.copy()
    store.mark(sid, status)
    student = session.find(sid)
    logger.info(f"Marked {status.label} for {student.name if student else sid}")
    return replace(session, store=store)


def _output_name(session: Session, date_key: str) -> tuple[str, str]:
    source = session.source
    if source is not None and source.source_name:
        path = Path(source.source_name)
        if source.file_format == "csv":
            return path.name, "csv"
        return path.with_suffix(".xlsx").name, "xlsx"
    safe_key = re.sub(r"[^\w.-]+", "_", date_key)
    return f"attendance-{safe_key}.xlsx", "xlsx"


def save(
    session: Session,
    date_key: str | None,
    aliases: Mapping[str, Sequence[str]] | None = None,
    sheet_name: str = DEFAULT_SHEET_NAME,
) -> tuple[Session, SavedFile]:
    """Write the store back into the sheet structure it was loaded from.

    On success the returned session is empty (the roster has been consumed).

    Raises:
        MissingDateError: date_key empty
        NoRosterError: nothing loaded
        SerializeError: the writer failed
    """
    date_key = _require_date(date_key)
    if not session.is_loaded:
        raise NoRosterError("no student data loaded")

    snapshot = session.store.snapshot()
    columns, rows = project_rows(
        snapshot,
        date_key,
        table=session.source,
        students=session.students,
        aliases=aliases,
    )
    name, file_format = _output_name(session, date_key)
    target_sheet = session.source.sheet_name if session.source is not None else sheet_name
    content = write_table(
        columns,
        rows,
        sheet_name=target_sheet,
        file_format=file_format,
        labels=header_labels(columns, session.source),
    )

    media_type = CSV_MEDIA_TYPE if file_format == "csv" else XLSX_MEDIA_TYPE
    logger.info(f"saved attendance for {date_key} ({len(rows)} rows) as {name}")
    return reset(session), SavedFile(name=name, content=content, media_type=media_type)


def reset(session: Session) -> Session:
    return Session.empty()


def current_roster(session: Session) -> list[Student]:
    """Students with their status as currently held in the store."""
    snapshot = session.store.snapshot()
    return [s.with_status(snapshot.get(s.id, AttendanceStatus.ABSENT)) for s in session.students]


def search(session: Session, term: str) -> list[Student]:
    """Case-insensitive name match or id substring match."""
    needle = term.strip()
    roster = current_roster(session)
    if not needle:
        return roster
    lowered = needle.lower()
    return [s for s in roster if lowered in s.name.lower() or needle in s.id]
