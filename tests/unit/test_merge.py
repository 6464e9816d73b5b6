from __future__ import annotations

from attendance_tracker.excel.columns import resolve_columns
from attendance_tracker.models.student import AttendanceStatus
from attendance_tracker.services.merge import collect_prior_marks, merge_attendance
from attendance_tracker.services.normalizer import normalize_rows

DATE = "2024-01-01"


def _merge(rows):
    columns = resolve_columns(list(rows[0].keys()), DATE)
    students = normalize_rows(rows, columns)
    prior = collect_prior_marks(rows, columns)
    return prior, merge_attendance(students, prior)


def test_no_date_column_defaults_everyone_absent():
    prior, merged = _merge([{"Roll No": 1}, {"Roll No": 2}])
    assert prior is None
    assert [s.status for s in merged] == [AttendanceStatus.ABSENT, AttendanceStatus.ABSENT]


def test_existing_date_column_restores_marks():
    prior, merged = _merge([{"Roll No": 1, DATE: "P"}, {"Roll No": 2, DATE: "A"}])
    assert prior == {"1": "P", "2": "A"}
    assert [s.status for s in merged] == [AttendanceStatus.PRESENT, AttendanceStatus.ABSENT]


def test_blank_first_cell_still_merges_later_rows():
    _, merged = _merge([{"Roll No": 1, DATE: None}, {"Roll No": 2, DATE: "P"}])
    assert [s.status for s in merged] == [AttendanceStatus.ABSENT, AttendanceStatus.PRESENT]


def test_unknown_codes_read_as_absent():
    _, merged = _merge([{"Roll No": 1, DATE: "L"}, {"Roll No": 2, DATE: "present"}])
    assert [s.status for s in merged] == [AttendanceStatus.ABSENT, AttendanceStatus.PRESENT]


def test_synthetic_ids_merge_by_position():
    _, merged = _merge([{"Name": "A", DATE: "P"}, {"Name": "B", DATE: "A"}])
    assert [(s.id, s.status) for s in merged] == [
        ("temp-1", AttendanceStatus.PRESENT),
        ("temp-2", AttendanceStatus.ABSENT),
    ]


def test_merge_of_empty_roster():
    assert merge_attendance([], None) == []


def test_spacer_rows_do_not_shift_synthetic_ids():
    rows = [
        {"Name": "A", DATE: "A"},
        {"Name": None, DATE: None},
        {"Name": "B", DATE: "P"},
    ]
    prior, merged = _merge(rows)
    assert prior == {"temp-1": "A", "temp-2": "P"}
    assert [(s.id, s.status) for s in merged] == [
        ("temp-1", AttendanceStatus.ABSENT),
        ("temp-2", AttendanceStatus.PRESENT),
    ]
