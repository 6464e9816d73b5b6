from __future__ import annotations

import json
from pathlib import Path

from attendance_tracker.cli import main as cli_main
from attendance_tracker.excel.reader import read_roster_file

DATE = "2024-01-01"


def test_cli_marks_and_saves(roster_file: Path, temp_workdir: Path, capsys):
    code = cli_main([str(roster_file), "--date", DATE, "--present", "1"])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO Marked Present for A" in out
    assert f"SUMMARY date={DATE} students=2 present=1 absent=1 rate=50" in out

    saved = temp_workdir / "out" / "roster.xlsx"
    table = read_roster_file(saved)
    assert [r[DATE] for r in table.rows] == ["P", "A"]
    assert table.rows[0]["Phone"] == "555-0100"


def test_cli_output_path_and_absent_override(roster_file: Path, temp_workdir: Path):
    target = temp_workdir / "final" / "class.xlsx"
    code = cli_main(
        [str(roster_file), "--date", DATE, "--present", "1", "2", "--absent", "2", "--output", str(target)]
    )
    assert code == 0
    table = read_roster_file(target)
    assert [r[DATE] for r in table.rows] == ["P", "A"]


def test_cli_unknown_id_is_operator_error(roster_file: Path, temp_workdir: Path, capsys):
    code = cli_main([str(roster_file), "--date", DATE, "--present", "99", "2"])
    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR mark: unknown identifier: '99'" in out
    # valid marks are still written
    table = read_roster_file(temp_workdir / "out" / "roster.xlsx")
    assert [r[DATE] for r in table.rows] == ["A", "P"]


def test_cli_missing_date(roster_file: Path, capsys):
    code = cli_main([str(roster_file)])
    assert code == 2
    assert "ERROR load: no date selected" in capsys.readouterr().out


def test_cli_unreadable_file_logs_error_record(temp_workdir: Path, capsys):
    bad = temp_workdir / "data" / "broken.xlsx"
    bad.write_bytes(b"garbage")
    code = cli_main([str(bad), "--date", DATE])
    assert code == 1
    assert "ERROR load:" in capsys.readouterr().out
    logs = list((temp_workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    record = json.loads(logs[0].read_text(encoding="utf-8").splitlines()[0])
    assert record["error_type"] == "PARSE_ERROR"
    assert record["operation"] == "load"
    assert record["file"] == "broken.xlsx"


def test_cli_empty_roster(make_excel, temp_workdir: Path, capsys):
    path = make_excel("empty.xlsx", [["Roll No", "Name"]])
    code = cli_main([str(path), "--date", DATE])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO No data" in out
    assert f"SUMMARY date={DATE} students=0 present=0 absent=0 rate=0" in out
    assert not (temp_workdir / "out").exists()


def test_cli_search_and_dry_run(make_excel, temp_workdir: Path, capsys):
    path = make_excel("s.xlsx", [["Roll No", "Name"], [101, "Asha"], [202, "Ben"]])
    code = cli_main([str(path), "--date", DATE, "--present", "202", "--search", "ben", "--dry-run"])
    out = capsys.readouterr().out
    assert code == 0
    assert "INFO 202\tBen\tN/A\tN/A\tP" in out
    assert "Asha" not in out
    assert not (temp_workdir / "out").exists()


def test_cli_config_aliases(write_config: Path, make_excel, temp_workdir: Path):
    path = make_excel("custom.xlsx", [["Student ID", "Full Name"], ["S-1", "Asha"]])
    code = cli_main([str(path), "--date", DATE, "--present", "S-1", "--config", str(write_config)])
    assert code == 0
    table = read_roster_file(temp_workdir / "exports" / "custom.xlsx")
    assert table.sheet_name == "Sheet1"
    assert table.rows == [{"Student ID": "S-1", "Full Name": "Asha", DATE: "P"}]


def test_cli_bad_config(write_config: Path, roster_file: Path, capsys):
    write_config.write_text("unknown_key: 1\n", encoding="utf-8")
    code = cli_main([str(roster_file), "--date", DATE, "--config", str(write_config)])
    assert code == 1
    assert "ERROR config: config validation failed" in capsys.readouterr().out


def test_cli_inspect_data(roster_file: Path, capsys):
    code = cli_main([str(roster_file), "--date", DATE, "--inspect-data"])
    out = capsys.readouterr().out
    assert code == 0
    assert "identifier=Roll No name=Name course=Course semester=None status=None" in out


def test_cli_debug_dry_run(roster_file: Path, temp_workdir: Path, capsys):
    code = cli_main([str(roster_file), "--date", DATE, "--present", "2", "--dry-run", "--debug"])
    out = capsys.readouterr().out
    assert code == 0
    assert "DEBUG debug mode enabled" in out
    assert f"SUMMARY date={DATE} students=2 present=1 absent=1 rate=50" in out
    assert not (temp_workdir / "out").exists()
