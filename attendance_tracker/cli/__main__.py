from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from attendance_tracker.config.loader import DEFAULT_CONFIG_PATH, AppConfig, ConfigError, load_config
from attendance_tracker.errors import (
    AttendanceError,
    LoadError,
    MissingDateError,
    UnknownIdentifierError,
)
from attendance_tracker.logging.error_log import ErrorLogBuffer
from attendance_tracker.logging.init import log_failure, log_summary, setup_logging
from attendance_tracker.models.session import Session
from attendance_tracker.models.student import AttendanceStatus
from attendance_tracker.services import engine
from attendance_tracker.services.summary import summarize

"""CLI entrypoint.

Stands in for the interactive front end: loads one roster file for a date,
applies the requested marks, optionally lists/filters the roster, then writes
the updated spreadsheet.

Exit codes:
- 0: saved (or nothing to save)
- 2: operator error (missing date, unknown id); valid marks are still saved
- 1: fatal (config, unreadable file, write failure)
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_OPERATOR_ERROR = 2


def _load_env_file(path: Path, override: bool = False) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="attendance-tracker",
        description="Mark attendance for a date in a roster spreadsheet",
    )
    p.add_argument("file", type=Path, help="Roster spreadsheet (.xlsx, .xls or .csv)")
    p.add_argument("--date", default=None, help="Date key, used as the attendance column header")
    p.add_argument("--present", nargs="+", default=[], metavar="ID", help="Mark these ids present")
    p.add_argument("--absent", nargs="+", default=[], metavar="ID", help="Mark these ids absent")
    p.add_argument("--list", action="store_true", help="Print the roster with current status")
    p.add_argument("--search", default=None, metavar="TERM", help="Print students matching name or id")
    p.add_argument("--output", type=Path, default=None, help="Output file (default: output_directory/<file name>)")
    p.add_argument("--config", type=Path, default=None, help="Config YAML")
    p.add_argument("--dry-run", action="store_true", help="Do not write the output file")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print resolved columns & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(path: Path, date_key: str | None, cfg: AppConfig) -> int:
    from attendance_tracker.excel.columns import resolve_columns
    from attendance_tracker.excel.reader import read_roster_file

    try:
        table = read_roster_file(path)
    except LoadError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    columns = resolve_columns(table.columns, date_key, cfg.columns)
    print(f"FILE: {table.source_name} SHEET: {table.sheet_name} rows={len(table.rows)}")
    print(f"  cols={table.columns}")
    print(
        f"  identifier={columns.identifier} name={columns.name} course={columns.course} "
        f"semester={columns.semester} status={columns.status}"
    )
    safe_rows = []
    for r in table.rows[:3]:
        safe_rows.append({k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.items()})
    print("  sample_rows=", safe_rows)
    return EXIT_SUCCESS


def _print_roster(logger, session: Session, term: str | None) -> None:
    students = engine.search(session, term or "")
    if not students:
        logger.info("No students found matching your search")
        return
    for s in students:
        logger.info(f"{s.id}\t{s.name}\t{s.course}\t{s.semester}\t{s.status.code}")


def main(argv: list[str] | None = None) -> int:
    # only fall back to sys.argv for None; tests pass explicit lists
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")
    _load_env_file(Path(".env"))

    config_path = args.config or Path(os.getenv("ATTENDANCE_CONFIG", str(DEFAULT_CONFIG_PATH)))
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        log_failure("config", e)
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(args.file, args.date, cfg)

    error_log = ErrorLogBuffer(Path(cfg.error_log_directory))
    session = Session.empty()
    try:
        session, result = engine.load(session, args.file, args.date, aliases=cfg.columns)
    except MissingDateError as e:
        log_failure("load", e)
        return EXIT_OPERATOR_ERROR
    except LoadError as e:
        log_failure("load", e)
        error_log.record_failure(e, operation="load", file=args.file.name, date_key=args.date)
        error_log.flush()
        return EXIT_FATAL

    if result.is_empty:
        logger.info("No data: the file has no student rows")
        log_summary(summarize(session))
        return EXIT_SUCCESS

    exit_code = EXIT_SUCCESS
    requested = [(sid, AttendanceStatus.PRESENT) for sid in args.present]
    requested += [(sid, AttendanceStatus.ABSENT) for sid in args.absent]
    for sid, status in requested:
        try:
            session = engine.mark(session, sid, status)
        except UnknownIdentifierError as e:
            log_failure("mark", e)
            exit_code = EXIT_OPERATOR_ERROR

    if args.list or args.search is not None:
        _print_roster(logger, session, args.search)

    # counted before save, which hands back an empty session
    summary = summarize(session)

    if args.dry_run:
        log_summary(summary)
        return exit_code

    try:
        session, saved = engine.save(session, args.date, aliases=cfg.columns, sheet_name=cfg.sheet_name)
    except AttendanceError as e:
        log_failure("save", e)
        error_log.record_failure(e, operation="save", file=args.file.name, date_key=args.date)
        error_log.flush()
        return EXIT_FATAL

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_bytes(saved.content)
        target = args.output
    else:
        target = saved.write_to(Path(cfg.output_directory))
    logger.info(f"Attendance saved to {target}")
    log_summary(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
