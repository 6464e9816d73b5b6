# Shared pytest fixtures
from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Callable

import pandas as pd
import pytest

from attendance_tracker.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


def _write_excel(path: Path, rows: list[list[object]], sheet_name: str = "Sheet1") -> Path:
    # rows[0] is the header row; written without pandas' own header
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
    return path


@pytest.fixture()
def make_excel(temp_workdir: Path) -> Callable[..., Path]:
    def factory(name: str, rows: list[list[object]], sheet_name: str = "Sheet1") -> Path:
        return _write_excel(temp_workdir / "data" / name, rows, sheet_name)
    return factory


@pytest.fixture()
def roster_rows() -> list[list[object]]:
    return [
        ["Roll No", "Name", "Course", "Phone"],
        [1, "A", "CS", "555-0100"],
        [2, "B", "EE", None],
    ]


@pytest.fixture()
def roster_file(make_excel, roster_rows) -> Path:
    return make_excel("roster.xlsx", roster_rows, sheet_name="Class 10")


@pytest.fixture()
def sample_config_yaml() -> str:
    return """columns:
  identifier: [Student ID, Roll No]
  name: [Full Name]
sheet_name: Register
output_directory: ./exports
error_log_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "attendance.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg
