from __future__ import annotations

from pathlib import Path

import pytest

from attendance_tracker.config.loader import AppConfig, ConfigError, load_config
from attendance_tracker.excel.columns import DEFAULT_ALIASES


def test_load_config_success(write_config: Path):
    cfg = load_config(write_config)
    assert cfg.columns["identifier"] == ("Student ID", "Roll No")
    assert cfg.columns["name"] == ("Full Name",)
    assert cfg.columns["course"] == DEFAULT_ALIASES["course"]
    assert cfg.sheet_name == "Register"
    assert cfg.output_directory == "./exports"


def test_missing_file_uses_defaults(temp_workdir: Path):
    cfg = load_config(temp_workdir / "config" / "not_exists.yml")
    assert cfg == AppConfig()
    assert cfg.columns["identifier"] == ("rollno", "Roll No", "Roll", "ID")


def test_invalid_yaml(write_config: Path):
    write_config.write_text("columns: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "invalid yaml" in str(e.value)


def test_extra_field_rejected(write_config: Path):
    text = write_config.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_config.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config(write_config)
    assert "config validation failed" in str(e.value)


def test_empty_alias_list_rejected(write_config: Path):
    write_config.write_text("columns:\n  identifier: []\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(write_config)


def test_empty_file_uses_defaults(write_config: Path):
    write_config.write_text("", encoding="utf-8")
    assert load_config(write_config) == AppConfig()
