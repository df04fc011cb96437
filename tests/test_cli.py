# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the ``lintgate`` command line."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from lintgate import __version__
from lintgate.cli import app, parse_rule_configurations
from lintgate.exit_codes import ExitCode

runner = CliRunner()


@pytest.fixture
def source(tmp_path: Path) -> Path:
    path = tmp_path / "a.c"
    path.write_text("int a;\n" + "x" * 30 + "\n", encoding="utf-8")
    return path


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_check_writes_text_report(source: Path, monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["check", str(source)])

    assert result.exit_code == ExitCode.SUCCESS
    assert "Summary: TotalFiles=1 FilesWithViolations=0 P1=0 P2=0 P3=0" in result.output


def test_check_gates_on_thresholds(source: Path, monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(
        app,
        ["check", str(source), "--rc", "LONG_LINE=10", "--max-priority-3", "0", "--no-emoji"],
    )

    assert result.exit_code == ExitCode.VIOLATIONS_EXCEED_THRESHOLD
    assert "violations exceed threshold" in result.output
    assert "P3=1[0]" in result.output


def test_check_writes_one_file_per_reporter(source: Path, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    template = tmp_path / "out" / "lint.txt"
    template.parent.mkdir()

    result = runner.invoke(
        app,
        ["check", str(source), "-r", "json", "-r", "sarif", "-o", str(template), "--rc", "LONG_LINE=10"],
    )

    assert result.exit_code == ExitCode.SUCCESS
    data = json.loads((tmp_path / "out" / "lint.json").read_text(encoding="utf-8"))
    assert data["summary"]["p3"] == 1
    assert (tmp_path / "out" / "lint.sarif").is_file()


def test_unknown_reporter(source: Path, monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["check", str(source), "-r", "html"])

    assert result.exit_code == ExitCode.REPORTER_NOT_FOUND
    assert "reporter not found: html" in result.output


def test_empty_rule_directory(source: Path, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "no_rules").mkdir()
    result = runner.invoke(app, ["check", str(source), "-R", str(tmp_path / "no_rules")])

    assert result.exit_code == ExitCode.RULE_NOT_FOUND
    assert "no rule loaded" in result.output


def test_invalid_config_file(source: Path, tmp_path: Path) -> None:
    config = tmp_path / "bad.toml"
    config.write_text("jobs = 0\n", encoding="utf-8")

    result = runner.invoke(app, ["check", str(source), "--config", str(config)])

    assert result.exit_code == ExitCode.OPTIONS_ERROR
    assert "invalid configuration" in result.output


def test_list_enabled_rules(source: Path, monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(
        app,
        ["check", str(source), "--list-enabled-rules", "--enable-rule", "long line", "-r", "json"],
    )

    assert result.exit_code == ExitCode.SUCCESS
    assert "Enabled rules:\n- long line\n" in result.output


def test_rules_command(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["rules"])

    assert result.exit_code == 0
    assert "trailing whitespace" in result.output
    assert "P2" in result.output


def test_parse_rule_configurations() -> None:
    assert parse_rule_configurations(["LONG_LINE=80", " LONG_FILE = 500 "]) == {
        "LONG_LINE": "80",
        "LONG_FILE": "500",
    }
    with pytest.raises(typer.BadParameter):
        parse_rule_configurations(["LONG_LINE"])


def test_rules_command_ignores_reporter_configuration(monkeypatch, tmp_path: Path) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "lintgate.toml").write_text('reporters = ["html"]\n', encoding="utf-8")

    result = runner.invoke(app, ["rules"])

    assert result.exit_code == ExitCode.SUCCESS
    assert "long line" in result.output
    assert "reporter not found" not in result.output
