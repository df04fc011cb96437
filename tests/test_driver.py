# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the driver's phase pipeline."""

from __future__ import annotations

import io
import json
from collections.abc import Sequence
from pathlib import Path

import pytest

from lintgate.collector import ResultCollector
from lintgate.config import DriverConfig
from lintgate.driver import Driver
from lintgate.errors import Failure, FailureKind, ProcessingError
from lintgate.exit_codes import ExitCode
from lintgate.gate import Outcome, Thresholds
from lintgate.models import SourceLocation, Violation
from lintgate.rules import Rule


class _RecordingEngine:
    def __init__(self, *, priorities: Sequence[int] = (), errors: int = 0, fail: bool = False) -> None:
        self.calls = 0
        self.priorities = priorities
        self.errors = errors
        self.fail = fail

    def run(self, rules: Sequence[Rule], sources: Sequence[Path], collector: ResultCollector) -> None:
        self.calls += 1
        if self.fail:
            raise ProcessingError("engine crashed")
        rule = rules[0]
        for index, priority in enumerate(self.priorities, start=1):
            collector.record(_make(rule, index, priority))
        for index in range(self.errors):
            collector.record_error(f"unit {index} failed", path=f"unit{index}.c")


def _make(rule: Rule, line: int, priority: int) -> Violation:
    return Violation(
        rule=rule.name,
        priority=priority,
        location=SourceLocation(path="unit.c", start_line=line, start_column=1),
        message="found",
    )


def _config(rule_plugin: Path, reporter_plugin: Path, **overrides) -> DriverConfig:
    data = {
        "rule_paths": [rule_plugin],
        "reporter_paths": [reporter_plugin],
        "reporters": ["count"],
        "thresholds": Thresholds.unlimited(),
    }
    data.update(overrides)
    return DriverConfig(**data)


def test_successful_run(rule_plugin: Path, reporter_plugin: Path) -> None:
    engine = _RecordingEngine(priorities=(3, 3))
    stdout = io.StringIO()
    outcome = Driver(_config(rule_plugin, reporter_plugin), engine=engine, stdout=stdout).run([Path("unit.c")])

    assert outcome.exit_code is ExitCode.SUCCESS
    assert outcome.decision is not None and outcome.decision.outcome is Outcome.SUCCESS
    assert stdout.getvalue() == "violations=2\n"
    assert engine.calls == 1


@pytest.mark.parametrize("rule_paths", [[], "empty-dir"])
def test_no_rules_means_rule_not_found(tmp_path: Path, reporter_plugin: Path, rule_paths) -> None:
    if rule_paths == "empty-dir":
        (tmp_path / "empty").mkdir()
        rule_paths = [tmp_path / "empty"]
    engine = _RecordingEngine()
    config = DriverConfig(rule_paths=rule_paths, reporter_paths=[reporter_plugin], reporters=["count"])

    outcome = Driver(config, engine=engine).run([Path("unit.c")])

    assert outcome.exit_code is ExitCode.RULE_NOT_FOUND
    assert outcome.failure is not None and outcome.failure.kind is FailureKind.NO_RULES_LOADED
    assert engine.calls == 0


def test_failing_rule_path_aborts_startup(tmp_path: Path, rule_plugin: Path, reporter_plugin: Path) -> None:
    engine = _RecordingEngine()
    config = _config(rule_plugin, reporter_plugin, rule_paths=[rule_plugin, tmp_path / "missing.py"])

    outcome = Driver(config, engine=engine).run([])

    assert outcome.exit_code is ExitCode.RULE_NOT_FOUND
    assert outcome.failure is not None and outcome.failure.kind is FailureKind.PLUGIN_LOAD
    assert "missing.py" in outcome.failure.message
    assert engine.calls == 0


def test_unknown_reporter_fails_before_analysis(rule_plugin: Path, reporter_plugin: Path) -> None:
    engine = _RecordingEngine()
    config = _config(rule_plugin, reporter_plugin, reporters=["count", "html"])

    outcome = Driver(config, engine=engine).run([])

    assert outcome.exit_code is ExitCode.REPORTER_NOT_FOUND
    assert outcome.failure is not None and "html" in outcome.failure.message
    assert engine.calls == 0


def test_unknown_enabled_rule(rule_plugin: Path, reporter_plugin: Path) -> None:
    config = _config(rule_plugin, reporter_plugin, enabled_rules=["nope"])
    outcome = Driver(config, engine=_RecordingEngine()).run([])

    assert outcome.exit_code is ExitCode.RULE_NOT_FOUND
    assert outcome.failure is not None and outcome.failure.kind is FailureKind.RULE_NOT_FOUND


def test_processing_error(rule_plugin: Path, reporter_plugin: Path) -> None:
    stdout = io.StringIO()
    outcome = Driver(
        _config(rule_plugin, reporter_plugin),
        engine=_RecordingEngine(fail=True),
        stdout=stdout,
    ).run([])

    assert outcome.exit_code is ExitCode.ERROR_WHILE_PROCESSING
    assert outcome.results is None
    assert stdout.getvalue() == ""


def test_threshold_breach(rule_plugin: Path, reporter_plugin: Path, capsys) -> None:
    config = _config(rule_plugin, reporter_plugin, thresholds=Thresholds(max_p1=4))
    outcome = Driver(config, engine=_RecordingEngine(priorities=(1,) * 5), stdout=io.StringIO()).run([])

    assert outcome.exit_code is ExitCode.VIOLATIONS_EXCEED_THRESHOLD
    err = capsys.readouterr().err
    assert "violations exceed threshold" in err
    assert "P1=5[4] P2=0[unlimited] P3=0[unlimited]" in err


def test_threshold_boundary_passes(rule_plugin: Path, reporter_plugin: Path) -> None:
    config = _config(rule_plugin, reporter_plugin, thresholds=Thresholds(max_p1=5))
    outcome = Driver(config, engine=_RecordingEngine(priorities=(1,) * 5), stdout=io.StringIO()).run([])

    assert outcome.exit_code is ExitCode.SUCCESS


def test_analysis_errors_win_over_counts(rule_plugin: Path, reporter_plugin: Path) -> None:
    outcome = Driver(
        _config(rule_plugin, reporter_plugin),
        engine=_RecordingEngine(errors=1),
        stdout=io.StringIO(),
    ).run([])

    assert outcome.exit_code is ExitCode.COMPILATION_ERRORS


def test_duplicates_follow_configuration(rule_plugin: Path, reporter_plugin: Path) -> None:
    class _Duplicating(_RecordingEngine):
        def run(self, rules, sources, collector):
            for _ in range(3):
                collector.record(_make(rules[0], 1, 3))

    unique = Driver(_config(rule_plugin, reporter_plugin), engine=_Duplicating(), stdout=io.StringIO()).run([])
    raw = Driver(
        _config(rule_plugin, reporter_plugin, allow_duplicated_violations=True),
        engine=_Duplicating(),
        stdout=io.StringIO(),
    ).run([])

    assert unique.results is not None and unique.results.count() == 1
    assert raw.results is not None and raw.results.count() == 3


def test_list_enabled_rules(rule_plugin: Path, reporter_plugin: Path) -> None:
    stdout = io.StringIO()
    config = _config(rule_plugin, reporter_plugin, list_enabled_rules=True)
    Driver(config, engine=_RecordingEngine(), stdout=stdout).run([])

    assert stdout.getvalue().startswith("Enabled rules:\n- marker\n\n")


def test_reporting_failure_keeps_earlier_reports(tmp_path: Path, rule_plugin: Path) -> None:
    output = tmp_path / "out" / "report.txt"
    (tmp_path / "out").mkdir()
    (tmp_path / "out" / "report.sarif").mkdir()
    config = DriverConfig(
        rule_paths=[rule_plugin],
        reporters=["json", "sarif"],
        output=output,
        thresholds=Thresholds.unlimited(),
    )

    outcome = Driver(config, engine=_RecordingEngine(priorities=(2,))).run([])

    assert outcome.exit_code is ExitCode.ERROR_WHILE_REPORTING
    assert outcome.failure is not None and outcome.failure.kind is FailureKind.REPORT_OUTPUT
    data = json.loads((tmp_path / "out" / "report.json").read_text(encoding="utf-8"))
    assert data["summary"]["p2"] == 1


def test_end_to_end_with_builtin_plugins(tmp_path: Path) -> None:
    source = tmp_path / "a.c"
    source.write_text("int a;   \n// TODO: later\n", encoding="utf-8")
    stdout = io.StringIO()
    config = DriverConfig(reporters=["json"], jobs=2)

    outcome = Driver(config, stdout=stdout).run([source])

    assert outcome.exit_code is ExitCode.SUCCESS
    data = json.loads(stdout.getvalue())
    assert sorted(item["rule"] for item in data["violations"]) == ["todo comment", "trailing whitespace"]


def test_unconfigured_thresholds_never_gate(rule_plugin: Path, reporter_plugin: Path) -> None:
    config = DriverConfig(rule_paths=[rule_plugin], reporter_paths=[reporter_plugin], reporters=["count"])
    engine = _RecordingEngine(priorities=(1,) * 25 + (2,) * 25 + (3,) * 25)

    outcome = Driver(config, engine=engine, stdout=io.StringIO()).run([])

    assert outcome.exit_code is ExitCode.SUCCESS
    assert outcome.decision is not None and outcome.decision.counts == {1: 25, 2: 25, 3: 25}


def test_closed_pipe_on_stdout_exits_with_reporting_error(rule_plugin: Path, reporter_plugin: Path, capsys) -> None:
    class _ClosedPipe(io.StringIO):
        def flush(self) -> None:
            raise BrokenPipeError(32, "Broken pipe")

    outcome = Driver(
        _config(rule_plugin, reporter_plugin),
        engine=_RecordingEngine(priorities=(3,)),
        stdout=_ClosedPipe(),
    ).run([])

    assert outcome.exit_code is ExitCode.ERROR_WHILE_REPORTING
    assert outcome.failure is not None and outcome.failure.kind is FailureKind.REPORTING
    assert "lintgate: error: reporter count failed" in capsys.readouterr().err


def test_prepare_rules_skips_reporter_resolution(rule_plugin: Path, reporter_plugin: Path) -> None:
    config = _config(rule_plugin, reporter_plugin, reporters=["html"])
    driver = Driver(config, engine=_RecordingEngine())

    prepared = driver.prepare_rules()

    assert not isinstance(prepared, Failure)
    registry, rules = prepared
    assert registry.names() == ("marker",)
    assert [rule.name for rule in rules] == ["marker"]
    failure = driver.prepare()
    assert isinstance(failure, Failure) and failure.kind is FailureKind.REPORTER_NOT_FOUND
