# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import textwrap
from collections.abc import Callable
from pathlib import Path

import pytest

from lintgate.models import SourceLocation, Violation

ViolationFactory = Callable[..., Violation]
PluginWriter = Callable[[str, str], Path]


def make_violation(
    rule: str = "long line",
    *,
    priority: int = 3,
    path: str = "src/app.c",
    line: int = 1,
    column: int = 1,
    message: str = "too long",
) -> Violation:
    """Build a violation with sensible defaults for tests."""
    return Violation(
        rule=rule,
        priority=priority,
        location=SourceLocation(path=path, start_line=line, start_column=column),
        message=message,
    )


@pytest.fixture
def violation() -> ViolationFactory:
    """Return the violation factory."""
    return make_violation


@pytest.fixture
def write_plugin(tmp_path: Path) -> PluginWriter:
    """Return a helper writing dedented plugin source under ``tmp_path/plugins``."""

    def _write(name: str, source: str) -> Path:
        target = tmp_path / "plugins" / name
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(textwrap.dedent(source), encoding="utf-8")
        return target

    return _write


RULE_PLUGIN = """
    from lintgate.rules import Rule


    class MarkerRule(Rule):
        name = "marker"
        priority = 1
        description = "Flags the word MARKER."

        def apply(self, unit):
            for number, line in enumerate(unit.lines, start=1):
                column = line.find("MARKER")
                if column >= 0:
                    yield self.violation(unit, number, column + 1, "marker found")


    def register_rules(registry):
        registry.register(MarkerRule())
"""

REPORTER_PLUGIN = """
    from lintgate.reporters import Reporter


    class CountReporter(Reporter):
        name = "count"

        def report(self, results, stream):
            stream.write(f"violations={results.count()}\\n")


    def register_reporters(registry):
        registry.register(CountReporter())
"""


@pytest.fixture
def rule_plugin(write_plugin: PluginWriter) -> Path:
    """Return a rule plugin file registering the ``marker`` rule."""
    return write_plugin("marker_rule.py", RULE_PLUGIN)


@pytest.fixture
def reporter_plugin(write_plugin: PluginWriter) -> Path:
    """Return a reporter plugin file registering the ``count`` reporter."""
    return write_plugin("count_reporter.py", REPORTER_PLUGIN)
