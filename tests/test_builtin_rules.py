# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the bundled rule plugins."""

from __future__ import annotations

import pytest

from lintgate.config import BUILTIN_RULES_DIR
from lintgate.plugins import rule_loader
from lintgate.registry import RuleRegistry
from lintgate.rules import SourceUnit


@pytest.fixture(scope="module")
def registry() -> RuleRegistry:
    loaded = RuleRegistry()
    assert rule_loader(loaded).load_from_path(BUILTIN_RULES_DIR).ok
    return loaded


def _apply(registry: RuleRegistry, name: str, text: str, **options: str):
    return list(registry[name].apply(SourceUnit(path="a.c", text=text, options=options)))


def test_long_line_uses_configured_limit(registry: RuleRegistry) -> None:
    text = "x" * 12 + "\nshort\n"
    assert _apply(registry, "long line", text) == []

    found = _apply(registry, "long line", text, LONG_LINE="10")
    assert len(found) == 1
    assert found[0].location.start_line == 1
    assert found[0].message == "Line with 12 characters exceeds limit of 10"


def test_long_file(registry: RuleRegistry) -> None:
    text = "line\n" * 5
    assert _apply(registry, "long file", text, LONG_FILE="5") == []
    assert len(_apply(registry, "long file", text, LONG_FILE="4")) == 1


def test_invalid_option_falls_back_to_default(registry: RuleRegistry) -> None:
    assert _apply(registry, "long line", "x" * 50, LONG_LINE="wide") == []


def test_trailing_whitespace(registry: RuleRegistry) -> None:
    found = _apply(registry, "trailing whitespace", "ok\nbad  \n\tfine\n")
    assert [(item.location.start_line, item.location.start_column) for item in found] == [(2, 4)]


def test_mixed_indentation_is_priority_two(registry: RuleRegistry) -> None:
    found = _apply(registry, "mixed indentation", "\t  x = 1\n    y = 2\n")
    assert len(found) == 1
    assert found[0].priority == 2


def test_work_markers(registry: RuleRegistry) -> None:
    found = _apply(registry, "todo comment", "// TODO: fix\nint x; // FIXME and XXX\n// todos are fine\n")
    assert [item.message for item in found] == [
        "TODO marker left in source",
        "FIXME marker left in source",
        "XXX marker left in source",
    ]
