# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Whitespace hygiene rules."""

from __future__ import annotations

from collections.abc import Iterator

from lintgate.models import Violation
from lintgate.registry import RuleRegistry
from lintgate.rules import Rule, SourceUnit


class TrailingWhitespaceRule(Rule):
    """Flag lines ending in spaces or tabs."""

    name = "trailing whitespace"
    priority = 3
    category = "convention"
    description = "Line ends with whitespace."

    def apply(self, unit: SourceUnit) -> Iterator[Violation]:
        for number, line in enumerate(unit.lines, start=1):
            stripped = line.rstrip(" \t")
            if len(stripped) != len(line):
                yield self.violation(
                    unit,
                    number,
                    len(stripped) + 1,
                    "Trailing whitespace",
                    end_column=len(line),
                )


class MixedIndentationRule(Rule):
    """Flag indentation that mixes tabs and spaces on one line."""

    name = "mixed indentation"
    priority = 2
    category = "convention"
    description = "Indentation mixes tabs and spaces."

    def apply(self, unit: SourceUnit) -> Iterator[Violation]:
        for number, line in enumerate(unit.lines, start=1):
            indent = line[: len(line) - len(line.lstrip(" \t"))]
            if " " in indent and "\t" in indent:
                yield self.violation(
                    unit,
                    number,
                    1,
                    "Indentation mixes tabs and spaces",
                    end_column=len(indent),
                )


def register_rules(registry: RuleRegistry) -> None:
    registry.register(TrailingWhitespaceRule())
    registry.register(MixedIndentationRule())
