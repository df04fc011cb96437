# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Size rules: overly long lines and files."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Final

from lintgate.models import Violation
from lintgate.registry import RuleRegistry
from lintgate.rules import Rule, SourceUnit

LONG_LINE_KEY: Final[str] = "LONG_LINE"
LONG_FILE_KEY: Final[str] = "LONG_FILE"


class LongLineRule(Rule):
    """Flag lines longer than ``LONG_LINE`` characters (default 100)."""

    name = "long line"
    priority = 3
    category = "size"
    description = "Line is longer than the configured limit."

    def apply(self, unit: SourceUnit) -> Iterator[Violation]:
        limit = unit.option_int(LONG_LINE_KEY, 100)
        for number, line in enumerate(unit.lines, start=1):
            length = len(line)
            if length > limit:
                yield self.violation(
                    unit,
                    number,
                    1,
                    f"Line with {length} characters exceeds limit of {limit}",
                    end_column=length,
                )


class LongFileRule(Rule):
    """Flag files with more than ``LONG_FILE`` lines (default 1000)."""

    name = "long file"
    priority = 3
    category = "size"
    description = "File has more lines than the configured limit."

    def apply(self, unit: SourceUnit) -> Iterator[Violation]:
        limit = unit.option_int(LONG_FILE_KEY, 1000)
        total = len(unit.lines)
        if total > limit:
            yield self.violation(
                unit,
                1,
                1,
                f"File with {total} lines exceeds limit of {limit}",
                end_line=total,
            )


def register_rules(registry: RuleRegistry) -> None:
    registry.register(LongLineRule())
    registry.register(LongFileRule())
