# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rules for leftover work markers in comments."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Final

from lintgate.models import Violation
from lintgate.registry import RuleRegistry
from lintgate.rules import Rule, SourceUnit

_MARKER_RE: Final[re.Pattern[str]] = re.compile(r"\b(TODO|FIXME|XXX)\b")


class WorkMarkerRule(Rule):
    """Flag ``TODO``, ``FIXME``, and ``XXX`` markers."""

    name = "todo comment"
    priority = 3
    category = "documentation"
    description = "Source contains a TODO, FIXME, or XXX marker."

    def apply(self, unit: SourceUnit) -> Iterator[Violation]:
        for number, line in enumerate(unit.lines, start=1):
            for match in _MARKER_RE.finditer(line):
                yield self.violation(
                    unit,
                    number,
                    match.start() + 1,
                    f"{match.group(1)} marker left in source",
                    end_column=match.end(),
                )


def register_rules(registry: RuleRegistry) -> None:
    registry.register(WorkMarkerRule())
