# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Threshold gate turning final results into the process outcome."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exit_codes import ExitCode
from .models import PRIORITIES
from .results import Results

UNLIMITED_TOKENS: Final[frozenset[str]] = frozenset({"unlimited", "none"})


class Thresholds(BaseModel):
    """Per-priority ceilings on acceptable violation counts.

    An unset ceiling (``None``) means the priority is unlimited; configuration
    files and the command line may also spell it ``unlimited``.
    """

    model_config = ConfigDict(frozen=True)

    max_p1: int | None = Field(default=None, ge=0)
    max_p2: int | None = Field(default=None, ge=0)
    max_p3: int | None = Field(default=None, ge=0)

    @field_validator("max_p1", "max_p2", "max_p3", mode="before")
    @classmethod
    def _parse_unlimited(cls, value: object) -> object:
        """Accept ``"unlimited"`` (any case) as an unset ceiling."""
        if isinstance(value, str) and value.strip().lower() in UNLIMITED_TOKENS:
            return None
        return value

    @classmethod
    def unlimited(cls) -> Thresholds:
        """Return thresholds that never fail a run."""

        return cls(max_p1=None, max_p2=None, max_p3=None)

    def ceiling(self, priority: int) -> int | None:
        """Return the configured ceiling for ``priority``.

        Args:
            priority: Priority level between 1 and 3.

        Returns:
            int | None: Ceiling or ``None`` when unlimited.

        Raises:
            ValueError: If ``priority`` is outside 1..3.
        """

        if priority not in PRIORITIES:
            raise ValueError(f"unknown priority {priority}")
        return (self.max_p1, self.max_p2, self.max_p3)[priority - 1]

    def exceeded(self, priority: int, count: int) -> bool:
        """Return ``True`` when ``count`` is strictly greater than the ceiling."""

        ceiling = self.ceiling(priority)
        return ceiling is not None and count > ceiling


class Outcome(str, Enum):
    """Policy outcome computed from the final results."""

    SUCCESS = "success"
    COMPILATION_ERRORS = "compilation-errors"
    VIOLATIONS_EXCEED_THRESHOLD = "violations-exceed-threshold"

    @property
    def exit_code(self) -> ExitCode:
        """Return the process exit status for this outcome."""

        return ExitCode[self.name]


@dataclass(frozen=True, slots=True)
class GateDecision:
    """Outcome of the threshold gate plus the counts it was based on."""

    outcome: Outcome
    counts: dict[int, int]
    thresholds: Thresholds

    @property
    def exit_code(self) -> ExitCode:
        """Return the process exit status for :attr:`outcome`."""

        return self.outcome.exit_code

    def summary(self) -> str:
        """Return ``P1=<n>[<max>] P2=<n>[<max>] P3=<n>[<max>]`` for every priority."""

        parts = []
        for priority in PRIORITIES:
            ceiling = self.thresholds.ceiling(priority)
            shown = "unlimited" if ceiling is None else str(ceiling)
            parts.append(f"P{priority}={self.counts.get(priority, 0)}[{shown}]")
        return " ".join(parts)


def evaluate(results: Results, thresholds: Thresholds) -> GateDecision:
    """Decide the run outcome from ``results`` and ``thresholds``.

    Recorded analysis errors win over every count comparison; otherwise any
    priority whose count is strictly greater than its ceiling fails the run.

    Args:
        results: Final results view.
        thresholds: Configured per-priority ceilings.

    Returns:
        GateDecision: Outcome together with all per-priority counts.
    """

    counts = results.priority_counts()
    if results.has_errors():
        outcome = Outcome.COMPILATION_ERRORS
    elif any(thresholds.exceeded(priority, counts[priority]) for priority in PRIORITIES):
        outcome = Outcome.VIOLATIONS_EXCEED_THRESHOLD
    else:
        outcome = Outcome.SUCCESS
    return GateDecision(outcome=outcome, counts=counts, thresholds=thresholds)


__all__ = ["GateDecision", "Outcome", "Thresholds", "evaluate"]
