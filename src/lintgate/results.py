# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read-only views over the violations recorded during a run."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Iterator

from .models import PRIORITIES, AnalysisError, Violation, ViolationKey


class Results:
    """Immutable snapshot of violations and analysis errors.

    Two implementations exist: :class:`RawResults` keeps the log verbatim and
    :class:`UniqueResults` collapses findings that share an identity key.
    Reporters receive a ``Results`` instance and must treat it as read-only.
    """

    deduplicated: bool = False

    def __init__(
        self,
        violations: Iterable[Violation],
        *,
        errors: Iterable[AnalysisError] = (),
        files: Iterable[str] = (),
    ) -> None:
        """Initialise the view from the recorded state.

        Args:
            violations: Violations in recording order.
            errors: Hard analysis errors recorded during the run.
            files: Paths of the analysed compilation units.
        """

        self._violations: tuple[Violation, ...] = self._project(violations)
        self._errors: tuple[AnalysisError, ...] = tuple(errors)
        self._files: tuple[str, ...] = tuple(files)
        self._by_priority: Counter[int] = Counter(item.priority for item in self._violations)

    def _project(self, violations: Iterable[Violation]) -> tuple[Violation, ...]:
        return tuple(violations)

    @property
    def violations(self) -> tuple[Violation, ...]:
        """Return the violations exposed by this view in order."""

        return self._violations

    @property
    def errors(self) -> tuple[AnalysisError, ...]:
        """Return the hard analysis errors recorded during the run."""

        return self._errors

    @property
    def files(self) -> tuple[str, ...]:
        """Return the analysed file paths in first-seen order."""

        return self._files

    def count(self) -> int:
        """Return the total number of violations exposed by this view."""

        return len(self._violations)

    def count_with_priority(self, priority: int) -> int:
        """Return how many violations carry ``priority``.

        Args:
            priority: Priority level between 1 and 3.

        Returns:
            int: Number of violations at that priority.
        """

        return self._by_priority.get(priority, 0)

    def priority_counts(self) -> dict[int, int]:
        """Return a mapping of every priority level to its violation count."""

        return {priority: self.count_with_priority(priority) for priority in PRIORITIES}

    def has_errors(self) -> bool:
        """Return ``True`` when any hard analysis error was recorded."""

        return bool(self._errors)

    def files_with_violations(self) -> tuple[str, ...]:
        """Return paths that have at least one violation, in first-seen order."""

        return tuple(dict.fromkeys(item.location.path for item in self._violations))

    def __len__(self) -> int:
        return len(self._violations)

    def __iter__(self) -> Iterator[Violation]:
        return iter(self._violations)

    def __getitem__(self, index: int) -> Violation:
        return self._violations[index]

    def __repr__(self) -> str:
        return f"{type(self).__name__}(violations={len(self)}, errors={len(self._errors)})"


class RawResults(Results):
    """Expose the log verbatim, duplicates included."""


class UniqueResults(Results):
    """Expose one violation per identity key, keeping the first one seen."""

    deduplicated = True

    def _project(self, violations: Iterable[Violation]) -> tuple[Violation, ...]:
        return unique_violations(violations)


def unique_violations(violations: Iterable[Violation]) -> tuple[Violation, ...]:
    """Return ``violations`` with duplicate findings removed, preserving order.

    Args:
        violations: Violations in recording order.

    Returns:
        tuple[Violation, ...]: First occurrence of each distinct finding.
    """

    seen: dict[ViolationKey, Violation] = {}
    for violation in violations:
        seen.setdefault(violation.identity, violation)
    return tuple(seen.values())


def build_results(
    violations: Iterable[Violation],
    *,
    errors: Iterable[AnalysisError] = (),
    files: Iterable[str] = (),
    deduplicate: bool = True,
) -> Results:
    """Return the raw or unique view over ``violations``.

    Args:
        violations: Violations in recording order.
        errors: Hard analysis errors recorded during the run.
        files: Paths of the analysed compilation units.
        deduplicate: ``True`` selects :class:`UniqueResults`.

    Returns:
        Results: View selected by ``deduplicate``.
    """

    view_type: type[Results] = UniqueResults if deduplicate else RawResults
    return view_type(violations, errors=errors, files=files)


__all__ = [
    "RawResults",
    "Results",
    "UniqueResults",
    "build_results",
    "unique_violations",
]
