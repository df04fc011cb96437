# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Thread-safe sink that accumulates violations during the analysis phase.

One :class:`ResultCollector` exists per run.  Analysis workers append to it
concurrently; once the engine signals completion the driver calls
:meth:`ResultCollector.build_results` exactly once, which freezes the
collector and returns an immutable :class:`~lintgate.results.Results` view.
"""

from __future__ import annotations

import logging
from threading import Lock

from .models import AnalysisError, Violation
from .results import Results, build_results

LOGGER = logging.getLogger(__name__)


class CollectorFrozenError(RuntimeError):
    """Raised when a frozen collector receives another write."""


class ResultCollector:
    """Append log of violations plus hard analysis errors for a single run."""

    def __init__(self) -> None:
        """Initialise an empty, writable collector."""

        self._lock = Lock()
        self._violations: list[Violation] = []
        self._errors: list[AnalysisError] = []
        self._files: dict[str, None] = {}
        self._frozen = False

    @property
    def frozen(self) -> bool:
        """Return ``True`` once :meth:`build_results` has been called."""

        return self._frozen

    def record(self, violation: Violation) -> None:
        """Append ``violation`` to the log.

        Args:
            violation: Violation reported by a rule.

        Raises:
            CollectorFrozenError: If the results view was already built.
        """

        with self._lock:
            self._ensure_writable()
            self._violations.append(violation)

    def record_error(self, message: str = "analysis error", *, path: str | None = None) -> None:
        """Mark that a compilation unit could not be analysed.

        Args:
            message: Description of the failure.
            path: Optional path of the unit that failed.

        Raises:
            CollectorFrozenError: If the results view was already built.
        """

        with self._lock:
            self._ensure_writable()
            self._errors.append(AnalysisError(path=path, message=message))
        LOGGER.debug("analysis error recorded path=%s message=%s", path, message)

    def record_file(self, path: str) -> None:
        """Note that ``path`` was handed to the analysis engine.

        Args:
            path: Path of the analysed compilation unit.
        """

        with self._lock:
            self._ensure_writable()
            self._files.setdefault(path, None)

    def build_results(self, *, deduplicate: bool = True) -> Results:
        """Freeze the collector and return a snapshot view.

        Args:
            deduplicate: ``True`` for the unique view, ``False`` for the raw log.

        Returns:
            Results: Immutable view over the recorded state.

        Raises:
            RuntimeError: If called more than once.
        """

        with self._lock:
            if self._frozen:
                raise RuntimeError("results were already built for this run")
            self._frozen = True
            violations = tuple(self._violations)
            errors = tuple(self._errors)
            files = tuple(self._files)
        LOGGER.debug(
            "building results violations=%d errors=%d deduplicate=%s",
            len(violations),
            len(errors),
            deduplicate,
        )
        return build_results(violations, errors=errors, files=files, deduplicate=deduplicate)

    def _ensure_writable(self) -> None:
        if self._frozen:
            raise CollectorFrozenError("result collector is frozen; the analysis phase has finished")


__all__ = ["CollectorFrozenError", "ResultCollector"]
