# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reporter contract and the loop that runs every active reporter.

Reporters run one at a time in configured order.  The first reporter that
cannot open its output or fails while writing stops the loop; reports that
were already written stay on disk.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar, TextIO

from .errors import Failure, FailureKind, LintGateError, ReportingError, failure_from_exception
from .results import Results

if TYPE_CHECKING:
    from .output import OutputResolver

LOGGER = logging.getLogger(__name__)


class Reporter(ABC):
    """Output-format handler rendering a results view to a text stream."""

    name: ClassVar[str]
    description: ClassVar[str] = ""

    @abstractmethod
    def report(self, results: Results, stream: TextIO) -> None:
        """Write a complete report for ``results`` to ``stream``.

        Args:
            results: Read-only view over the run's violations.
            stream: Writable stream provided by the output resolver.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def summarize(results: Results) -> dict[str, int]:
    """Return the summary statistics reporters commonly print.

    Args:
        results: Results view being reported.

    Returns:
        dict[str, int]: File counts plus one ``p<n>`` entry per priority.
    """

    summary = {
        "total_files": len(results.files),
        "files_with_violations": len(results.files_with_violations()),
        "violations": results.count(),
        "errors": len(results.errors),
    }
    for priority, count in results.priority_counts().items():
        summary[f"p{priority}"] = count
    return summary


def run_reporter(reporter: Reporter, results: Results, resolver: OutputResolver) -> None:
    """Resolve the output stream for ``reporter``, write the report, and release the stream.

    Args:
        reporter: Reporter to invoke.
        results: Results view shared by all reporters.
        resolver: Resolver providing the output stream.

    Raises:
        ReportOutputError: If the output stream cannot be opened.
        ReportingError: If the reporter raises while writing or its stream
            cannot be released.
    """

    try:
        with resolver.open(reporter.name) as stream:
            reporter.report(results, stream)
    except LintGateError:
        raise
    except Exception as exc:  # reporter plugins are third-party code
        raise ReportingError(reporter.name, str(exc) or type(exc).__name__) from exc


def emit_reports(
    reporters: Sequence[Reporter],
    results: Results,
    resolver: OutputResolver,
) -> Failure | None:
    """Run ``reporters`` in order, stopping at the first failure.

    Args:
        reporters: Active reporters in configured order.
        results: Results view shared by all reporters.
        resolver: Resolver providing each reporter's output stream.

    Returns:
        Failure | None: Failure of the reporter that stopped the loop, or ``None``.
    """

    for reporter in reporters:
        try:
            run_reporter(reporter, results, resolver)
        except LintGateError as exc:
            return failure_from_exception(exc, default=FailureKind.REPORTING)
        LOGGER.debug("reporter %s finished", reporter.name)
    return None


__all__ = ["Reporter", "emit_reports", "run_reporter", "summarize"]
