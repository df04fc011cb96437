# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Plain-text reporter: a summary line followed by one line per violation."""

from __future__ import annotations

from typing import TextIO

from lintgate import __version__
from lintgate.registry import ReporterRegistry
from lintgate.reporters import Reporter, summarize
from lintgate.results import Results


class TextReporter(Reporter):
    """Render results as human-readable lines."""

    name = "text"
    description = "Human-readable summary and violation list."

    def report(self, results: Results, stream: TextIO) -> None:
        summary = summarize(results)
        stream.write("\nlintgate Report\n\n")
        stream.write(
            f"Summary: TotalFiles={summary['total_files']} "
            f"FilesWithViolations={summary['files_with_violations']} "
            f"P1={summary['p1']} P2={summary['p2']} P3={summary['p3']}\n\n",
        )
        for violation in results:
            location = violation.location
            stream.write(
                f"{location.path}:{location.start_line}:{location.start_column}: "
                f"{violation.rule} P{violation.priority} {violation.message}\n",
            )
        if results.has_errors():
            stream.write("\nAnalysis errors:\n")
            for error in results.errors:
                stream.write(f"{error.path or '<unknown>'}: {error.message}\n")
        stream.write(f"\n[lintgate v{__version__}]\n")


def register_reporters(registry: ReporterRegistry) -> None:
    registry.register(TextReporter())
