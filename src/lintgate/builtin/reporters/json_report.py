# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""JSON reporter emitting a machine-readable summary and violation list."""

from __future__ import annotations

import json
from typing import TextIO

from lintgate import __version__
from lintgate.registry import ReporterRegistry
from lintgate.reporters import Reporter, summarize
from lintgate.results import Results


class JsonReporter(Reporter):
    """Write results as a single JSON document."""

    name = "json"
    description = "Machine-readable JSON document."

    def report(self, results: Results, stream: TextIO) -> None:
        payload = {
            "version": __version__,
            "deduplicated": results.deduplicated,
            "summary": summarize(results),
            "violations": [violation.model_dump(mode="json") for violation in results],
            "errors": [error.model_dump(mode="json") for error in results.errors],
        }
        json.dump(payload, stream, indent=2)
        stream.write("\n")


def register_reporters(registry: ReporterRegistry) -> None:
    registry.register(JsonReporter())
