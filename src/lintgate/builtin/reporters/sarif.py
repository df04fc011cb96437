# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""SARIF 2.1.0 reporter compatible with GitHub code scanning."""

from __future__ import annotations

import json
from typing import Final, TextIO

from lintgate import __version__
from lintgate.models import Violation
from lintgate.registry import ReporterRegistry
from lintgate.reporters import Reporter
from lintgate.results import Results

SARIF_VERSION: Final[str] = "2.1.0"
SARIF_SCHEMA: Final[str] = "https://schemastore.azurewebsites.net/schemas/json/sarif-2.1.0.json"

_PRIORITY_TO_LEVEL: Final[dict[int, str]] = {1: "error", 2: "warning", 3: "note"}


def _result_entry(violation: Violation) -> dict[str, object]:
    location = violation.location
    region = {
        "startLine": location.start_line,
        "startColumn": location.start_column,
        "endLine": location.end_line,
        "endColumn": location.end_column,
    }
    return {
        "ruleId": violation.rule,
        "level": _PRIORITY_TO_LEVEL[violation.priority],
        "message": {"text": violation.message or violation.rule},
        "locations": [
            {
                "physicalLocation": {
                    "artifactLocation": {"uri": location.path},
                    "region": {key: value for key, value in region.items() if value > 0},
                },
            },
        ],
    }


class SarifReporter(Reporter):
    """Emit a SARIF document with one run for the whole analysis."""

    name = "sarif"
    description = "SARIF 2.1.0 log for code-scanning integrations."

    def report(self, results: Results, stream: TextIO) -> None:
        rules: dict[str, dict[str, object]] = {}
        entries: list[dict[str, object]] = []
        for violation in results:
            if violation.rule not in rules:
                rules[violation.rule] = {
                    "id": violation.rule,
                    "name": violation.rule,
                    "defaultConfiguration": {"level": _PRIORITY_TO_LEVEL[violation.priority]},
                }
            entries.append(_result_entry(violation))

        run: dict[str, object] = {
            "tool": {
                "driver": {
                    "name": "lintgate",
                    "version": __version__,
                    "rules": list(rules.values()),
                },
            },
            "results": entries,
        }
        if results.has_errors():
            run["invocations"] = [
                {
                    "executionSuccessful": False,
                    "toolExecutionNotifications": [
                        {"level": "error", "message": {"text": error.message}} for error in results.errors
                    ],
                },
            ]
        document = {"version": SARIF_VERSION, "$schema": SARIF_SCHEMA, "runs": [run]}
        json.dump(document, stream, indent=2)
        stream.write("\n")


def register_reporters(registry: ReporterRegistry) -> None:
    registry.register(SarifReporter())
