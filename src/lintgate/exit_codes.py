# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process exit statuses returned by the ``lintgate`` driver."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Distinct process exit statuses, one per pipeline outcome."""

    SUCCESS = 0
    RULE_NOT_FOUND = 1
    REPORTER_NOT_FOUND = 2
    ERROR_WHILE_PROCESSING = 3
    ERROR_WHILE_REPORTING = 4
    VIOLATIONS_EXCEED_THRESHOLD = 5
    COMPILATION_ERRORS = 6
    OPTIONS_ERROR = 7


__all__ = ["ExitCode"]
