# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Failure taxonomy shared by the loading, processing, and reporting phases.

Collaborators signal problems by raising the exceptions defined here.  The
driver converts them into :class:`Failure` values at each phase boundary so
that every phase returns an explicit result drawn from the closed
:class:`FailureKind` set.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from .exit_codes import ExitCode


class LintGateError(RuntimeError):
    """Base error carrying the exit status associated with the failure."""

    exit_code: ExitCode = ExitCode.ERROR_WHILE_PROCESSING

    def __init__(self, message: str) -> None:
        """Initialise the error with a human-readable message.

        Args:
            message: Diagnostic text shown to the user.
        """

        super().__init__(message)
        self.message = message


class ConfigError(LintGateError):
    """Raised when configuration input is invalid."""

    exit_code = ExitCode.OPTIONS_ERROR


class PluginLoadError(LintGateError):
    """Raised when a plugin artifact cannot be loaded or registered."""

    exit_code = ExitCode.RULE_NOT_FOUND

    def __init__(self, path: Path | str, reason: str) -> None:
        """Initialise the error for ``path``.

        Args:
            path: Filesystem path of the plugin artifact that failed.
            reason: Short description of the underlying failure.
        """

        super().__init__(f"cannot load plugin {path}: {reason}")
        self.path = Path(path)
        self.reason = reason


class NoRulesLoadedError(LintGateError):
    """Raised when startup finishes without any active rule."""

    exit_code = ExitCode.RULE_NOT_FOUND

    def __init__(self) -> None:
        super().__init__("no rule loaded")


class RuleNotFoundError(LintGateError):
    """Raised when configuration names a rule that was never registered."""

    exit_code = ExitCode.RULE_NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(f"rule not found: {name}")
        self.name = name


class ReporterNotFoundError(LintGateError):
    """Raised when configuration requests an unregistered reporter."""

    exit_code = ExitCode.REPORTER_NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(f"reporter not found: {name}")
        self.name = name


class ProcessingError(LintGateError):
    """Raised by the analysis engine when the run cannot continue."""

    exit_code = ExitCode.ERROR_WHILE_PROCESSING


class ReportOutputError(LintGateError):
    """Raised when a reporter's output file cannot be opened."""

    exit_code = ExitCode.ERROR_WHILE_REPORTING

    def __init__(self, path: Path | str, reason: str | None = None) -> None:
        """Initialise the error for ``path``.

        Args:
            path: Output path that could not be opened for writing.
            reason: Optional description of the underlying OS error.
        """

        message = f"cannot open report output file {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = Path(path)


class ReportingError(LintGateError):
    """Raised when a reporter fails while writing its report."""

    exit_code = ExitCode.ERROR_WHILE_REPORTING

    def __init__(self, reporter: str, reason: str) -> None:
        super().__init__(f"reporter {reporter} failed: {reason}")
        self.reporter = reporter


class FailureKind(str, Enum):
    """Closed set of fatal conditions a pipeline phase can return."""

    NO_RULES_LOADED = "no-rules-loaded"
    PLUGIN_LOAD = "plugin-load"
    RULE_NOT_FOUND = "rule-not-found"
    REPORTER_NOT_FOUND = "reporter-not-found"
    PROCESSING = "processing"
    REPORT_OUTPUT = "report-output"
    REPORTING = "reporting"


_KIND_EXIT_CODES: Final[dict[FailureKind, ExitCode]] = {
    FailureKind.NO_RULES_LOADED: ExitCode.RULE_NOT_FOUND,
    FailureKind.PLUGIN_LOAD: ExitCode.RULE_NOT_FOUND,
    FailureKind.RULE_NOT_FOUND: ExitCode.RULE_NOT_FOUND,
    FailureKind.REPORTER_NOT_FOUND: ExitCode.REPORTER_NOT_FOUND,
    FailureKind.PROCESSING: ExitCode.ERROR_WHILE_PROCESSING,
    FailureKind.REPORT_OUTPUT: ExitCode.ERROR_WHILE_REPORTING,
    FailureKind.REPORTING: ExitCode.ERROR_WHILE_REPORTING,
}

_ERROR_KINDS: Final[tuple[tuple[type[LintGateError], FailureKind], ...]] = (
    (NoRulesLoadedError, FailureKind.NO_RULES_LOADED),
    (PluginLoadError, FailureKind.PLUGIN_LOAD),
    (RuleNotFoundError, FailureKind.RULE_NOT_FOUND),
    (ReporterNotFoundError, FailureKind.REPORTER_NOT_FOUND),
    (ReportOutputError, FailureKind.REPORT_OUTPUT),
    (ReportingError, FailureKind.REPORTING),
    (ProcessingError, FailureKind.PROCESSING),
)


@dataclass(frozen=True, slots=True)
class Failure:
    """Explicit result value describing why a pipeline phase stopped."""

    kind: FailureKind
    message: str

    @property
    def exit_code(self) -> ExitCode:
        """Return the process exit status mapped to :attr:`kind`."""

        return _KIND_EXIT_CODES[self.kind]


def failure_from_exception(exc: BaseException, *, default: FailureKind) -> Failure:
    """Convert ``exc`` into a :class:`Failure` value.

    Args:
        exc: Exception raised by a collaborator.
        default: Kind used when ``exc`` is not part of the taxonomy.

    Returns:
        Failure: Failure whose kind reflects the exception type.
    """

    for error_type, kind in _ERROR_KINDS:
        if isinstance(exc, error_type):
            return Failure(kind=kind, message=str(exc))
    return Failure(kind=default, message=str(exc) or type(exc).__name__)


__all__ = [
    "ConfigError",
    "Failure",
    "FailureKind",
    "LintGateError",
    "NoRulesLoadedError",
    "PluginLoadError",
    "ProcessingError",
    "ReportOutputError",
    "ReporterNotFoundError",
    "ReportingError",
    "RuleNotFoundError",
    "failure_from_exception",
]
