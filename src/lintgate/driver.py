# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Phase pipeline turning an analysis run into a process exit status.

Phases run strictly in sequence:

1. load rule and reporter plugins and resolve the configured names;
2. run the analysis engine, which writes into a fresh ``ResultCollector``;
3. freeze the collector into a single ``Results`` view;
4. run every reporter against that view;
5. apply the threshold gate.

Each phase returns either its product or a :class:`~lintgate.errors.Failure`.
A failure stops the pipeline, prints one diagnostic line, and maps to its
exit status.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from .collector import ResultCollector
from .config import DriverConfig
from .engine import AnalysisEngine, LineRuleEngine
from .errors import (
    Failure,
    FailureKind,
    LintGateError,
    NoRulesLoadedError,
    ReporterNotFoundError,
    failure_from_exception,
)
from .exit_codes import ExitCode
from .gate import GateDecision, Outcome, evaluate
from .logging import error_line, warn
from .output import OutputResolver
from .plugins import (
    REPORTERS_ENTRY_POINT_GROUP,
    RULES_ENTRY_POINT_GROUP,
    FilesystemPluginLoader,
    LoadOutcome,
    PluginLoader,
    reporter_loader,
    rule_loader,
)
from .registry import ReporterRegistry, RuleRegistry
from .reporters import Reporter, emit_reports
from .results import Results
from .rules import Rule, RuleFilter

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class PreparedRun:
    """Registries and resolved plugins produced by the loading phase."""

    rule_registry: RuleRegistry
    reporter_registry: ReporterRegistry
    rules: tuple[Rule, ...]
    reporters: tuple[Reporter, ...]


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """Final state of a driver run."""

    exit_code: ExitCode
    results: Results | None = None
    failure: Failure | None = None
    decision: GateDecision | None = None
    loaded: tuple[LoadOutcome, ...] = field(default_factory=tuple)


def load_plugin_paths(loader: PluginLoader, paths: Sequence[Path]) -> tuple[tuple[LoadOutcome, ...], Failure | None]:
    """Load ``paths`` in order, stopping at the first failing path.

    Entries registered by earlier paths stay registered when a later path fails.

    Args:
        loader: Loader bound to the target registry.
        paths: Plugin files or directories.

    Returns:
        tuple[tuple[LoadOutcome, ...], Failure | None]: Outcomes of the
        attempted paths and the failure that stopped loading, if any.
    """

    outcomes: list[LoadOutcome] = []
    for path in paths:
        outcome = loader.load_from_path(path)
        outcomes.append(outcome)
        if not outcome.ok:
            return tuple(outcomes), failure_from_exception(outcome.error, default=FailureKind.PLUGIN_LOAD)
    return tuple(outcomes), None


def _load_entry_points(
    loader: FilesystemPluginLoader[RuleRegistry] | FilesystemPluginLoader[ReporterRegistry],
    group: str,
) -> tuple[tuple[LoadOutcome, ...], Failure | None]:
    outcomes = loader.load_entry_points(group)
    for outcome in outcomes:
        if not outcome.ok:
            return outcomes, failure_from_exception(outcome.error, default=FailureKind.PLUGIN_LOAD)
    return outcomes, None


def resolve_reporters(names: Sequence[str], registry: ReporterRegistry) -> tuple[Reporter, ...] | Failure:
    """Return the reporters for ``names`` in configured order.

    Args:
        names: Reporter format names requested by configuration.
        registry: Registry holding the loaded reporters.

    Returns:
        tuple[Reporter, ...] | Failure: Resolved reporters, or a
        ``REPORTER_NOT_FOUND`` failure naming the first missing reporter.
    """

    resolved: list[Reporter] = []
    for name in names:
        reporter = registry.try_get(name)
        if reporter is None:
            return failure_from_exception(ReporterNotFoundError(name), default=FailureKind.REPORTER_NOT_FOUND)
        resolved.append(reporter)
    return tuple(resolved)


class Driver:
    """Run the load, analyse, report, and gate phases for one configuration.

    A driver instance performs a single run; the collector it creates is
    never reused.
    """

    def __init__(
        self,
        config: DriverConfig,
        *,
        engine: AnalysisEngine | None = None,
        stdout: TextIO | None = None,
        use_color: bool | None = None,
        use_emoji: bool = False,
    ) -> None:
        """Initialise the driver.

        Args:
            config: Run configuration.
            engine: Analysis engine; defaults to :class:`LineRuleEngine`.
            stdout: Stream used for standard output reports and rule listings.
            use_color: Optional colour override for diagnostics.
            use_emoji: Whether diagnostics may include emoji.
        """

        self.config = config
        self.engine: AnalysisEngine = engine or LineRuleEngine(
            jobs=config.jobs,
            options=config.rule_configurations,
            suffixes=config.source_suffixes,
        )
        self._stdout = stdout
        self._use_color = use_color
        self._use_emoji = use_emoji
        self.collector = ResultCollector()

    @property
    def stdout(self) -> TextIO:
        """Return the stream used for standard output."""

        return self._stdout if self._stdout is not None else sys.stdout

    def prepare_rules(self) -> tuple[RuleRegistry, tuple[Rule, ...]] | Failure:
        """Load rule plugins and select the active rules.

        Returns:
            tuple[RuleRegistry, tuple[Rule, ...]] | Failure: Registry of every
            loaded rule plus the active rules, or the startup failure.
        """

        rule_registry = RuleRegistry()
        rules_loader = rule_loader(rule_registry)
        _, failure = load_plugin_paths(rules_loader, self.config.rule_paths)
        if failure is None and self.config.load_entry_points:
            _, failure = _load_entry_points(rules_loader, RULES_ENTRY_POINT_GROUP)
        if failure is not None:
            return failure
        if len(rule_registry) == 0:
            return failure_from_exception(NoRulesLoadedError(), default=FailureKind.NO_RULES_LOADED)
        try:
            rules = RuleFilter(
                enabled=self.config.enabled_rules,
                disabled=self.config.disabled_rules,
            ).filtered_rules(rule_registry)
        except LintGateError as exc:
            return failure_from_exception(exc, default=FailureKind.RULE_NOT_FOUND)
        return rule_registry, rules

    def prepare(self) -> PreparedRun | Failure:
        """Load plugins and resolve the active rules and reporters.

        Returns:
            PreparedRun | Failure: Prepared plugins, or the startup failure.
        """

        prepared_rules = self.prepare_rules()
        if isinstance(prepared_rules, Failure):
            return prepared_rules
        rule_registry, rules = prepared_rules

        reporter_registry = ReporterRegistry()
        reporters_loader = reporter_loader(reporter_registry)
        _, failure = load_plugin_paths(reporters_loader, self.config.reporter_paths)
        if failure is None and self.config.load_entry_points:
            _, failure = _load_entry_points(reporters_loader, REPORTERS_ENTRY_POINT_GROUP)
        if failure is not None:
            return Failure(kind=FailureKind.REPORTER_NOT_FOUND, message=failure.message)
        reporters = resolve_reporters(self.config.reporters, reporter_registry)
        if isinstance(reporters, Failure):
            return reporters
        LOGGER.debug(
            "prepared rules=%s reporters=%s",
            ",".join(rule.name for rule in rules),
            ",".join(reporter.name for reporter in reporters),
        )
        return PreparedRun(
            rule_registry=rule_registry,
            reporter_registry=reporter_registry,
            rules=rules,
            reporters=reporters,
        )

    def analyse(self, prepared: PreparedRun, sources: Sequence[Path]) -> Results | Failure:
        """Run the analysis engine and build the results view once it finishes.

        Args:
            prepared: Output of :meth:`prepare`.
            sources: Files or directories to analyse.

        Returns:
            Results | Failure: Frozen results view, or the processing failure.
        """

        try:
            self.engine.run(prepared.rules, sources, self.collector)
        except Exception as exc:  # engine faults are processing failures
            LOGGER.debug("analysis failed", exc_info=True)
            return failure_from_exception(exc, default=FailureKind.PROCESSING)
        return self.collector.build_results(deduplicate=self.config.deduplicate)

    def report(self, prepared: PreparedRun, results: Results) -> Failure | None:
        """Run every active reporter against ``results``.

        Args:
            prepared: Output of :meth:`prepare`.
            results: Frozen results view.

        Returns:
            Failure | None: Failure that stopped reporting, if any.
        """

        resolver = OutputResolver(self.config.output, stdout=self._stdout)
        if resolver.uses_stdout and len(prepared.reporters) > 1:
            LOGGER.debug("%d reporters share standard output", len(prepared.reporters))
        return emit_reports(prepared.reporters, results, resolver)

    def list_enabled_rules(self, prepared: PreparedRun) -> None:
        """Write the names of the active rules to standard output."""

        stream = self.stdout
        stream.write("Enabled rules:\n")
        for rule in prepared.rules:
            stream.write(f"- {rule.name}\n")
        stream.write("\n")

    def run(self, sources: Sequence[Path]) -> RunOutcome:
        """Execute every phase and return the final outcome.

        Args:
            sources: Files or directories to analyse.

        Returns:
            RunOutcome: Exit status plus whatever state the run produced.
        """

        prepared = self.prepare()
        if isinstance(prepared, Failure):
            return self._fail(prepared)
        if self.config.list_enabled_rules:
            self.list_enabled_rules(prepared)

        results = self.analyse(prepared, sources)
        if isinstance(results, Failure):
            return self._fail(results)

        failure = self.report(prepared, results)
        if failure is not None:
            return self._fail(failure, results=results)

        decision = evaluate(results, self.config.thresholds)
        self._print_decision(decision, results)
        return RunOutcome(exit_code=decision.exit_code, results=results, decision=decision)

    def _fail(self, failure: Failure, *, results: Results | None = None) -> RunOutcome:
        error_line(failure.message, use_emoji=self._use_emoji, use_color=self._use_color)
        return RunOutcome(exit_code=failure.exit_code, results=results, failure=failure)

    def _print_decision(self, decision: GateDecision, results: Results) -> None:
        if decision.outcome is Outcome.COMPILATION_ERRORS:
            for error in results.errors:
                warn(error.message, use_emoji=self._use_emoji, use_color=self._use_color)
        elif decision.outcome is Outcome.VIOLATIONS_EXCEED_THRESHOLD:
            error_line("violations exceed threshold", use_emoji=self._use_emoji, use_color=self._use_color)
            warn(decision.summary(), use_emoji=False, use_color=self._use_color)


__all__ = [
    "Driver",
    "PreparedRun",
    "RunOutcome",
    "load_plugin_paths",
    "resolve_reporters",
]
