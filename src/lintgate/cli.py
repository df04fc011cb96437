# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer application exposing the ``lintgate`` command line."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Final

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import DriverConfig
from .config_loader import load_config
from .driver import Driver
from .errors import ConfigError, Failure
from .exit_codes import ExitCode
from .logging import configure_logging, error_line

RULE_CONFIG_SEPARATOR: Final[str] = "="

app = typer.Typer(
    help="Run static-analysis rules, render reports, and gate on violation thresholds.",
    no_args_is_help=True,
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"lintgate {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Static-analysis driver with pluggable rules and reporters."""

    del version


def parse_rule_configurations(values: list[str] | None) -> dict[str, str]:
    """Parse ``KEY=VALUE`` rule configuration options.

    Args:
        values: Raw ``--rc`` option values.

    Returns:
        dict[str, str]: Parsed key/value pairs.

    Raises:
        typer.BadParameter: If an entry lacks the ``=`` separator or a key.
    """

    parsed: dict[str, str] = {}
    for raw in values or ():
        key, sep, value = raw.partition(RULE_CONFIG_SEPARATOR)
        if not sep or not key.strip():
            raise typer.BadParameter(f"expected KEY=VALUE, got '{raw}'", param_hint="--rc")
        parsed[key.strip()] = value.strip()
    return parsed


_THRESHOLD_KEYS: Final[tuple[str, ...]] = ("max_p1", "max_p2", "max_p3")


def _is_unset(value: Any) -> bool:
    return value is None or value is False or (isinstance(value, (list, dict)) and not value)


def _build_overrides(**options: Any) -> dict[str, Any]:
    """Return only the configuration values supplied on the command line."""
    ceilings = {key: options.pop(key) for key in _THRESHOLD_KEYS if key in options}
    overrides = {key: value for key, value in options.items() if not _is_unset(value)}
    thresholds = {key: value for key, value in ceilings.items() if value is not None}
    if thresholds:
        overrides["thresholds"] = thresholds
    return overrides


def _load(config_path: Path | None, overrides: dict[str, Any]) -> DriverConfig:
    try:
        return load_config(config_path, overrides=overrides)
    except ConfigError as exc:
        error_line(exc.message)
        raise typer.Exit(code=int(exc.exit_code)) from exc


ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Configuration file (lintgate.toml or pyproject.toml)."),
]
RulePathOption = Annotated[
    list[Path] | None,
    typer.Option("--rule-path", "-R", help="Rule plugin file or directory; repeatable."),
]


@app.command("check")
def check_command(
    paths: Annotated[list[Path], typer.Argument(help="Files or directories to analyse.")],
    config_path: ConfigOption = None,
    rule_paths: RulePathOption = None,
    reporter_paths: Annotated[
        list[Path] | None,
        typer.Option("--reporter-path", help="Reporter plugin file or directory; repeatable."),
    ] = None,
    reporters: Annotated[
        list[str] | None,
        typer.Option("--report-type", "-r", help="Reporter format name; repeatable."),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output template; the extension is replaced by each format name."),
    ] = None,
    max_p1: Annotated[
        str | None,
        typer.Option("--max-priority-1", help="Maximum allowed priority 1 violations, e.g. 0; unlimited when unset."),
    ] = None,
    max_p2: Annotated[
        str | None,
        typer.Option("--max-priority-2", help="Maximum allowed priority 2 violations, e.g. 10; unlimited when unset."),
    ] = None,
    max_p3: Annotated[
        str | None,
        typer.Option("--max-priority-3", help="Maximum allowed priority 3 violations, e.g. 20; unlimited when unset."),
    ] = None,
    allow_duplicated_violations: Annotated[
        bool,
        typer.Option("--allow-duplicated-violations", help="Report duplicate findings verbatim."),
    ] = False,
    enabled_rules: Annotated[
        list[str] | None,
        typer.Option("--enable-rule", help="Only run the named rule; repeatable."),
    ] = None,
    disabled_rules: Annotated[
        list[str] | None,
        typer.Option("--disable-rule", help="Skip the named rule; repeatable."),
    ] = None,
    rule_configurations: Annotated[
        list[str] | None,
        typer.Option("--rc", help="Rule configuration KEY=VALUE; repeatable."),
    ] = None,
    list_enabled_rules: Annotated[
        bool,
        typer.Option("--list-enabled-rules", help="Print the active rules before analysis."),
    ] = False,
    jobs: Annotated[int | None, typer.Option("--jobs", "-j", min=1, help="Worker threads.")] = None,
    load_entry_points: Annotated[
        bool,
        typer.Option("--entry-points", help="Also load plugins from installed entry points."),
    ] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Enable debug tracing on stderr.")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured diagnostics.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in diagnostics.")] = False,
) -> None:
    """Analyse PATHS, write every configured report, and exit with the gate's status."""

    configure_logging(debug=debug, color=not no_color)
    overrides = _build_overrides(
        rule_paths=rule_paths,
        reporter_paths=reporter_paths,
        reporters=reporters,
        output=output,
        max_p1=max_p1,
        max_p2=max_p2,
        max_p3=max_p3,
        allow_duplicated_violations=allow_duplicated_violations,
        enabled_rules=enabled_rules,
        disabled_rules=disabled_rules,
        rule_configurations=parse_rule_configurations(rule_configurations),
        list_enabled_rules=list_enabled_rules,
        jobs=jobs,
        load_entry_points=load_entry_points,
    )
    config = _load(config_path, overrides)
    driver = Driver(config, use_color=False if no_color else None, use_emoji=not no_emoji)
    outcome = driver.run(paths)
    raise typer.Exit(code=int(outcome.exit_code))


@app.command("rules")
def rules_command(
    config_path: ConfigOption = None,
    rule_paths: RulePathOption = None,
) -> None:
    """List every rule the configured rule paths register."""

    config = _load(config_path, _build_overrides(rule_paths=rule_paths))
    prepared = Driver(config).prepare_rules()
    if isinstance(prepared, Failure):
        error_line(prepared.message)
        raise typer.Exit(code=int(prepared.exit_code))
    registry, rules = prepared

    table = Table(title="Registered rules")
    table.add_column("Rule", no_wrap=True)
    table.add_column("Priority", justify="right", no_wrap=True)
    table.add_column("Category")
    table.add_column("Description")
    active = {rule.name for rule in rules}
    for name in registry.names():
        rule = registry[name]
        label = name if name in active else f"{name} (disabled)"
        table.add_row(label, f"P{rule.priority}", rule.category, rule.description)
    Console(soft_wrap=True).print(table)
    raise typer.Exit(code=int(ExitCode.SUCCESS))


__all__ = ["app", "parse_rule_configurations"]
