# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rule contract consumed by the analysis engine.

Rule plugins subclass :class:`Rule` and register instances with the
:class:`~lintgate.registry.RuleRegistry` passed to their ``register_rules``
hook.  The engine hands each rule a :class:`SourceUnit` and records every
:class:`~lintgate.models.Violation` the rule yields.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from typing import TYPE_CHECKING, ClassVar

from .errors import NoRulesLoadedError, RuleNotFoundError
from .models import SourceLocation, Violation

if TYPE_CHECKING:
    from .registry import RuleRegistry


@dataclass(frozen=True)
class SourceUnit:
    """Source text of a single compilation unit handed to rules."""

    path: str
    text: str
    options: Mapping[str, str] = field(default_factory=dict)

    @cached_property
    def lines(self) -> tuple[str, ...]:
        """Return the unit's lines without trailing newlines."""

        return tuple(self.text.splitlines())

    def option_int(self, key: str, default: int) -> int:
        """Return the integer rule configuration stored under ``key``.

        Args:
            key: Rule configuration key such as ``LONG_LINE``.
            default: Value used when the key is absent or not an integer.

        Returns:
            int: Configured value or ``default``.
        """

        raw = self.options.get(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            return default


class Rule(ABC):
    """Named check applied to every source unit."""

    name: ClassVar[str]
    priority: ClassVar[int] = 3
    category: ClassVar[str] = "basic"
    description: ClassVar[str] = ""

    @abstractmethod
    def apply(self, unit: SourceUnit) -> Iterable[Violation]:
        """Yield the violations found in ``unit``.

        Args:
            unit: Source unit under analysis.

        Returns:
            Iterable[Violation]: Violations discovered by the rule.
        """

    def violation(
        self,
        unit: SourceUnit,
        line: int,
        column: int,
        message: str,
        *,
        end_line: int | None = None,
        end_column: int | None = None,
    ) -> Violation:
        """Build a violation attributed to this rule.

        Args:
            unit: Source unit the violation belongs to.
            line: One-based start line.
            column: One-based start column.
            message: Human-readable description.
            end_line: Optional end line; defaults to ``line``.
            end_column: Optional end column; defaults to ``column``.

        Returns:
            Violation: Violation carrying the rule name and priority.
        """

        location = SourceLocation(
            path=unit.path,
            start_line=line,
            start_column=column,
            end_line=line if end_line is None else end_line,
            end_column=column if end_column is None else end_column,
        )
        return Violation(rule=self.name, priority=self.priority, location=location, message=message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"


@dataclass(slots=True)
class RuleFilter:
    """Select the active rules from a registry by name."""

    enabled: Sequence[str] = ()
    disabled: Sequence[str] = ()

    def filtered_rules(self, registry: RuleRegistry) -> tuple[Rule, ...]:
        """Return the rules that remain active after filtering.

        Args:
            registry: Registry holding every loaded rule.

        Returns:
            tuple[Rule, ...]: Active rules ordered by name.

        Raises:
            RuleNotFoundError: If a configured name is not registered.
            NoRulesLoadedError: If no rule remains active.
        """

        for name in (*self.enabled, *self.disabled):
            if name not in registry:
                raise RuleNotFoundError(name)
        selected = set(self.enabled) if self.enabled else set(registry)
        selected.difference_update(self.disabled)
        rules = tuple(registry[name] for name in sorted(selected))
        if not rules:
            raise NoRulesLoadedError()
        return rules


__all__ = ["Rule", "RuleFilter", "SourceUnit"]
