# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Name-keyed registries for rules and reporters."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Generic, Protocol, TypeVar

from .reporters import Reporter
from .rules import Rule


class _Named(Protocol):
    """Anything registered by name."""

    @property
    def name(self) -> str: ...


EntryT = TypeVar("EntryT", bound=_Named)


class RegistrationConflictError(ValueError):
    """Raised when two plugins register the same name."""


class _NamedRegistry(Mapping[str, EntryT], Generic[EntryT]):
    """Read-only mapping of names to registered entries.

    Registration enforces uniqueness: a second entry under an existing name is
    rejected with :class:`RegistrationConflictError` instead of silently
    replacing the first one.
    """

    kind: str = "entry"

    def __init__(self) -> None:
        """Initialise an empty registry."""

        self._entries: dict[str, EntryT] = {}

    def register(self, entry: EntryT) -> None:
        """Register ``entry`` under its name.

        Args:
            entry: Rule or reporter to insert.

        Raises:
            RegistrationConflictError: If the name is already registered.
            ValueError: If the entry has an empty name.
        """

        name = entry.name
        if not name:
            raise ValueError(f"{self.kind} {entry!r} has no name")
        if name in self._entries:
            raise RegistrationConflictError(f"{self.kind} '{name}' already registered")
        self._entries[name] = entry

    def update(self, entries: Iterable[EntryT]) -> None:
        """Register every entry in ``entries`` in order.

        Args:
            entries: Entries to insert.
        """

        for entry in entries:
            self.register(entry)

    def try_get(self, name: str) -> EntryT | None:
        """Return the entry named ``name`` when registered, otherwise ``None``."""

        return self._entries.get(name)

    def names(self) -> tuple[str, ...]:
        """Return the registered names sorted alphabetically."""

        return tuple(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __getitem__(self, name: str) -> EntryT:
        return self._entries[name]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(self.names())})"


class RuleRegistry(_NamedRegistry[Rule]):
    """Registry of rule instances keyed by rule name."""

    kind = "rule"


class ReporterRegistry(_NamedRegistry[Reporter]):
    """Registry of reporter instances keyed by format name."""

    kind = "reporter"


__all__ = ["RegistrationConflictError", "ReporterRegistry", "RuleRegistry"]
