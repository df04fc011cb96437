# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Plugin loading for rules and reporters.

Plugins are plain Python files.  A rule plugin defines
``register_rules(registry)`` and a reporter plugin defines
``register_reporters(registry)``; the hook receives a registry and adds
instances to it.  A configured path may name a single ``.py`` file or a
directory whose ``*.py`` files are loaded in sorted order.

Loading one path is atomic: entries are registered into a staging registry
first and only merged into the target once every file under the path has
loaded.  Installed distributions may also contribute plugins through the
``lintgate.rules`` and ``lintgate.reporters`` entry-point groups.
"""

from __future__ import annotations

import hashlib
import importlib.util
import logging
import sys
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from importlib import metadata
from importlib.metadata import EntryPoint, EntryPoints
from pathlib import Path
from types import ModuleType
from typing import Final, Generic, Protocol, TypeAlias, TypeVar, cast

from .errors import PluginLoadError
from .registry import ReporterRegistry, RuleRegistry, _NamedRegistry

LOGGER = logging.getLogger(__name__)

RULES_HOOK: Final[str] = "register_rules"
REPORTERS_HOOK: Final[str] = "register_reporters"
RULES_ENTRY_POINT_GROUP: Final[str] = "lintgate.rules"
REPORTERS_ENTRY_POINT_GROUP: Final[str] = "lintgate.reporters"
PLUGIN_SUFFIX: Final[str] = ".py"
_MODULE_PREFIX: Final[str] = "lintgate_plugins"

RegistryT = TypeVar("RegistryT", bound=_NamedRegistry)  # type: ignore[type-arg]
RegisterHook: TypeAlias = Callable[[RegistryT], object]

_EntryPointSource: TypeAlias = EntryPoints | Mapping[str, Sequence[EntryPoint]]


@dataclass(frozen=True, slots=True)
class LoadOutcome:
    """Result of loading one plugin path."""

    source: str
    registered: tuple[str, ...] = ()
    error: PluginLoadError | None = None

    @property
    def ok(self) -> bool:
        """Return ``True`` when the path loaded without error."""

        return self.error is None


class PluginLoader(Protocol):
    """Narrow loading interface used by the driver."""

    def load_from_path(self, path: Path) -> LoadOutcome:
        """Load every plugin contained in ``path``."""
        ...


class FilesystemPluginLoader(Generic[RegistryT]):
    """Load plugin files from disk and register their entries into a registry."""

    def __init__(
        self,
        registry: RegistryT,
        *,
        hook: str,
        registry_factory: Callable[[], RegistryT],
    ) -> None:
        """Initialise the loader.

        Args:
            registry: Registry receiving the loaded entries.
            hook: Name of the module-level registration function.
            registry_factory: Factory producing empty staging registries.
        """

        self.registry = registry
        self.hook = hook
        self._registry_factory = registry_factory

    def load_from_path(self, path: Path) -> LoadOutcome:
        """Load ``path`` and merge its entries into the registry.

        Args:
            path: Plugin file or directory of plugin files.

        Returns:
            LoadOutcome: Names registered from ``path`` or the load error.
        """

        staging = self._registry_factory()
        try:
            for plugin_file in plugin_files(path):
                module = import_plugin_file(plugin_file, namespace=self.hook)
                register = getattr(module, self.hook, None)
                if not callable(register):
                    raise PluginLoadError(plugin_file, f"missing callable '{self.hook}'")
                _invoke_hook(cast(RegisterHook[RegistryT], register), staging, source=plugin_file)
            registered = self._commit(staging, source=path)
        except PluginLoadError as exc:
            LOGGER.debug("plugin load failed path=%s reason=%s", path, exc.reason)
            return LoadOutcome(source=str(path), error=exc)
        LOGGER.debug("loaded plugins path=%s names=%s", path, ",".join(registered))
        return LoadOutcome(source=str(path), registered=registered)

    def load_entry_points(self, group: str) -> tuple[LoadOutcome, ...]:
        """Load registration hooks exposed by installed distributions.

        Args:
            group: Entry-point group to inspect.

        Returns:
            tuple[LoadOutcome, ...]: One outcome per discovered entry point.
        """

        outcomes: list[LoadOutcome] = []
        for entry in _select_entry_points(cast(_EntryPointSource, metadata.entry_points()), group):
            source = f"{entry.name} ({entry.value})"
            staging = self._registry_factory()
            try:
                try:
                    register = entry.load()
                except (AttributeError, ImportError, ValueError, SyntaxError) as exc:
                    raise PluginLoadError(entry.value, str(exc)) from exc
                _invoke_hook(cast(RegisterHook[RegistryT], register), staging, source=entry.value)
                registered = self._commit(staging, source=entry.value)
            except PluginLoadError as exc:
                outcomes.append(LoadOutcome(source=source, error=exc))
                break
            outcomes.append(LoadOutcome(source=source, registered=registered))
        return tuple(outcomes)

    def _commit(self, staging: RegistryT, *, source: Path | str) -> tuple[str, ...]:
        conflicts = [name for name in staging if name in self.registry]
        if conflicts:
            raise PluginLoadError(source, f"already registered: {', '.join(sorted(conflicts))}")
        self.registry.update(staging.values())
        return tuple(staging)


def rule_loader(registry: RuleRegistry) -> FilesystemPluginLoader[RuleRegistry]:
    """Return a loader registering rule plugins into ``registry``."""

    return FilesystemPluginLoader(registry, hook=RULES_HOOK, registry_factory=RuleRegistry)


def reporter_loader(registry: ReporterRegistry) -> FilesystemPluginLoader[ReporterRegistry]:
    """Return a loader registering reporter plugins into ``registry``."""

    return FilesystemPluginLoader(registry, hook=REPORTERS_HOOK, registry_factory=ReporterRegistry)


def plugin_files(path: Path) -> tuple[Path, ...]:
    """Return the plugin files contained in ``path``.

    Args:
        path: Plugin file or directory.

    Returns:
        tuple[Path, ...]: Plugin files in load order. Files whose name starts
        with an underscore are skipped when scanning a directory.

    Raises:
        PluginLoadError: If ``path`` does not exist or is not a Python file.
    """

    if path.is_dir():
        return tuple(
            sorted(
                candidate
                for candidate in path.iterdir()
                if candidate.suffix == PLUGIN_SUFFIX and candidate.is_file() and not candidate.name.startswith("_")
            ),
        )
    if not path.exists():
        raise PluginLoadError(path, "no such file or directory")
    if path.suffix != PLUGIN_SUFFIX:
        raise PluginLoadError(path, f"expected a {PLUGIN_SUFFIX} file")
    return (path,)


def import_plugin_file(path: Path, *, namespace: str) -> ModuleType:
    """Import ``path`` as a uniquely named module.

    Args:
        path: Python source file to import.
        namespace: Label mixed into the module name to keep rule and reporter
            plugins apart.

    Returns:
        ModuleType: Executed module object.

    Raises:
        PluginLoadError: If the file cannot be imported or executed.
    """

    resolved = path.resolve()
    digest = hashlib.sha1(f"{namespace}:{resolved}".encode(), usedforsecurity=False).hexdigest()[:12]
    module_name = f"{_MODULE_PREFIX}.{resolved.stem}_{digest}"
    existing = sys.modules.get(module_name)
    if existing is not None:
        return existing
    spec = importlib.util.spec_from_file_location(module_name, resolved)
    if spec is None or spec.loader is None:
        raise PluginLoadError(path, "not an importable module")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as exc:  # plugin modules are arbitrary code
        sys.modules.pop(module_name, None)
        raise PluginLoadError(path, f"{type(exc).__name__}: {exc}") from exc
    return module


def _invoke_hook(register: RegisterHook[RegistryT], staging: RegistryT, *, source: Path | str) -> None:
    try:
        register(staging)
    except PluginLoadError:
        raise
    except Exception as exc:  # registration hooks are arbitrary code
        raise PluginLoadError(source, f"{type(exc).__name__}: {exc}") from exc


def _select_entry_points(entries: _EntryPointSource, group: str) -> Iterable[EntryPoint]:
    """Return entry points exposed under ``group`` from ``entries``.

    Args:
        entries: Raw entry-point container returned by :func:`metadata.entry_points`.
        group: Name of the entry-point group to extract.

    Returns:
        Iterable[EntryPoint]: Entry points belonging to ``group``.
    """

    if isinstance(entries, Mapping):
        return entries.get(group, ())
    if hasattr(entries, "select"):
        return entries.select(group=group)
    return ()


__all__ = [
    "REPORTERS_ENTRY_POINT_GROUP",
    "REPORTERS_HOOK",
    "RULES_ENTRY_POINT_GROUP",
    "RULES_HOOK",
    "FilesystemPluginLoader",
    "LoadOutcome",
    "PluginLoader",
    "import_plugin_file",
    "plugin_files",
    "reporter_loader",
    "rule_loader",
]
