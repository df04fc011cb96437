# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Config loading with layered precedence: defaults, TOML file, then overrides."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from .config import DriverConfig
from .errors import ConfigError

LOGGER = logging.getLogger(__name__)

CONFIG_FILENAME: Final[str] = "lintgate.toml"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "lintgate"
_PATH_LIST_KEYS: Final[tuple[str, ...]] = ("rule_paths", "reporter_paths")
_PATH_KEYS: Final[tuple[str, ...]] = ("output",)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"cannot read configuration {path}: {exc.strerror}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML in {path}: {exc}") from exc


def _resolve_paths(data: dict[str, Any], base: Path) -> dict[str, Any]:
    """Resolve relative paths in ``data`` against ``base``."""
    resolved = dict(data)
    for key in _PATH_LIST_KEYS:
        value = resolved.get(key)
        if isinstance(value, list):
            resolved[key] = [base / Path(item) if isinstance(item, str) else item for item in value]
    for key in _PATH_KEYS:
        value = resolved.get(key)
        if isinstance(value, str):
            resolved[key] = base / Path(value)
    return resolved


def load_config_file(path: Path) -> dict[str, Any]:
    """Return the configuration fragment stored in ``path``.

    ``pyproject.toml`` files contribute their ``[tool.lintgate]`` table; any
    other file is read as a whole.

    Args:
        path: TOML configuration file.

    Returns:
        dict[str, Any]: Raw configuration fragment with paths resolved
        relative to the file's directory.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """

    data = _read_toml(path)
    if path.name == PYPROJECT_FILENAME:
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        section = tool_section.get(PYPROJECT_SECTION_KEY) if isinstance(tool_section, Mapping) else None
        if section is None:
            return {}
        if not isinstance(section, Mapping):
            raise ConfigError(f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table")
        data = dict(section)
    return _resolve_paths(data, path.parent)


def find_config_file(root: Path) -> Path | None:
    """Return the configuration file governing ``root``, if any.

    Args:
        root: Directory searched for ``lintgate.toml`` or a ``pyproject.toml``
            carrying a ``[tool.lintgate]`` table.

    Returns:
        Path | None: Discovered configuration file.
    """

    candidate = root / CONFIG_FILENAME
    if candidate.is_file():
        return candidate
    pyproject = root / PYPROJECT_FILENAME
    if pyproject.is_file():
        try:
            if load_config_file(pyproject):
                return pyproject
        except ConfigError:
            LOGGER.debug("ignoring unreadable %s", pyproject)
    return None


def load_config(
    path: Path | None = None,
    *,
    root: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> DriverConfig:
    """Build a :class:`DriverConfig` from defaults, a TOML file, and overrides.

    Args:
        path: Explicit configuration file; discovered under ``root`` when ``None``.
        root: Directory used for discovery; defaults to the working directory.
        overrides: Values supplied on the command line, applied last.

    Returns:
        DriverConfig: Validated configuration.

    Raises:
        ConfigError: If a file cannot be parsed or the merged data is invalid.
    """

    if path is not None and not path.is_file():
        raise ConfigError(f"configuration file not found: {path}")
    source = path if path is not None else find_config_file(root or Path.cwd())
    data: dict[str, Any] = {}
    if source is not None:
        LOGGER.debug("loading configuration from %s", source)
        data = load_config_file(source)
    if overrides:
        data = _deep_merge(data, overrides)
    try:
        return DriverConfig.model_validate(data)
    except ValidationError as exc:
        origin = f" in {source}" if source is not None else ""
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ConfigError(f"invalid configuration{origin}: {details}") from exc


__all__ = [
    "CONFIG_FILENAME",
    "find_config_file",
    "load_config",
    "load_config_file",
]
