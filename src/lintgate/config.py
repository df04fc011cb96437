# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model consumed by the ``lintgate`` driver."""

from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .engine import DEFAULT_SOURCE_SUFFIXES
from .gate import Thresholds

BUILTIN_DIR: Final[Path] = Path(__file__).resolve().parent / "builtin"
BUILTIN_RULES_DIR: Final[Path] = BUILTIN_DIR / "rules"
BUILTIN_REPORTERS_DIR: Final[Path] = BUILTIN_DIR / "reporters"
DEFAULT_REPORTER: Final[str] = "text"


def default_jobs() -> int:
    """Return 75% of available CPU cores (minimum of 1)."""
    cores = os.cpu_count() or 1
    return max(1, math.floor(cores * 0.75))


class DriverConfig(BaseModel):
    """Settings for one driver run: plugins, reporters, output, and thresholds."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    rule_paths: list[Path] = Field(default_factory=lambda: [BUILTIN_RULES_DIR])
    reporter_paths: list[Path] = Field(default_factory=lambda: [BUILTIN_REPORTERS_DIR])
    reporters: list[str] = Field(default_factory=lambda: [DEFAULT_REPORTER], min_length=1)
    output: Path | None = None
    thresholds: Thresholds = Field(default_factory=Thresholds)
    allow_duplicated_violations: bool = False
    enabled_rules: list[str] = Field(default_factory=list)
    disabled_rules: list[str] = Field(default_factory=list)
    rule_configurations: dict[str, str] = Field(default_factory=dict)
    jobs: int = Field(default_factory=default_jobs, ge=1)
    source_suffixes: list[str] = Field(default_factory=lambda: list(DEFAULT_SOURCE_SUFFIXES))
    load_entry_points: bool = False
    list_enabled_rules: bool = False

    @field_validator("rule_configurations", mode="before")
    @classmethod
    def _stringify_rule_configurations(cls, value: Any) -> Any:
        """Accept TOML integers and floats as rule configuration values."""
        if isinstance(value, dict):
            return {str(key): str(item) for key, item in value.items()}
        return value

    @field_validator("reporters")
    @classmethod
    def _reject_blank_reporters(cls, value: list[str]) -> list[str]:
        if any(not name.strip() for name in value):
            raise ValueError("reporter names must not be blank")
        return value

    @property
    def deduplicate(self) -> bool:
        """Return ``True`` when results should be deduplicated."""

        return not self.allow_duplicated_violations


__all__ = [
    "BUILTIN_REPORTERS_DIR",
    "BUILTIN_RULES_DIR",
    "DEFAULT_REPORTER",
    "DriverConfig",
    "default_jobs",
]
