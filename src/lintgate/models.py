# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models describing violations and analysis errors."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict, Field, model_validator

PRIORITIES: Final[tuple[int, ...]] = (1, 2, 3)

ViolationKey = tuple[str, str, int, int, str]


class SourceLocation(BaseModel):
    """Span of source text a violation refers to."""

    model_config = ConfigDict(frozen=True)

    path: str
    start_line: int = Field(default=0, ge=0)
    start_column: int = Field(default=0, ge=0)
    end_line: int = Field(default=0, ge=0)
    end_column: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _default_end(cls, data: object) -> object:
        """Collapse a missing end position onto the start position."""
        if isinstance(data, dict):
            data = dict(data)
            data.setdefault("end_line", data.get("start_line", 0))
            data.setdefault("end_column", data.get("start_column", 0))
        return data

    def __str__(self) -> str:
        return f"{self.path}:{self.start_line}:{self.start_column}"


class Violation(BaseModel):
    """Immutable record of one issue discovered by a rule."""

    model_config = ConfigDict(frozen=True)

    rule: str
    priority: int = Field(ge=1, le=3)
    location: SourceLocation
    message: str = ""

    @property
    def identity(self) -> ViolationKey:
        """Return the key used to decide whether two violations are the same finding.

        Returns:
            ViolationKey: ``(rule, path, start_line, start_column, message)``.
        """

        loc = self.location
        return (self.rule, loc.path, loc.start_line, loc.start_column, self.message)


class AnalysisError(BaseModel):
    """Hard error raised while processing one compilation unit."""

    model_config = ConfigDict(frozen=True)

    path: str | None = None
    message: str


__all__ = [
    "PRIORITIES",
    "AnalysisError",
    "SourceLocation",
    "Violation",
    "ViolationKey",
]
