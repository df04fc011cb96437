# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for violation and location models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from lintgate.models import SourceLocation, Violation


def test_location_end_defaults_to_start() -> None:
    location = SourceLocation(path="a.c", start_line=4, start_column=7)
    assert (location.end_line, location.end_column) == (4, 7)
    assert str(location) == "a.c:4:7"


def test_violation_is_immutable(violation) -> None:
    item = violation()
    with pytest.raises(ValidationError):
        item.message = "changed"


@pytest.mark.parametrize("priority", [0, 4])
def test_violation_rejects_out_of_range_priority(priority: int) -> None:
    with pytest.raises(ValidationError):
        Violation(rule="r", priority=priority, location=SourceLocation(path="a.c"))


def test_identity_ignores_priority_and_end_position() -> None:
    first = Violation(
        rule="long line",
        priority=3,
        location=SourceLocation(path="a.c", start_line=1, start_column=1, end_line=1, end_column=90),
        message="too long",
    )
    second = Violation(
        rule="long line",
        priority=2,
        location=SourceLocation(path="a.c", start_line=1, start_column=1, end_line=2, end_column=3),
        message="too long",
    )
    assert first.identity == second.identity == ("long line", "a.c", 1, 1, "too long")


def test_identity_distinguishes_message(violation) -> None:
    assert violation(message="one").identity != violation(message="two").identity
