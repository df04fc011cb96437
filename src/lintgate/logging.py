# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing diagnostics with optional colour and emoji support.

Everything here writes to standard error so that reporters sharing standard
output keep a clean stream.
"""

from __future__ import annotations

import logging
import sys
from functools import lru_cache
from typing import Final

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

PROGRAM_NAME: Final[str] = "lintgate"


def detect_tty() -> bool:
    """Return ``True`` when stderr appears to be backed by a terminal."""

    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False


@lru_cache(maxsize=8)
def get_console(*, color: bool = True, emoji: bool = True) -> Console:
    """Return a cached stderr console configured for ``color`` and ``emoji``.

    Args:
        color: ``True`` when ANSI colour output may be used.
        emoji: ``True`` when emoji glyphs may be rendered.

    Returns:
        Console: Rich console bound to standard error.
    """

    return Console(
        stderr=True,
        no_color=not color,
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _print_line(msg: str, *, style: str | None, use_emoji: bool, use_color: bool | None) -> None:
    color_enabled = detect_tty() if use_color is None else use_color
    console = get_console(color=color_enabled, emoji=use_emoji)
    text = Text(msg)
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def warn(msg: str, *, use_emoji: bool = False, use_color: bool | None = None) -> None:
    """Emit a warning message."""

    _print_line(f"{emoji('⚠️ ', use_emoji)}{msg}", style="yellow", use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool = False, use_color: bool | None = None) -> None:
    """Emit an error message."""

    _print_line(f"{emoji('❌ ', use_emoji)}{msg}", style="red", use_emoji=use_emoji, use_color=use_color)


def error_line(msg: str, *, use_emoji: bool = False, use_color: bool | None = None) -> None:
    """Emit the single ``lintgate: error: <msg>`` diagnostic for a fatal condition.

    Args:
        msg: Description of the failure.
        use_emoji: Flag indicating whether emoji output is desired.
        use_color: Optional explicit colour flag overriding TTY detection.
    """

    fail(f"{PROGRAM_NAME}: error: {msg}", use_emoji=use_emoji, use_color=use_color)


def configure_logging(*, debug: bool = False, color: bool = True) -> None:
    """Route the ``lintgate`` logger hierarchy through a Rich handler on stderr.

    Args:
        debug: ``True`` enables DEBUG level tracing.
        color: ``False`` disables colour in log records.
    """

    logger = logging.getLogger(PROGRAM_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.WARNING)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    handler = RichHandler(
        console=get_console(color=color, emoji=False),
        show_time=False,
        show_path=debug,
        markup=False,
    )
    logger.addHandler(handler)
    logger.propagate = False


__all__ = [
    "PROGRAM_NAME",
    "configure_logging",
    "detect_tty",
    "emoji",
    "error_line",
    "fail",
    "get_console",
    "warn",
]
