# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Resolve the output stream each reporter writes to.

Without an output template every reporter shares standard output, so several
reporters interleave their reports on one stream.  With a template such as
``build/lint.*`` each reporter gets its own file whose extension is replaced
by the reporter's format name (``build/lint.json``, ``build/lint.sarif``).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from pathlib import Path
from typing import TextIO

from .errors import ReportingError, ReportOutputError

LOGGER = logging.getLogger(__name__)


def derive_output_path(template: Path | str, format_name: str) -> Path:
    """Return the report path for ``format_name`` derived from ``template``.

    Args:
        template: Configured output template, for example ``out/report.txt``.
        format_name: Reporter format name used as the new extension.

    Returns:
        Path: ``<parent of template>/<stem of template>.<format_name>``.
    """

    template_path = Path(template)
    return template_path.parent / f"{template_path.stem}.{format_name}"


class OutputResolver:
    """Hand out writable streams for reporters."""

    def __init__(self, template: Path | str | None = None, *, stdout: TextIO | None = None) -> None:
        """Initialise the resolver.

        Args:
            template: Optional output template; ``None`` selects standard output.
            stdout: Stream used in place of :data:`sys.stdout` when provided.
        """

        self._template = Path(template) if template is not None else None
        self._stdout = stdout

    @property
    def uses_stdout(self) -> bool:
        """Return ``True`` when every reporter shares standard output."""

        return self._template is None

    def target_for(self, format_name: str) -> Path | None:
        """Return the file path for ``format_name`` or ``None`` for standard output.

        Args:
            format_name: Reporter format name.

        Returns:
            Path | None: Derived path, or ``None`` when no template is configured.
        """

        if self._template is None:
            return None
        return derive_output_path(self._template, format_name)

    @contextmanager
    def open(self, format_name: str) -> Iterator[TextIO]:
        """Yield the stream for ``format_name`` and release it afterwards.

        File-backed streams are closed on exit; the shared standard output
        stream is flushed but never closed.  A stream that fails to flush or
        close after a successful write surfaces as :class:`ReportingError`;
        when the write itself failed, that error is the one propagated.

        Args:
            format_name: Reporter format name.

        Yields:
            TextIO: Writable text stream.

        Raises:
            ReportOutputError: If the derived path cannot be opened.
            ReportingError: If the stream cannot be flushed or closed.
        """

        target = self.target_for(format_name)
        if target is None:
            stream = self._stdout if self._stdout is not None else sys.stdout
            yield stream
            try:
                stream.flush()
            except OSError as exc:
                raise ReportingError(format_name, f"cannot flush standard output: {_reason(exc)}") from exc
            return

        try:
            handle = target.open("w", encoding="utf-8")
        except OSError as exc:
            raise ReportOutputError(target, exc.strerror) from exc
        LOGGER.debug("writing %s report to %s", format_name, target)
        try:
            yield handle
        except BaseException:
            with suppress(OSError):
                handle.close()
            raise
        try:
            handle.close()
        except OSError as exc:
            raise ReportingError(format_name, f"cannot close {target}: {_reason(exc)}") from exc


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc) or type(exc).__name__


__all__ = ["OutputResolver", "derive_output_path"]
