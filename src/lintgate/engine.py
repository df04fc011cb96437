# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Analysis engine seam and the default line-oriented engine.

The driver only depends on :class:`AnalysisEngine`: something that applies
the active rules to the requested sources and writes into a
:class:`~lintgate.collector.ResultCollector`.  :class:`LineRuleEngine` is the
bundled implementation; it reads each file as text and fans the files out
over a thread pool, with every worker writing to the same collector.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Final, Protocol

from .collector import ResultCollector
from .errors import ProcessingError
from .rules import Rule, SourceUnit

LOGGER = logging.getLogger(__name__)

DEFAULT_SOURCE_SUFFIXES: Final[tuple[str, ...]] = (
    ".c",
    ".cc",
    ".cpp",
    ".cxx",
    ".h",
    ".hh",
    ".hpp",
    ".m",
    ".mm",
    ".py",
)


class AnalysisEngine(Protocol):
    """Apply rules to sources and record the findings."""

    def run(self, rules: Sequence[Rule], sources: Sequence[Path], collector: ResultCollector) -> None:
        """Analyse ``sources`` with ``rules`` writing into ``collector``.

        Raises:
            ProcessingError: If the analysis cannot complete.
        """
        ...


def iter_source_files(sources: Iterable[Path], suffixes: Sequence[str]) -> Iterator[Path]:
    """Yield the files to analyse for ``sources``.

    Files named explicitly are always yielded; directories are walked
    recursively for files whose suffix is listed in ``suffixes``, skipping
    hidden entries.

    Args:
        sources: Files and directories requested by the user.
        suffixes: File suffixes collected from directories.

    Yields:
        Path: Source files in deterministic order.
    """

    wanted = {suffix.lower() for suffix in suffixes}
    seen: set[Path] = set()
    for source in sources:
        if source.is_dir():
            candidates: Iterable[Path] = sorted(
                path
                for path in source.rglob("*")
                if path.is_file()
                and path.suffix.lower() in wanted
                and not any(part.startswith(".") for part in path.relative_to(source).parts)
            )
        else:
            candidates = (source,)
        for candidate in candidates:
            if candidate not in seen:
                seen.add(candidate)
                yield candidate


class LineRuleEngine:
    """Read sources as text and apply every rule to each file."""

    def __init__(
        self,
        *,
        jobs: int = 1,
        options: Mapping[str, str] | None = None,
        suffixes: Sequence[str] = DEFAULT_SOURCE_SUFFIXES,
        encoding: str = "utf-8",
    ) -> None:
        """Initialise the engine.

        Args:
            jobs: Number of worker threads.
            options: Rule configuration values exposed through :class:`SourceUnit`.
            suffixes: Suffixes collected when a directory is analysed.
            encoding: Text encoding used to read sources.
        """

        self.jobs = max(1, jobs)
        self.options = dict(options or {})
        self.suffixes = tuple(suffixes)
        self.encoding = encoding

    def run(self, rules: Sequence[Rule], sources: Sequence[Path], collector: ResultCollector) -> None:
        """Analyse ``sources`` concurrently and record findings in ``collector``.

        Args:
            rules: Active rules.
            sources: Files or directories to analyse.
            collector: Sink shared by all workers.

        Raises:
            ProcessingError: If a rule fails while analysing a file.
        """

        files = list(iter_source_files(sources, self.suffixes))
        LOGGER.debug("analysing files=%d rules=%d jobs=%d", len(files), len(rules), self.jobs)
        with ThreadPoolExecutor(max_workers=self.jobs) as executor:
            futures: list[Future[None]] = [
                executor.submit(self.analyse_file, path, rules, collector) for path in files
            ]
            for future in as_completed(futures):
                try:
                    future.result()
                except ProcessingError:
                    for pending in futures:
                        pending.cancel()
                    raise

    def analyse_file(self, path: Path, rules: Sequence[Rule], collector: ResultCollector) -> None:
        """Apply ``rules`` to one file.

        Unreadable files are recorded as analysis errors rather than raised.

        Args:
            path: File to analyse.
            rules: Active rules.
            collector: Sink receiving violations and errors.

        Raises:
            ProcessingError: If a rule raises.
        """

        display = path.as_posix()
        collector.record_file(display)
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
            collector.record_error(f"cannot read {display}: {reason}", path=display)
            return
        unit = SourceUnit(path=display, text=text, options=self.options)
        for rule in rules:
            try:
                for violation in rule.apply(unit):
                    collector.record(violation)
            except ProcessingError:
                raise
            except Exception as exc:  # rules are plugin code
                raise ProcessingError(f"rule {rule.name} failed on {display}: {exc}") from exc


__all__ = [
    "DEFAULT_SOURCE_SUFFIXES",
    "AnalysisEngine",
    "LineRuleEngine",
    "iter_source_files",
]
