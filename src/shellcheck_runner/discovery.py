# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expand configured source entries into concrete shell script paths."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Final

from .errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

SHELL_SUFFIXES: Final[frozenset[str]] = frozenset({".sh", ".bash", ".ksh", ".dash"})
ALWAYS_EXCLUDE_DIRS: Final[frozenset[str]] = frozenset(
    {".git", ".hg", ".svn", ".venv", "venv", "node_modules", "build", "__pycache__", ".tox"},
)
_GLOB_CHARS: Final[frozenset[str]] = frozenset("*?[")


def expand_sources(entries: Iterable[str | Path], project_dir: Path) -> tuple[Path, ...]:
    """Return the deduplicated script paths described by ``entries``.

    Entries may name files, directories (walked for shell script suffixes) or
    glob patterns relative to ``project_dir``. First-seen order is kept.

    Args:
        entries: Raw ``sources`` values from configuration.
        project_dir: Directory that relative entries are anchored to.

    Returns:
        tuple[Path, ...]: Absolute, resolved script paths.

    Raises:
        ConfigurationError: If an explicit file or directory entry does not exist.
    """

    raw_entries = [str(entry) for entry in entries]
    seen: dict[Path, None] = {}
    for entry in raw_entries:
        for path in _expand_entry(entry, project_dir):
            seen.setdefault(path.resolve(), None)
    LOGGER.debug("expanded %d source entries into %d files", len(raw_entries), len(seen))
    return tuple(seen)


def _expand_entry(entry: str, project_dir: Path) -> Iterator[Path]:
    text = entry.strip()
    if not text:
        return
    if _GLOB_CHARS.intersection(text):
        pattern = Path(text)
        if pattern.is_absolute():
            anchor = Path(pattern.anchor)
            matches = anchor.glob(str(pattern.relative_to(anchor)))
        else:
            matches = project_dir.glob(text)
        yield from sorted(match for match in matches if match.is_file())
        return

    candidate = Path(text)
    if not candidate.is_absolute():
        candidate = project_dir / candidate
    if candidate.is_dir():
        yield from _walk_scripts(candidate)
    elif candidate.is_file():
        yield candidate
    else:
        raise ConfigurationError(f"'{entry}' does not exist", field="sources")


def _walk_scripts(base: Path) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(base):
        dirnames[:] = sorted(name for name in dirnames if name not in ALWAYS_EXCLUDE_DIRS)
        for filename in sorted(filenames):
            if Path(filename).suffix in SHELL_SUFFIXES:
                yield Path(dirpath) / filename


__all__ = ["ALWAYS_EXCLUDE_DIRS", "SHELL_SUFFIXES", "expand_sources"]
