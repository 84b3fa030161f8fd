# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity related types and helpers."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Final


class Severity(str, Enum):
    """Severity levels emitted by shellcheck, lowest first."""

    STYLE = "style"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @property
    def rank(self) -> int:
        """Return the ordinal used to compare severities."""

        return SEVERITY_RANK[self]

    def at_least(self, threshold: Severity) -> bool:
        """Return ``True`` when this severity meets or exceeds ``threshold``."""

        return self.rank >= threshold.rank


SEVERITY_RANK: Final[dict[Severity, int]] = {
    Severity.STYLE: 0,
    Severity.INFO: 1,
    Severity.WARNING: 2,
    Severity.ERROR: 3,
}

_SEVERITY_ALIASES: Final[dict[str, Severity]] = {
    "warn": Severity.WARNING,
}

_SEVERITY_TO_SARIF_LEVEL: Final[dict[Severity, str]] = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "note",
    Severity.STYLE: "note",
}


def parse_severity(label: str) -> Severity:
    """Return the :class:`Severity` matching ``label`` case-insensitively.

    Args:
        label: Raw severity label from configuration or tool output.

    Returns:
        Severity: Matching severity member.

    Raises:
        ValueError: If ``label`` is not a recognised severity.
    """

    normalized = label.strip().lower()
    if normalized in _SEVERITY_ALIASES:
        return _SEVERITY_ALIASES[normalized]
    return Severity(normalized)


def worst_severity(severities: Iterable[Severity]) -> Severity | None:
    """Return the highest severity in ``severities`` or ``None`` when empty."""

    worst: Severity | None = None
    for severity in severities:
        if worst is None or severity.rank > worst.rank:
            worst = severity
    return worst


def descending() -> tuple[Severity, ...]:
    """Return severities ordered from most to least severe."""

    return tuple(sorted(Severity, key=lambda sev: sev.rank, reverse=True))


def severity_to_sarif(severity: Severity) -> str:
    """Map :class:`Severity` to a SARIF reporting level."""

    return _SEVERITY_TO_SARIF_LEVEL.get(severity, "warning")


__all__ = [
    "SEVERITY_RANK",
    "Severity",
    "descending",
    "parse_severity",
    "severity_to_sarif",
    "worst_severity",
]
