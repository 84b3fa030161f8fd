# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised by the shellcheck runner pipeline."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import ClassVar

from .severity import Severity, descending


class ShellcheckRunnerError(RuntimeError):
    """Base class for failures surfaced by the runner."""

    exit_code: ClassVar[int] = 1
    stage: ClassVar[str] = "pipeline"


class ConfigurationError(ShellcheckRunnerError):
    """Raised when settings are missing, invalid, or conflicting."""

    exit_code: ClassVar[int] = 2
    stage: ClassVar[str] = "configuration"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        """Initialise the error with the offending configuration field.

        Args:
            message: Human-readable description of the problem.
            field: Name of the configuration key at fault, when known.
        """

        prefix = f"{field}: " if field else ""
        super().__init__(f"{prefix}{message}")
        self.field = field


class LauncherError(ShellcheckRunnerError):
    """Raised when shellcheck could not be run to completion."""

    exit_code: ClassVar[int] = 3
    stage: ClassVar[str] = "launch"

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        output: str = "",
        timed_out: bool = False,
    ) -> None:
        """Initialise the error with captured process metadata.

        Args:
            message: Human-readable description of the failure.
            command: Command line that was executed.
            returncode: Exit status reported by the process, if it exited.
            output: Merged stdout/stderr captured before the failure.
            timed_out: ``True`` when the process was killed on timeout.
        """

        super().__init__(message)
        self.command = tuple(command)
        self.returncode = returncode
        self.output = output
        self.timed_out = timed_out


class ParseError(ShellcheckRunnerError):
    """Raised when shellcheck reported findings that could not be extracted."""

    exit_code: ClassVar[int] = 3
    stage: ClassVar[str] = "parse"

    def __init__(self, message: str, *, returncode: int, output: str) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class ReportWriteError(ShellcheckRunnerError):
    """Raised when a single report target could not be written."""

    exit_code: ClassVar[int] = 4
    stage: ClassVar[str] = "report"

    def __init__(self, report_format: str, destination: Path, reason: str) -> None:
        super().__init__(f"{report_format} report could not be written to {destination}: {reason}")
        self.report_format = report_format
        self.destination = destination
        self.reason = reason


class ThresholdFailure(ShellcheckRunnerError):
    """Raised when violations meet or exceed the configured severity."""

    exit_code: ClassVar[int] = 1
    stage: ClassVar[str] = "decide"

    def __init__(self, summary: Mapping[Severity, int], threshold: Severity) -> None:
        failing = sum(count for severity, count in summary.items() if severity.at_least(threshold))
        super().__init__(
            f"shellcheck found {failing} violation(s) at or above '{threshold.value}' ({format_summary(summary)})",
        )
        self.summary = dict(summary)
        self.threshold = threshold


def format_summary(summary: Mapping[Severity, int]) -> str:
    """Render per-severity counts as ``error=1, warning=2`` ordered by severity."""

    parts = [f"{severity.value}={summary[severity]}" for severity in descending() if summary.get(severity)]
    return ", ".join(parts) if parts else "none"


__all__ = [
    "ConfigurationError",
    "LauncherError",
    "ParseError",
    "ReportWriteError",
    "ShellcheckRunnerError",
    "ThresholdFailure",
    "format_summary",
]
