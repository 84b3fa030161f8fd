# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Result models shared by the launcher, parser, reporters, and decider."""

from __future__ import annotations

from collections import Counter

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .severity import Severity, descending, worst_severity


class ViolationRecord(BaseModel):
    """A single shellcheck finding tied to a file position."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int = Field(ge=1)
    column: int = Field(ge=1)
    severity: Severity
    code: str
    message: str

    @field_validator("file", mode="before")
    @classmethod
    def _normalize_file(cls, value: str) -> str:
        """Normalise path separators so reports match across platforms."""

        return str(value).replace("\\", "/")

    @property
    def location(self) -> str:
        """Return the ``file:line:column`` location string."""

        return f"{self.file}:{self.line}:{self.column}"

    def render(self) -> str:
        """Return the human-readable single line form of the violation."""

        return f"{self.location}: {self.severity.value} {self.code}: {self.message}"


class LaunchResult(BaseModel):
    """Exit status and merged output of a completed shellcheck process."""

    model_config = ConfigDict(frozen=True)

    command: tuple[str, ...]
    returncode: int
    output: str = ""


class RunResult(BaseModel):
    """Aggregate of the process outcome and the parsed violations."""

    model_config = ConfigDict(frozen=True)

    returncode: int
    output: str = ""
    violations: tuple[ViolationRecord, ...] = Field(default_factory=tuple)

    @property
    def worst_severity(self) -> Severity | None:
        """Return the most severe violation level observed, if any."""

        return worst_severity(violation.severity for violation in self.violations)

    @property
    def summary(self) -> dict[Severity, int]:
        """Return violation counts per severity ordered from error to style."""

        counts = Counter(violation.severity for violation in self.violations)
        return {severity: counts[severity] for severity in descending() if counts[severity]}


__all__ = ["LaunchResult", "RunResult", "ViolationRecord"]
