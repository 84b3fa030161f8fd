# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from shellcheck_runner.config import InvocationDescriptor, ShellcheckSettings
from shellcheck_runner.errors import ShellcheckRunnerError
from shellcheck_runner.models import LaunchResult


@dataclass
class SpyLauncher:
    """Record descriptors and return a canned shellcheck result."""

    returncode: int = 0
    output: str = ""
    error: ShellcheckRunnerError | None = None
    calls: list[InvocationDescriptor] = field(default_factory=list)

    def launch(self, descriptor: InvocationDescriptor) -> LaunchResult:
        self.calls.append(descriptor)
        if self.error is not None:
            raise self.error
        return LaunchResult(command=("shellcheck",), returncode=self.returncode, output=self.output)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Return a project directory holding a couple of shell scripts."""

    root = tmp_path / "project"
    (root / "scripts").mkdir(parents=True)
    (root / "a.sh").write_text("#!/bin/sh\necho $1\n", encoding="utf-8")
    (root / "scripts" / "b.sh").write_text("#!/bin/sh\nls *\n", encoding="utf-8")
    return root.resolve()


@pytest.fixture
def make_settings(project: Path):
    """Return a factory building local-mode settings rooted at ``project``."""

    def _make(**overrides: Any) -> ShellcheckSettings:
        values: dict[str, Any] = {
            "project_dir": project,
            "sources": ("a.sh",),
            "use_docker": False,
            "shellcheck_binary": "/usr/bin/shellcheck",
        }
        values.update(overrides)
        return ShellcheckSettings(**values)

    return _make


@pytest.fixture
def spy_launcher() -> SpyLauncher:
    """Return a launcher spy reporting a clean run by default."""

    return SpyLauncher()
