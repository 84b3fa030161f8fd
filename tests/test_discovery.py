# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for expanding source entries into script paths."""

from __future__ import annotations

from pathlib import Path

import pytest

from shellcheck_runner.discovery import expand_sources
from shellcheck_runner.errors import ConfigurationError


def test_directories_are_walked_for_shell_scripts(project: Path) -> None:
    (project / "scripts" / "notes.txt").write_text("x", encoding="utf-8")
    (project / "scripts" / "deploy.bash").write_text("x", encoding="utf-8")
    (project / "node_modules").mkdir()
    (project / "node_modules" / "vendored.sh").write_text("x", encoding="utf-8")

    found = expand_sources(["."], project)

    assert found == (
        project / "a.sh",
        project / "scripts" / "b.sh",
        project / "scripts" / "deploy.bash",
    )


def test_globs_and_duplicates(project: Path) -> None:
    found = expand_sources(["scripts/*.sh", "a.sh", str(project / "a.sh"), "**/b.sh"], project)

    assert found == (project / "scripts" / "b.sh", project / "a.sh")


def test_blank_entries_are_ignored(project: Path) -> None:
    assert expand_sources(["", "  "], project) == ()


def test_missing_entry_raises(project: Path) -> None:
    with pytest.raises(ConfigurationError, match="nope.sh"):
        expand_sources(["nope.sh"], project)
