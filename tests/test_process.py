# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the subprocess wrapper."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

import pytest

from shellcheck_runner import process
from shellcheck_runner.process import CommandOptions, CommandTimeoutError, run_command


def test_run_command_merges_stderr_and_never_checks(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    captured: dict[str, Any] = {}

    def fake_run(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        captured["args"] = args
        captured.update(kwargs)
        return subprocess.CompletedProcess(args, 1, stdout="out", stderr=None)

    monkeypatch.setattr(process.shutil, "which", lambda name: f"/opt/bin/{name}")
    monkeypatch.setattr(process.subprocess, "run", fake_run)

    completed = run_command(["shellcheck", "a.sh"], options=CommandOptions(cwd=tmp_path, timeout=5))

    assert completed.returncode == 1
    assert captured["args"] == ["/opt/bin/shellcheck", "a.sh"]
    assert captured["stderr"] is subprocess.STDOUT
    assert captured["check"] is False
    assert captured["cwd"] == str(tmp_path)
    assert captured["timeout"] == 5
    assert "shell" not in captured


def test_run_command_reports_timeouts(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_run(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        raise subprocess.TimeoutExpired(args, kwargs["timeout"], output=b"partial")

    monkeypatch.setattr(process.shutil, "which", lambda name: f"/opt/bin/{name}")
    monkeypatch.setattr(process.subprocess, "run", fake_run)

    with pytest.raises(CommandTimeoutError) as excinfo:
        run_command(["shellcheck"], overrides={"timeout": 1.5})

    assert excinfo.value.output == "partial"
    assert "1.5s" in str(excinfo.value)


def test_missing_executables_raise_file_not_found(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(process.shutil, "which", lambda name: None)

    with pytest.raises(FileNotFoundError):
        run_command(["shellcheck"])
    with pytest.raises(FileNotFoundError):
        run_command([str(tmp_path / "missing" / "shellcheck")])
    with pytest.raises(ValueError):
        run_command([])


def test_command_option_overrides_are_validated() -> None:
    options = CommandOptions()

    assert options.with_overrides({"timeout": 3}).timeout == 3
    with pytest.raises(TypeError):
        options.with_overrides({"shell": True})
    with pytest.raises(ValueError):
        options.with_overrides({"timeout": -1})
