# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run shellcheck locally or in Docker, parse violations and write reports."""

from __future__ import annotations

from .config import (
    ExecutionMode,
    InvocationDescriptor,
    ReportFormat,
    ReportSettings,
    ReportTarget,
    ShellcheckSettings,
    resolve_invocation,
)
from .config_loader import load_settings
from .errors import (
    ConfigurationError,
    LauncherError,
    ParseError,
    ReportWriteError,
    ShellcheckRunnerError,
    ThresholdFailure,
)
from .launcher import ProcessLauncher, SubprocessLauncher, build_command
from .models import LaunchResult, RunResult, ViolationRecord
from .parser import parse_output
from .pipeline import OutcomeStatus, PipelineOutcome, PipelineState, decide, run_pipeline
from .reporting import emit_reports
from .severity import Severity

__all__ = [
    "ConfigurationError",
    "ExecutionMode",
    "InvocationDescriptor",
    "LaunchResult",
    "LauncherError",
    "OutcomeStatus",
    "ParseError",
    "PipelineOutcome",
    "PipelineState",
    "ProcessLauncher",
    "ReportFormat",
    "ReportSettings",
    "ReportTarget",
    "ReportWriteError",
    "RunResult",
    "Severity",
    "ShellcheckRunnerError",
    "ShellcheckSettings",
    "SubprocessLauncher",
    "ThresholdFailure",
    "ViolationRecord",
    "build_command",
    "decide",
    "emit_reports",
    "load_settings",
    "parse_output",
    "resolve_invocation",
    "run_pipeline",
]
