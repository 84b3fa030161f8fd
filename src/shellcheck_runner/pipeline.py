# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the configure, launch, parse, report and decide stages for one invocation."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from rich.console import Console

from .config import ExecutionMode, InvocationDescriptor, ShellcheckSettings, resolve_invocation
from .errors import (
    ConfigurationError,
    LauncherError,
    ParseError,
    ReportWriteError,
    ShellcheckRunnerError,
    ThresholdFailure,
    format_summary,
)
from .launcher import ProcessLauncher, SubprocessLauncher
from .models import RunResult
from .parser import parse_output
from .reporting import echo_violations, emit_reports
from .severity import Severity

LOGGER = logging.getLogger(__name__)

EXIT_SUCCESS = 0


class PipelineState(str, Enum):
    """Stage reached by the pipeline."""

    PENDING = "pending"
    CONFIGURED = "configured"
    LAUNCHED = "launched"
    PARSED = "parsed"
    REPORTED = "reported"
    DECIDED = "decided"
    FAILED = "failed"


class OutcomeStatus(str, Enum):
    """Final classification of a run."""

    SKIPPED = "skipped"
    CLEAN = "clean"
    SUPPRESSED = "suppressed"
    FAILED = "failed"
    ERROR = "error"


@dataclass(slots=True)
class PipelineOutcome:
    """Everything a caller needs to report and exit after a run."""

    state: PipelineState
    status: OutcomeStatus
    descriptor: InvocationDescriptor | None = None
    result: RunResult | None = None
    error: ShellcheckRunnerError | None = None
    report_errors: list[ReportWriteError] = field(default_factory=list)
    history: list[PipelineState] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Return ``True`` for clean, suppressed and skipped runs."""

        return self.status in {OutcomeStatus.CLEAN, OutcomeStatus.SUPPRESSED, OutcomeStatus.SKIPPED}

    @property
    def summary(self) -> dict[Severity, int]:
        """Return the per-severity violation counts, empty when nothing ran."""

        return self.result.summary if self.result is not None else {}

    @property
    def threshold_failure(self) -> ThresholdFailure | None:
        """Return the threshold failure for failed runs."""

        return self.error if isinstance(self.error, ThresholdFailure) else None

    @property
    def exit_code(self) -> int:
        """Return the process exit code for this outcome.

        A threshold failure wins over report write errors; report write errors
        alone still fail the run.
        """

        if self.error is not None:
            return self.error.exit_code
        if self.report_errors:
            return ReportWriteError.exit_code
        return EXIT_SUCCESS

    @property
    def message(self) -> str:
        """Return a one-line description of the outcome."""

        if self.status is OutcomeStatus.SKIPPED:
            return "No shell scripts to check"
        if self.status is OutcomeStatus.ERROR and self.error is not None:
            return f"{self.error.stage} failed: {self.error}"
        if self.status is OutcomeStatus.FAILED and self.error is not None:
            return str(self.error)
        total = len(self.result.violations) if self.result is not None else 0
        if self.status is OutcomeStatus.SUPPRESSED:
            return f"shellcheck found {total} violation(s) ({format_summary(self.summary)}); continuing build"
        if total:
            return f"shellcheck found {total} violation(s) below the failure threshold ({format_summary(self.summary)})"
        return "shellcheck found no violations"


def decide(result: RunResult, descriptor: InvocationDescriptor) -> tuple[OutcomeStatus, ThresholdFailure | None]:
    """Compare the worst observed severity with the configured threshold.

    Returns:
        tuple[OutcomeStatus, ThresholdFailure | None]: ``CLEAN`` when nothing
        meets the threshold, ``SUPPRESSED`` when something does but failures
        are ignored, and ``FAILED`` with the failure otherwise.
    """

    worst = result.worst_severity
    if worst is None or not worst.at_least(descriptor.threshold):
        return OutcomeStatus.CLEAN, None
    if descriptor.continue_on_failure:
        return OutcomeStatus.SUPPRESSED, None
    return OutcomeStatus.FAILED, ThresholdFailure(result.summary, descriptor.threshold)


def _advance(outcome: PipelineOutcome, state: PipelineState) -> None:
    outcome.state = state
    outcome.history.append(state)


def _fail(outcome: PipelineOutcome, error: ShellcheckRunnerError) -> PipelineOutcome:
    LOGGER.debug("stage=%s error=%s", error.stage, error)
    outcome.status = OutcomeStatus.ERROR
    outcome.error = error
    _advance(outcome, PipelineState.FAILED)
    return outcome


def run_pipeline(
    settings: ShellcheckSettings,
    *,
    launcher: ProcessLauncher | None = None,
    console: Console | None = None,
) -> PipelineOutcome:
    """Run shellcheck once according to ``settings``.

    The outcome's ``state`` advances through ``CONFIGURED``, ``LAUNCHED``,
    ``PARSED``, ``REPORTED`` and ``DECIDED``; ``history`` keeps every state
    reached. Configuration, launch and parse errors move it to ``FAILED`` and
    are returned on the outcome. Report write errors are collected without
    stopping the decision.

    Args:
        settings: Raw settings to resolve into an invocation.
        launcher: Process launcher, defaults to :class:`SubprocessLauncher`.
        console: Console used for violation echo, defaults to stdout.

    Returns:
        PipelineOutcome: Final state, status, results and errors.
    """

    outcome = PipelineOutcome(state=PipelineState.PENDING, status=OutcomeStatus.ERROR)
    try:
        descriptor = resolve_invocation(settings)
    except ConfigurationError as exc:
        return _fail(outcome, exc)
    if descriptor is None:
        LOGGER.debug("stage=configure sources=0 skipping")
        outcome.status = OutcomeStatus.SKIPPED
        _advance(outcome, PipelineState.CONFIGURED)
        return outcome
    outcome.descriptor = descriptor
    _advance(outcome, PipelineState.CONFIGURED)
    LOGGER.debug("stage=configure mode=%s sources=%d", descriptor.mode.value, len(descriptor.sources))

    active_launcher = launcher or SubprocessLauncher()
    try:
        launched = active_launcher.launch(descriptor)
    except (ConfigurationError, LauncherError) as exc:
        return _fail(outcome, exc)
    _advance(outcome, PipelineState.LAUNCHED)
    LOGGER.debug("stage=launch returncode=%d", launched.returncode)

    strip_prefix = descriptor.mount_path if descriptor.mode is ExecutionMode.DOCKER else None
    try:
        violations = parse_output(launched.output, launched.returncode, strip_prefix=strip_prefix)
    except ParseError as exc:
        return _fail(outcome, exc)
    outcome.result = RunResult(returncode=launched.returncode, output=launched.output, violations=violations)
    _advance(outcome, PipelineState.PARSED)
    LOGGER.debug("stage=parse violations=%d", len(violations))

    outcome.report_errors = emit_reports(violations, descriptor.reports.enabled())
    if descriptor.show_violations and violations:
        echo_violations(violations, console or Console(highlight=False, soft_wrap=True))
    _advance(outcome, PipelineState.REPORTED)
    LOGGER.debug("stage=report errors=%d", len(outcome.report_errors))

    outcome.status, outcome.error = decide(outcome.result, descriptor)
    _advance(outcome, PipelineState.DECIDED)
    LOGGER.debug("stage=decide status=%s", outcome.status.value)
    return outcome


__all__ = [
    "OutcomeStatus",
    "PipelineOutcome",
    "PipelineState",
    "decide",
    "run_pipeline",
]
