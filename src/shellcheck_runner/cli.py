# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer command line interface for the shellcheck runner."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console

from .config import ReportFormat
from .config_loader import load_settings
from .console import configure_logging
from .console import fail as core_fail
from .console import ok as core_ok
from .console import warn as core_warn
from .errors import ConfigurationError
from .pipeline import OutcomeStatus, PipelineOutcome, run_pipeline

app = typer.Typer(
    name="shellcheck-runner",
    help="Run shellcheck locally or in Docker and write violation reports.",
    no_args_is_help=True,
    add_completion=False,
)


@dataclass(slots=True)
class CLILogger:
    """Adapter around the console helpers respecting CLI emoji settings."""

    console: Console
    use_emoji: bool

    def fail(self, message: str) -> None:
        """Log a failure message."""

        core_fail(message, use_emoji=self.use_emoji)

    def warn(self, message: str) -> None:
        """Log a warning message."""

        core_warn(message, use_emoji=self.use_emoji)

    def ok(self, message: str) -> None:
        """Log a success message."""

        core_ok(message, use_emoji=self.use_emoji)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper."""

        typer.echo(message)


def build_cli_logger(*, emoji: bool) -> CLILogger:
    """Return a ``CLILogger`` bound to a dedicated Rich console."""

    return CLILogger(console=Console(highlight=False, soft_wrap=True), use_emoji=emoji)


ProjectDirOption = Annotated[
    Path,
    typer.Option("--project-dir", "-C", help="Project root used for relative paths and the docker mount."),
]
ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Extra TOML configuration file applied after project files."),
]


def _build_overrides(
    *,
    sources: list[str],
    use_docker: bool | None,
    image: str | None,
    version_tag: str | None,
    binary: str | None,
    severity: str | None,
    continue_on_failure: bool | None,
    show_violations: bool | None,
    timeout: float | None,
    reports: dict[ReportFormat, Path | None],
) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    candidates: dict[str, Any] = {
        "useDocker": use_docker,
        "shellcheckImage": image,
        "shellcheckVersion": version_tag,
        "shellcheckBinary": binary,
        "severity": severity,
        "continueBuildOnFailure": continue_on_failure,
        "showViolations": show_violations,
        "timeout": timeout,
    }
    overrides.update({key: value for key, value in candidates.items() if value is not None})
    if sources:
        overrides["sources"] = list(sources)
    report_overrides = {
        report_format.value: {"enabled": True, "destination": str(destination)}
        for report_format, destination in reports.items()
        if destination is not None
    }
    if report_overrides:
        overrides["reports"] = report_overrides
    return overrides


@app.command("check")
def check_command(
    sources: Annotated[
        list[str] | None,
        typer.Argument(help="Shell scripts, directories or glob patterns to check."),
    ] = None,
    project_dir: ProjectDirOption = Path("."),
    config: ConfigOption = None,
    use_docker: Annotated[
        bool | None,
        typer.Option("--docker/--local", help="Run shellcheck in a container or from a local binary."),
    ] = None,
    image: Annotated[str | None, typer.Option("--image", help="Docker image providing shellcheck.")] = None,
    version_tag: Annotated[str | None, typer.Option("--version-tag", help="Docker image tag.")] = None,
    binary: Annotated[str | None, typer.Option("--binary", help="Path to a local shellcheck binary.")] = None,
    severity: Annotated[
        str | None,
        typer.Option("--severity", help="Minimum severity that fails the run: style|info|warning|error."),
    ] = None,
    continue_on_failure: Annotated[
        bool | None,
        typer.Option(
            "--continue-on-failure/--fail-on-violations",
            help="Report violations without failing the run.",
        ),
    ] = None,
    show_violations: Annotated[
        bool | None,
        typer.Option("--show-violations/--hide-violations", help="Echo violations on the console."),
    ] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", help="Kill shellcheck after N seconds.")] = None,
    html: Annotated[Path | None, typer.Option("--html", help="Write an HTML report to PATH.")] = None,
    xml: Annotated[Path | None, typer.Option("--xml", help="Write a checkstyle XML report to PATH.")] = None,
    text: Annotated[Path | None, typer.Option("--text", help="Write a plain text report to PATH.")] = None,
    sarif: Annotated[Path | None, typer.Option("--sarif", help="Write a SARIF report to PATH.")] = None,
    debug: Annotated[bool, typer.Option("--debug", help="Log commands and stage transitions.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in console output.")] = False,
) -> None:
    """Run shellcheck against SOURCES and write the configured reports."""

    configure_logging(debug=debug)
    logger = build_cli_logger(emoji=not no_emoji)
    overrides = _build_overrides(
        sources=sources or [],
        use_docker=use_docker,
        image=image,
        version_tag=version_tag,
        binary=binary,
        severity=severity,
        continue_on_failure=continue_on_failure,
        show_violations=show_violations,
        timeout=timeout,
        reports={
            ReportFormat.HTML: html,
            ReportFormat.XML: xml,
            ReportFormat.TEXT: text,
            ReportFormat.SARIF: sarif,
        },
    )
    try:
        loaded = load_settings(project_dir.resolve(), config_file=config, overrides=overrides)
    except ConfigurationError as exc:
        logger.fail(f"configuration failed: {exc}")
        raise typer.Exit(code=exc.exit_code) from exc

    outcome = run_pipeline(loaded.settings, console=logger.console)
    _report_outcome(outcome, logger)
    raise typer.Exit(code=outcome.exit_code)


def _report_outcome(outcome: PipelineOutcome, logger: CLILogger) -> None:
    for report_error in outcome.report_errors:
        logger.fail(str(report_error))
    if outcome.status is OutcomeStatus.ERROR or outcome.status is OutcomeStatus.FAILED:
        logger.fail(outcome.message)
    elif outcome.status is OutcomeStatus.SUPPRESSED:
        logger.warn(outcome.message)
    else:
        logger.ok(outcome.message)


@app.command("show-config")
def show_config_command(
    project_dir: ProjectDirOption = Path("."),
    config: ConfigOption = None,
) -> None:
    """Print the resolved configuration as JSON."""

    logger = build_cli_logger(emoji=False)
    try:
        loaded = load_settings(project_dir.resolve(), config_file=config)
    except ConfigurationError as exc:
        logger.fail(f"configuration failed: {exc}")
        raise typer.Exit(code=exc.exit_code) from exc
    payload = {
        "configSources": loaded.sources,
        "settings": loaded.settings.model_dump(mode="json", by_alias=True),
    }
    logger.echo(json.dumps(payload, indent=2))


def main() -> None:
    """Console script entry point."""

    app()


__all__ = ["CLILogger", "app", "build_cli_logger", "main"]
