# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and the invocation resolver."""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .discovery import expand_sources
from .errors import ConfigurationError
from .severity import Severity

DEFAULT_IMAGE: Final[str] = "koalaman/shellcheck-alpine"
DEFAULT_VERSION: Final[str] = "v0.7.1"
DEFAULT_BINARY: Final[str] = "/usr/local/bin/shellcheck"
DEFAULT_DOCKER_BINARY: Final[str] = "docker"
DEFAULT_MOUNT_PATH: Final[str] = "/mnt"
DEFAULT_SEVERITY: Final[str] = Severity.STYLE.value
DEFAULT_REPORT_DIR: Final[Path] = Path("build") / "reports" / "shellcheck"


class ExecutionMode(str, Enum):
    """Where shellcheck runs."""

    LOCAL = "local"
    DOCKER = "docker"


class ReportFormat(str, Enum):
    """Report formats the emitter can render."""

    HTML = "html"
    XML = "xml"
    TEXT = "text"
    SARIF = "sarif"

    @property
    def extension(self) -> str:
        """Return the default file extension for the format."""

        return _REPORT_EXTENSIONS[self]


_REPORT_EXTENSIONS: Final[dict[ReportFormat, str]] = {
    ReportFormat.HTML: "html",
    ReportFormat.XML: "xml",
    ReportFormat.TEXT: "txt",
    ReportFormat.SARIF: "sarif",
}


def _default_destination(report_format: ReportFormat) -> Path:
    return DEFAULT_REPORT_DIR / f"shellcheck.{report_format.extension}"


class _SettingsModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="forbid",
    )


class ReportTarget(_SettingsModel):
    """Enable flag and destination for one report format."""

    enabled: bool = False
    destination: Path | None = None


class ReportSettings(_SettingsModel):
    """Fixed set of report targets, one per :class:`ReportFormat`."""

    html: ReportTarget = Field(default_factory=ReportTarget)
    xml: ReportTarget = Field(default_factory=ReportTarget)
    text: ReportTarget = Field(default_factory=ReportTarget)
    sarif: ReportTarget = Field(default_factory=ReportTarget)

    def targets(self) -> dict[ReportFormat, ReportTarget]:
        """Return every target keyed by its format."""

        return {report_format: getattr(self, report_format.value) for report_format in ReportFormat}

    def enabled(self) -> dict[ReportFormat, ReportTarget]:
        """Return only the enabled targets keyed by format."""

        return {fmt: target for fmt, target in self.targets().items() if target.enabled}

    def with_target(self, report_format: ReportFormat, destination: Path) -> ReportSettings:
        """Return a copy with ``report_format`` enabled and written to ``destination``."""

        target = ReportTarget(enabled=True, destination=destination)
        return self.model_copy(update={report_format.value: target})


class ShellcheckSettings(_SettingsModel):
    """Raw configuration surface, accepted with camelCase or snake_case keys."""

    sources: tuple[str, ...] = ()
    show_violations: bool = True
    use_docker: bool = True
    continue_build_on_failure: bool = False
    shellcheck_image: str = DEFAULT_IMAGE
    shellcheck_version: str = DEFAULT_VERSION
    shellcheck_binary: str = DEFAULT_BINARY
    severity: str = DEFAULT_SEVERITY
    project_dir: Path = Field(default_factory=Path.cwd)
    timeout: float | None = None
    docker_binary: str = DEFAULT_DOCKER_BINARY
    mount_path: str = DEFAULT_MOUNT_PATH
    reports: ReportSettings = Field(default_factory=ReportSettings)


class InvocationDescriptor(BaseModel):
    """Validated, immutable description of a single shellcheck run."""

    model_config = ConfigDict(frozen=True)

    sources: tuple[Path, ...]
    mode: ExecutionMode
    image: str | None = None
    version: str | None = None
    binary: str | None = None
    threshold: Severity
    continue_on_failure: bool = False
    show_violations: bool = True
    project_dir: Path
    timeout: float | None = None
    docker_binary: str = DEFAULT_DOCKER_BINARY
    mount_path: str = DEFAULT_MOUNT_PATH
    reports: ReportSettings = Field(default_factory=ReportSettings)

    @property
    def image_reference(self) -> str:
        """Return the ``image:version`` reference used in docker mode."""

        return f"{self.image}:{self.version}"


def resolve_invocation(settings: ShellcheckSettings) -> InvocationDescriptor | None:
    """Validate ``settings`` and build the invocation descriptor.

    Args:
        settings: Raw settings gathered from defaults, files and CLI flags.

    Returns:
        InvocationDescriptor | None: The descriptor, or ``None`` when there are
        no source files and the run should be skipped.

    Raises:
        ConfigurationError: If a field is missing, invalid or conflicting.
    """

    project_dir = settings.project_dir.resolve()
    threshold = _resolve_threshold(settings.severity)
    if settings.timeout is not None and settings.timeout <= 0:
        raise ConfigurationError("must be a positive number of seconds", field="timeout")

    mode = ExecutionMode.DOCKER if settings.use_docker else ExecutionMode.LOCAL
    if mode is ExecutionMode.DOCKER:
        _require(settings.shellcheck_image, "shellcheckImage", "is required when useDocker is enabled")
        _require(settings.shellcheck_version, "shellcheckVersion", "is required when useDocker is enabled")
        _require(settings.docker_binary, "dockerBinary", "is required when useDocker is enabled")
        if not settings.mount_path.startswith("/"):
            raise ConfigurationError("must be an absolute container path", field="mountPath")
    else:
        _require(settings.shellcheck_binary, "shellcheckBinary", "is required when useDocker is disabled")

    reports = _resolve_reports(settings.reports, project_dir)
    sources = expand_sources(settings.sources, project_dir)
    if not sources:
        return None

    return InvocationDescriptor(
        sources=sources,
        mode=mode,
        image=settings.shellcheck_image.strip() if mode is ExecutionMode.DOCKER else None,
        version=settings.shellcheck_version.strip() if mode is ExecutionMode.DOCKER else None,
        binary=_anchor_executable(settings.shellcheck_binary, project_dir) if mode is ExecutionMode.LOCAL else None,
        threshold=threshold,
        continue_on_failure=settings.continue_build_on_failure,
        show_violations=settings.show_violations,
        project_dir=project_dir,
        timeout=settings.timeout,
        docker_binary=_anchor_executable(settings.docker_binary, project_dir),
        mount_path=settings.mount_path.rstrip("/") or "/",
        reports=reports,
    )


def _resolve_threshold(label: str) -> Severity:
    try:
        return Severity(label.strip().lower())
    except ValueError as exc:
        choices = "|".join(severity.value for severity in Severity)
        raise ConfigurationError(f"'{label}' is not one of {choices}", field="severity") from exc


def _anchor_executable(value: str, project_dir: Path) -> str:
    """Anchor relative executable paths at ``project_dir``; bare names stay on ``PATH``."""

    text = value.strip()
    path = Path(text)
    if path.is_absolute() or not any(separator in text for separator in {"/", os.sep}):
        return text
    return str(project_dir / path)


def _require(value: str, field: str, message: str) -> None:
    if not value or not value.strip():
        raise ConfigurationError(message, field=field)


def _resolve_reports(reports: ReportSettings, project_dir: Path) -> ReportSettings:
    """Anchor report destinations at ``project_dir`` and reject collisions."""

    resolved: dict[str, ReportTarget] = {}
    seen: dict[Path, ReportFormat] = {}
    for report_format, target in reports.targets().items():
        destination = target.destination or _default_destination(report_format)
        if not destination.is_absolute():
            destination = project_dir / destination
        if target.enabled:
            other = seen.get(destination)
            if other is not None:
                raise ConfigurationError(
                    f"{report_format.value} and {other.value} reports share destination {destination}",
                    field="reports",
                )
            seen[destination] = report_format
        resolved[report_format.value] = target.model_copy(update={"destination": destination})
    return reports.model_copy(update=resolved)


__all__ = [
    "DEFAULT_BINARY",
    "DEFAULT_IMAGE",
    "DEFAULT_MOUNT_PATH",
    "DEFAULT_SEVERITY",
    "DEFAULT_VERSION",
    "ExecutionMode",
    "InvocationDescriptor",
    "ReportFormat",
    "ReportSettings",
    "ReportTarget",
    "ShellcheckSettings",
    "resolve_invocation",
]
