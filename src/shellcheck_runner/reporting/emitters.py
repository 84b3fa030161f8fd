# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Write rendered reports to disk and echo violations to the console."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Mapping, Sequence
from pathlib import Path

from rich.console import Console
from rich.text import Text

from ..config import ReportFormat, ReportTarget
from ..errors import ReportWriteError
from ..models import ViolationRecord
from ..severity import Severity
from .renderers import RENDERERS

LOGGER = logging.getLogger(__name__)

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
    Severity.STYLE: "dim",
}


def write_report(path: Path, content: str) -> None:
    """Atomically replace ``path`` with ``content``, creating parent directories.

    Raises:
        OSError: If the directory or file cannot be written.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    handle, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
    try:
        with os.fdopen(handle, "w", encoding="utf-8", newline="\n") as stream:
            stream.write(content)
        os.replace(temp_name, path)
    except OSError:
        Path(temp_name).unlink(missing_ok=True)
        raise


def emit_reports(
    violations: Sequence[ViolationRecord],
    targets: Mapping[ReportFormat, ReportTarget],
) -> list[ReportWriteError]:
    """Render and write every enabled report target.

    A failure for one target does not stop the others from being attempted.

    Args:
        violations: Parsed violations in shellcheck order.
        targets: Report targets keyed by format; disabled targets are skipped.

    Returns:
        list[ReportWriteError]: One error per target that could not be written.
    """

    errors: list[ReportWriteError] = []
    for report_format, target in targets.items():
        if not target.enabled:
            continue
        if target.destination is None:
            errors.append(ReportWriteError(report_format.value, Path(), "no destination configured"))
            continue
        try:
            content = RENDERERS[report_format](violations)
            write_report(target.destination, content)
        except OSError as exc:
            LOGGER.debug("report=%s destination=%s error=%s", report_format.value, target.destination, exc)
            errors.append(ReportWriteError(report_format.value, target.destination, exc.strerror or str(exc)))
            continue
        LOGGER.debug("report=%s destination=%s", report_format.value, target.destination)
    return errors


def echo_violations(violations: Sequence[ViolationRecord], console: Console) -> None:
    """Print each violation on ``console`` in order, styled by severity."""

    for violation in violations:
        text = Text()
        text.append(violation.location, style="bold")
        text.append(": ")
        text.append(violation.severity.value, style=SEVERITY_STYLES[violation.severity])
        text.append(" ")
        text.append(violation.code, style="magenta")
        text.append(f": {violation.message}")
        console.print(text)


__all__ = ["SEVERITY_STYLES", "echo_violations", "emit_reports", "write_report"]
