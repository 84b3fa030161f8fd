# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report rendering and emission."""

from __future__ import annotations

from .emitters import echo_violations, emit_reports, write_report
from .renderers import RENDERERS, render_checkstyle, render_html, render_sarif, render_text

__all__ = [
    "RENDERERS",
    "echo_violations",
    "emit_reports",
    "render_checkstyle",
    "render_html",
    "render_sarif",
    "render_text",
    "write_report",
]
