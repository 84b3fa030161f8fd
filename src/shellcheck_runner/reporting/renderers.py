# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render violation sequences into report documents.

Every renderer is a pure function of its inputs: no timestamps or absolute
paths leak into the output, so repeated runs produce byte-identical files.
"""

from __future__ import annotations

import html
import json
import xml.etree.ElementTree as ET
from collections.abc import Callable, Sequence
from typing import Final

from ..config import ReportFormat
from ..errors import format_summary
from ..models import RunResult, ViolationRecord
from ..severity import Severity, descending, severity_to_sarif

CHECKSTYLE_VERSION: Final[str] = "4.3"
SARIF_VERSION: Final[str] = "2.1.0"
SARIF_SCHEMA: Final[str] = "https://schemastore.azurewebsites.net/schemas/json/sarif-2.1.0.json"
WIKI_URL: Final[str] = "https://www.shellcheck.net/wiki/{code}"

ReportRenderer = Callable[[Sequence[ViolationRecord]], str]


def _summary(violations: Sequence[ViolationRecord]) -> dict[Severity, int]:
    return RunResult(returncode=0, violations=tuple(violations)).summary


def _group_by_file(violations: Sequence[ViolationRecord]) -> dict[str, list[ViolationRecord]]:
    grouped: dict[str, list[ViolationRecord]] = {}
    for violation in violations:
        grouped.setdefault(violation.file, []).append(violation)
    return grouped


def render_text(violations: Sequence[ViolationRecord]) -> str:
    """Return one line per violation followed by a summary line."""

    lines = [violation.render() for violation in violations]
    lines.append(f"{len(violations)} violation(s): {format_summary(_summary(violations))}")
    return "\n".join(lines) + "\n"


def render_checkstyle(violations: Sequence[ViolationRecord]) -> str:
    """Return a checkstyle XML document grouping violations by file."""

    root = ET.Element("checkstyle", version=CHECKSTYLE_VERSION)
    for file_name, entries in _group_by_file(violations).items():
        file_element = ET.SubElement(root, "file", name=file_name)
        for violation in entries:
            ET.SubElement(
                file_element,
                "error",
                line=str(violation.line),
                column=str(violation.column),
                severity=violation.severity.value,
                message=violation.message,
                source=f"ShellCheck.{violation.code}",
            )
    ET.indent(root)
    body = ET.tostring(root, encoding="unicode")
    return f"<?xml version='1.0' encoding='UTF-8'?>\n{body}\n"


_HTML_STYLE: Final[str] = """
body { font-family: sans-serif; margin: 2em; color: #222; }
table { border-collapse: collapse; width: 100%; margin-bottom: 2em; }
th, td { border: 1px solid #ccc; padding: 4px 8px; text-align: left; vertical-align: top; }
th { background: #f0f0f0; }
.error { color: #b00020; }
.warning { color: #b36b00; }
.info { color: #00589c; }
.style { color: #555; }
""".strip()


def render_html(violations: Sequence[ViolationRecord]) -> str:
    """Return a standalone HTML summary with per-severity counts and per-file tables."""

    summary = _summary(violations)
    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        "<title>ShellCheck Report</title>",
        f"<style>\n{_HTML_STYLE}\n</style>",
        "</head>",
        "<body>",
        "<h1>ShellCheck Report</h1>",
        "<h2>Summary</h2>",
        "<table>",
        "<tr><th>Severity</th><th>Count</th></tr>",
    ]
    for severity in descending():
        parts.append(f'<tr><td class="{severity.value}">{severity.value}</td><td>{summary.get(severity, 0)}</td></tr>')
    parts.append(f"<tr><th>Total</th><th>{len(violations)}</th></tr>")
    parts.append("</table>")
    grouped = _group_by_file(violations)
    if not grouped:
        parts.append("<p>No violations found.</p>")
    for file_name, entries in grouped.items():
        parts.append(f"<h2>{html.escape(file_name)}</h2>")
        parts.append("<table>")
        parts.append("<tr><th>Line</th><th>Column</th><th>Severity</th><th>Code</th><th>Message</th></tr>")
        for violation in entries:
            code = html.escape(violation.code)
            link = html.escape(WIKI_URL.format(code=violation.code), quote=True)
            parts.append(
                f"<tr><td>{violation.line}</td><td>{violation.column}</td>"
                f'<td class="{violation.severity.value}">{violation.severity.value}</td>'
                f'<td><a href="{link}">{code}</a></td>'
                f"<td>{html.escape(violation.message)}</td></tr>",
            )
        parts.append("</table>")
    parts.extend(["</body>", "</html>"])
    return "\n".join(parts) + "\n"


def render_sarif(violations: Sequence[ViolationRecord]) -> str:
    """Return a SARIF document compatible with GitHub code scanning."""

    rules: dict[str, dict[str, object]] = {}
    results: list[dict[str, object]] = []
    for violation in violations:
        if violation.code not in rules:
            rules[violation.code] = {
                "id": violation.code,
                "name": violation.code,
                "shortDescription": {"text": violation.message[:120]},
                "helpUri": WIKI_URL.format(code=violation.code),
            }
        results.append(
            {
                "ruleId": violation.code,
                "level": severity_to_sarif(violation.severity),
                "message": {"text": violation.message},
                "locations": [
                    {
                        "physicalLocation": {
                            "artifactLocation": {"uri": violation.file},
                            "region": {"startLine": violation.line, "startColumn": violation.column},
                        },
                    },
                ],
            },
        )
    document = {
        "version": SARIF_VERSION,
        "$schema": SARIF_SCHEMA,
        "runs": [
            {
                "tool": {"driver": {"name": "shellcheck", "rules": list(rules.values())}},
                "results": results,
            },
        ],
    }
    return json.dumps(document, indent=2) + "\n"


RENDERERS: Final[dict[ReportFormat, ReportRenderer]] = {
    ReportFormat.HTML: render_html,
    ReportFormat.XML: render_checkstyle,
    ReportFormat.TEXT: render_text,
    ReportFormat.SARIF: render_sarif,
}


__all__ = [
    "RENDERERS",
    "ReportRenderer",
    "render_checkstyle",
    "render_html",
    "render_sarif",
    "render_text",
]
