# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for report renderers and emitters."""

from __future__ import annotations

import json
import xml.etree.ElementTree as ET
from io import StringIO
from pathlib import Path

from rich.console import Console

from shellcheck_runner.config import ReportFormat, ReportTarget
from shellcheck_runner.models import ViolationRecord
from shellcheck_runner.reporting import (
    echo_violations,
    emit_reports,
    render_checkstyle,
    render_html,
    render_sarif,
    render_text,
)
from shellcheck_runner.severity import Severity


def _violations() -> tuple[ViolationRecord, ...]:
    return (
        ViolationRecord(
            file="a.sh",
            line=3,
            column=5,
            severity=Severity.WARNING,
            code="SC2086",
            message="Double quote to prevent globbing.",
        ),
        ViolationRecord(
            file="scripts/b.sh",
            line=1,
            column=1,
            severity=Severity.ERROR,
            code="SC2148",
            message="Add a shebang <#!/bin/sh> & retry.",
        ),
        ViolationRecord(
            file="a.sh",
            line=7,
            column=2,
            severity=Severity.STYLE,
            code="SC2006",
            message="Use $(...) notation.",
        ),
    )


def test_render_text() -> None:
    lines = render_text(_violations()).splitlines()

    assert lines[0] == "a.sh:3:5: warning SC2086: Double quote to prevent globbing."
    assert lines[-1] == "3 violation(s): error=1, warning=1, style=1"


def test_render_text_without_violations() -> None:
    assert render_text(()) == "0 violation(s): none\n"


def test_render_checkstyle_groups_by_file() -> None:
    document = render_checkstyle(_violations())

    assert document.startswith("<?xml version='1.0' encoding='UTF-8'?>")
    root = ET.fromstring(document.split("\n", 1)[1])
    assert root.tag == "checkstyle"
    files = root.findall("file")
    assert [element.get("name") for element in files] == ["a.sh", "scripts/b.sh"]
    first = files[0].findall("error")
    assert [error.get("line") for error in first] == ["3", "7"]
    assert first[0].get("severity") == "warning"
    assert first[0].get("source") == "ShellCheck.SC2086"
    assert files[1].find("error").get("message") == "Add a shebang <#!/bin/sh> & retry."


def test_render_html_escapes_and_counts() -> None:
    document = render_html(_violations())

    assert "<title>ShellCheck Report</title>" in document
    assert "Add a shebang &lt;#!/bin/sh&gt; &amp; retry." in document
    assert '<td class="error">error</td><td>1</td>' in document
    assert "<tr><th>Total</th><th>3</th></tr>" in document
    assert 'href="https://www.shellcheck.net/wiki/SC2086"' in document
    assert "No violations found." in render_html(())


def test_render_sarif() -> None:
    document = json.loads(render_sarif(_violations()))

    run = document["runs"][0]
    assert document["version"] == "2.1.0"
    assert run["tool"]["driver"]["name"] == "shellcheck"
    assert [rule["id"] for rule in run["tool"]["driver"]["rules"]] == ["SC2086", "SC2148", "SC2006"]
    assert run["results"][0]["level"] == "warning"
    assert run["results"][2]["level"] == "note"
    region = run["results"][0]["locations"][0]["physicalLocation"]["region"]
    assert region == {"startLine": 3, "startColumn": 5}


def test_emit_reports_creates_directories(tmp_path: Path) -> None:
    targets = {
        ReportFormat.HTML: ReportTarget(enabled=True, destination=tmp_path / "nested" / "deep" / "report.html"),
        ReportFormat.XML: ReportTarget(enabled=True, destination=tmp_path / "report.xml"),
        ReportFormat.TEXT: ReportTarget(enabled=False, destination=tmp_path / "report.txt"),
    }

    errors = emit_reports(_violations(), targets)

    assert errors == []
    assert (tmp_path / "nested" / "deep" / "report.html").is_file()
    assert (tmp_path / "report.xml").read_text(encoding="utf-8") == render_checkstyle(_violations())
    assert not (tmp_path / "report.txt").exists()
    assert not list(tmp_path.glob(".report*"))


def test_emit_reports_is_best_effort(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    targets = {
        ReportFormat.HTML: ReportTarget(enabled=True, destination=blocker / "report.html"),
        ReportFormat.SARIF: ReportTarget(enabled=True, destination=tmp_path / "report.sarif"),
    }

    errors = emit_reports(_violations(), targets)

    assert len(errors) == 1
    assert errors[0].report_format == "html"
    assert errors[0].destination == blocker / "report.html"
    assert "html report could not be written" in str(errors[0])
    assert (tmp_path / "report.sarif").is_file()


def test_emit_reports_is_idempotent(tmp_path: Path) -> None:
    targets = {
        report_format: ReportTarget(enabled=True, destination=tmp_path / f"report.{report_format.extension}")
        for report_format in ReportFormat
    }

    emit_reports(_violations(), targets)
    first = {path.name: path.read_bytes() for path in tmp_path.iterdir()}
    emit_reports(_violations(), targets)
    second = {path.name: path.read_bytes() for path in tmp_path.iterdir()}

    assert first == second
    assert len(first) == 4


def test_echo_violations_keeps_order() -> None:
    stream = StringIO()
    console = Console(file=stream, no_color=True, width=200)

    echo_violations(_violations(), console)

    lines = stream.getvalue().splitlines()
    assert lines == [violation.render() for violation in _violations()]
