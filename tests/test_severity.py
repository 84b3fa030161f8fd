# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for severity ordering and parsing."""

from __future__ import annotations

import pytest

from shellcheck_runner.severity import Severity, descending, parse_severity, severity_to_sarif, worst_severity


def test_severities_are_ordered_style_to_error() -> None:
    assert Severity.STYLE.rank < Severity.INFO.rank < Severity.WARNING.rank < Severity.ERROR.rank
    assert Severity.ERROR.at_least(Severity.WARNING)
    assert Severity.WARNING.at_least(Severity.WARNING)
    assert not Severity.INFO.at_least(Severity.WARNING)


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("Warning", Severity.WARNING),
        (" ERROR ", Severity.ERROR),
        ("style", Severity.STYLE),
        ("Info", Severity.INFO),
        ("warn", Severity.WARNING),
    ],
)
def test_parse_severity_is_case_insensitive(label: str, expected: Severity) -> None:
    assert parse_severity(label) is expected


@pytest.mark.parametrize("label", ["fatal", "note"])
def test_parse_severity_rejects_unknown_labels(label: str) -> None:
    with pytest.raises(ValueError):
        parse_severity(label)


def test_worst_severity() -> None:
    assert worst_severity([]) is None
    assert worst_severity([Severity.INFO, Severity.ERROR, Severity.STYLE]) is Severity.ERROR


def test_descending_and_sarif_levels() -> None:
    assert descending() == (Severity.ERROR, Severity.WARNING, Severity.INFO, Severity.STYLE)
    assert severity_to_sarif(Severity.STYLE) == "note"
    assert severity_to_sarif(Severity.ERROR) == "error"
