# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for layered configuration loading."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from shellcheck_runner.config_loader import PROJECT_CONFIG_FILENAME, deep_merge, expand_env, load_settings
from shellcheck_runner.errors import ConfigurationError


def _write(path: Path, content: str) -> Path:
    path.write_text(dedent(content), encoding="utf-8")
    return path


def test_defaults_when_no_files(project: Path) -> None:
    loaded = load_settings(project, env={})

    assert loaded.sources == ["defaults"]
    assert loaded.settings.project_dir == project
    assert loaded.settings.use_docker is True


def test_pyproject_section_accepts_camel_and_snake_case(project: Path) -> None:
    _write(
        project / "pyproject.toml",
        """
        [project]
        name = "demo"

        [tool.shellcheck]
        sources = ["scripts"]
        useDocker = false
        shellcheck_binary = "/opt/shellcheck"
        severity = "warning"

        [tool.shellcheck.reports.html]
        enabled = true
        """,
    )

    loaded = load_settings(project, env={})
    settings = loaded.settings

    assert settings.sources == ("scripts",)
    assert settings.use_docker is False
    assert settings.shellcheck_binary == "/opt/shellcheck"
    assert settings.severity == "warning"
    assert settings.reports.html.enabled is True
    assert settings.reports.html.destination is None
    assert loaded.sources == ["defaults", str(project / "pyproject.toml")]


def test_layers_apply_in_precedence_order(project: Path, tmp_path: Path) -> None:
    _write(
        project / "pyproject.toml",
        """
        [tool.shellcheck]
        severity = "info"
        shellcheckImage = "from-pyproject"
        shellcheckVersion = "1"
        """,
    )
    _write(project / PROJECT_CONFIG_FILENAME, 'severity = "warning"\nshellcheckVersion = "2"\n')
    extra = _write(tmp_path / "extra.toml", 'severity = "error"\n')

    loaded = load_settings(project, config_file=extra, overrides={"shellcheck_version": "3"}, env={})

    assert loaded.settings.severity == "error"
    assert loaded.settings.shellcheck_image == "from-pyproject"
    assert loaded.settings.shellcheck_version == "3"
    assert loaded.sources[-1] == "overrides"


def test_environment_references_are_expanded(project: Path) -> None:
    _write(project / PROJECT_CONFIG_FILENAME, 'shellcheckVersion = "${SC_VERSION}"\nshellcheckImage = "${UNSET}"\n')

    settings = load_settings(project, env={"SC_VERSION": "v0.9.0"}).settings

    assert settings.shellcheck_version == "v0.9.0"
    assert settings.shellcheck_image == "${UNSET}"


def test_relative_project_dir_is_anchored(project: Path) -> None:
    _write(project / PROJECT_CONFIG_FILENAME, 'projectDir = "scripts"\n')

    assert load_settings(project, env={}).settings.project_dir == project / "scripts"


@pytest.mark.parametrize(
    "content",
    [
        "severity = \n",
        'unknownKey = "x"\n',
        'useDocker = "sometimes"\n',
    ],
)
def test_invalid_configuration_files(project: Path, content: str) -> None:
    _write(project / PROJECT_CONFIG_FILENAME, content)

    with pytest.raises(ConfigurationError):
        load_settings(project, env={})


def test_missing_explicit_config_file(project: Path) -> None:
    with pytest.raises(ConfigurationError, match="does not exist"):
        load_settings(project, config_file=project / "absent.toml", env={})


def test_merge_helpers() -> None:
    assert deep_merge({"a": {"b": 1, "c": 2}}, {"a": {"c": 3}}) == {"a": {"b": 1, "c": 3}}
    assert expand_env(["${A}", {"k": "x${A}"}, 3], {"A": "1"}) == ["1", {"k": "x1"}, 3]
