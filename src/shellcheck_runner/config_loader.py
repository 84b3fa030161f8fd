# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Layered configuration loading from TOML documents and overrides."""

from __future__ import annotations

import logging
import os
import re
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from .config import ShellcheckSettings
from .errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "shellcheck"
PROJECT_CONFIG_FILENAME: Final[str] = ".shellcheck-runner.toml"

_ENV_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)\}")


@dataclass(slots=True)
class LoadedConfig:
    """Settings plus the sources that contributed to them, lowest precedence first."""

    settings: ShellcheckSettings
    sources: list[str] = field(default_factory=list)


def read_toml(path: Path) -> dict[str, Any]:
    """Return the TOML document at ``path``.

    Raises:
        ConfigurationError: If the file cannot be read or is not valid TOML.
    """

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"invalid TOML in {path}: {exc}", field="config") from exc
    except OSError as exc:
        raise ConfigurationError(f"unable to read {path}: {exc.strerror or exc}", field="config") from exc


def load_pyproject_section(path: Path) -> dict[str, Any]:
    """Return the ``[tool.shellcheck]`` table from a ``pyproject.toml`` file."""

    if not path.is_file():
        return {}
    tool_section = read_toml(path).get(PYPROJECT_TOOL_KEY)
    if not isinstance(tool_section, Mapping):
        return {}
    section = tool_section.get(PYPROJECT_SECTION_KEY)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigurationError(f"[tool.{PYPROJECT_SECTION_KEY}] in {path} must be a table", field="config")
    return dict(section)


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated recursively with ``override``."""

    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def expand_env(value: Any, env: Mapping[str, str]) -> Any:
    """Substitute ``${VAR}`` references in strings nested inside ``value``."""

    if isinstance(value, str):
        return _ENV_PATTERN.sub(lambda match: env.get(match.group("name"), match.group(0)), value)
    if isinstance(value, Mapping):
        return {key: expand_env(entry, env) for key, entry in value.items()}
    if isinstance(value, list):
        return [expand_env(entry, env) for entry in value]
    return value


def load_settings(
    project_dir: Path,
    *,
    config_file: Path | None = None,
    overrides: Mapping[str, Any] | None = None,
    env: Mapping[str, str] | None = None,
) -> LoadedConfig:
    """Build settings from defaults, project files, an explicit file and overrides.

    Precedence, lowest first: built-in defaults, ``[tool.shellcheck]`` in
    ``pyproject.toml``, ``.shellcheck-runner.toml``, ``config_file``, ``overrides``.

    Args:
        project_dir: Directory holding the project configuration files.
        config_file: Optional explicit TOML file; it must exist.
        overrides: Values supplied on the command line.
        env: Environment used for ``${VAR}`` expansion, defaults to ``os.environ``.

    Returns:
        LoadedConfig: Validated settings and the contributing source names.

    Raises:
        ConfigurationError: If a file is unreadable or a value fails validation.
    """

    environment = os.environ if env is None else env
    merged: dict[str, Any] = {"projectDir": str(project_dir)}
    sources = ["defaults"]

    layers: list[tuple[str, dict[str, Any]]] = [
        (str(project_dir / PYPROJECT_FILENAME), load_pyproject_section(project_dir / PYPROJECT_FILENAME)),
    ]
    project_config = project_dir / PROJECT_CONFIG_FILENAME
    if project_config.is_file():
        layers.append((str(project_config), read_toml(project_config)))
    if config_file is not None:
        if not config_file.is_file():
            raise ConfigurationError(f"{config_file} does not exist", field="config")
        layers.append((str(config_file), read_toml(config_file)))

    for name, fragment in layers:
        if not fragment:
            continue
        merged = deep_merge(merged, _normalise_keys(fragment))
        sources.append(name)
    if overrides:
        merged = deep_merge(merged, _normalise_keys(dict(overrides)))
        sources.append("overrides")

    payload = expand_env(merged, environment)
    project_value = Path(payload.get("projectDir", project_dir))
    if not project_value.is_absolute():
        payload["projectDir"] = str(project_dir / project_value)
    try:
        settings = ShellcheckSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(_describe_validation_error(exc)) from exc
    LOGGER.debug("config sources=%s", ",".join(sources))
    return LoadedConfig(settings=settings, sources=sources)


def _normalise_keys(fragment: Mapping[str, Any]) -> dict[str, Any]:
    """Convert snake_case keys to the camelCase aliases used by the models."""

    normalised: dict[str, Any] = {}
    for key, value in fragment.items():
        camel = _to_camel(str(key))
        normalised[camel] = _normalise_keys(value) if isinstance(value, Mapping) else value
    return normalised


def _to_camel(key: str) -> str:
    head, *rest = key.replace("-", "_").split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _describe_validation_error(exc: ValidationError) -> str:
    problems: list[str] = []
    for error in exc.errors():
        location: Sequence[object] = error.get("loc", ())
        dotted = ".".join(str(part) for part in location) or "config"
        problems.append(f"{dotted}: {error.get('msg', 'invalid value')}")
    return "; ".join(problems)


__all__ = [
    "LoadedConfig",
    "PROJECT_CONFIG_FILENAME",
    "deep_merge",
    "expand_env",
    "load_pyproject_section",
    "load_settings",
    "read_toml",
]
