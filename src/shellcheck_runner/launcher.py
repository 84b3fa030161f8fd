# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Build and run the shellcheck command for local or containerised execution."""

from __future__ import annotations

import logging
import shlex
import uuid
from pathlib import PurePosixPath
from typing import Final, Protocol, runtime_checkable

from .config import ExecutionMode, InvocationDescriptor
from .errors import ConfigurationError, LauncherError
from .models import LaunchResult
from .process import CommandOptions, CommandTimeoutError, run_command

LOGGER = logging.getLogger(__name__)

OUTPUT_FORMAT: Final[str] = "json1"
EXIT_CLEAN: Final[int] = 0
EXIT_VIOLATIONS: Final[int] = 1
CONTAINER_PREFIX: Final[str] = "shellcheck-runner"
KILL_TIMEOUT_SECONDS: Final[float] = 30.0


@runtime_checkable
class ProcessLauncher(Protocol):
    """Run shellcheck for an invocation and return its exit status and output."""

    def launch(self, descriptor: InvocationDescriptor) -> LaunchResult:
        """Execute shellcheck for ``descriptor``."""
        ...


def relative_sources(descriptor: InvocationDescriptor) -> list[str]:
    """Return source paths rewritten relative to the project directory.

    Paths outside the project are kept absolute for local runs. Docker runs
    can only see the mounted project, so such paths are rejected.

    Raises:
        ConfigurationError: If a docker run references a file outside the project.
    """

    rewritten: list[str] = []
    for source in descriptor.sources:
        try:
            relative = source.relative_to(descriptor.project_dir)
        except ValueError:
            if descriptor.mode is ExecutionMode.DOCKER:
                raise ConfigurationError(
                    f"{source} is outside project directory {descriptor.project_dir} and cannot be mounted",
                    field="sources",
                ) from None
            rewritten.append(str(source))
            continue
        rewritten.append(relative.as_posix())
    return rewritten


def shellcheck_arguments(descriptor: InvocationDescriptor) -> list[str]:
    """Return the shellcheck flags shared by both execution modes."""

    return [f"--severity={descriptor.threshold.value}", f"--format={OUTPUT_FORMAT}"]


def build_local_command(descriptor: InvocationDescriptor) -> list[str]:
    """Return the command invoking the configured shellcheck binary directly."""

    binary = descriptor.binary or ""
    return [binary, *shellcheck_arguments(descriptor), *relative_sources(descriptor)]


def build_docker_command(descriptor: InvocationDescriptor, *, container_name: str | None = None) -> list[str]:
    """Return the ``docker run`` command mounting the project read-only.

    ``container_name`` is passed as ``--name`` so the container can be killed
    if the docker client times out.
    """

    mount = PurePosixPath(descriptor.mount_path)
    files = [str(mount / path) for path in relative_sources(descriptor)]
    name_args = ["--name", container_name] if container_name else []
    return [
        descriptor.docker_binary,
        "run",
        "--rm",
        *name_args,
        "-v",
        f"{descriptor.project_dir}:{mount}:ro",
        "-w",
        str(mount),
        descriptor.image_reference,
        *shellcheck_arguments(descriptor),
        *files,
    ]


def build_command(descriptor: InvocationDescriptor, *, container_name: str | None = None) -> list[str]:
    """Return the command line for the descriptor's execution mode."""

    if descriptor.mode is ExecutionMode.DOCKER:
        return build_docker_command(descriptor, container_name=container_name)
    return build_local_command(descriptor)


def new_container_name() -> str:
    """Return a unique container name for one docker run."""

    return f"{CONTAINER_PREFIX}-{uuid.uuid4().hex[:12]}"


class SubprocessLauncher:
    """Launch shellcheck as a child process and classify its exit status."""

    def __init__(self, *, options: CommandOptions | None = None) -> None:
        self._options = options or CommandOptions()

    def launch(self, descriptor: InvocationDescriptor) -> LaunchResult:
        """Run shellcheck once for ``descriptor`` and capture merged output.

        Args:
            descriptor: Validated invocation settings.

        Returns:
            LaunchResult: Exit status 0 (clean) or 1 (violations) with output.

        Raises:
            LauncherError: If the process could not start, timed out, or exited
                with any status other than 0 or 1.
        """

        container_name = new_container_name() if descriptor.mode is ExecutionMode.DOCKER else None
        command = build_command(descriptor, container_name=container_name)
        LOGGER.debug("command=%s", shlex.join(command))
        options = self._options.with_overrides(
            {"cwd": descriptor.project_dir, "timeout": descriptor.timeout},
        )
        try:
            completed = run_command(command, options=options)
        except CommandTimeoutError as exc:
            if container_name is not None:
                self._kill_container(descriptor, container_name)
            raise LauncherError(
                str(exc),
                command=command,
                output=exc.output,
                timed_out=True,
            ) from exc
        except OSError as exc:
            raise LauncherError(
                f"unable to start {command[0]}: {exc}",
                command=command,
            ) from exc

        output = completed.stdout or ""
        LOGGER.debug("returncode=%d output_lines=%d", completed.returncode, len(output.splitlines()))
        if completed.returncode not in (EXIT_CLEAN, EXIT_VIOLATIONS):
            detail = output.strip().splitlines()[-1] if output.strip() else "no output"
            raise LauncherError(
                f"{command[0]} exited with status {completed.returncode}: {detail}",
                command=command,
                returncode=completed.returncode,
                output=output,
            )
        return LaunchResult(command=tuple(command), returncode=completed.returncode, output=output)

    def _kill_container(self, descriptor: InvocationDescriptor, container_name: str) -> None:
        """Stop a container left running after its docker client was killed."""

        command = [descriptor.docker_binary, "kill", container_name]
        LOGGER.debug("command=%s", shlex.join(command))
        options = self._options.with_overrides({"cwd": descriptor.project_dir, "timeout": KILL_TIMEOUT_SECONDS})
        try:
            completed = run_command(command, options=options)
        except (CommandTimeoutError, OSError) as exc:
            LOGGER.warning("unable to kill container %s: %s", container_name, exc)
            return
        if completed.returncode != EXIT_CLEAN:
            LOGGER.warning("unable to kill container %s: %s", container_name, (completed.stdout or "").strip())


__all__ = [
    "CONTAINER_PREFIX",
    "EXIT_CLEAN",
    "EXIT_VIOLATIONS",
    "OUTPUT_FORMAT",
    "ProcessLauncher",
    "SubprocessLauncher",
    "build_command",
    "build_docker_command",
    "build_local_command",
    "new_container_name",
    "relative_sources",
    "shellcheck_arguments",
]
