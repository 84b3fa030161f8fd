# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse shellcheck output into violation records."""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Final

from .errors import ParseError
from .launcher import EXIT_VIOLATIONS
from .models import ViolationRecord
from .severity import parse_severity

LOGGER = logging.getLogger(__name__)

# ``a.sh:3:5: warning SC2086: Double quote to prevent globbing.``
_TEXT_LINE_RE: Final[re.Pattern[str]] = re.compile(
    r"^(?P<file>.+?):(?P<line>\d+):(?P<column>\d+):\s+"
    r"(?P<severity>[A-Za-z]+)\s+(?P<code>SC\d+):\s*(?P<message>.+?)\s*$",
)
_JSON_DECODER: Final[json.JSONDecoder] = json.JSONDecoder()


def parse_line(line: str, *, strip_prefix: str | None = None) -> ViolationRecord | None:
    """Return the violation described by ``line`` or ``None`` when it is not one.

    Args:
        line: Single line of shellcheck output.
        strip_prefix: Container mount path removed from the file name so that
            docker and local runs report identical paths.
    """

    match = _TEXT_LINE_RE.match(line)
    if match is None:
        return None
    return _build_record(
        file=match.group("file"),
        line=int(match.group("line")),
        column=int(match.group("column")),
        level=match.group("severity"),
        code=match.group("code"),
        message=match.group("message"),
        strip_prefix=strip_prefix,
    )


def parse_lines(lines: Iterable[str], *, strip_prefix: str | None = None) -> tuple[ViolationRecord, ...]:
    """Parse every violation line in ``lines`` preserving order."""

    records: list[ViolationRecord] = []
    for raw_line in lines:
        record = parse_line(raw_line.rstrip("\r\n"), strip_prefix=strip_prefix)
        if record is not None:
            records.append(record)
    return tuple(records)


def parse_json_payload(payload: Any, *, strip_prefix: str | None = None) -> tuple[ViolationRecord, ...]:
    """Convert a ``json1`` (``{"comments": [...]}``) or ``json`` payload into records.

    Entries missing a message, a position or a known ``level`` are skipped.
    """

    records: list[ViolationRecord] = []
    for entry in _shellcheck_entries(payload) or ():
        message = entry.get("message")
        line_no = entry.get("line")
        column = entry.get("column")
        if not isinstance(message, str) or not message.strip():
            continue
        if not isinstance(line_no, int) or not isinstance(column, int):
            continue
        record = _build_record(
            file=str(entry.get("file", "")),
            line=line_no,
            column=column,
            level=str(entry.get("level", "")),
            code=_format_code(entry.get("code")),
            message=message.strip(),
            strip_prefix=strip_prefix,
        )
        if record is not None:
            records.append(record)
    return tuple(records)


def parse_output(
    output: str,
    returncode: int,
    *,
    strip_prefix: str | None = None,
) -> tuple[ViolationRecord, ...]:
    """Interpret captured shellcheck output.

    The JSON document written by ``--format=json1`` is preferred; output without
    one is read line by line. Lines that are not violations (banners, notes,
    blank lines) are ignored.

    Args:
        output: Merged stdout/stderr captured from shellcheck.
        returncode: Exit status reported by shellcheck.
        strip_prefix: Container mount path to remove from file names.

    Returns:
        tuple[ViolationRecord, ...]: Violations in the order shellcheck emitted them.

    Raises:
        ParseError: If shellcheck reported findings but none could be parsed.
    """

    payload = _find_json_payload(output)
    if payload is not None:
        records = parse_json_payload(payload, strip_prefix=strip_prefix)
        LOGGER.debug("parsed=%d source=json", len(records))
    else:
        lines: Sequence[str] = output.splitlines()
        records = parse_lines(lines, strip_prefix=strip_prefix)
        ignored = sum(1 for line in lines if line.strip()) - len(records)
        LOGGER.debug("parsed=%d ignored=%d source=text", len(records), ignored)
    if returncode == EXIT_VIOLATIONS and not records:
        raise ParseError(
            "shellcheck reported violations but no violations could be parsed",
            returncode=returncode,
            output=output,
        )
    return records


def _find_json_payload(output: str) -> Any | None:
    """Return the first shellcheck JSON document in ``output``, if any.

    Only documents starting a line are considered, so bracketed text inside
    messages is never mistaken for a payload.
    """

    offset = 0
    for line in output.splitlines(keepends=True):
        stripped = line.lstrip()
        if stripped[:1] in ("{", "["):
            start = offset + len(line) - len(stripped)
            try:
                payload, _ = _JSON_DECODER.raw_decode(output, start)
            except ValueError:
                payload = None
            if _shellcheck_entries(payload) is not None:
                return payload
        offset += len(line)
    return None


def _shellcheck_entries(payload: Any) -> list[Mapping[str, Any]] | None:
    """Return the comment entries of ``payload`` or ``None`` for foreign shapes."""

    if isinstance(payload, Mapping):
        payload = payload.get("comments")
    if not isinstance(payload, list):
        return None
    if not all(isinstance(entry, Mapping) for entry in payload):
        return None
    return payload


def _format_code(value: Any) -> str:
    text = str(value).strip() if value is not None else ""
    if text.isdigit():
        return f"SC{text}"
    return text


def _build_record(
    *,
    file: str,
    line: int,
    column: int,
    level: str,
    code: str,
    message: str,
    strip_prefix: str | None,
) -> ViolationRecord | None:
    try:
        severity = parse_severity(level)
    except ValueError:
        return None
    if line < 1 or column < 1 or not file or not code:
        return None
    return ViolationRecord(
        file=_strip_mount(file, strip_prefix),
        line=line,
        column=column,
        severity=severity,
        code=code,
        message=message,
    )


def _strip_mount(path: str, prefix: str | None) -> str:
    if prefix:
        head = prefix.rstrip("/") + "/"
        if path.startswith(head):
            return path[len(head) :]
    return path.removeprefix("./")


__all__ = ["parse_json_payload", "parse_line", "parse_lines", "parse_output"]
