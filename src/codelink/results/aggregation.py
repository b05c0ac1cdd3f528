# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Merge per-module parser responses written into a shared directory."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final

from ..core.errors import MalformedModuleOutputError
from ..core.models import RequestMode

MESSAGES_KEY: Final[str] = "messages"
_RESULT_KEYS: Final[Mapping[RequestMode, str]] = {
    RequestMode.PARSE: "docs",
    RequestMode.CREATE: "createdFiles",
}


@dataclass(slots=True, frozen=True)
class AggregatedOutput:
    """Concatenated module responses, still untyped."""

    payload: dict[str, list[Any]]
    modules: tuple[str, ...]


def result_key(mode: RequestMode) -> str:
    """Return the wire key holding results for ``mode``."""

    return _RESULT_KEYS[mode]


def list_module_files(directory: Path) -> list[Path]:
    """Return the module response files in ``directory``.

    Regular files are returned sorted by name; hidden files are ignored.

    Args:
        directory: Directory the parser wrote module responses into.

    Returns:
        list[Path]: Module files in processing order.
    """

    if not directory.is_dir():
        return []
    return sorted(
        (entry for entry in directory.iterdir() if entry.is_file() and not entry.name.startswith(".")),
        key=lambda entry: entry.name,
    )


def _read_module(path: Path) -> Mapping[str, Any]:
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise MalformedModuleOutputError(path, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise MalformedModuleOutputError(path, "file is not valid UTF-8") from exc
    except json.JSONDecodeError as exc:
        raise MalformedModuleOutputError(path, f"{exc.msg} at line {exc.lineno} column {exc.colno}") from exc
    if not isinstance(document, Mapping):
        raise MalformedModuleOutputError(path, "expected a JSON object")
    return document


def _sequence_field(document: Mapping[str, Any], key: str, path: Path) -> list[Any]:
    value = document.get(key, [])
    if not isinstance(value, list):
        raise MalformedModuleOutputError(path, f"`{key}` must be an array")
    return value


def aggregate_module_outputs(directory: Path, mode: RequestMode) -> AggregatedOutput:
    """Concatenate every module response in ``directory``.

    Results and messages are appended in module order, then in the order each
    module listed them. Nothing is deduplicated here. Any unreadable module
    fails the whole aggregation.

    Args:
        directory: Directory holding one JSON response per module.
        mode: Request mode deciding whether ``docs`` or ``createdFiles`` is
            collected.

    Returns:
        AggregatedOutput: Response-shaped payload plus the module file names.

    Raises:
        MalformedModuleOutputError: If a module file is not a JSON object with
            array-valued fields.
    """

    key = result_key(mode)
    results: list[Any] = []
    messages: list[Any] = []
    modules: list[str] = []
    for path in list_module_files(directory):
        document = _read_module(path)
        results.extend(_sequence_field(document, key, path))
        messages.extend(_sequence_field(document, MESSAGES_KEY, path))
        modules.append(path.name)
    return AggregatedOutput(payload={key: results, MESSAGES_KEY: messages}, modules=tuple(modules))


__all__ = [
    "MESSAGES_KEY",
    "AggregatedOutput",
    "aggregate_module_outputs",
    "list_module_files",
    "result_key",
]
