# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Build the protocol requests handed to parsers."""

from __future__ import annotations

import fnmatch
import re
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from ..core.errors import ConfigError
from ..core.models import ComponentDescriptor, CreateRequest, ParseRequest, ParserKind
from .config import ProjectConfig

LARGE_FILE_SET_THRESHOLD: Final[int] = 10_000

DEFAULT_INCLUDE_GLOBS: Final[Mapping[ParserKind, tuple[str, ...] | None]] = {
    ParserKind.REACT: ("**/*.{tsx,jsx}",),
    ParserKind.HTML: ("**/*.{ts,js}",),
    ParserKind.SWIFT: ("**/*.swift",),
    ParserKind.COMPOSE: ("**/*.kt",),
    ParserKind.CUSTOM: None,
    ParserKind.UNIT_TEST: (),
}

DEFAULT_EXCLUDE_GLOBS: Final[Mapping[ParserKind, tuple[str, ...]]] = {
    ParserKind.REACT: ("node_modules/**",),
    ParserKind.HTML: ("node_modules/**",),
    ParserKind.SWIFT: ("**/__test__/**",),
}

_BRACE_RE: Final[re.Pattern[str]] = re.compile(r"\{([^{}]*)\}")
_RECURSIVE_PREFIX: Final[str] = "**/"


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives in ``pattern``.

    Args:
        pattern: Glob pattern that may contain brace alternatives.

    Returns:
        list[str]: One pattern per combination of alternatives, in order.
    """

    match = _BRACE_RE.search(pattern)
    if match is None:
        return [pattern]
    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def resolve_globs(config: ProjectConfig) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Return the effective include and exclude globs for ``config``.

    Args:
        config: Project configuration.

    Returns:
        tuple[tuple[str, ...], tuple[str, ...]]: Include globs and exclude globs.

    Raises:
        ConfigError: If no include globs are configured for a parser without
            defaults.
    """

    include = config.include or DEFAULT_INCLUDE_GLOBS.get(config.parser)
    if config.parser is ParserKind.CUSTOM and not include:
        raise ConfigError("`include` globs must be specified in the config file for custom parsers")
    if include is None:
        raise ConfigError("No `include` globs specified in config file")
    exclude = (*(config.exclude or ()), *DEFAULT_EXCLUDE_GLOBS.get(config.parser, ()))
    return include, exclude


def _is_excluded(relative: str, exclude: Sequence[str]) -> bool:
    for pattern in exclude:
        if fnmatch.fnmatchcase(relative, pattern):
            return True
        if pattern.startswith(_RECURSIVE_PREFIX) and fnmatch.fnmatchcase(
            relative, pattern.removeprefix(_RECURSIVE_PREFIX)
        ):
            return True
    return False


def discover_files(root: Path, include: Iterable[str], exclude: Iterable[str] = ()) -> tuple[Path, ...]:
    """Return files under ``root`` matching ``include`` and not ``exclude``.

    Args:
        root: Project root the globs are relative to.
        include: Glob patterns selecting candidate files.
        exclude: Glob patterns removing candidates, matched against the
            root-relative POSIX path.

    Returns:
        tuple[Path, ...]: Sorted absolute file paths.
    """

    base = root.resolve()
    excluded = [expanded for pattern in exclude for expanded in expand_braces(pattern)]
    matches: set[Path] = set()
    for pattern in include:
        for expanded in expand_braces(pattern):
            if not expanded:
                continue
            for candidate in base.glob(expanded):
                if not candidate.is_file():
                    continue
                if _is_excluded(candidate.relative_to(base).as_posix(), excluded):
                    continue
                matches.add(candidate)
    return tuple(sorted(matches))


def project_files(config: ProjectConfig, root: Path) -> tuple[Path, ...]:
    """Return the files a parse run for ``config`` should hand to the parser."""

    include, exclude = resolve_globs(config)
    return discover_files(root, include, exclude)


def build_parse_request(config: ProjectConfig, root: Path, *, verbose: bool = False) -> ParseRequest:
    """Return a ``PARSE`` request covering the project's matching files.

    Args:
        config: Project configuration, passed through as the request config.
        root: Project root used to resolve include and exclude globs.
        verbose: Whether the parser should emit extra diagnostics.

    Returns:
        ParseRequest: Request ready to serialise for the parser.

    Raises:
        ConfigError: If include globs cannot be determined.
    """

    files = project_files(config, root)
    return ParseRequest(
        paths=tuple(str(path) for path in files),
        config=config.to_request_config(),
        verbose=verbose,
    )


def build_create_request(
    config: ProjectConfig,
    component: ComponentDescriptor,
    destination_dir: Path,
    *,
    destination_file: str | None = None,
    source_filepath: str | None = None,
    source_export: str | None = None,
    prop_mapping: Mapping[str, Any] | None = None,
    verbose: bool = False,
) -> CreateRequest:
    """Return a ``CREATE`` request asking the parser to scaffold ``component``."""

    return CreateRequest(
        destination_dir=str(destination_dir.resolve()),
        component=component,
        config=config.to_request_config(),
        destination_file=destination_file,
        source_filepath=source_filepath,
        source_export=source_export,
        prop_mapping=dict(prop_mapping) if prop_mapping is not None else None,
        verbose=verbose,
    )


__all__ = [
    "DEFAULT_EXCLUDE_GLOBS",
    "DEFAULT_INCLUDE_GLOBS",
    "LARGE_FILE_SET_THRESHOLD",
    "build_create_request",
    "build_parse_request",
    "discover_files",
    "expand_braces",
    "project_files",
    "resolve_globs",
]
