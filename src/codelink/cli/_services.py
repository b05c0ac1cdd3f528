# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Helpers shared by the parse and create commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..core.errors import ERRORS_ENCOUNTERED_NOTICE, ConfigError, ParserReportedError
from ..core.models import ComponentDescriptor
from ..project.config import (
    DEFAULT_CONFIG_FILE_NAME,
    EngineSettings,
    ProjectConfig,
    find_config_file,
    load_project_config,
)
from ..results.outcome import RunOutcome
from .shared import CLIError, CLILogger


def resolve_project_dir(directory: Path | None) -> Path:
    """Return the absolute project directory, failing when it does not exist."""

    project_dir = (directory or Path.cwd()).resolve()
    if not project_dir.is_dir():
        raise CLIError(f"Project directory {project_dir} does not exist")
    return project_dir


def load_config(project_dir: Path, config_path: Path | None, *, logger: CLILogger) -> ProjectConfig:
    """Load the project configuration for a command.

    Args:
        project_dir: Project directory.
        config_path: Explicit config file, or ``None`` to look in ``project_dir``.
        logger: CLI logger for progress output.

    Returns:
        ProjectConfig: Validated configuration.

    Raises:
        CLIError: If no config file exists or it is invalid.
    """

    path = config_path.resolve() if config_path is not None else find_config_file(project_dir)
    if path is None or not path.is_file():
        missing = path or project_dir / DEFAULT_CONFIG_FILE_NAME
        raise CLIError(f"Config file {missing} does not exist. A config file with a `parser` key is required.")
    logger.debug(f"Loading project config config={path}")
    try:
        return load_project_config(path)
    except ConfigError as exc:
        raise CLIError(exc.user_message, exit_code=exc.exit_code) from exc


def build_settings(
    project_dir: Path,
    *,
    verbose: bool,
    emoji: bool,
    timeout: float | None = None,
    label: str | None = None,
) -> EngineSettings:
    """Return engine settings for a command, leaving unset knobs at their defaults.

    Raises:
        CLIError: If an option value is invalid.
    """

    overrides: dict[str, Any] = {"cwd": project_dir, "verbose": verbose, "use_emoji": emoji}
    if timeout is not None:
        overrides["timeout"] = timeout
    if label:
        overrides["label"] = label
    try:
        return EngineSettings(**overrides)
    except ValidationError as exc:
        details = "; ".join(f"{'.'.join(map(str, error['loc']))}: {error['msg']}" for error in exc.errors())
        raise CLIError(f"Invalid option: {details}", exit_code=2) from exc
    except ConfigError as exc:
        raise CLIError(exc.user_message, exit_code=exc.exit_code) from exc


def load_component(path: Path) -> ComponentDescriptor:
    """Read a component descriptor from ``path``.

    Raises:
        CLIError: If the file is missing or does not describe a component.
    """

    try:
        return ComponentDescriptor.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise CLIError(f"Unable to read component file {path}: {exc.strerror or exc}") from exc
    except ValidationError as exc:
        raise CLIError(f"Invalid component file {path}: {exc.error_count()} validation error(s)") from exc


def report_failure(outcome: RunOutcome, *, logger: CLILogger, verbose: bool) -> None:
    """Print the failure carried by ``outcome``.

    Parser ``ERROR`` messages have already been printed as they arrived, so
    only the closing notice is repeated for them.
    """

    if outcome.error_kind == ParserReportedError.kind:
        logger.fail(ERRORS_ENCOUNTERED_NOTICE)
        return
    message = outcome.error or "Parser run failed"
    if not verbose:
        message = f"{message}. Try re-running the command with --verbose for more information."
    logger.fail(message)


def write_json(payload: Any, outfile: Path | None, *, logger: CLILogger) -> None:
    """Write ``payload`` as JSON to ``outfile`` or standard output."""

    rendered = json.dumps(payload, indent=2)
    if outfile is None:
        logger.echo(rendered)
        return
    outfile.parent.mkdir(parents=True, exist_ok=True)
    outfile.write_text(f"{rendered}\n", encoding="utf-8")
    logger.ok(f"Wrote {outfile}")


__all__ = [
    "build_settings",
    "load_component",
    "load_config",
    "report_failure",
    "resolve_project_dir",
    "write_json",
]
