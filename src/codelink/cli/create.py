# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command asking a parser to scaffold a file for a design component."""

from __future__ import annotations

import typer

from ..engine import ParserEngine
from ._services import build_settings, load_component, load_config, report_failure, resolve_project_dir
from .options import (
    COMPONENT_ARGUMENT,
    CONFIG_OPTION,
    DIR_OPTION,
    EMOJI_OPTION,
    OUT_DIR_OPTION,
    OUT_FILE_OPTION,
    VERBOSE_OPTION,
)
from .shared import CLIError, build_cli_logger


def create_command(
    component_file: COMPONENT_ARGUMENT,
    directory: DIR_OPTION = None,
    config: CONFIG_OPTION = None,
    out_dir: OUT_DIR_OPTION = None,
    out_file: OUT_FILE_OPTION = None,
    verbose: VERBOSE_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Create a source file connecting the component in COMPONENT_FILE."""

    logger = build_cli_logger(emoji=emoji, debug=verbose)
    try:
        project_dir = resolve_project_dir(directory)
        project_config = load_config(project_dir, config, logger=logger)
        settings = build_settings(project_dir, verbose=verbose, emoji=emoji)
        component = load_component(component_file)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    destination = (out_dir or project_dir).resolve()
    outcome = ParserEngine(project_config, settings).create(component, destination, destination_file=out_file)
    if not outcome.succeeded:
        report_failure(outcome, logger=logger, verbose=verbose)
        raise typer.Exit(code=outcome.exit_code)

    for created in outcome.created_files:
        logger.echo(created.file_path)
    if not outcome.created_files:
        logger.warn("Parser did not create any files")
    else:
        logger.ok(f"Created {len(outcome.created_files)} file(s) for {component.name}")
    raise typer.Exit(code=0)


__all__ = ["create_command"]
