# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command extracting documents from a project."""

from __future__ import annotations

import typer

from ..engine import ParserEngine
from ._services import build_settings, load_config, report_failure, resolve_project_dir, write_json
from .options import (
    CONFIG_OPTION,
    DIR_OPTION,
    EMOJI_OPTION,
    LABEL_OPTION,
    OUTFILE_OPTION,
    TIMEOUT_OPTION,
    VERBOSE_OPTION,
)
from .shared import CLIError, build_cli_logger


def parse_command(
    directory: DIR_OPTION = None,
    config: CONFIG_OPTION = None,
    outfile: OUTFILE_OPTION = None,
    label: LABEL_OPTION = None,
    verbose: VERBOSE_OPTION = False,
    timeout: TIMEOUT_OPTION = None,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Run the configured parser and print the documents it found as JSON."""

    logger = build_cli_logger(emoji=emoji, debug=verbose)
    try:
        project_dir = resolve_project_dir(directory)
        project_config = load_config(project_dir, config, logger=logger)
        settings = build_settings(project_dir, verbose=verbose, emoji=emoji, timeout=timeout, label=label)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    logger.debug(f"Parsing project dir={project_dir} parser={project_config.parser.value}")
    outcome = ParserEngine(project_config, settings).parse()
    if not outcome.succeeded:
        report_failure(outcome, logger=logger, verbose=verbose)
        raise typer.Exit(code=outcome.exit_code)

    write_json([document.to_payload() for document in outcome.documents], outfile, logger=logger)
    count = len(outcome.documents)
    summary = f"Parsed {count} document{'s' if count != 1 else ''}"
    if outcome.warnings:
        logger.warn(f"{summary} with {len(outcome.warnings)} warning(s)")
    else:
        logger.ok(summary)
    raise typer.Exit(code=0)


__all__ = ["parse_command"]
