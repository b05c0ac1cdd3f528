# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reusable Typer option declarations."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

DIR_OPTION = Annotated[
    Path | None,
    typer.Option("--dir", "-d", help="Project directory. Defaults to the current directory."),
]
CONFIG_OPTION = Annotated[
    Path | None,
    typer.Option("--config", "-c", help="Path to figma.config.json. Defaults to the one in --dir."),
]
OUTFILE_OPTION = Annotated[
    Path | None,
    typer.Option("--outfile", "-o", help="Write the JSON documents to this file instead of stdout."),
]
LABEL_OPTION = Annotated[
    str | None,
    typer.Option("--label", "-l", help="Label applied to every document."),
]
VERBOSE_OPTION = Annotated[
    bool,
    typer.Option("--verbose", "-v", help="Show debug output, including parser debug messages."),
]
TIMEOUT_OPTION = Annotated[
    float | None,
    typer.Option(
        "--timeout",
        help="Kill the parser after this many seconds. Defaults to $CODELINK_PARSER_TIMEOUT.",
    ),
]
EMOJI_OPTION = Annotated[
    bool,
    typer.Option("--emoji/--no-emoji", help="Toggle emoji output."),
]
COMPONENT_ARGUMENT = Annotated[
    Path,
    typer.Argument(help="JSON file describing the design component to connect."),
]
OUT_DIR_OPTION = Annotated[
    Path | None,
    typer.Option("--out-dir", help="Directory the parser should create the file in. Defaults to --dir."),
]
OUT_FILE_OPTION = Annotated[
    str | None,
    typer.Option("--out-file", help="File name for the created file. The parser chooses one when omitted."),
]

__all__ = [
    "COMPONENT_ARGUMENT",
    "CONFIG_OPTION",
    "DIR_OPTION",
    "EMOJI_OPTION",
    "LABEL_OPTION",
    "OUTFILE_OPTION",
    "OUT_DIR_OPTION",
    "OUT_FILE_OPTION",
    "TIMEOUT_OPTION",
    "VERBOSE_OPTION",
]
