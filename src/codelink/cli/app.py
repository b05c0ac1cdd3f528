# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands."""

from __future__ import annotations

from typing import Annotated

import typer

from .. import __version__
from .create import create_command
from .parse import parse_command

app = typer.Typer(
    name="codelink",
    help="Run design-to-code parsers and collect the documents they produce.",
    no_args_is_help=True,
    add_completion=False,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_print_version, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Run design-to-code parsers and collect the documents they produce."""


app.command("parse")(parse_command)
app.command("create")(create_command)

__all__ = ["app"]
