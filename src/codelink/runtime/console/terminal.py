# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rich consoles bound to standard error.

Standard output carries the JSON documents callers may pipe elsewhere, so all
diagnostics go to standard error.
"""

from __future__ import annotations

import sys
from functools import cache

from rich.console import Console


def stderr_is_terminal() -> bool:
    """Return whether standard error is attached to a terminal."""

    try:
        return sys.stderr.isatty()
    except (AttributeError, ValueError):
        return False


@cache
def _console(color: bool, emoji: bool, terminal: bool) -> Console:
    # Rich resolves ``sys.stderr`` on every write, so cached consoles follow
    # stream replacement by test harnesses.
    styled = color and terminal
    return Console(
        stderr=True,
        color_system="auto" if styled else None,
        force_terminal=terminal,
        no_color=not styled,
        emoji=emoji,
        highlight=False,
        soft_wrap=True,
    )


def diagnostics_console(*, color: bool, emoji: bool) -> Console:
    """Return the shared standard-error console for the given preferences.

    Colour is only applied when standard error is a terminal.

    Args:
        color: Whether styled output is wanted.
        emoji: Whether Rich should render emoji codes.

    Returns:
        Console: Console reused by every caller with the same settings.
    """

    return _console(color, emoji, stderr_is_terminal())


__all__ = ["diagnostics_console", "stderr_is_terminal"]
