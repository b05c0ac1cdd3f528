# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Severity-styled diagnostic lines for the engine and the CLI."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

from rich.text import Text

from codelink.runtime.console import diagnostics_console, stderr_is_terminal

from .models import MessageLevel


@dataclass(frozen=True, slots=True)
class LineStyle:
    """Emoji prefix and Rich style applied to one kind of line."""

    prefix: str
    style: str


LEVEL_STYLES: Final[Mapping[MessageLevel, LineStyle]] = MappingProxyType(
    {
        MessageLevel.DEBUG: LineStyle("", "dim"),
        MessageLevel.INFO: LineStyle("ℹ️ ", "cyan"),
        MessageLevel.WARN: LineStyle("⚠️ ", "yellow"),
        MessageLevel.ERROR: LineStyle("❌ ", "red"),
    }
)
SUCCESS_STYLE: Final[LineStyle] = LineStyle("✅ ", "green")


def render_line(msg: str, line_style: LineStyle, *, use_emoji: bool, use_color: bool) -> Text:
    """Build the Rich text for one diagnostic line.

    Args:
        msg: Line content.
        line_style: Prefix and style for the line's severity.
        use_emoji: Whether to lead with the severity emoji.
        use_color: Whether to apply the severity style.

    Returns:
        Text: Renderable line.
    """

    text = Text(f"{line_style.prefix}{msg}" if use_emoji else msg)
    if use_color:
        text.stylize(line_style.style)
    return text


def emit_line(msg: str, line_style: LineStyle, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` to standard error; ``use_color=None`` follows the terminal."""

    color = stderr_is_terminal() if use_color is None else use_color
    console = diagnostics_console(color=color, emoji=use_emoji)
    console.print(render_line(msg, line_style, use_emoji=use_emoji, use_color=color))


def log_at(level: MessageLevel, msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    """Print ``msg`` styled for ``level``."""

    emit_line(msg, LEVEL_STYLES[level], use_emoji=use_emoji, use_color=use_color)


def log_success(msg: str, *, use_emoji: bool, use_color: bool | None = None) -> None:
    emit_line(msg, SUCCESS_STYLE, use_emoji=use_emoji, use_color=use_color)


__all__ = ["LEVEL_STYLES", "SUCCESS_STYLE", "LineStyle", "emit_line", "log_at", "log_success", "render_line"]
