# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Route parser messages to the console."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from .core.logging import log_at
from .core.models import Message, MessageLevel


def format_message(message: Message) -> str:
    """Render ``message`` as one display line.

    Args:
        message: Parser message.

    Returns:
        str: Text including the message type and source location when present.
    """

    text = message.message
    if message.type:
        text = f"[{message.type}] {text}"
    location = message.source_location
    if location is not None:
        position = f"{location.file}:{location.line}" if location.line is not None else location.file
        text = f"{text} ({position})"
    return text


@dataclass(slots=True)
class MessageReporter:
    """Print messages at their level; ``DEBUG`` only when verbose."""

    verbose: bool = False
    use_emoji: bool = True
    use_color: bool | None = None

    def log(self, level: MessageLevel, text: str) -> None:
        """Print ``text`` styled for ``level``.

        Args:
            level: Severity of the text.
            text: Line to print.
        """

        if level is MessageLevel.DEBUG and not self.verbose:
            return
        log_at(level, text, use_emoji=self.use_emoji, use_color=self.use_color)

    def report(self, message: Message) -> None:
        self.log(message.level, format_message(message))

    def __call__(self, message: Message) -> None:
        self.report(message)


@dataclass(slots=True)
class MessageCollector:
    """Record messages in arrival order and forward them to ``sink``."""

    sink: Callable[[Message], None] | None = None
    messages: list[Message] = field(default_factory=list)

    def __call__(self, message: Message) -> None:
        self.messages.append(message)
        if self.sink is not None:
            self.sink(message)


__all__ = ["MessageCollector", "MessageReporter", "format_message"]
