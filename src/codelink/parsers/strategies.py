# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Invocation strategies mapping each parser kind to how it is executed.

Every :class:`~codelink.core.models.ParserKind` resolves to exactly one
strategy, and every strategy belongs to one of three invocation kinds: an
in-process callable, a fixed first-party command, or a user-configured custom
command.
"""

from __future__ import annotations

import shlex
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Final, Protocol

from ..core.errors import ConfigError, ParserNotFoundError
from ..core.models import ParserKind, RequestMode
from ..project.config import ProjectConfig
from .toolchains import UNIT_TEST_COMMAND, compose_command, locate_gradle_wrapper, swift_command
from .workspace import InvocationWorkspace

InProcessParser = Callable[[dict[str, Any], Path], Mapping[str, Any]]


class InvocationKind(str, Enum):
    """Closed set of ways a parser can be executed."""

    IN_PROCESS = "in-process"
    FIXED_COMMAND = "fixed-command"
    CUSTOM_COMMAND = "custom-command"


class RequestChannel(str, Enum):
    """Where the serialised request is delivered."""

    STDIN = "stdin"
    FILE = "file"


class OutputChannel(str, Enum):
    """Where the parser's response is collected from."""

    STDOUT = "stdout"
    MODULE_DIRECTORY = "module-directory"


@dataclass(slots=True, frozen=True)
class StrategyContext:
    """Inputs a strategy needs to plan one invocation."""

    config: ProjectConfig
    cwd: Path
    mode: RequestMode
    verbose: bool
    workspace: InvocationWorkspace


@dataclass(slots=True, frozen=True)
class InvocationPlan:
    """Concrete description of how one parser invocation will run."""

    kind: InvocationKind
    command: tuple[str, ...] = ()
    request_channel: RequestChannel = RequestChannel.STDIN
    output_channel: OutputChannel = OutputChannel.STDOUT
    handler: InProcessParser | None = None
    notice: str | None = None

    def describe(self) -> str:
        """Return a one-line rendering of the plan for debug output."""

        if self.kind is InvocationKind.IN_PROCESS:
            name = getattr(self.handler, "__qualname__", repr(self.handler))
            return f"in-process parser {name}"
        return shlex.join(self.command)


class ParserStrategy(Protocol):
    """Interface implemented by every invocation strategy."""

    kind: InvocationKind

    def plan(self, context: StrategyContext) -> InvocationPlan:
        """Return the invocation plan for ``context``."""
        ...


_IN_PROCESS_PARSERS: dict[ParserKind, InProcessParser] = {}


def register_in_process_parser(kind: ParserKind, handler: InProcessParser) -> None:
    """Register ``handler`` as the in-process implementation of ``kind``.

    Args:
        kind: Parser kind served by ``handler``.
        handler: Callable receiving the request payload and working directory
            and returning the raw response mapping.

    Raises:
        ValueError: If ``kind`` is not an in-process parser kind, or another
            handler is already registered for it.
    """

    if kind not in IN_PROCESS_KINDS:
        raise ValueError(f"parser '{kind.value}' is not executed in-process")
    existing = _IN_PROCESS_PARSERS.get(kind)
    if existing is not None and existing is not handler:
        raise ValueError(f"in-process parser '{kind.value}' is already registered")
    _IN_PROCESS_PARSERS[kind] = handler


def unregister_in_process_parser(kind: ParserKind) -> None:
    """Remove any in-process handler registered for ``kind``."""

    _IN_PROCESS_PARSERS.pop(kind, None)


@dataclass(slots=True, frozen=True)
class InProcessStrategy:
    """Call a registered Python callable instead of spawning a process."""

    parser: ParserKind
    kind: InvocationKind = InvocationKind.IN_PROCESS

    def plan(self, context: StrategyContext) -> InvocationPlan:
        handler = _IN_PROCESS_PARSERS.get(self.parser)
        if handler is None:
            raise ParserNotFoundError(
                self.parser.value,
                hint="No in-process parser is registered for this parser kind",
            )
        return InvocationPlan(kind=self.kind, handler=handler)


@dataclass(slots=True, frozen=True)
class SwiftStrategy:
    """Run the Swift parser through SwiftPM."""

    kind: InvocationKind = InvocationKind.FIXED_COMMAND

    def plan(self, context: StrategyContext) -> InvocationPlan:
        command = swift_command(context.cwd, context.config.swift_package_path)
        return InvocationPlan(kind=self.kind, command=command)


@dataclass(slots=True, frozen=True)
class ComposeStrategy:
    """Run the Compose parser through the project's Gradle wrapper.

    Gradle runs the parser once per module, so the request travels through a
    file and each module writes its own response into the workspace's module
    output directory.
    """

    kind: InvocationKind = InvocationKind.FIXED_COMMAND

    def plan(self, context: StrategyContext) -> InvocationPlan:
        wrapper = locate_gradle_wrapper(context.cwd, context.config.gradle_wrapper_path)
        command = compose_command(
            wrapper,
            context.mode,
            request_file=context.workspace.request_file,
            output_dir=context.workspace.module_output_dir,
            verbose=context.verbose,
        )
        return InvocationPlan(
            kind=self.kind,
            command=command,
            request_channel=RequestChannel.FILE,
            output_channel=OutputChannel.MODULE_DIRECTORY,
        )


@dataclass(slots=True, frozen=True)
class UnitTestStrategy:
    """Run the fixture parser used by end-to-end test projects."""

    kind: InvocationKind = InvocationKind.FIXED_COMMAND

    def plan(self, context: StrategyContext) -> InvocationPlan:
        return InvocationPlan(kind=self.kind, command=UNIT_TEST_COMMAND)


@dataclass(slots=True, frozen=True)
class CustomCommandStrategy:
    """Run the command configured under ``parserCommand``."""

    kind: InvocationKind = InvocationKind.CUSTOM_COMMAND

    def plan(self, context: StrategyContext) -> InvocationPlan:
        raw = (context.config.parser_command or "").strip()
        if not raw:
            raise ConfigError(
                "No `parserCommand` specified in config. A command is required when using the `custom` parser."
            )
        try:
            command = tuple(shlex.split(raw))
        except ValueError as exc:
            raise ConfigError(f"Invalid `parserCommand` {raw!r}: {exc}") from exc
        return InvocationPlan(
            kind=self.kind,
            command=command,
            notice=f"Using custom parser command: {raw}",
        )


IN_PROCESS_KINDS: Final[frozenset[ParserKind]] = frozenset({ParserKind.REACT, ParserKind.HTML})

_STRATEGIES: Final[Mapping[ParserKind, ParserStrategy]] = {
    ParserKind.REACT: InProcessStrategy(ParserKind.REACT),
    ParserKind.HTML: InProcessStrategy(ParserKind.HTML),
    ParserKind.SWIFT: SwiftStrategy(),
    ParserKind.COMPOSE: ComposeStrategy(),
    ParserKind.CUSTOM: CustomCommandStrategy(),
    ParserKind.UNIT_TEST: UnitTestStrategy(),
}


def strategy_for(kind: ParserKind) -> ParserStrategy:
    """Return the strategy responsible for ``kind``."""

    return _STRATEGIES[kind]


__all__ = [
    "IN_PROCESS_KINDS",
    "ComposeStrategy",
    "CustomCommandStrategy",
    "InProcessParser",
    "InProcessStrategy",
    "InvocationKind",
    "InvocationPlan",
    "OutputChannel",
    "ParserStrategy",
    "RequestChannel",
    "StrategyContext",
    "SwiftStrategy",
    "UnitTestStrategy",
    "register_in_process_parser",
    "strategy_for",
    "unregister_in_process_parser",
]
