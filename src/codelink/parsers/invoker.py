# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run a parser for one request and collect its raw response.

The invoker delivers the serialised request, surfaces standard-error lines as
they arrive, and returns the undecoded response tree. It never validates the
response and never retries: parsers may have written files before failing.
"""

from __future__ import annotations

import json
import signal
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..core.errors import (
    CodelinkError,
    MalformedResponseError,
    ParserFailedError,
    ParserNotFoundError,
    ProcessAbortedError,
    SpawnError,
)
from ..core.models import CreateRequest, Message, MessageLevel, ParseRequest, ParserKind, RequestMode
from ..core.process import StreamedProcess, stream_command
from ..project.config import ProjectConfig
from ..results.aggregation import aggregate_module_outputs, list_module_files
from .strategies import InvocationKind, InvocationPlan, OutputChannel, RequestChannel, StrategyContext, strategy_for
from .toolchains import error_suggestion
from .workspace import InvocationWorkspace

MessageSink = Callable[[Message], None]
LogSink = Callable[[MessageLevel, str], None]


@dataclass(slots=True, frozen=True)
class InvocationResult:
    """Raw output of one parser invocation."""

    payload: Any
    stderr_messages: tuple[Message, ...] = ()
    returncode: int | None = None
    modules: tuple[str, ...] = ()


def message_from_stderr_line(line: str) -> Message:
    """Wrap one standard-error line into a :class:`Message`.

    Lines holding a JSON object shaped like a message keep their declared
    level; anything else becomes an ``INFO`` message with the line as text.

    Args:
        line: Standard-error line without its trailing newline.

    Returns:
        Message: Message for the run's diagnostic stream.
    """

    stripped = line.strip()
    if stripped.startswith("{"):
        try:
            return Message.model_validate_json(stripped)
        except ValidationError:
            return Message(level=MessageLevel.INFO, message=line)
    return Message(level=MessageLevel.INFO, message=line)


def _describe_termination(process: StreamedProcess, timeout: float | None) -> str:
    if process.timed_out:
        return f"timed out after {timeout:g}s" if timeout is not None else "timed out"
    try:
        name = signal.Signals(-process.returncode).name
    except ValueError:
        name = str(-process.returncode)
    return f"terminated by signal {name}"


def decode_stdout(stdout: str, *, returncode: int, suggestion: str | None = None) -> Any:
    """Decode a parser's standard output as one JSON document.

    Args:
        stdout: Everything the parser wrote to standard output.
        returncode: Exit status of the parser.
        suggestion: Optional remediation hint for a failed parser.

    Returns:
        Any: Decoded JSON tree.

    Raises:
        MalformedResponseError: If the output is empty or not JSON.
    """

    text = stdout.strip()
    if not text:
        raise MalformedResponseError("no response on standard output", returncode=returncode, suggestion=suggestion)
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        reason = f"invalid JSON on standard output: {exc.msg} at line {exc.lineno} column {exc.colno}"
        raise MalformedResponseError(reason, returncode=returncode, suggestion=suggestion) from exc


def _run_in_process(
    plan: InvocationPlan,
    request: ParseRequest | CreateRequest,
    *,
    parser: ParserKind,
    cwd: Path,
) -> InvocationResult:
    handler = plan.handler
    if handler is None:
        raise ParserNotFoundError(plan.describe())
    try:
        payload = handler(request.to_payload(), cwd)
    except CodelinkError:
        raise
    except Exception as exc:
        raise ParserFailedError(parser.value, exc) from exc
    return InvocationResult(payload=payload)


def _run_external(
    plan: InvocationPlan,
    request: ParseRequest | CreateRequest,
    *,
    config: ProjectConfig,
    cwd: Path,
    workspace: InvocationWorkspace,
    timeout: float | None,
    on_message: MessageSink | None,
    on_log: LogSink | None,
) -> InvocationResult:
    serialized = json.dumps(request.to_payload())
    stdin_text: str | None = serialized
    if plan.request_channel is RequestChannel.FILE:
        workspace.write_request(serialized)
        stdin_text = None

    collected: list[Message] = []

    def _handle_line(line: str) -> None:
        if not line.strip():
            return
        message = message_from_stderr_line(line)
        collected.append(message)
        if on_message is not None:
            on_message(message)

    try:
        process = stream_command(
            plan.command,
            cwd=cwd,
            stdin_text=stdin_text,
            on_stderr_line=_handle_line,
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise ParserNotFoundError(plan.command[0]) from exc
    except OSError as exc:
        raise SpawnError(plan.command, exc) from exc

    if process.timed_out or process.killed_by_signal:
        raise ProcessAbortedError(
            process.command,
            _describe_termination(process, timeout),
            returncode=process.returncode,
        )
    if process.stdin_closed_early and on_log is not None:
        on_log(MessageLevel.DEBUG, "Parser closed its standard input before reading the whole request")

    returncode = process.returncode
    suggestion = error_suggestion(config.parser, process.stderr) if returncode else None
    if plan.output_channel is OutputChannel.MODULE_DIRECTORY:
        module_dir = workspace.module_output_dir
        if returncode and not list_module_files(module_dir):
            raise MalformedResponseError(
                "no module responses were written",
                returncode=returncode,
                suggestion=suggestion,
            )
        aggregated = aggregate_module_outputs(module_dir, RequestMode(request.mode))
        if on_log is not None:
            listing = ", ".join(aggregated.modules) or "[empty]"
            on_log(MessageLevel.DEBUG, f"Aggregated parser output files: {listing}")
        return InvocationResult(
            payload=aggregated.payload,
            stderr_messages=tuple(collected),
            returncode=returncode,
            modules=aggregated.modules,
        )

    payload = decode_stdout(process.stdout, returncode=returncode, suggestion=suggestion)
    return InvocationResult(payload=payload, stderr_messages=tuple(collected), returncode=returncode)


def invoke_parser(
    config: ProjectConfig,
    request: ParseRequest | CreateRequest,
    *,
    cwd: Path,
    verbose: bool = False,
    timeout: float | None = None,
    on_message: MessageSink | None = None,
    on_log: LogSink | None = None,
    workspace_dir: Path | None = None,
) -> InvocationResult:
    """Invoke the parser selected by ``config`` with ``request``.

    Args:
        config: Project configuration naming the parser.
        request: Request to deliver.
        cwd: Working directory the parser runs in.
        verbose: Whether verbose parser output was requested.
        timeout: Optional limit in seconds before the parser is killed.
        on_message: Callback receiving each standard-error message as it
            arrives.
        on_log: Callback receiving the invoker's own notices.
        workspace_dir: Optional parent directory for the invocation workspace.

    Returns:
        InvocationResult: Raw response plus standard-error messages.

    Raises:
        ConfigError: If the parser configuration is incomplete.
        ParserNotFoundError: If the parser cannot be located.
        SpawnError: If the parser process cannot be started.
        ParserFailedError: If an in-process parser raises.
        ProcessAbortedError: If the parser is killed or times out.
        MalformedOutputError: If the response cannot be decoded.
    """

    strategy = strategy_for(config.parser)
    with InvocationWorkspace(base_dir=workspace_dir) as workspace:
        plan = strategy.plan(
            StrategyContext(
                config=config,
                cwd=cwd,
                mode=RequestMode(request.mode),
                verbose=verbose,
                workspace=workspace,
            )
        )
        if on_log is not None:
            if plan.notice:
                on_log(MessageLevel.INFO, plan.notice)
            on_log(MessageLevel.DEBUG, f"Running parser: {plan.describe()}")
        if plan.kind is InvocationKind.IN_PROCESS:
            return _run_in_process(plan, request, parser=config.parser, cwd=cwd)
        return _run_external(
            plan,
            request,
            config=config,
            cwd=cwd,
            workspace=workspace,
            timeout=timeout,
            on_message=on_message,
            on_log=on_log,
        )


__all__ = [
    "InvocationResult",
    "LogSink",
    "MessageSink",
    "decode_stdout",
    "invoke_parser",
    "message_from_stderr_line",
]
