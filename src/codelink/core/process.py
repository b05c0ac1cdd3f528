# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution.

Two entry points are provided: :func:`run_command` for short helper commands
whose output is consumed after exit (``git`` lookups), and
:func:`stream_command` for parser processes whose standard error must be
surfaced line by line while they run.
"""

from __future__ import annotations

import os
import shutil
import signal

# Bandit: subprocess usage is intentional; arguments are passed as lists and
# ``shell=True`` is never used.
import subprocess  # nosec B404 suppression_valid: Shell-free subprocess wrapper enforces safe execution.
import threading
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from subprocess import CompletedProcess
from typing import IO, Final

TIMEOUT_RETURNCODE: Final[int] = 124
_POSIX: Final[bool] = os.name == "posix"

StderrLineHandler = Callable[[str], None]


@dataclass(slots=True)
class CommandOptions:
    """Command execution options for :func:`run_command`."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = True
    capture_output: bool = False
    text: bool = True
    timeout: float | None = None
    discard_stdin: bool = False


class SubprocessExecutionError(RuntimeError):
    """Raised when a subprocess exits with a non-zero status while ``check`` is true."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        """Initialise the error with captured subprocess metadata.

        Args:
            command: Normalised command sequence that was executed.
            returncode: Exit status reported by the subprocess.
            stdout: Captured standard output stream.
            stderr: Captured standard error stream.
        """
        super().__init__(
            f"Command '{command[0]}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


@dataclass(slots=True, frozen=True)
class StreamedProcess:
    """Result of a process executed through :func:`stream_command`."""

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr_lines: tuple[str, ...] = ()
    timed_out: bool = False
    stdin_closed_early: bool = False

    @property
    def stderr(self) -> str:
        """Return the captured standard error as one newline-joined string."""

        return "\n".join(self.stderr_lines)

    @property
    def killed_by_signal(self) -> bool:
        """Return whether the process terminated because of a signal."""

        return self.returncode < 0


@dataclass(slots=True)
class _StreamState:
    """Mutable bookkeeping shared with the helper threads of one process."""

    stdout_chunks: list[str] = field(default_factory=list)
    timed_out: bool = False
    stdin_closed_early: bool = False


def _ensure_text(value: str | bytes | None) -> str | None:
    """Return ``value`` decoded to text when supplied as ``bytes``.

    Args:
        value: Stream output captured from subprocess execution.

    Returns:
        str | None: Text output or ``None`` when no data was captured.
    """

    if value is None or isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def _normalize_args(args: Sequence[str], *, cwd: Path | None = None) -> list[str]:
    """Normalise the subprocess argument sequence.

    Bare executable names are resolved on ``PATH``. Relative paths that
    contain a directory component are resolved against ``cwd`` so the result
    does not depend on how the platform combines ``cwd`` with relative
    executables.

    Args:
        args: Raw command arguments supplied by the caller.
        cwd: Working directory the command will run in.

    Returns:
        list[str]: Validated argument list suitable for subprocess execution.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be resolved.
    """

    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    if head_path.parent != Path("."):
        candidate = (cwd or Path.cwd()) / head_path
        if not candidate.exists():
            msg = f"Executable '{head}' was not found relative to {cwd or Path.cwd()}"
            raise FileNotFoundError(msg)
        return [str(candidate), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    Args:
        args: Command and argument sequence to execute.
        options: Options configuring execution semantics.

    Returns:
        CompletedProcess: Subprocess execution metadata.

    Raises:
        FileNotFoundError: If the executable cannot be resolved on ``PATH``.
        SubprocessExecutionError: When ``check`` is true and the process exits
            with a non-zero status.
    """

    resolved_options = options or CommandOptions()
    normalized = _normalize_args(args, cwd=resolved_options.cwd)

    try:
        completed: CompletedProcess[str] = subprocess.run(  # nosec B603 - controlled arguments, not user supplied
            normalized,
            cwd=str(resolved_options.cwd) if resolved_options.cwd is not None else None,
            env=dict(resolved_options.env) if resolved_options.env is not None else None,
            check=False,
            capture_output=resolved_options.capture_output,
            text=resolved_options.text,
            timeout=resolved_options.timeout,
            stdin=subprocess.DEVNULL if resolved_options.discard_stdin else None,
        )
    except subprocess.TimeoutExpired as exc:
        stdout = _ensure_text(exc.stdout) or ""
        stderr = _ensure_text(exc.stderr)
        timeout_value = resolved_options.timeout
        timeout_msg = (
            f"Command timed out after {timeout_value:.1f}s" if timeout_value is not None else "Command timed out"
        )
        combined_stderr = f"{stderr}\n{timeout_msg}" if stderr else timeout_msg
        completed = subprocess.CompletedProcess(
            args=list(normalized),
            returncode=TIMEOUT_RETURNCODE,
            stdout=stdout,
            stderr=combined_stderr,
        )

    if resolved_options.check and completed.returncode != 0:
        raise SubprocessExecutionError(
            normalized,
            completed.returncode,
            completed.stdout if isinstance(completed.stdout, str) else None,
            completed.stderr if isinstance(completed.stderr, str) else None,
        )

    return completed


def _feed_stdin(stream: IO[str], payload: str, state: _StreamState) -> None:
    """Write ``payload`` to the child's standard input and close it.

    A child that exits without reading its input closes the pipe early; that
    is recorded on ``state`` rather than raised.
    """

    try:
        stream.write(payload)
        stream.flush()
    except BrokenPipeError:
        state.stdin_closed_early = True
    finally:
        try:
            stream.close()
        except BrokenPipeError:
            state.stdin_closed_early = True


def _kill_process_tree(process: subprocess.Popen[str]) -> None:
    """Kill ``process`` and everything else in its session.

    Parsers are started as session leaders on POSIX, so descendants that still
    hold the output pipes die with them and the readers see end of file.
    """

    if _POSIX:
        try:
            os.killpg(process.pid, signal.SIGKILL)
        except ProcessLookupError:
            return
        except PermissionError:
            process.kill()
        return
    process.kill()


def _drain_stdout(stream: IO[str], state: _StreamState) -> None:
    """Read the child's standard output to completion."""

    for chunk in iter(lambda: stream.read(65536), ""):
        state.stdout_chunks.append(chunk)


def stream_command(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    stdin_text: str | None = None,
    on_stderr_line: StderrLineHandler | None = None,
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
) -> StreamedProcess:
    """Run ``args`` while forwarding each standard-error line as it arrives.

    Standard input receives ``stdin_text`` (or is closed immediately when
    ``None``), standard output is buffered in full, and standard error is read
    on the calling thread so ``on_stderr_line`` observes lines in arrival
    order. When ``timeout`` elapses the process is killed and the result is
    flagged as timed out.

    Args:
        args: Command and argument sequence to execute.
        cwd: Working directory for the child process.
        stdin_text: Text written to the child's standard input.
        on_stderr_line: Callback receiving each standard-error line without
            its trailing newline.
        timeout: Optional limit in seconds before the process is killed.
        env: Optional replacement environment.

    Returns:
        StreamedProcess: Exit status plus captured output.

    Raises:
        FileNotFoundError: If the executable cannot be resolved.
        OSError: If the operating system refuses to start the process.
    """

    normalized = _normalize_args(args, cwd=cwd)
    process = subprocess.Popen(  # nosec B603 - argument list, no shell
        normalized,
        cwd=str(cwd) if cwd is not None else None,
        env=dict(env) if env is not None else None,
        stdin=subprocess.PIPE if stdin_text is not None else subprocess.DEVNULL,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        encoding="utf-8",
        errors="replace",
        start_new_session=_POSIX,
    )
    state = _StreamState()
    helpers: list[threading.Thread] = []
    if stdin_text is not None and process.stdin is not None:
        helpers.append(
            threading.Thread(target=_feed_stdin, args=(process.stdin, stdin_text, state), daemon=True),
        )
    if process.stdout is not None:
        helpers.append(threading.Thread(target=_drain_stdout, args=(process.stdout, state), daemon=True))
    for helper in helpers:
        helper.start()

    timer: threading.Timer | None = None
    if timeout is not None:

        def _expire() -> None:
            state.timed_out = True
            _kill_process_tree(process)

        timer = threading.Timer(timeout, _expire)
        timer.daemon = True
        timer.start()

    stderr_lines: list[str] = []
    try:
        if process.stderr is not None:
            for raw in process.stderr:
                line = raw.rstrip("\r\n")
                stderr_lines.append(line)
                if on_stderr_line is not None:
                    on_stderr_line(line)
        returncode = process.wait()
    except BaseException:
        _kill_process_tree(process)
        process.wait()
        raise
    finally:
        if timer is not None:
            timer.cancel()
        for helper in helpers:
            helper.join()
        for stream in (process.stdout, process.stderr):
            if stream is not None:
                stream.close()

    return StreamedProcess(
        command=tuple(normalized),
        returncode=returncode,
        stdout="".join(state.stdout_chunks),
        stderr_lines=tuple(stderr_lines),
        timed_out=state.timed_out,
        stdin_closed_early=state.stdin_closed_early,
    )


__all__ = [
    "TIMEOUT_RETURNCODE",
    "CommandOptions",
    "StderrLineHandler",
    "StreamedProcess",
    "SubprocessExecutionError",
    "run_command",
    "stream_command",
]
