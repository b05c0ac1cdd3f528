# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Error taxonomy shared by the parser engine and the CLI."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Final

from .models import Message, ValidationIssue

ERRORS_ENCOUNTERED_NOTICE: Final[str] = "Errors encountered calling parser, exiting"
ISSUE_SEPARATOR: Final[str] = "; "


class CodelinkError(RuntimeError):
    """Base class for failures that terminate a parser invocation."""

    kind: str = "error"

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a display message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status the CLI should use for this failure.
        """

        super().__init__(message)
        self.exit_code = exit_code

    @property
    def user_message(self) -> str:
        """Return the message suitable for direct display.

        Returns:
            str: Display text for the failure.
        """

        return str(self)


class ConfigError(CodelinkError):
    """Raised when project configuration is missing or invalid."""

    kind = "ConfigError"


class ParserNotFoundError(CodelinkError):
    """Raised when the parser executable or in-process handler cannot be resolved."""

    kind = "ParserNotFound"

    def __init__(self, executable: str, *, hint: str | None = None) -> None:
        message = f"Parser executable '{executable}' could not be found"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)
        self.executable = executable


class SpawnError(CodelinkError):
    """Raised when the operating system refuses to start the parser process."""

    kind = "SpawnError"

    def __init__(self, command: Sequence[str], cause: OSError) -> None:
        super().__init__(f"Failed to start parser '{command[0]}': {cause.strerror or cause}")
        self.command = tuple(command)


class ParserFailedError(CodelinkError):
    """Raised when an in-process parser raises instead of returning a response."""

    kind = "ParserFailed"

    def __init__(self, parser: str, cause: BaseException) -> None:
        super().__init__(f"Parser '{parser}' failed: {type(cause).__name__}: {cause}")
        self.parser = parser


class ProcessAbortedError(CodelinkError):
    """Raised when the parser was killed by a signal or exceeded its timeout."""

    kind = "ProcessAborted"

    def __init__(self, command: Sequence[str], reason: str, *, returncode: int | None = None) -> None:
        super().__init__(f"Parser '{command[0]}' was aborted: {reason}")
        self.command = tuple(command)
        self.returncode = returncode


class MalformedOutputError(CodelinkError):
    """Raised when parser output cannot be decoded as a JSON response."""

    kind = "MalformedOutput"


class MalformedModuleOutputError(MalformedOutputError):
    """Raised when one per-module response file is not a usable JSON object."""

    kind = "MalformedModuleOutput"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read parser output file {path}: {reason}")
        self.path = path


class MalformedResponseError(MalformedOutputError):
    """Raised when the parser's standard output is not a usable JSON response."""

    kind = "MalformedResponse"

    def __init__(self, reason: str, *, returncode: int | None = None, suggestion: str | None = None) -> None:
        if returncode:
            message = f"Parser exited with code {returncode}"
            if suggestion:
                message = f"{message}: {suggestion}"
            message = f"{message} ({reason})"
        else:
            message = f"Error returned from parser: {reason}"
        super().__init__(message)
        self.returncode = returncode
        self.suggestion = suggestion


class SchemaValidationError(CodelinkError):
    """Raised when a parser response violates the response schema.

    All violations found in the response are carried together so they can be
    reported as one failure.
    """

    kind = "SchemaValidationFailed"

    def __init__(self, issues: Sequence[ValidationIssue]) -> None:
        self.issues = tuple(issues)
        joined = ISSUE_SEPARATOR.join(issue.describe() for issue in self.issues)
        super().__init__(f"Error returned from parser: Validation error: {joined}")


class ParserReportedError(CodelinkError):
    """Raised when a parser reports at least one ``ERROR`` level message."""

    kind = "ParserReportedError"

    def __init__(self, messages: Sequence[Message]) -> None:
        self.messages = tuple(messages)
        lines = [message.message for message in self.messages]
        lines.append(ERRORS_ENCOUNTERED_NOTICE)
        super().__init__("\n".join(lines))


__all__ = [
    "ERRORS_ENCOUNTERED_NOTICE",
    "ISSUE_SEPARATOR",
    "CodelinkError",
    "ConfigError",
    "MalformedModuleOutputError",
    "MalformedOutputError",
    "MalformedResponseError",
    "ParserFailedError",
    "ParserNotFoundError",
    "ParserReportedError",
    "ProcessAbortedError",
    "SchemaValidationError",
    "SpawnError",
]
