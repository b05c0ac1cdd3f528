# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Reduce a run's result and diagnostics to one terminal outcome."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from ..core.errors import CodelinkError, ParserReportedError
from ..core.models import CreatedFile, CreateResponse, Document, Message, MessageLevel, ParseResponse, ParserResult


class OutcomeStatus(str, Enum):
    """Terminal state of one engine run."""

    SUCCESS = "success"
    SUCCESS_WITH_WARNINGS = "success-with-warnings"
    FAILURE = "failure"


@dataclass(slots=True, frozen=True)
class RunOutcome:
    """Typed result handed back to the caller of the engine.

    A failed outcome never carries documents or created files; the messages
    collected up to the failure are still included.
    """

    status: OutcomeStatus
    documents: tuple[Document, ...] = ()
    created_files: tuple[CreatedFile, ...] = ()
    messages: tuple[Message, ...] = ()
    error: str | None = None
    error_kind: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is not OutcomeStatus.FAILURE

    @property
    def exit_code(self) -> int:
        """Return the process exit status a CLI should use for this outcome."""

        return 0 if self.succeeded else 1

    @property
    def warnings(self) -> tuple[Message, ...]:
        return tuple(message for message in self.messages if message.level is MessageLevel.WARN)


def failure_outcome(error: CodelinkError, messages: Iterable[Message] = ()) -> RunOutcome:
    """Return a failed outcome describing ``error``.

    Args:
        error: Terminal failure raised during the run.
        messages: Diagnostics collected before the failure.

    Returns:
        RunOutcome: Failure carrying the error text and no results.
    """

    return RunOutcome(
        status=OutcomeStatus.FAILURE,
        messages=tuple(messages),
        error=error.user_message,
        error_kind=error.kind,
    )


def classify_outcome(result: ParserResult, messages: Sequence[Message]) -> RunOutcome:
    """Decide the terminal state of a run whose response validated.

    Any ``ERROR`` message fails the run even when the documents are well
    formed. ``WARN`` messages downgrade success to success-with-warnings;
    ``INFO`` and ``DEBUG`` never affect the outcome.

    Args:
        result: Validated, deduplicated parser result.
        messages: Complete message stream for the run in arrival order.

    Returns:
        RunOutcome: Classified outcome.
    """

    errors = [message for message in messages if message.level is MessageLevel.ERROR]
    if errors:
        return failure_outcome(ParserReportedError(errors), messages)

    has_warnings = any(message.level is MessageLevel.WARN for message in messages)
    status = OutcomeStatus.SUCCESS_WITH_WARNINGS if has_warnings else OutcomeStatus.SUCCESS
    documents: tuple[Document, ...] = result.docs if isinstance(result, ParseResponse) else ()
    created: tuple[CreatedFile, ...] = result.created_files if isinstance(result, CreateResponse) else ()
    return RunOutcome(status=status, documents=documents, created_files=created, messages=tuple(messages))


def surfaced_messages(messages: Iterable[Message], *, verbose: bool) -> tuple[Message, ...]:
    """Return the messages a user should see, hiding ``DEBUG`` unless verbose."""

    return tuple(message for message in messages if verbose or message.level is not MessageLevel.DEBUG)


__all__ = [
    "OutcomeStatus",
    "RunOutcome",
    "classify_outcome",
    "failure_outcome",
    "surfaced_messages",
]
