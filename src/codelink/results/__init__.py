# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Result pipeline: aggregation, validation, deduplication and classification."""

from __future__ import annotations

from .aggregation import AggregatedOutput, aggregate_module_outputs, list_module_files
from .dedup import dedupe_documents, is_duplicate
from .outcome import OutcomeStatus, RunOutcome, classify_outcome, failure_outcome, surfaced_messages
from .validation import format_location, issues_from_errors, validate_response

__all__ = [
    "AggregatedOutput",
    "OutcomeStatus",
    "RunOutcome",
    "aggregate_module_outputs",
    "classify_outcome",
    "dedupe_documents",
    "failure_outcome",
    "format_location",
    "is_duplicate",
    "issues_from_errors",
    "list_module_files",
    "surfaced_messages",
    "validate_response",
]
