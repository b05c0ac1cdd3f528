# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Parser execution and aggregation engine.

One engine call builds a request, invokes the configured parser, validates
and deduplicates what it returns, and classifies the run. Every failure is
converted into a :class:`~codelink.results.outcome.RunOutcome` at this
boundary; callers never see partial results from a failed run.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from .core.errors import CodelinkError
from .core.models import (
    ComponentDescriptor,
    CreateRequest,
    Document,
    Message,
    MessageLevel,
    ParseRequest,
    ParseResponse,
    RequestMode,
)
from .documents import finalize_documents
from .parsers.invoker import invoke_parser
from .project.config import EngineSettings, ProjectConfig
from .project.payload import LARGE_FILE_SET_THRESHOLD, build_create_request, build_parse_request
from .project.repository import RepositoryInfo, detect_repository
from .reporting import MessageCollector, MessageReporter
from .results.dedup import dedupe_documents
from .results.outcome import RunOutcome, classify_outcome, failure_outcome
from .results.validation import validate_response

RepositoryLookup = Callable[..., RepositoryInfo | None]


class ParserEngine:
    """Run parse and create requests for one project."""

    def __init__(
        self,
        config: ProjectConfig,
        settings: EngineSettings | None = None,
        *,
        reporter: MessageReporter | None = None,
        repository_lookup: RepositoryLookup = detect_repository,
        workspace_dir: Path | None = None,
    ) -> None:
        """Create an engine bound to ``config``.

        Args:
            config: Project configuration naming the parser.
            settings: Per-run settings; defaults are used when omitted.
            reporter: Console reporter for parser messages.
            repository_lookup: Callable describing the project's git
                repository, used to link document sources.
            workspace_dir: Optional parent directory for invocation workspaces.
        """

        self.config = config
        self.settings = settings or EngineSettings()
        self.reporter = reporter or MessageReporter(
            verbose=self.settings.verbose,
            use_emoji=self.settings.use_emoji,
        )
        self._repository_lookup = repository_lookup
        self._workspace_dir = workspace_dir

    def parse(self) -> RunOutcome:
        """Extract documents from the project's matching files.

        Returns:
            RunOutcome: Deduplicated, finalised documents on success.
        """

        collector = MessageCollector(sink=self.reporter)
        try:
            request = build_parse_request(self.config, self.settings.cwd, verbose=self.settings.verbose)
            if len(request.paths) > LARGE_FILE_SET_THRESHOLD:
                self.reporter.log(
                    MessageLevel.WARN,
                    f"Matching number of files was excessively large ({len(request.paths)}) - consider using "
                    "more specific include/exclude globs in your config file.",
                )
            return self._execute(request, collector)
        except CodelinkError as exc:
            return failure_outcome(exc, collector.messages)

    def create(
        self,
        component: ComponentDescriptor,
        destination_dir: Path,
        *,
        destination_file: str | None = None,
        source_filepath: str | None = None,
        source_export: str | None = None,
        prop_mapping: Mapping[str, Any] | None = None,
    ) -> RunOutcome:
        """Ask the parser to scaffold a source file for ``component``.

        Args:
            component: Design component to connect.
            destination_dir: Directory the parser should write into.
            destination_file: Optional file name for the created file.
            source_filepath: Optional existing source file to connect.
            source_export: Optional export within ``source_filepath``.
            prop_mapping: Optional design-property to code-property mapping.

        Returns:
            RunOutcome: Created files on success.
        """

        collector = MessageCollector(sink=self.reporter)
        try:
            request = build_create_request(
                self.config,
                component,
                destination_dir,
                destination_file=destination_file,
                source_filepath=source_filepath,
                source_export=source_export,
                prop_mapping=prop_mapping,
                verbose=self.settings.verbose,
            )
            return self._execute(request, collector)
        except CodelinkError as exc:
            return failure_outcome(exc, collector.messages)

    def _execute(self, request: ParseRequest | CreateRequest, collector: MessageCollector) -> RunOutcome:
        invocation = invoke_parser(
            self.config,
            request,
            cwd=self.settings.cwd,
            verbose=self.settings.verbose,
            timeout=self.settings.timeout,
            on_message=collector,
            on_log=self.reporter.log,
            workspace_dir=self._workspace_dir,
        )
        result = validate_response(invocation.payload, RequestMode(request.mode))
        for message in result.messages:
            collector(message)
        messages: tuple[Message, ...] = tuple(collector.messages)

        if isinstance(result, ParseResponse):
            result = result.model_copy(update={"docs": dedupe_documents(result.docs)})
        outcome = classify_outcome(result, messages)
        if not outcome.succeeded or not isinstance(result, ParseResponse):
            return outcome
        return dataclasses.replace(outcome, documents=self._finalize(outcome))

    def _finalize(self, outcome: RunOutcome) -> tuple[Document, ...]:
        label = self.settings.label or self.config.label
        if label:
            self.reporter.log(MessageLevel.INFO, f'Using label "{label}"')
        repository = self._repository_lookup(self.settings.cwd, remote_url=self.settings.repository_url)
        return finalize_documents(
            outcome.documents,
            cwd=self.settings.cwd,
            cli_version=self.settings.cli_version,
            repository=repository,
            substitutions=self.config.document_url_substitutions,
            label=label,
        )


__all__ = ["ParserEngine", "RepositoryLookup"]
