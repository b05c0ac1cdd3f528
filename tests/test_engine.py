# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""End-to-end tests for the parser engine."""

from __future__ import annotations

import sys
import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from codelink.core.models import ComponentDescriptor, ComponentType, MessageLevel, ParserKind
from codelink.engine import ParserEngine
from codelink.parsers.strategies import register_in_process_parser, unregister_in_process_parser
from codelink.project.config import EngineSettings, ProjectConfig
from codelink.project.repository import RepositoryInfo
from codelink.reporting import MessageReporter
from codelink.results.outcome import OutcomeStatus


def _no_repository(*_args: Any, **_kwargs: Any) -> None:
    return None


def _engine(config: ProjectConfig, cwd: Path, **settings: Any) -> ParserEngine:
    return ParserEngine(
        config,
        EngineSettings(cwd=cwd, timeout=30, cli_version="9.9.9", **settings),
        reporter=MessageReporter(use_emoji=False, use_color=False),
        repository_lookup=_no_repository,
    )


def test_echo_parser_documents_are_returned_unchanged(
    project_dir: Path,
    echo_parser: Path,
    python_command: Callable[..., str],
    custom_config: Callable[..., ProjectConfig],
) -> None:
    config = custom_config(python_command(echo_parser))

    outcome = _engine(config, project_dir).parse()

    assert outcome.status is OutcomeStatus.SUCCESS
    assert outcome.warnings == ()
    payloads = [document.to_payload() for document in outcome.documents]
    for payload in payloads:
        assert payload.pop("metadata") == {"cliVersion": "9.9.9"}
    assert payloads == [
        {
            "figmaNode": name,
            "template": "{...}",
            "language": "test",
            "label": "Test",
            "templateData": {},
            "source": name,
            "sourceLocation": {"line": -1},
        }
        for name in ("A.test", "B.test")
    ]
    assert [(m.level, m.message) for m in outcome.messages] == [(MessageLevel.INFO, "Success")]


def test_custom_parser_without_include_never_spawns(
    project_dir: Path,
    tmp_path: Path,
    write_script: Callable[..., Path],
    python_command: Callable[..., str],
    custom_config: Callable[..., ProjectConfig],
) -> None:
    marker = tmp_path / "spawned"
    script = write_script(f"open({str(marker)!r}, 'w').close()\n")
    config = custom_config(python_command(script), include=None)

    outcome = _engine(config, project_dir).parse()

    assert outcome.status is OutcomeStatus.FAILURE
    assert outcome.error_kind == "ConfigError"
    assert "`include`" in (outcome.error or "")
    assert not marker.exists()


def test_error_message_fails_the_run_and_keeps_messages(
    project_dir: Path,
    write_script: Callable[..., Path],
    python_command: Callable[..., str],
    custom_config: Callable[..., ProjectConfig],
) -> None:
    script = write_script(
        """
        import json
        import sys

        print("warming up", file=sys.stderr, flush=True)
        doc = {"figmaNode": "n", "template": "t", "templateData": {}, "language": "raw", "label": "L"}
        json.dump({"docs": [doc], "messages": [{"level": "ERROR", "message": "Could not resolve prop"}]}, sys.stdout)
        """
    )
    config = custom_config(python_command(script))

    outcome = _engine(config, project_dir).parse()

    assert outcome.status is OutcomeStatus.FAILURE
    assert outcome.documents == ()
    assert outcome.error_kind == "ParserReportedError"
    assert outcome.error is not None and outcome.error.startswith("Could not resolve prop")
    assert [m.message for m in outcome.messages] == ["warming up", "Could not resolve prop"]


def test_schema_violation_fails_with_every_issue(
    project_dir: Path,
    write_script: Callable[..., Path],
    python_command: Callable[..., str],
    custom_config: Callable[..., ProjectConfig],
) -> None:
    script = write_script(
        """
        import json
        import sys

        json.dump({"docs": [{"template": "t", "templateData": {}, "language": "raw"}], "messages": []}, sys.stdout)
        """
    )
    config = custom_config(python_command(script))

    outcome = _engine(config, project_dir).parse()

    assert outcome.status is OutcomeStatus.FAILURE
    assert outcome.error_kind == "SchemaValidationFailed"
    assert outcome.error == (
        "Error returned from parser: Validation error: docs[0].figmaNode: Required; docs[0].label: Required"
    )


def test_nonzero_exit_with_valid_response_is_classified_by_messages(
    project_dir: Path,
    write_script: Callable[..., Path],
    python_command: Callable[..., str],
    custom_config: Callable[..., ProjectConfig],
) -> None:
    script = write_script(
        """
        import json
        import sys

        json.dump({"docs": [], "messages": [{"level": "WARN", "message": "partial"}]}, sys.stdout)
        sys.exit(1)
        """
    )
    config = custom_config(python_command(script))

    outcome = _engine(config, project_dir).parse()

    assert outcome.status is OutcomeStatus.SUCCESS_WITH_WARNINGS
    assert outcome.exit_code == 0


def test_duplicates_collapse_and_documents_are_finalised(
    project_dir: Path,
    write_script: Callable[..., Path],
    python_command: Callable[..., str],
    custom_config: Callable[..., ProjectConfig],
) -> None:
    script = write_script(
        """
        import json
        import sys

        base = {"template": "t", "templateData": {}, "language": "raw", "source": "src/Button.tsx"}
        docs = [
            dict(base, figmaNode="<ROOT>?node-id=1-1", label="React"),
            dict(base, figmaNode="<ROOT>?node-id=1-1", label="Storybook"),
            dict(base, figmaNode="<ROOT>?node-id=1-1", label="React", template="t2"),
        ]
        json.dump({"docs": docs, "messages": []}, sys.stdout)
        """
    )
    config = custom_config(
        python_command(script),
        label="Web",
        documentUrlSubstitutions={"<ROOT>": "https://figma.com/design/abc"},
    )
    lookups: list[dict[str, Any]] = []

    def lookup(directory: Path, **kwargs: Any) -> RepositoryInfo:
        lookups.append({"directory": directory, **kwargs})
        return RepositoryInfo(remote_url="git@github.com:acme/widgets.git", root=project_dir, default_branch="main")

    engine = ParserEngine(
        config,
        EngineSettings(cwd=project_dir, timeout=30, label="Override"),
        reporter=MessageReporter(use_emoji=False, use_color=False),
        repository_lookup=lookup,
    )

    outcome = engine.parse()

    assert outcome.status is OutcomeStatus.SUCCESS
    assert [(doc.template, doc.label) for doc in outcome.documents] == [("t", "Override"), ("t2", "Override")]
    assert {doc.figma_node for doc in outcome.documents} == {"https://figma.com/design/abc?node-id=1-1"}
    assert {doc.source for doc in outcome.documents} == {
        "https://github.com/acme/widgets/blob/main/src/Button.tsx"
    }
    assert lookups == [{"directory": project_dir, "remote_url": None}]


@pytest.mark.skipif(sys.platform == "win32", reason="requires POSIX process semantics")
def test_compose_modules_are_merged_then_deduplicated(tmp_path: Path) -> None:
    project = tmp_path / "android"
    project.mkdir()
    (project / "Button.kt").write_text("", encoding="utf-8")
    wrapper = project / "gradlew"
    wrapper.write_text(
        textwrap.dedent(
            f"""\
            #!{sys.executable}
            import json
            import sys
            from pathlib import Path

            args = dict(arg[2:].split("=", 1) for arg in sys.argv[1:] if arg.startswith("-P"))
            output = Path(args["outputDir"])
            shared = {{"figmaNode": "n", "template": "t", "templateData": {{}}, "language": "kotlin", "label": "Compose"}}
            extra = dict(shared, figmaNode="m")
            (output / "app.json").write_text(json.dumps({{"docs": [shared], "messages": []}}))
            (output / "lib.json").write_text(json.dumps({{"docs": [shared, extra], "messages": []}}))
            """
        ),
        encoding="utf-8",
    )
    wrapper.chmod(0o755)
    workspaces = tmp_path / "workspaces"
    workspaces.mkdir()
    engine = ParserEngine(
        ProjectConfig(parser=ParserKind.COMPOSE),
        EngineSettings(cwd=project, timeout=30),
        reporter=MessageReporter(use_emoji=False, use_color=False),
        repository_lookup=_no_repository,
        workspace_dir=workspaces,
    )

    outcome = engine.parse()

    assert outcome.status is OutcomeStatus.SUCCESS
    assert [doc.figma_node for doc in outcome.documents] == ["n", "m"]
    assert list(workspaces.iterdir()) == []


def test_create_returns_created_files(
    tmp_path: Path,
    write_script: Callable[..., Path],
    python_command: Callable[..., str],
    custom_config: Callable[..., ProjectConfig],
) -> None:
    script = write_script(
        """
        import json
        import os
        import sys

        request = json.load(sys.stdin)
        assert request["mode"] == "CREATE"
        target = os.path.join(request["destinationDir"], request["component"]["normalizedName"] + ".figma.test")
        json.dump({"createdFiles": [{"filePath": target}], "messages": []}, sys.stdout)
        """
    )
    config = custom_config(python_command(script))
    component = ComponentDescriptor(
        figma_node_url="https://figma.com/design/abc?node-id=1-1",
        id="1:1",
        name="Primary Button",
        normalized_name="PrimaryButton",
        type=ComponentType.COMPONENT,
    )

    outcome = _engine(config, tmp_path).create(component, tmp_path)

    assert outcome.status is OutcomeStatus.SUCCESS
    assert [created.file_path for created in outcome.created_files] == [
        str(tmp_path.resolve() / "PrimaryButton.figma.test")
    ]
    assert outcome.documents == ()


def test_unreadable_output_fails_without_documents(
    project_dir: Path,
    write_script: Callable[..., Path],
    python_command: Callable[..., str],
    custom_config: Callable[..., ProjectConfig],
) -> None:
    script = write_script(
        """
        import sys

        print("Traceback: kaboom", file=sys.stderr)
        sys.exit(2)
        """
    )
    config = custom_config(python_command(script))

    outcome = _engine(config, project_dir).parse()

    assert outcome.status is OutcomeStatus.FAILURE
    assert outcome.error_kind == "MalformedResponse"
    assert (outcome.error or "").startswith("Parser exited with code 2")
    assert [m.message for m in outcome.messages] == ["Traceback: kaboom"]


def test_raising_in_process_parser_becomes_a_failure(tmp_path: Path) -> None:
    def handler(payload: dict[str, Any], cwd: Path) -> dict[str, Any]:
        raise ValueError("parser blew up")

    register_in_process_parser(ParserKind.REACT, handler)
    try:
        outcome = _engine(ProjectConfig(parser=ParserKind.REACT), tmp_path).parse()
    finally:
        unregister_in_process_parser(ParserKind.REACT)

    assert outcome.status is OutcomeStatus.FAILURE
    assert outcome.error_kind == "ParserFailed"
    assert "ValueError: parser blew up" in (outcome.error or "")
    assert outcome.documents == ()
