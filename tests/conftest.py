# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import shlex
import sys
import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from codelink.core.models import Document
from codelink.project.config import ProjectConfig


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper writing a dedented Python script under ``tmp_path``."""

    def _write(source: str, name: str = "parser.py") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(source).lstrip(), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def python_command() -> Callable[..., str]:
    """Return a helper rendering a ``parserCommand`` that runs a script with this interpreter."""

    def _command(script: Path, *args: str) -> str:
        return shlex.join([sys.executable, str(script), *args])

    return _command


@pytest.fixture
def make_document() -> Callable[..., Document]:
    """Return a factory for valid documents; keyword overrides use wire names."""

    def _make(figma_node: str = "https://figma.com/design/abc?node-id=1-1", **overrides: Any) -> Document:
        payload: dict[str, Any] = {
            "figmaNode": figma_node,
            "template": "figma.code`<Button />`",
            "templateData": {"props": {}},
            "language": "raw",
            "label": "React",
            "source": "",
            "sourceLocation": {"line": -1},
        }
        payload.update(overrides)
        return Document.model_validate(payload)

    return _make


@pytest.fixture
def custom_config() -> Callable[..., ProjectConfig]:
    """Return a factory for ``custom`` parser configurations."""

    def _config(
        command: str | None,
        *,
        include: tuple[str, ...] | None = ("*.test",),
        **extra: Any,
    ) -> ProjectConfig:
        payload: dict[str, Any] = {"parser": "custom", **extra}
        if command is not None:
            payload["parserCommand"] = command
        if include is not None:
            payload["include"] = list(include)
        return ProjectConfig.model_validate(payload)

    return _config


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Return a project directory holding two ``.test`` source files."""

    root = tmp_path / "project"
    root.mkdir()
    (root / "A.test").write_text("a", encoding="utf-8")
    (root / "B.test").write_text("b", encoding="utf-8")
    return root


@pytest.fixture
def echo_parser(write_script: Callable[..., Path]) -> Path:
    """Return a parser answering with one document per requested path."""

    return write_script(
        """
        import json
        import os
        import sys

        request = json.load(sys.stdin)
        docs = [
            {
                "figmaNode": os.path.basename(path),
                "template": "{...}",
                "language": "test",
                "label": "Test",
                "templateData": {},
                "source": os.path.basename(path),
                "sourceLocation": {"line": -1},
            }
            for path in request["paths"]
        ]
        json.dump({"docs": docs, "messages": [{"level": "INFO", "message": "Success"}]}, sys.stdout)
        """,
        name="echo_parser.py",
    )
