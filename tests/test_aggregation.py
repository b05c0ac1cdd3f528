# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for merging per-module parser responses."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from codelink.core.errors import MalformedModuleOutputError
from codelink.core.models import RequestMode
from codelink.results.aggregation import aggregate_module_outputs, list_module_files


def _write(directory: Path, name: str, payload: object) -> Path:
    path = directory / name
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_modules_are_concatenated_in_name_order(tmp_path: Path) -> None:
    _write(tmp_path, "b.json", {"docs": [{"figmaNode": "x"}], "messages": [{"level": "WARN", "message": "b"}]})
    _write(tmp_path, "a.json", {"docs": [{"figmaNode": "x"}, {"figmaNode": "y"}], "messages": []})

    aggregated = aggregate_module_outputs(tmp_path, RequestMode.PARSE)

    assert aggregated.modules == ("a.json", "b.json")
    assert [doc["figmaNode"] for doc in aggregated.payload["docs"]] == ["x", "y", "x"]
    assert aggregated.payload["messages"] == [{"level": "WARN", "message": "b"}]


def test_hidden_files_and_directories_are_ignored(tmp_path: Path) -> None:
    _write(tmp_path, "module.json", {"docs": [], "messages": []})
    (tmp_path / ".DS_Store").write_text("junk", encoding="utf-8")
    (tmp_path / "nested").mkdir()

    assert [path.name for path in list_module_files(tmp_path)] == ["module.json"]
    assert list_module_files(tmp_path / "missing") == []


def test_malformed_module_names_the_file(tmp_path: Path) -> None:
    _write(tmp_path, "a.json", {"docs": [], "messages": []})
    broken = tmp_path / "b.json"
    broken.write_text("{not json", encoding="utf-8")

    with pytest.raises(MalformedModuleOutputError) as excinfo:
        aggregate_module_outputs(tmp_path, RequestMode.PARSE)

    assert excinfo.value.path == broken
    assert str(broken) in str(excinfo.value)


def test_non_object_module_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, "a.json", [1, 2, 3])

    with pytest.raises(MalformedModuleOutputError, match="expected a JSON object"):
        aggregate_module_outputs(tmp_path, RequestMode.PARSE)


def test_non_array_field_is_rejected(tmp_path: Path) -> None:
    _write(tmp_path, "a.json", {"docs": {"figmaNode": "x"}, "messages": []})

    with pytest.raises(MalformedModuleOutputError, match="`docs` must be an array"):
        aggregate_module_outputs(tmp_path, RequestMode.PARSE)


def test_empty_directory_yields_empty_response(tmp_path: Path) -> None:
    aggregated = aggregate_module_outputs(tmp_path, RequestMode.PARSE)

    assert aggregated.payload == {"docs": [], "messages": []}
    assert aggregated.modules == ()


def test_create_mode_collects_created_files(tmp_path: Path) -> None:
    _write(tmp_path, "app.json", {"createdFiles": [{"filePath": "/out/A.kt"}]})
    _write(tmp_path, "lib.json", {"createdFiles": [{"filePath": "/out/B.kt"}], "messages": []})

    aggregated = aggregate_module_outputs(tmp_path, RequestMode.CREATE)

    assert aggregated.payload == {
        "createdFiles": [{"filePath": "/out/A.kt"}, {"filePath": "/out/B.kt"}],
        "messages": [],
    }
