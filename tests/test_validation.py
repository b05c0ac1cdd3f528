# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for parser response validation."""

from __future__ import annotations

import pytest

from codelink.core.errors import SchemaValidationError
from codelink.core.models import CreateResponse, ParseResponse, RequestMode, ValidationIssueKind
from codelink.results.validation import classify_error_type, format_location, strip_union_tags, validate_response


def _doc(**overrides: object) -> dict[str, object]:
    payload: dict[str, object] = {
        "figmaNode": "https://figma.com/design/abc?node-id=1-1",
        "template": "tpl",
        "templateData": {},
        "language": "raw",
        "label": "Code",
    }
    payload.update(overrides)
    return payload


def test_valid_parse_response_is_typed() -> None:
    result = validate_response({"docs": [_doc()], "messages": [{"level": "INFO", "message": "ok"}]}, RequestMode.PARSE)

    assert isinstance(result, ParseResponse)
    assert result.docs[0].label == "Code"
    assert result.docs[0].source == ""


def test_all_violations_are_reported_together() -> None:
    document = _doc()
    del document["figmaNode"]
    del document["label"]

    with pytest.raises(SchemaValidationError) as excinfo:
        validate_response({"docs": [document], "messages": []}, RequestMode.PARSE)

    paths = [issue.path for issue in excinfo.value.issues]
    assert paths == ["docs[0].figmaNode", "docs[0].label"]
    assert all(issue.kind is ValidationIssueKind.REQUIRED for issue in excinfo.value.issues)
    assert str(excinfo.value) == (
        "Error returned from parser: Validation error: docs[0].figmaNode: Required; docs[0].label: Required"
    )


def test_wrong_types_and_values_are_classified() -> None:
    payload = {
        "docs": [_doc(sourceLocation={"line": "seven"})],
        "messages": [{"level": "FATAL", "message": "x"}],
    }

    with pytest.raises(SchemaValidationError) as excinfo:
        validate_response(payload, RequestMode.PARSE)

    described = {issue.path: issue.kind for issue in excinfo.value.issues}
    assert described["docs[0].sourceLocation.line"] is ValidationIssueKind.INVALID_TYPE
    assert described["messages[0].level"] is ValidationIssueKind.INVALID_VALUE



def test_union_member_errors_collapse_onto_the_field() -> None:
    payload = {"docs": [_doc(variant={"Size": ["large"]})], "messages": []}

    with pytest.raises(SchemaValidationError) as excinfo:
        validate_response(payload, RequestMode.PARSE)

    assert [(issue.path, issue.kind) for issue in excinfo.value.issues] == [
        ("docs[0].variant.Size", ValidationIssueKind.INVALID_TYPE)
    ]
    assert str(excinfo.value).endswith("docs[0].variant.Size: InvalidType")

def test_non_object_response_reports_root() -> None:
    with pytest.raises(SchemaValidationError) as excinfo:
        validate_response(["not", "an", "object"], RequestMode.PARSE)

    assert excinfo.value.issues[0].path == "response"
    assert excinfo.value.issues[0].kind is ValidationIssueKind.INVALID_TYPE


def test_create_response_requires_created_files() -> None:
    result = validate_response({"createdFiles": [{"filePath": "/out/Button.figma.tsx"}], "messages": []}, RequestMode.CREATE)
    assert isinstance(result, CreateResponse)
    assert result.created_files[0].file_path == "/out/Button.figma.tsx"

    with pytest.raises(SchemaValidationError, match="createdFiles: Required"):
        validate_response({"messages": []}, RequestMode.CREATE)


def test_format_location() -> None:
    assert format_location(()) == "response"
    assert format_location(("docs", 2, "language")) == "docs[2].language"
    assert format_location(("messages", 0, "sourceLocation", "file")) == "messages[0].sourceLocation.file"



def test_strip_union_tags() -> None:
    assert strip_union_tags(("docs", 0, "variant", "Size", "bool")) == ("docs", 0, "variant", "Size")
    assert strip_union_tags(("docs", 0, "list[str]", 1)) == ("docs", 0, 1)
    assert strip_union_tags(("str",)) == ("str",)
    assert strip_union_tags(("docs", 0, "label")) == ("docs", 0, "label")

@pytest.mark.parametrize(
    ("error_type", "expected"),
    [
        ("missing", ValidationIssueKind.REQUIRED),
        ("string_type", ValidationIssueKind.INVALID_TYPE),
        ("int_parsing", ValidationIssueKind.INVALID_TYPE),
        ("enum", ValidationIssueKind.INVALID_VALUE),
        ("literal_error", ValidationIssueKind.INVALID_VALUE),
        ("extra_forbidden", ValidationIssueKind.UNRECOGNIZED),
        ("value_error", ValidationIssueKind.INVALID),
    ],
)
def test_classify_error_type(error_type: str, expected: ValidationIssueKind) -> None:
    assert classify_error_type(error_type) is expected
