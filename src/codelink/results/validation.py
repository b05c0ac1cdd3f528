# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema validation of untrusted parser responses."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Final

from pydantic import ValidationError

from ..core.errors import SchemaValidationError
from ..core.models import (
    CreateResponse,
    ParseResponse,
    ParserResult,
    RequestMode,
    ValidationIssue,
    ValidationIssueKind,
)

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

ROOT_LOCATION: Final[str] = "response"

# Union member tags pydantic appends to a location, e.g. ``str`` or ``list[str]``.
_SCALAR_UNION_TAGS: Final[frozenset[str]] = frozenset({"str", "int", "float", "bool", "bytes", "list", "dict", "tuple", "none"})
_PARAMETRISED_TAG_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z0-9_-]*\[.*\]$")

_RESPONSE_MODELS: Final[Mapping[RequestMode, type[ParseResponse] | type[CreateResponse]]] = {
    RequestMode.PARSE: ParseResponse,
    RequestMode.CREATE: CreateResponse,
}

_KIND_BY_ERROR_TYPE: Final[Mapping[str, ValidationIssueKind]] = {
    "missing": ValidationIssueKind.REQUIRED,
    "literal_error": ValidationIssueKind.INVALID_VALUE,
    "enum": ValidationIssueKind.INVALID_VALUE,
    "extra_forbidden": ValidationIssueKind.UNRECOGNIZED,
}


def format_location(loc: Sequence[int | str]) -> str:
    """Render a pydantic error location as a field path.

    Args:
        loc: Location tuple reported by pydantic.

    Returns:
        str: Path such as ``docs[2].language``; ``response`` for the root.
    """

    rendered = ""
    for part in loc:
        if isinstance(part, int):
            rendered = f"{rendered}[{part}]"
        else:
            rendered = f"{rendered}.{part}" if rendered else str(part)
    return rendered or ROOT_LOCATION


def strip_union_tags(loc: Sequence[int | str]) -> tuple[int | str, ...]:
    """Remove the union member tags pydantic adds to error locations.

    A value failing every member of a union is reported once per member, each
    location ending in that member's tag. Dropping the tags lets those errors
    collapse onto the field path the parser actually wrote.

    Args:
        loc: Location tuple reported by pydantic.

    Returns:
        tuple[int | str, ...]: Location without member tags.
    """

    parts = [part for part in loc if not (isinstance(part, str) and _PARAMETRISED_TAG_RE.match(part))]
    if len(parts) > 1 and isinstance(parts[-1], str) and parts[-1] in _SCALAR_UNION_TAGS:
        parts.pop()
    return tuple(parts)


def classify_error_type(error_type: str) -> ValidationIssueKind:
    """Map a pydantic error type onto a :class:`ValidationIssueKind`."""

    if error_type in _KIND_BY_ERROR_TYPE:
        return _KIND_BY_ERROR_TYPE[error_type]
    if error_type.endswith(("_type", "_parsing")):
        return ValidationIssueKind.INVALID_TYPE
    return ValidationIssueKind.INVALID


def issues_from_errors(errors: Iterable[ErrorDetails]) -> tuple[ValidationIssue, ...]:
    """Convert pydantic error details into ordered, unique validation issues.

    Args:
        errors: Error details from :meth:`pydantic.ValidationError.errors`.

    Returns:
        tuple[ValidationIssue, ...]: One issue per distinct path and kind.
    """

    issues: list[ValidationIssue] = []
    seen: set[tuple[str, ValidationIssueKind]] = set()
    for error in errors:
        path = format_location(strip_union_tags(error["loc"]))
        kind = classify_error_type(error["type"])
        if (path, kind) in seen:
            continue
        seen.add((path, kind))
        issues.append(ValidationIssue(path=path, kind=kind, detail=error["msg"]))
    return tuple(issues)


def validate_response(payload: Any, mode: RequestMode) -> ParserResult:
    """Validate ``payload`` against the response schema for ``mode``.

    Every violation is collected before failing, so one error reports all of
    them together.

    Args:
        payload: Decoded JSON response from a parser.
        mode: Mode of the request the response answers.

    Returns:
        ParserResult: Typed response.

    Raises:
        SchemaValidationError: If the payload does not match the schema.
    """

    model = _RESPONSE_MODELS[mode]
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise SchemaValidationError(issues_from_errors(exc.errors())) from exc


__all__ = [
    "ROOT_LOCATION",
    "classify_error_type",
    "format_location",
    "issues_from_errors",
    "strip_union_tags",
    "validate_response",
]
