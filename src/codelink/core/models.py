# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Protocol data models exchanged between codelink and parser processes.

Every model uses snake_case attribute names in Python and camelCase names on
the wire, matching the JSON documents parsers read and write.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)
UNKNOWN_LINE = -1


class ParserKind(str, Enum):
    """Enumerate the parser identities a project may configure."""

    REACT = "react"
    HTML = "html"
    SWIFT = "swift"
    COMPOSE = "compose"
    CUSTOM = "custom"
    UNIT_TEST = "__unit_test__"


class RequestMode(str, Enum):
    """Enumerate the two request modes understood by parsers."""

    PARSE = "PARSE"
    CREATE = "CREATE"


class MessageLevel(str, Enum):
    """Severity levels a parser may attach to a message."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class WireModel(BaseModel):
    """Base model for immutable protocol entities with camelCase wire names."""

    model_config = _WIRE_CONFIG

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-compatible wire representation of the model.

        Returns:
            dict[str, Any]: Mapping keyed by wire names with ``None`` fields omitted.
        """

        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ---------------------------------------------------------------------------
# Requests


class ComponentPropertyType(str, Enum):
    """Enumerate design component property kinds."""

    BOOLEAN = "BOOLEAN"
    INSTANCE_SWAP = "INSTANCE_SWAP"
    TEXT = "TEXT"
    VARIANT = "VARIANT"


class ComponentType(str, Enum):
    """Enumerate the design node types a component descriptor may describe."""

    COMPONENT = "COMPONENT"
    COMPONENT_SET = "COMPONENT_SET"


class ComponentPropertyDefinition(WireModel):
    """Describe one property exposed by a design component."""

    type: ComponentPropertyType
    default_value: bool | str
    variant_options: tuple[str, ...] | None = None


class ComponentDescriptor(WireModel):
    """Design component information handed to parsers in create mode."""

    figma_node_url: str
    id: str
    name: str
    normalized_name: str
    type: ComponentType
    component_property_definitions: dict[str, ComponentPropertyDefinition] = Field(default_factory=dict)


class ParseRequest(WireModel):
    """Ask a parser to extract documents from ``paths``."""

    mode: Literal["PARSE"] = "PARSE"
    paths: tuple[str, ...]
    config: dict[str, Any]
    verbose: bool = False


class CreateRequest(WireModel):
    """Ask a parser to scaffold a source file for ``component``."""

    mode: Literal["CREATE"] = "CREATE"
    destination_dir: str
    component: ComponentDescriptor
    config: dict[str, Any]
    destination_file: str | None = None
    source_filepath: str | None = None
    source_export: str | None = None
    prop_mapping: dict[str, Any] | None = None
    verbose: bool = False


ParserRequest = Annotated[ParseRequest | CreateRequest, Field(discriminator="mode")]


# ---------------------------------------------------------------------------
# Responses


class MessageLocation(WireModel):
    """Optional source position attached to a parser message."""

    file: str
    line: int | None = None


class Message(WireModel):
    """Diagnostic message reported by a parser."""

    level: MessageLevel
    message: str
    type: str | None = None
    source_location: MessageLocation | None = None


class SourceLocation(WireModel):
    """Line information for a document's source; ``-1`` when unknown."""

    line: int = UNKNOWN_LINE


class DocumentLink(WireModel):
    """Named link shown alongside a document."""

    name: str
    url: str


class DocumentMetadata(WireModel):
    """Metadata stamped onto documents by codelink itself."""

    cli_version: str


class Document(WireModel):
    """One generated code example tied to a design node."""

    figma_node: str
    label: str
    language: str
    template: str
    template_data: dict[str, Any]
    component: str | None = None
    variant: dict[str, str | bool] | None = None
    source: str = ""
    source_location: SourceLocation = Field(default_factory=SourceLocation)
    links: tuple[DocumentLink, ...] | None = None
    metadata: DocumentMetadata | None = None

    @field_validator("source", mode="before")
    @classmethod
    def _default_source(cls, value: str | None) -> str | None:
        """Treat an explicit ``null`` source as an empty string.

        Args:
            value: Raw source value supplied by the parser.

        Returns:
            str | None: Empty string for ``None``; otherwise the value unchanged.
        """

        return "" if value is None else value

    @field_validator("source_location", mode="before")
    @classmethod
    def _default_location(cls, value: Any) -> Any:
        """Treat an explicit ``null`` location as an unknown line."""

        return {} if value is None else value

    @property
    def dedupe_key(self) -> tuple[str, str]:
        """Return the identity used to collapse duplicate documents.

        Returns:
            tuple[str, str]: ``(figma_node, template)`` pair.
        """

        return (self.figma_node, self.template)


class CreatedFile(WireModel):
    """File written by a parser in create mode."""

    file_path: str


class ParseResponse(WireModel):
    """Parser response for a :class:`ParseRequest`."""

    docs: tuple[Document, ...]
    messages: tuple[Message, ...]


class CreateResponse(WireModel):
    """Parser response for a :class:`CreateRequest`."""

    created_files: tuple[CreatedFile, ...]
    messages: tuple[Message, ...]


ParserResult = ParseResponse | CreateResponse


# ---------------------------------------------------------------------------
# Validation


class ValidationIssueKind(str, Enum):
    """Categorise a single field-level schema violation."""

    REQUIRED = "Required"
    INVALID_TYPE = "InvalidType"
    INVALID_VALUE = "InvalidValue"
    UNRECOGNIZED = "Unrecognized"
    INVALID = "Invalid"


class ValidationIssue(BaseModel):
    """Field-path addressed violation found in a parser response."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: ValidationIssueKind
    detail: str = ""

    def describe(self) -> str:
        """Return a short human-readable rendering of the issue.

        Returns:
            str: Text such as ``docs[0].figmaNode: Required``.
        """

        return f"{self.path}: {self.kind.value}"


__all__ = [
    "UNKNOWN_LINE",
    "ComponentDescriptor",
    "ComponentPropertyDefinition",
    "ComponentPropertyType",
    "ComponentType",
    "CreateRequest",
    "CreateResponse",
    "CreatedFile",
    "Document",
    "DocumentLink",
    "DocumentMetadata",
    "Message",
    "MessageLevel",
    "MessageLocation",
    "ParseRequest",
    "ParseResponse",
    "ParserKind",
    "ParserRequest",
    "ParserResult",
    "RequestMode",
    "SourceLocation",
    "ValidationIssue",
    "ValidationIssueKind",
    "WireModel",
]
