# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Project configuration (``figma.config.json``) and per-run engine settings."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .. import __version__
from ..core.errors import ConfigError
from ..core.models import ParserKind

DEFAULT_CONFIG_FILE_NAME: Final[str] = "figma.config.json"
CONFIG_SECTION_KEY: Final[str] = "codeConnect"
TIMEOUT_ENV_VAR: Final[str] = "CODELINK_PARSER_TIMEOUT"


class ProjectConfig(BaseModel):
    """Parser-facing configuration read from the project's config file.

    Keys this package does not interpret are retained so they reach the parser
    unchanged in the request ``config`` blob.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )

    parser: ParserKind
    parser_command: str | None = None
    include: tuple[str, ...] | None = None
    exclude: tuple[str, ...] | None = None
    label: str | None = None
    language: str | None = None
    document_url_substitutions: dict[str, str] | None = None
    gradle_wrapper_path: str | None = None
    swift_package_path: str | None = None
    xcodeproj_path: str | None = None
    source_packages_path: str | None = None

    def to_request_config(self) -> dict[str, Any]:
        """Return the configuration blob handed to parsers.

        Returns:
            dict[str, Any]: Wire-named keys, including parser-specific keys
            this package does not model.
        """

        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def _timeout_from_env() -> float | None:
    raw = os.environ.get(TIMEOUT_ENV_VAR)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(f"{TIMEOUT_ENV_VAR} must be a number of seconds, got {raw!r}") from exc
    return value if value > 0 else None


class EngineSettings(BaseModel):
    """Per-run knobs supplied by the caller rather than the config file."""

    model_config = ConfigDict(frozen=True)

    cwd: Path = Field(default_factory=Path.cwd)
    verbose: bool = False
    timeout: float | None = Field(default_factory=_timeout_from_env)
    repository_url: str | None = None
    label: str | None = None
    cli_version: str = __version__
    use_emoji: bool = True

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        """Reject non-positive timeouts.

        Args:
            value: Timeout in seconds supplied by the caller.

        Returns:
            float | None: Validated timeout.

        Raises:
            ValueError: If ``value`` is zero or negative.
        """

        if value is not None and value <= 0:
            raise ValueError("timeout must be greater than zero")
        return value


def find_config_file(directory: Path) -> Path | None:
    """Return the default config file inside ``directory`` if it exists."""

    candidate = directory / DEFAULT_CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def _describe_config_errors(exc: ValidationError) -> str:
    parts: list[str] = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or CONFIG_SECTION_KEY
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def parse_project_config(document: Mapping[str, Any], *, source: str = "<config>") -> ProjectConfig:
    """Build a :class:`ProjectConfig` from a decoded config document.

    The ``codeConnect`` section is used when present; otherwise the document
    root is treated as the section itself.

    Args:
        document: Decoded JSON config document.
        source: Label used in error messages.

    Returns:
        ProjectConfig: Validated configuration.

    Raises:
        ConfigError: If the section is missing, malformed, or lacks a ``parser``.
    """

    section: Any = document.get(CONFIG_SECTION_KEY, document)
    if not isinstance(section, Mapping):
        raise ConfigError(f"No options specified under '{CONFIG_SECTION_KEY}' in config file: {source}")
    if "parser" not in section:
        raise ConfigError(f"No `parser` specified in config file: {source}")
    try:
        return ProjectConfig.model_validate(dict(section))
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {source}: {_describe_config_errors(exc)}") from exc


def load_project_config(path: Path) -> ProjectConfig:
    """Read and validate the config file at ``path``.

    Args:
        path: Location of the JSON config file.

    Returns:
        ProjectConfig: Validated configuration.

    Raises:
        ConfigError: If the file cannot be read or is not valid configuration.
    """

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc.strerror or exc}") from exc
    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Error parsing config file: {path} ({exc.msg})") from exc
    if not isinstance(document, Mapping):
        raise ConfigError(f"Error parsing config file: {path} (expected a JSON object)")
    return parse_project_config(document, source=str(path))


__all__ = [
    "CONFIG_SECTION_KEY",
    "DEFAULT_CONFIG_FILE_NAME",
    "TIMEOUT_ENV_VAR",
    "EngineSettings",
    "ProjectConfig",
    "find_config_file",
    "load_project_config",
    "parse_project_config",
]
