# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Project helpers: configuration, request payloads and repository links."""

from __future__ import annotations

from .config import EngineSettings, ProjectConfig, find_config_file, load_project_config, parse_project_config
from .payload import build_create_request, build_parse_request, discover_files, project_files, resolve_globs
from .repository import RepositoryInfo, detect_repository, remote_file_url

__all__ = [
    "EngineSettings",
    "ProjectConfig",
    "RepositoryInfo",
    "build_create_request",
    "build_parse_request",
    "detect_repository",
    "discover_files",
    "find_config_file",
    "load_project_config",
    "parse_project_config",
    "project_files",
    "remote_file_url",
    "resolve_globs",
]
