# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Console access for user-facing output."""

from __future__ import annotations

from .terminal import diagnostics_console, stderr_is_terminal

__all__ = ["diagnostics_console", "stderr_is_terminal"]
