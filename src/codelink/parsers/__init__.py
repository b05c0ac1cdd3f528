# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser invocation: strategies, toolchain commands and the invoker."""

from __future__ import annotations

from .invoker import InvocationResult, invoke_parser, message_from_stderr_line
from .strategies import (
    InvocationKind,
    InvocationPlan,
    OutputChannel,
    RequestChannel,
    register_in_process_parser,
    strategy_for,
    unregister_in_process_parser,
)
from .workspace import InvocationWorkspace

__all__ = [
    "InvocationKind",
    "InvocationPlan",
    "InvocationResult",
    "InvocationWorkspace",
    "OutputChannel",
    "RequestChannel",
    "invoke_parser",
    "message_from_stderr_line",
    "register_in_process_parser",
    "strategy_for",
    "unregister_in_process_parser",
]
