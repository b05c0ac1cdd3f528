# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Entry commands and known failure hints for first-party parser toolchains."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Final

from ..core.errors import ParserNotFoundError
from ..core.models import ParserKind, RequestMode

GRADLE_WRAPPER_NAME: Final[str] = "gradlew"
SWIFT_PARSER_PRODUCT: Final[str] = "figma-swift"
UNIT_TEST_COMMAND: Final[tuple[str, ...]] = ("node", "parser/unit_test_parser.js")

_COMPOSE_TASKS: Final[Mapping[RequestMode, str]] = {
    RequestMode.PARSE: "parseCodeConnect",
    RequestMode.CREATE: "createCodeConnect",
}

JAVA17_INCOMPATIBILITY: Final[str] = (
    "Incompatible because this component declares a component, compatible with Java 17 "
    "and the consumer needed a component"
)
JAVA17_SUGGESTION: Final[str] = (
    "Code Connect requires a minimum java version of Java 17, please update JAVA_HOME to point to "
    "a Java version that is greater or equal to 17"
)


def swift_command(cwd: Path, swift_package_path: str | None) -> tuple[str, ...]:
    """Return the ``swift run`` invocation for the Swift parser."""

    package_dir = (cwd / swift_package_path) if swift_package_path else cwd
    return ("swift", "run", "--package-path", str(package_dir), SWIFT_PARSER_PRODUCT)


def locate_gradle_wrapper(cwd: Path, gradle_wrapper_path: str | None) -> Path:
    """Return the path of the project's Gradle wrapper script.

    Args:
        cwd: Project working directory.
        gradle_wrapper_path: Configured wrapper location, relative to ``cwd``
            or absolute. It may name the script or its directory.

    Returns:
        Path: Absolute path of the wrapper script.

    Raises:
        ParserNotFoundError: If no wrapper exists at the expected location.
    """

    if gradle_wrapper_path:
        candidate = cwd / gradle_wrapper_path
        if candidate.is_dir():
            candidate = candidate / GRADLE_WRAPPER_NAME
    else:
        candidate = cwd / GRADLE_WRAPPER_NAME
    if not candidate.is_file():
        raise ParserNotFoundError(
            str(candidate),
            hint=(
                "Could not find the location of the gradlew in your project. You can specify the "
                "location of your gradlew file with the `gradleWrapperPath` config option."
            ),
        )
    return candidate.resolve()


def compose_command(
    wrapper: Path,
    mode: RequestMode,
    *,
    request_file: Path,
    output_dir: Path,
    verbose: bool,
) -> tuple[str, ...]:
    """Return the Gradle invocation for the Compose parser.

    Args:
        wrapper: Absolute path of the Gradle wrapper script.
        mode: Request mode selecting the Gradle task.
        request_file: File the serialised request was written to.
        output_dir: Directory each Gradle module writes its response into.
        verbose: Whether to ask Gradle for stack traces.

    Returns:
        tuple[str, ...]: Command arguments.
    """

    command = [
        str(wrapper),
        "-p",
        str(wrapper.parent),
        _COMPOSE_TASKS[mode],
        f"-PfilePath={request_file}",
    ]
    if verbose:
        command.append("--stacktrace")
    command.append(f"-PoutputDir={output_dir}")
    return tuple(command)


def error_suggestion(parser: ParserKind, stderr: str) -> str | None:
    """Return a remediation hint for a failed parser run, if one is known.

    Args:
        parser: Parser that failed.
        stderr: Everything the parser wrote to standard error.

    Returns:
        str | None: Suggestion text, or ``None`` when nothing matches.
    """

    if parser is ParserKind.COMPOSE and JAVA17_INCOMPATIBILITY in stderr:
        return JAVA17_SUGGESTION
    return None


__all__ = [
    "GRADLE_WRAPPER_NAME",
    "JAVA17_SUGGESTION",
    "UNIT_TEST_COMMAND",
    "compose_command",
    "error_suggestion",
    "locate_gradle_wrapper",
    "swift_command",
]
