# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Invocation-scoped temporary directory used for filesystem IPC with parsers."""

from __future__ import annotations

import shutil
import tempfile
import uuid
from pathlib import Path
from types import TracebackType
from typing import Final

REQUEST_FILE_NAME: Final[str] = "request.json"
MODULE_OUTPUT_DIR_NAME: Final[str] = "parser-output"


class InvocationWorkspace:
    """Own the temporary directory shared with one parser process.

    The directory name embeds a fresh run identifier so concurrent engine
    invocations in the same environment never collide. The tree is created on
    ``__enter__`` and removed on every exit path.
    """

    def __init__(self, *, base_dir: Path | None = None) -> None:
        self.run_id = uuid.uuid4().hex
        self._base_dir = base_dir
        self._root: Path | None = None

    @property
    def root(self) -> Path:
        """Return the workspace root, failing when the workspace is not active."""

        if self._root is None:
            raise RuntimeError("InvocationWorkspace used outside of its context")
        return self._root

    @property
    def request_file(self) -> Path:
        """Return the path a file-based request is written to."""

        return self.root / REQUEST_FILE_NAME

    @property
    def module_output_dir(self) -> Path:
        """Return the directory parsers write per-module responses into."""

        return self.root / MODULE_OUTPUT_DIR_NAME

    def write_request(self, payload: str) -> Path:
        """Write ``payload`` to :attr:`request_file` and return its path.

        Args:
            payload: Serialised request document.

        Returns:
            Path: Location of the written request file.
        """

        self.request_file.write_text(payload, encoding="utf-8")
        return self.request_file

    def __enter__(self) -> InvocationWorkspace:
        base = str(self._base_dir) if self._base_dir is not None else None
        self._root = Path(tempfile.mkdtemp(prefix=f"codelink-{self.run_id}-", dir=base))
        self.module_output_dir.mkdir()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        """Remove the workspace tree if it still exists."""

        if self._root is not None:
            shutil.rmtree(self._root, ignore_errors=True)
            self._root = None


__all__ = ["MODULE_OUTPUT_DIR_NAME", "REQUEST_FILE_NAME", "InvocationWorkspace"]
