# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for git repository lookups and remote link construction."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import pytest

from codelink.project.repository import (
    RepositoryInfo,
    default_branch_from,
    detect_repository,
    normalize_remote_url,
    remote_file_url,
)


class _FakeGit:
    def __init__(self, responses: dict[str, str]) -> None:
        self.responses = responses
        self.calls: list[tuple[str, ...]] = []

    def __call__(self, args: Sequence[str], cwd: Path) -> str:
        self.calls.append(tuple(args))
        return self.responses.get(" ".join(args[1:]), "")


def test_detect_repository_reads_remote_root_and_branch(tmp_path: Path) -> None:
    git = _FakeGit(
        {
            "config --get remote.origin.url": "git@github.com:acme/widgets.git",
            "rev-parse --show-toplevel": str(tmp_path),
            "branch -r": "  origin/HEAD -> origin/main\n  origin/main\n  origin/feature",
        }
    )

    info = detect_repository(tmp_path / "packages" / "ui", runner=git)

    assert info == RepositoryInfo(remote_url="git@github.com:acme/widgets.git", root=tmp_path, default_branch="main")


def test_detect_repository_without_remote(tmp_path: Path) -> None:
    git = _FakeGit({})

    assert detect_repository(tmp_path, runner=git) is None
    assert git.calls == [("git", "config", "--get", "remote.origin.url")]


def test_explicit_remote_survives_missing_git(tmp_path: Path) -> None:
    def missing_git(args: Sequence[str], cwd: Path) -> str:
        raise FileNotFoundError("git")

    assert detect_repository(tmp_path, runner=missing_git) is None
    info = detect_repository(tmp_path, remote_url="https://github.com/acme/widgets", runner=missing_git)
    assert info == RepositoryInfo(remote_url="https://github.com/acme/widgets", root=tmp_path)


def test_default_branch_falls_back_to_master() -> None:
    assert default_branch_from("  origin/develop\n  origin/master") == "master"
    assert default_branch_from("") == "master"


def test_normalize_remote_url() -> None:
    assert normalize_remote_url("git@github.com:acme/widgets.git") == "https://github.com/acme/widgets"
    assert normalize_remote_url("https://gitlab.com/acme/widgets.git\n") == "https://gitlab.com/acme/widgets"


@pytest.mark.parametrize(
    ("remote", "expected"),
    [
        ("git@github.com:acme/widgets.git", "https://github.com/acme/widgets/blob/main/src/Button.tsx"),
        ("https://gitlab.com/acme/widgets.git", "https://gitlab.com/acme/widgets/-/blob/main/src/Button.tsx"),
        ("git@bitbucket.org:acme/widgets.git", "https://bitbucket.org/acme/widgets/src/main/src/Button.tsx"),
        (
            "git@ssh.dev.azure.com:v3/acme/design/widgets",
            "https://dev.azure.com/acme/design/_git/widgets?path=/src/Button.tsx&branch=main",
        ),
        (
            "https://acme@dev.azure.com/acme/design/_git/widgets",
            "https://dev.azure.com/acme/design/_git/widgets?path=/src/Button.tsx&branch=main",
        ),
        ("https://git.acme.internal/ui/widgets.git", "https://git.acme.internal/ui/widgets/blob/main/src/Button.tsx"),
    ],
)
def test_remote_file_url_per_host(tmp_path: Path, remote: str, expected: str) -> None:
    repository = RepositoryInfo(remote_url=remote, root=tmp_path, default_branch="main")

    assert remote_file_url(tmp_path / "src" / "Button.tsx", repository) == expected


def test_remote_file_url_outside_repository(tmp_path: Path) -> None:
    repository = RepositoryInfo(remote_url="https://github.com/acme/widgets", root=tmp_path / "repo")

    assert remote_file_url(tmp_path / "elsewhere" / "Button.tsx", repository) == ""
