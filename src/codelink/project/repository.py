# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Git repository lookups used to turn local source paths into browsable links."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..core.process import CommandOptions, run_command

GitRunner = Callable[[Sequence[str], Path], str]

FALLBACK_BRANCH: Final[str] = "master"
MAIN_BRANCH: Final[str] = "main"
_GIT_SSH_PREFIX: Final[str] = "git@"
_GIT_SUFFIX: Final[str] = ".git"


@dataclass(slots=True, frozen=True)
class RepositoryInfo:
    """Remote location and checkout root of the project's git repository."""

    remote_url: str
    root: Path
    default_branch: str = FALLBACK_BRANCH


def _default_runner(args: Sequence[str], cwd: Path) -> str:
    """Run a git query and return its trimmed stdout, or ``""`` on failure."""

    completed = run_command(
        args,
        options=CommandOptions(cwd=cwd, check=False, capture_output=True, discard_stdin=True),
    )
    if completed.returncode != 0:
        return ""
    return (completed.stdout or "").strip()


def default_branch_from(branch_listing: str) -> str:
    """Return ``main`` when ``origin/main`` is listed, otherwise ``master``.

    Args:
        branch_listing: Output of ``git branch -r``.

    Returns:
        str: Branch name used in generated links.
    """

    branches = {line.strip() for line in branch_listing.splitlines()}
    return MAIN_BRANCH if f"origin/{MAIN_BRANCH}" in branches else FALLBACK_BRANCH


def detect_repository(
    directory: Path,
    *,
    remote_url: str | None = None,
    runner: GitRunner | None = None,
) -> RepositoryInfo | None:
    """Describe the git repository containing ``directory``.

    Args:
        directory: Directory inside the repository.
        remote_url: Remote URL to use instead of ``remote.origin.url``.
        runner: Optional git runner, defaulting to :func:`run_command`.

    Returns:
        RepositoryInfo | None: Repository details, or ``None`` when no remote
        is known or git is not installed.
    """

    run = runner or _default_runner
    try:
        url = remote_url or run(["git", "config", "--get", "remote.origin.url"], directory)
        if not url:
            return None
        toplevel = run(["git", "rev-parse", "--show-toplevel"], directory)
        root = Path(toplevel) if toplevel else directory
        branch = default_branch_from(run(["git", "branch", "-r"], root))
    except FileNotFoundError:
        if remote_url is None:
            return None
        return RepositoryInfo(remote_url=remote_url, root=directory)
    return RepositoryInfo(remote_url=url, root=root, default_branch=branch)


def normalize_remote_url(url: str) -> str:
    """Convert an SSH remote to HTTPS form and drop a trailing ``.git``."""

    normalized = url.strip()
    if normalized.startswith(_GIT_SSH_PREFIX):
        normalized = normalized.replace(":", "/", 1)
        normalized = normalized.replace(_GIT_SSH_PREFIX, "https://", 1)
    return normalized.removesuffix(_GIT_SUFFIX)


def remote_file_url(file_path: str | Path, repository: RepositoryInfo) -> str:
    """Return a link to ``file_path`` on the repository's hosting service.

    Hosts are recognised from the remote URL (GitHub, GitLab, Bitbucket and
    Azure DevOps); anything else is assumed to be GitHub Enterprise.

    Args:
        file_path: Local path of the source file.
        repository: Repository the file belongs to.

    Returns:
        str: Browsable URL, or ``""`` when the file lies outside the repository.
    """

    try:
        relative = Path(file_path).resolve().relative_to(repository.root.resolve())
    except ValueError:
        return ""
    rel = f"/{relative.as_posix()}"
    branch = repository.default_branch
    raw_url = repository.remote_url.strip()
    url = normalize_remote_url(raw_url)

    if "github.com" in url:
        return f"{url}/blob/{branch}{rel}"
    if "gitlab.com" in url:
        return f"{url}/-/blob/{branch}{rel}"
    if "bitbucket.org" in url:
        return f"{url}/src/{branch}{rel}"
    if "dev.azure.com" in url:
        if raw_url.startswith(_GIT_SSH_PREFIX):
            # git@ssh.dev.azure.com:v3/org/project/repo
            org, project, repo = raw_url.split("/")[-3:]
            return f"https://dev.azure.com/{org}/{project}/_git/{repo}?path={rel}&branch={branch}"
        # https://org@dev.azure.com/org/project/_git/repo
        host_path = raw_url.split("@", 1)[-1]
        return f"https://{host_path}?path={rel}&branch={branch}"
    return f"{url}/blob/{branch}{rel}"


__all__ = [
    "FALLBACK_BRANCH",
    "GitRunner",
    "RepositoryInfo",
    "default_branch_from",
    "detect_repository",
    "normalize_remote_url",
    "remote_file_url",
]
