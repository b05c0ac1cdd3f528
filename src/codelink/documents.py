# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Final touches applied to parsed documents before they leave the engine."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any, Final

from .core.models import Document, DocumentMetadata
from .project.repository import RepositoryInfo, remote_file_url

_WEB_SCHEMES: Final[tuple[str, ...]] = ("http://", "https://")


def is_web_url(value: str) -> bool:
    """Return ``True`` when ``value`` is an ``http`` or ``https`` URL."""

    return value.lower().startswith(_WEB_SCHEMES)


def apply_url_substitutions(figma_node: str, substitutions: Mapping[str, str] | None) -> str:
    """Apply each ``from -> to`` substitution once, in declaration order."""

    if not substitutions:
        return figma_node
    for source, target in substitutions.items():
        figma_node = figma_node.replace(source, target, 1)
    return figma_node


def resolve_source(source: str, *, cwd: Path, repository: RepositoryInfo | None) -> str:
    """Turn a local source path into a repository link.

    Web URLs are returned untouched, as are local paths when no repository is
    known. A local path outside the repository yields an empty string.

    Args:
        source: Source reported by the parser.
        cwd: Directory relative paths are resolved against.
        repository: Repository the project lives in, if known.

    Returns:
        str: Source to publish with the document.
    """

    if not source or is_web_url(source) or repository is None:
        return source
    return remote_file_url(cwd / source, repository)


def finalize_documents(
    documents: Iterable[Document],
    *,
    cwd: Path,
    cli_version: str,
    repository: RepositoryInfo | None = None,
    substitutions: Mapping[str, str] | None = None,
    label: str | None = None,
) -> tuple[Document, ...]:
    """Return ``documents`` ready for publication.

    Args:
        documents: Deduplicated documents in output order.
        cwd: Project directory.
        cli_version: Version stamped into each document's metadata.
        repository: Repository used to link local sources.
        substitutions: ``documentUrlSubstitutions`` from the project config.
        label: Label replacing every document's own label.

    Returns:
        tuple[Document, ...]: Finalised documents in the same order.
    """

    metadata = DocumentMetadata(cli_version=cli_version)
    finalized: list[Document] = []
    for document in documents:
        update: dict[str, Any] = {
            "figma_node": apply_url_substitutions(document.figma_node, substitutions),
            "source": resolve_source(document.source, cwd=cwd, repository=repository),
            "metadata": metadata,
        }
        if label:
            update["label"] = label
        finalized.append(document.model_copy(update=update))
    return tuple(finalized)


__all__ = ["apply_url_substitutions", "finalize_documents", "is_web_url", "resolve_source"]
