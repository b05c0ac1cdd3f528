# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Collapse documents that repeat the same design node and template."""

from __future__ import annotations

from collections.abc import Iterable

from ..core.models import Document


def is_duplicate(existing: Document, candidate: Document) -> bool:
    """Return ``True`` when ``candidate`` duplicates ``existing``.

    Only ``figmaNode`` and ``template`` take part; labels, sources and every
    other field may differ.

    Args:
        existing: Document already retained.
        candidate: Document under evaluation.

    Returns:
        bool: ``True`` when both documents share node and template exactly.
    """

    return existing.dedupe_key == candidate.dedupe_key


def dedupe_documents(documents: Iterable[Document]) -> tuple[Document, ...]:
    """Return ``documents`` with later duplicates removed.

    The first occurrence of each ``(figmaNode, template)`` pair is kept in its
    original position, so the result is an order-preserving subsequence of the
    input and deduplicating it again changes nothing.

    Args:
        documents: Documents in aggregation order.

    Returns:
        tuple[Document, ...]: Deduplicated documents.
    """

    kept: list[Document] = []
    seen: set[tuple[str, str]] = set()
    for document in documents:
        key = document.dedupe_key
        if key in seen:
            continue
        seen.add(key)
        kept.append(document)
    return tuple(kept)


__all__ = ["dedupe_documents", "is_duplicate"]
