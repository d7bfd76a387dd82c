"""Text and tag matching for asset search.

Stores delegate their ``search_by_term_or_tags`` ordering here so the
redirect resolver's "first result" is deterministic: candidates are ranked by
lexical similarity of the search term to the title stem, then newest first,
then by id.
"""

from __future__ import annotations

import difflib
from datetime import datetime
from typing import TYPE_CHECKING, Iterable

from .text import strip_extension

if TYPE_CHECKING:
    from wpassets.storage.models import Asset


def matches_term(asset: "Asset", needle: str) -> bool:
    """Return True when ``needle`` (already lowercased) occurs in a searchable field."""
    fields = [asset.title, asset.caption or "", asset.resource.filename, *asset.tags]
    return any(needle in field.lower() for field in fields)


def similarity(term: str, asset: "Asset") -> float:
    """Score how closely ``term`` matches the asset title stem (0.0 - 1.0)."""
    stem = strip_extension(asset.title).lower()
    return difflib.SequenceMatcher(None, term.lower(), stem).ratio()


def rank_assets(term: str, assets: Iterable["Asset"]) -> list["Asset"]:
    """Return assets matching ``term`` in deterministic best-first order.

    A blank term matches nothing.
    """
    needle = term.strip().lower()
    if not needle:
        return []

    candidates = [asset for asset in assets if matches_term(asset, needle)]
    # Negated timestamp sorts newest first within equal scores.
    return sorted(
        candidates,
        key=lambda asset: (
            -similarity(term, asset),
            -_timestamp(asset.created_at),
            asset.id,
        ),
    )


def _timestamp(value: datetime) -> float:
    return value.timestamp()


__all__ = ["matches_term", "rank_assets", "similarity"]
