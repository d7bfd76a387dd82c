"""Search-key derivation and asset ranking helpers."""

from .ranking import matches_term, rank_assets, similarity
from .text import search_key_from_filename, strip_extension

__all__ = [
    "search_key_from_filename",
    "strip_extension",
    "matches_term",
    "rank_assets",
    "similarity",
]
