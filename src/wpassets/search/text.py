"""Filename normalization used to derive search keys from legacy upload paths."""

from __future__ import annotations

import re

_THUMBNAIL_SIZE = re.compile(r"-[0-9]{2,4}x[0-9]{2,4}")


def strip_extension(filename: str) -> str:
    """Return ``filename`` without the text after its last dot.

    Names without a dot are returned unchanged.
    """
    stem, dot, _ = filename.rpartition(".")
    return stem if dot else filename


def search_key_from_filename(filename: str) -> str:
    """Return the search key for a bare filename.

    The final extension is removed, then every WordPress thumbnail-size
    suffix (``-300x200``). Case and whitespace are kept as-is because stored
    asset titles are matched against the exact remainder.

    Examples:
        >>> search_key_from_filename("photo-300x200.jpg")
        'photo'
        >>> search_key_from_filename("report.final.pdf")
        'report.final'
    """
    return _THUMBNAIL_SIZE.sub("", strip_extension(filename))


__all__ = ["search_key_from_filename", "strip_extension"]
