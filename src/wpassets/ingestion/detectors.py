"""File type filters applied during directory walks."""

from __future__ import annotations

from typing import Mapping, Optional

from .errors import UnknownFileTypeError

FILE_TYPE_FILTERS: Mapping[str, frozenset[str]] = {
    "image": frozenset({"jpg", "jpeg", "png", "gif", "bmp", "svg", "webp"}),
    "document": frozenset({"pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "txt"}),
}


def available_filter_types() -> list[str]:
    """Return the recognized filter names in declaration order."""
    return list(FILE_TYPE_FILTERS)


def validate_file_type(file_type: Optional[str]) -> Optional[str]:
    """Return ``file_type`` unchanged if it is None or a recognized filter name.

    Raises:
        UnknownFileTypeError: If the name is not recognized.
    """
    if file_type is not None and file_type not in FILE_TYPE_FILTERS:
        raise UnknownFileTypeError(
            f'Invalid type "{file_type}". Available types are: '
            f"{', '.join(available_filter_types())}."
        )
    return file_type


def extension_of(filename: str) -> str:
    """Return the lowercased text after the last dot, or an empty string."""
    _, dot, extension = filename.rpartition(".")
    return extension.lower() if dot else ""


def extensions_for(file_type: Optional[str]) -> frozenset[str] | None:
    """Return the extension set for ``file_type``; None means no filtering.

    Unrecognized names also yield None; callers validate names up front.
    """
    if file_type is None:
        return None
    return FILE_TYPE_FILTERS.get(file_type)


__all__ = [
    "FILE_TYPE_FILTERS",
    "available_filter_types",
    "validate_file_type",
    "extension_of",
    "extensions_for",
]
