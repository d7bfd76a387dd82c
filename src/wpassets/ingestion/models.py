"""Data models shared by the directory walker and the import pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict

from wpassets.storage.models import AssetCollection, Tag

from .errors import ImportTargetError


class FileDescriptor(BaseModel):
    """A file found by the walker.

    Attributes:
        path: Absolute path of the file.
        file_name: Final path component, extension included.
        extension: Lowercased extension without the dot.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    file_name: str
    extension: str


@dataclass(slots=True)
class WalkResult:
    """Lazy walk output.

    ``errors`` is filled while ``files`` is consumed, so read it only after
    the iterator is exhausted.
    """

    root: Path
    files: Iterator[FileDescriptor]
    errors: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ImportTarget:
    """Exactly one collection or one tag that imported assets are attached to."""

    collection: Optional[AssetCollection] = None
    tag: Optional[Tag] = None

    def __post_init__(self) -> None:
        if self.collection is not None and self.tag is not None:
            raise ImportTargetError("You can specify either a collection or a tag, but not both.")
        if self.collection is None and self.tag is None:
            raise ImportTargetError("You must specify either a collection or a tag.")

    @property
    def name(self) -> str:
        """Return the collection title or tag label."""
        if self.collection is not None:
            return self.collection.title
        assert self.tag is not None
        return self.tag.label

    @property
    def kind(self) -> str:
        """Return ``"collection"`` or ``"tag"``."""
        return "collection" if self.collection is not None else "tag"


@dataclass(slots=True)
class ImportReport:
    """Counters and error messages accumulated over one import run.

    Attributes:
        imported_count: Files registered as new assets.
        skipped_count: Files whose content hash was already stored.
        visited_count: Files yielded by the filtered walk.
        walker_errors: Unreadable directories reported by the walker.
        import_errors: Per-file failures, in processing order.
    """

    imported_count: int = 0
    skipped_count: int = 0
    visited_count: int = 0
    walker_errors: list[str] = field(default_factory=list)
    import_errors: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        """Return the number of files accounted for as imported or skipped."""
        return self.imported_count + self.skipped_count

    @property
    def errors(self) -> list[str]:
        """Return walker errors followed by import errors."""
        return [*self.walker_errors, *self.import_errors]

    @property
    def has_errors(self) -> bool:
        """Return True when any walker or import error was recorded."""
        return bool(self.walker_errors or self.import_errors)

    def numbered_errors(self) -> list[str]:
        """Return errors as a contiguous ``1) ...`` list."""
        return [f"{index}) {message}" for index, message in enumerate(self.errors, start=1)]

    def to_payload(self) -> dict[str, Any]:
        """Return a JSON-ready representation."""
        return {
            "counts": {
                "total": self.total,
                "visited": self.visited_count,
                "imported": self.imported_count,
                "skipped": self.skipped_count,
                "errors": len(self.errors),
            },
            "errors": {
                "walker": list(self.walker_errors),
                "import": list(self.import_errors),
            },
        }


__all__ = ["FileDescriptor", "WalkResult", "ImportTarget", "ImportReport"]
