"""Interface the redirect resolver and import pipeline expect from an asset store."""

from __future__ import annotations

from pathlib import Path
from typing import ContextManager, Protocol, Union

from .models import Asset, AssetCollection, ResourcePointer, Tag

Entity = Union[Asset, Tag, AssetCollection]


class AssetStore(Protocol):
    """Operations consumed by :mod:`wpassets.redirect` and :mod:`wpassets.ingestion`."""

    def find_by_content_hash(self, sha1: str) -> Asset | None: ...

    def find_collection_by_title(self, title: str) -> AssetCollection | None: ...

    def find_tag_by_label(self, label: str) -> Tag | None: ...

    def create_tag(self, label: str) -> Tag: ...

    def search_by_term_or_tags(self, term: str) -> list[Asset]: ...

    def save(self, entity: Entity) -> None: ...

    def deferred_writes(self) -> ContextManager[None]: ...

    def import_resource(self, path: Path) -> ResourcePointer: ...

    def public_location_of(self, asset: Asset) -> str: ...


__all__ = ["AssetStore", "Entity"]
