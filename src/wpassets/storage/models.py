"""Persisted data models for the asset store."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ResourcePointer(BaseModel):
    """Content-addressed binary resource backing an asset.

    Attributes:
        sha1: Hex SHA-1 digest of the file bytes.
        filename: Original file name, used when publishing the resource.
        size_bytes: Size of the stored bytes.
    """

    sha1: str
    filename: str
    size_bytes: int = 0


class Tag(BaseModel):
    """Label attached to assets."""

    label: str
    created_at: datetime = Field(default_factory=_now)


class AssetCollection(BaseModel):
    """Named grouping of assets. Collections are created explicitly, never by imports."""

    title: str
    asset_ids: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)

    def add_asset(self, asset: "Asset") -> None:
        """Link ``asset`` to this collection in both directions."""
        if asset.id not in self.asset_ids:
            self.asset_ids.append(asset.id)
        if self.title not in asset.collections:
            asset.collections.append(self.title)


class Asset(BaseModel):
    """Media record wrapping a stored resource.

    Attributes:
        id: Opaque identifier.
        title: Human-readable title; imports use the file name.
        caption: Optional descriptive text, searchable.
        resource: Backing resource pointer.
        tags: Labels of attached tags.
        collections: Titles of collections containing the asset.
        created_at: Creation timestamp.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    title: str
    caption: Optional[str] = None
    resource: ResourcePointer
    tags: List[str] = Field(default_factory=list)
    collections: List[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_now)

    @property
    def sha1(self) -> str:
        """Return the content hash of the backing resource."""
        return self.resource.sha1

    def add_tag(self, tag: Tag) -> None:
        """Attach ``tag`` unless it is already present."""
        if tag.label not in self.tags:
            self.tags.append(tag.label)


class StoreState(BaseModel):
    """Whole persisted store document."""

    assets: Dict[str, Asset] = Field(default_factory=dict)
    tags: Dict[str, Tag] = Field(default_factory=dict)
    collections: Dict[str, AssetCollection] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_now)
    updated_at: datetime = Field(default_factory=_now)


__all__ = ["ResourcePointer", "Tag", "AssetCollection", "Asset", "StoreState"]
