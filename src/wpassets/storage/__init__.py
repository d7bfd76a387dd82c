"""JSON-backed asset store with a content-addressed resource tree."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator
from urllib.parse import quote

from pydantic import ValidationError

from wpassets.search.ranking import rank_assets

from .base import AssetStore, Entity
from .errors import ResourceImportError, SearchError, StoreError
from .hashing import HashComputer
from .models import Asset, AssetCollection, ResourcePointer, StoreState, Tag

LOGGER = logging.getLogger(__name__)

STORE_FILENAME = "store.json"
RESOURCES_DIRNAME = "resources"


class AssetRepository:
    """Persist assets, tags, and collections under a single store directory.

    Layout::

        <root>/store.json                 assets, tags, collections
        <root>/resources/<ab>/<sha1>      imported file bytes, keyed by content

    The document is re-read whenever the file on disk changes, so a
    long-running process sees writes made by other processes.
    Inside :meth:`deferred_writes` the document is written once, when the
    outermost block exits.
    """

    def __init__(
        self,
        root: Path,
        *,
        public_base_url: str = "/_Resources/Persistent",
        hasher: HashComputer | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            root: Store directory; created on first write.
            public_base_url: Prefix used by :meth:`public_location_of`.
            hasher: Content hasher used while importing resources.
        """
        self._root = Path(root).expanduser()
        self._public_base_url = public_base_url.rstrip("/")
        self._hasher = hasher or HashComputer()
        self._cache: StoreState | None = None
        self._cache_key: tuple[int, int, int] | None = None
        self._sha1_index: dict[str, str] | None = None
        self._defer_depth = 0
        self._dirty = False

    @property
    def root(self) -> Path:
        """Return the store directory."""
        return self._root

    @property
    def state_path(self) -> Path:
        """Return the path of the store document."""
        return self._root / STORE_FILENAME

    # Lookups ----------------------------------------------------------

    def find_by_content_hash(self, sha1: str) -> Asset | None:
        """Return the asset whose resource has the given SHA-1, if any.

        Args:
            sha1: Hex SHA-1 digest of the resource bytes.

        Returns:
            Asset | None: The first asset registered with that content.

        Raises:
            StoreError: If the store document cannot be read.
        """
        state = self._state()
        if self._sha1_index is None:
            index: dict[str, str] = {}
            for asset in state.assets.values():
                index.setdefault(asset.resource.sha1, asset.id)
            self._sha1_index = index
        asset_id = self._sha1_index.get(sha1)
        return state.assets.get(asset_id) if asset_id is not None else None

    def find_collection_by_title(self, title: str) -> AssetCollection | None:
        """Return the collection titled ``title``, if it exists."""
        return self._state().collections.get(title)

    def find_tag_by_label(self, label: str) -> Tag | None:
        """Return the tag named ``label``, if it exists."""
        return self._state().tags.get(label)

    def get_asset(self, asset_id: str) -> Asset | None:
        """Return the asset with identifier ``asset_id``, if any."""
        return self._state().assets.get(asset_id)

    def list_assets(self) -> list[Asset]:
        """Return every stored asset in insertion order."""
        return list(self._state().assets.values())

    def list_collections(self) -> list[AssetCollection]:
        """Return all collections sorted by title."""
        return sorted(self._state().collections.values(), key=lambda item: item.title)

    def search_by_term_or_tags(self, term: str) -> list[Asset]:
        """Return assets whose text fields or tag labels contain ``term``.

        Results are ordered best match first; see :func:`wpassets.search.rank_assets`.

        Raises:
            SearchError: If ``term`` is not a string.
            StoreError: If the store document cannot be read.
        """
        if not isinstance(term, str):
            raise SearchError(f"Search term must be a string, got {type(term).__name__}")
        return rank_assets(term, self._state().assets.values())

    # Mutations --------------------------------------------------------

    def create_tag(self, label: str) -> Tag:
        """Return the tag named ``label``, creating and persisting it when absent."""
        existing = self.find_tag_by_label(label)
        if existing is not None:
            return existing
        tag = Tag(label=label)
        self.save(tag)
        LOGGER.info("Created tag %r", label)
        return tag

    def create_collection(self, title: str) -> AssetCollection:
        """Create and persist an empty collection.

        Raises:
            StoreError: If a collection with ``title`` already exists.
        """
        if self.find_collection_by_title(title) is not None:
            raise StoreError(f'Asset collection "{title}" already exists.')
        collection = AssetCollection(title=title)
        self.save(collection)
        LOGGER.info("Created collection %r", title)
        return collection

    def save(self, entity: Entity) -> None:
        """Insert or replace ``entity`` and write the store document.

        Raises:
            TypeError: If ``entity`` is not an asset, tag, or collection.
            StoreError: If the store document cannot be read or written.
        """
        state = self._state()
        if isinstance(entity, Asset):
            state.assets[entity.id] = entity
        elif isinstance(entity, Tag):
            state.tags[entity.label] = entity
        elif isinstance(entity, AssetCollection):
            state.collections[entity.title] = entity
        else:
            raise TypeError(f"Cannot store object of type {type(entity).__name__}")
        if isinstance(entity, Asset) and self._sha1_index is not None:
            self._sha1_index.setdefault(entity.resource.sha1, entity.id)
        if self._defer_depth:
            self._dirty = True
        else:
            self._write(state)

    @contextmanager
    def deferred_writes(self) -> Iterator[None]:
        """Batch :meth:`save` calls into a single document write.

        Lookups inside the block see unsaved changes. The document is
        written when the outermost block exits, including on error.
        """
        self._defer_depth += 1
        try:
            yield
        finally:
            self._defer_depth -= 1
            if self._defer_depth == 0 and self._dirty:
                self._write(self._state())

    def import_resource(self, path: Path) -> ResourcePointer:
        """Copy ``path`` into the resource tree, hashing it on the way.

        Bytes already present under the same digest are not written twice.

        Raises:
            ResourceImportError: If the file cannot be read or stored.
        """
        source = Path(path)
        incoming = self._root / RESOURCES_DIRNAME / ".incoming"
        staged_path: Path | None = None
        try:
            incoming.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(dir=incoming, delete=False) as staged:
                staged_path = Path(staged.name)
                with source.open("rb") as handle:
                    sha1 = self._hasher.compute_stream(handle, sink=staged)
        except OSError as exc:
            if staged_path is not None:
                staged_path.unlink(missing_ok=True)
            raise ResourceImportError(f"Could not import {source}: {exc}") from exc

        target = self.resource_path(sha1)
        try:
            size = staged_path.stat().st_size
            if target.exists():
                staged_path.unlink()
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                os.replace(staged_path, target)
        except OSError as exc:
            staged_path.unlink(missing_ok=True)
            raise ResourceImportError(f"Could not store {source}: {exc}") from exc

        return ResourcePointer(sha1=sha1, filename=source.name, size_bytes=size)

    # Publishing -------------------------------------------------------

    def resource_path(self, sha1: str) -> Path:
        """Return where the bytes for ``sha1`` live inside the store."""
        return self._root / RESOURCES_DIRNAME / sha1[:2] / sha1

    def public_location_of(self, asset: Asset) -> str:
        """Return the public URI of the asset's resource."""
        pointer = asset.resource
        return f"{self._public_base_url}/{pointer.sha1}/{quote(pointer.filename)}"

    # Internal helpers -------------------------------------------------

    def _state(self) -> StoreState:
        if self._dirty and self._cache is not None:
            return self._cache
        try:
            key = self._stat_key()
        except FileNotFoundError:
            if self._cache is None:
                self._cache = StoreState()
                self._sha1_index = None
            return self._cache
        except OSError as exc:
            raise StoreError(f"Cannot access asset store at {self.state_path}: {exc}") from exc

        if self._cache is None or key != self._cache_key:
            self._cache = self._read()
            self._cache_key = key
            self._sha1_index = None
        return self._cache

    def _read(self) -> StoreState:
        try:
            data = json.loads(self.state_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Invalid asset store data at {self.state_path}: {exc}") from exc
        try:
            return StoreState.model_validate(data)
        except ValidationError as exc:
            raise StoreError(f"Invalid asset store data at {self.state_path}: {exc}") from exc

    def _write(self, state: StoreState) -> None:
        state.updated_at = datetime.now(timezone.utc)
        payload = json.dumps(state.model_dump(mode="json"), indent=2)
        staged = self.state_path.with_suffix(".json.tmp")
        try:
            self._root.mkdir(parents=True, exist_ok=True)
            staged.write_text(payload, encoding="utf-8")
            os.replace(staged, self.state_path)
            key = self._stat_key()
        except OSError as exc:
            raise StoreError(f"Cannot write asset store at {self.state_path}: {exc}") from exc
        if state is not self._cache:
            self._sha1_index = None
        self._cache = state
        self._cache_key = key
        self._dirty = False

    def _stat_key(self) -> tuple[int, int, int]:
        # Writes replace the file, so the inode changes even when mtime does not.
        stat = self.state_path.stat()
        return (stat.st_mtime_ns, stat.st_size, stat.st_ino)


__all__ = [
    "AssetRepository",
    "AssetStore",
    "Asset",
    "AssetCollection",
    "ResourcePointer",
    "StoreState",
    "Tag",
    "StoreError",
    "ResourceImportError",
    "SearchError",
    "STORE_FILENAME",
]
