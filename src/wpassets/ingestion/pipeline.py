"""Import files from a directory tree into the asset store."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from wpassets.storage.base import AssetStore
from wpassets.storage.models import Asset

from .detectors import validate_file_type
from .discovery import DirectoryWalker
from .errors import CollectionNotFoundError, ImportTargetError
from .models import FileDescriptor, ImportReport, ImportTarget

LOGGER = logging.getLogger(__name__)

StartCallback = Callable[[int], None]
AdvanceCallback = Callable[[FileDescriptor], None]


class ImportPipeline:
    """Register every file below a root as an asset attached to one collection or tag.

    A run is fatal only when its preconditions fail (see :meth:`prepare`) or
    the root cannot be walked. Failures scoped to a single file are recorded
    on the report and the run continues with the next file.
    """

    def __init__(self, store: AssetStore, walker: DirectoryWalker | None = None) -> None:
        self.store = store
        self.walker = walker or DirectoryWalker()

    def prepare(
        self,
        *,
        collection: Optional[str] = None,
        tag: Optional[str] = None,
        file_type: Optional[str] = None,
        root: Path | str | None = None,
    ) -> ImportTarget:
        """Validate import options and resolve the target entity.

        A missing tag is created and persisted immediately so it is visible to
        every asset saved later in the run. Collections are only looked up.
        When ``root`` is given it is checked before anything is written.

        Raises:
            ImportTargetError: If both or neither of ``collection``/``tag`` are given.
            UnknownFileTypeError: If ``file_type`` is not a recognized filter.
            InvalidPathError: If ``root`` is given and is not a directory.
            PathNotReadableError: If ``root`` is given and cannot be read.
            CollectionNotFoundError: If the collection does not exist.
        """
        if collection is not None and tag is not None:
            raise ImportTargetError("You can specify either a collection or a tag, but not both.")
        if collection is None and tag is None:
            raise ImportTargetError("You must specify either a collection or a tag.")
        validate_file_type(file_type)
        if root is not None:
            self.walker.check_root(root)

        if collection is not None:
            found = self.store.find_collection_by_title(collection)
            if found is None:
                raise CollectionNotFoundError(
                    f'Asset collection "{collection}" not found. Please create it first.'
                )
            return ImportTarget(collection=found)

        assert tag is not None
        existing = self.store.find_tag_by_label(tag)
        if existing is None:
            existing = self.store.create_tag(tag)
        return ImportTarget(tag=existing)

    def run(
        self,
        root: Path | str,
        target: ImportTarget,
        file_type: Optional[str] = None,
        *,
        on_start: StartCallback | None = None,
        on_advance: AdvanceCallback | None = None,
    ) -> ImportReport:
        """Import every file under ``root`` matching ``file_type``.

        The filtered file list is collected once; its length is passed to
        ``on_start`` before any file is processed, and ``on_advance`` is called
        after each file regardless of its outcome. Store writes are deferred and
        flushed once after the last file.

        Raises:
            InvalidPathError: If ``root`` is not a directory.
            PathNotReadableError: If ``root`` cannot be read.
            StoreError: If the store document cannot be written at the end of the run.
        """
        report = ImportReport()
        walk = self.walker.walk(root, file_type)
        files = list(walk.files)
        report.walker_errors.extend(walk.errors)
        report.visited_count = len(files)

        LOGGER.info(
            "Importing %d file(s) from %s into %s %r",
            len(files),
            walk.root,
            target.kind,
            target.name,
        )
        if on_start is not None:
            on_start(len(files))

        with self.store.deferred_writes():
            for descriptor in files:
                self.process_file(descriptor, target, report)
                if on_advance is not None:
                    on_advance(descriptor)

        LOGGER.info(
            "Import finished: imported=%d skipped=%d errors=%d",
            report.imported_count,
            report.skipped_count,
            len(report.errors),
        )
        return report

    def process_file(
        self, descriptor: FileDescriptor, target: ImportTarget, report: ImportReport
    ) -> None:
        """Import one file, recording the outcome on ``report``."""
        try:
            resource = self.store.import_resource(descriptor.path)
            if self.store.find_by_content_hash(resource.sha1) is not None:
                LOGGER.debug("Skipping %s; content %s already stored", descriptor.path, resource.sha1)
                report.skipped_count += 1
                return

            asset = Asset(title=descriptor.file_name, resource=resource)
            if target.collection is not None:
                asset.collections.append(target.collection.title)
                self.store.save(asset)
                target.collection.add_asset(asset)
                self.store.save(target.collection)
            elif target.tag is not None:
                asset.add_tag(target.tag)
                self.store.save(asset)

            report.imported_count += 1
        except Exception as exc:
            LOGGER.debug("Import of %s failed", descriptor.path, exc_info=True)
            report.import_errors.append(f'Error importing file "{descriptor.path}": {exc}')


__all__ = ["ImportPipeline"]
