"""Tests covering the import pipeline."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from wpassets.ingestion import (
    CollectionNotFoundError,
    ImportPipeline,
    ImportTargetError,
    InvalidPathError,
    UnknownFileTypeError,
)
from wpassets.ingestion import discovery
from wpassets.storage import AssetRepository, ResourceImportError, ResourcePointer


class FlakyRepository(AssetRepository):
    """Repository that refuses to import one file name."""

    def __init__(self, root: Path, failing_name: str) -> None:
        super().__init__(root)
        self.failing_name = failing_name

    def import_resource(self, path: Path) -> ResourcePointer:
        if Path(path).name == self.failing_name:
            raise ResourceImportError(f"Could not import {path}: disk on fire")
        return super().import_resource(path)


def test_tag_import_is_idempotent(uploads: Path, store: AssetRepository) -> None:
    pipeline = ImportPipeline(store)

    target = pipeline.prepare(tag="legacy")
    first = pipeline.run(uploads, target)

    assert first.imported_count == 5
    assert first.skipped_count == 0
    assert first.total == first.visited_count == 5
    assert not first.has_errors
    assert store.find_tag_by_label("legacy") is not None
    assert all(asset.tags == ["legacy"] for asset in store.list_assets())

    second = pipeline.run(uploads, pipeline.prepare(tag="legacy"))

    assert second.imported_count == 0
    assert second.skipped_count == 5
    assert len(store.list_assets()) == 5


def test_collection_import_links_both_directions(uploads: Path, store: AssetRepository) -> None:
    store.create_collection("Uploads")
    pipeline = ImportPipeline(store)

    report = pipeline.run(uploads, pipeline.prepare(collection="Uploads"))

    reopened = AssetRepository(store.root)
    collection = reopened.find_collection_by_title("Uploads")
    assets = reopened.list_assets()
    assert report.imported_count == 5
    assert collection is not None
    assert sorted(collection.asset_ids) == sorted(asset.id for asset in assets)
    assert all(asset.collections == ["Uploads"] for asset in assets)
    assert all(asset.tags == [] for asset in assets)


def test_missing_collection_fails_before_writing(uploads: Path, store: AssetRepository) -> None:
    pipeline = ImportPipeline(store)

    with pytest.raises(CollectionNotFoundError, match='Asset collection "Nope" not found'):
        pipeline.prepare(collection="Nope", root=uploads)

    assert not store.root.exists()


@pytest.mark.parametrize(
    ("options", "message"),
    [
        ({"collection": "Uploads", "tag": "legacy"}, "not both"),
        ({}, "must specify either"),
    ],
)
def test_target_must_be_exactly_one(
    store: AssetRepository, uploads: Path, options: dict[str, str], message: str
) -> None:
    store.create_collection("Uploads")

    with pytest.raises(ImportTargetError, match=message):
        ImportPipeline(store).prepare(root=uploads, **options)

    assert store.find_tag_by_label("legacy") is None
    assert not (store.root / "resources").exists()


def test_unknown_type_is_rejected(store: AssetRepository) -> None:
    with pytest.raises(UnknownFileTypeError):
        ImportPipeline(store).prepare(tag="legacy", file_type="video")

    assert store.find_tag_by_label("legacy") is None


def test_invalid_root_is_rejected_before_tag_creation(tmp_path: Path, store: AssetRepository) -> None:
    with pytest.raises(InvalidPathError):
        ImportPipeline(store).prepare(tag="legacy", root=tmp_path / "missing")

    assert store.find_tag_by_label("legacy") is None


def test_run_rejects_invalid_root(tmp_path: Path, store: AssetRepository) -> None:
    pipeline = ImportPipeline(store)
    target = pipeline.prepare(tag="legacy")

    with pytest.raises(InvalidPathError):
        pipeline.run(tmp_path / "missing", target)


def test_type_filter_limits_import(uploads: Path, store: AssetRepository) -> None:
    pipeline = ImportPipeline(store)

    report = pipeline.run(uploads, pipeline.prepare(tag="images", file_type="image"), "image")

    assert report.imported_count == 3
    assert report.total == 3
    assert sorted(asset.title for asset in store.list_assets()) == [
        "cat.gif",
        "logo.png",
        "photo.jpg",
    ]


def test_single_file_failure_does_not_stop_the_run(uploads: Path, tmp_path: Path) -> None:
    repo = FlakyRepository(tmp_path / "store", failing_name="logo.png")
    pipeline = ImportPipeline(repo)

    report = pipeline.run(uploads, pipeline.prepare(tag="legacy"))

    assert report.visited_count == 5
    assert report.imported_count == 4
    assert report.skipped_count == 0
    assert report.visited_count == report.total + len(report.import_errors)
    assert len(report.import_errors) == 1
    assert report.import_errors[0].startswith('Error importing file "')
    assert "logo.png" in report.import_errors[0]
    assert "disk on fire" in report.import_errors[0]
    assert report.numbered_errors()[0].startswith("1) Error importing file")


def test_walker_errors_are_reported(
    uploads: Path, store: AssetRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    locked = (uploads / "2020").resolve()
    real_scandir = os.scandir

    def _scandir(path):  # type: ignore[no-untyped-def]
        if Path(path) == locked:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(discovery.os, "scandir", _scandir)
    pipeline = ImportPipeline(store)

    report = pipeline.run(uploads, pipeline.prepare(tag="legacy"))

    assert report.imported_count == 3
    assert report.import_errors == []
    assert len(report.walker_errors) == 1
    assert report.walker_errors[0].startswith(f'Error accessing path "{locked}"')
    payload = report.to_payload()
    assert payload["counts"]["errors"] == 1
    assert payload["errors"]["walker"] == report.walker_errors


def test_progress_callbacks(uploads: Path, store: AssetRepository) -> None:
    events: list[object] = []
    pipeline = ImportPipeline(store)

    pipeline.run(
        uploads,
        pipeline.prepare(tag="legacy"),
        on_start=lambda total: events.append(("start", total)),
        on_advance=lambda descriptor: events.append(descriptor.file_name),
    )

    assert events[0] == ("start", 5)
    assert events[1:] == ["photo.jpg", "report.pdf", "logo.png", "cat.gif", "notes.txt"]


def test_duplicate_content_within_one_run_is_skipped(tmp_path: Path, store: AssetRepository) -> None:
    root = tmp_path / "dupes"
    (root / "a").mkdir(parents=True)
    (root / "b").mkdir()
    (root / "a" / "first.txt").write_text("same bytes", encoding="utf-8")
    (root / "b" / "second.txt").write_text("same bytes", encoding="utf-8")
    pipeline = ImportPipeline(store)

    report = pipeline.run(root, pipeline.prepare(tag="legacy"))

    assert report.imported_count == 1
    assert report.skipped_count == 1
    assert [asset.title for asset in store.list_assets()] == ["first.txt"]


def test_imported_assets_keep_file_names(uploads: Path, store: AssetRepository) -> None:
    pipeline = ImportPipeline(store)
    pipeline.run(uploads, pipeline.prepare(tag="legacy"), "document")

    assets = sorted(store.list_assets(), key=lambda asset: asset.title)

    assert [asset.title for asset in assets] == ["notes.txt", "report.pdf"]
    assert [asset.resource.filename for asset in assets] == ["notes.txt", "report.pdf"]
    assert store.resource_path(assets[0].sha1).read_text(encoding="utf-8") == "meeting notes"


def test_run_writes_store_once(
    uploads: Path, store: AssetRepository, monkeypatch: pytest.MonkeyPatch
) -> None:
    pipeline = ImportPipeline(store)
    target = pipeline.prepare(tag="legacy")
    writes: list[int] = []
    real_write = store._write

    def _counting_write(state):  # type: ignore[no-untyped-def]
        writes.append(len(state.assets))
        real_write(state)

    monkeypatch.setattr(store, "_write", _counting_write)

    report = pipeline.run(uploads, target)

    assert report.imported_count == 5
    assert writes == [5]
