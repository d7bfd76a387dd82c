"""Tests for the recursive directory walker."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from wpassets.ingestion import (
    DirectoryWalker,
    InvalidPathError,
    PathNotReadableError,
    UnknownFileTypeError,
    available_filter_types,
    validate_file_type,
)
from wpassets.ingestion import discovery


def _names(root: Path, file_type: str | None = None) -> list[str]:
    result = DirectoryWalker().walk(root, file_type)
    return [descriptor.file_name for descriptor in result.files]


def test_walk_yields_every_file(uploads: Path) -> None:
    names = _names(uploads)

    assert sorted(names) == ["cat.gif", "logo.png", "notes.txt", "photo.jpg", "report.pdf"]


def test_walk_filters_by_type(uploads: Path) -> None:
    assert sorted(_names(uploads, "image")) == ["cat.gif", "logo.png", "photo.jpg"]
    assert sorted(_names(uploads, "document")) == ["notes.txt", "report.pdf"]


def test_filter_matches_extensions_case_insensitively(tmp_path: Path) -> None:
    (tmp_path / "SHOUT.JPG").write_bytes(b"x")
    (tmp_path / "archive.zip").write_bytes(b"x")

    result = DirectoryWalker().walk(tmp_path, "image")
    descriptors = list(result.files)

    assert [item.file_name for item in descriptors] == ["SHOUT.JPG"]
    assert descriptors[0].extension == "jpg"


def test_unrecognized_filter_disables_filtering(uploads: Path) -> None:
    assert len(_names(uploads, "video")) == 5


def test_descriptors_carry_absolute_paths(uploads: Path) -> None:
    descriptors = list(DirectoryWalker().walk(uploads).files)

    for descriptor in descriptors:
        assert descriptor.path.is_absolute()
        assert descriptor.path.name == descriptor.file_name
        assert descriptor.path.is_file()


def test_walk_is_depth_first_and_repeatable(uploads: Path) -> None:
    first = _names(uploads)
    second = _names(uploads)

    assert first == second
    assert first == ["photo.jpg", "report.pdf", "logo.png", "cat.gif", "notes.txt"]


def test_walk_rejects_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(InvalidPathError):
        DirectoryWalker().walk(tmp_path / "missing")


def test_walk_rejects_file_root(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(InvalidPathError):
        DirectoryWalker().walk(target)


def test_walk_rejects_unreadable_root(uploads: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(discovery.os, "access", lambda path, mode: False)

    with pytest.raises(PathNotReadableError):
        DirectoryWalker().walk(uploads)


def test_unreadable_subdirectory_is_reported_and_skipped(
    uploads: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    locked = (uploads / "2019" / "03").resolve()
    real_scandir = os.scandir

    def _scandir(path):  # type: ignore[no-untyped-def]
        if Path(path) == locked:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(discovery.os, "scandir", _scandir)

    result = DirectoryWalker().walk(uploads)
    names = sorted(descriptor.file_name for descriptor in result.files)

    assert names == ["cat.gif", "logo.png", "notes.txt"]
    assert len(result.errors) == 1
    assert str(locked) in result.errors[0]
    assert "Permission denied" in result.errors[0]


def test_filter_names_are_exposed() -> None:
    assert available_filter_types() == ["image", "document"]
    assert validate_file_type("image") == "image"
    assert validate_file_type(None) is None
    with pytest.raises(UnknownFileTypeError, match="Available types are: image, document"):
        validate_file_type("video")
