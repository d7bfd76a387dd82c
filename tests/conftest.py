"""Shared fixtures for wpassets tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from PIL import Image

from wpassets.storage import AssetRepository


def build_uploads_tree(root: Path) -> Path:
    """Create a WordPress-style uploads tree with three images and two documents.

    Args:
        root: Directory in which ``uploads`` is created.

    Returns:
        Path: The uploads directory.
    """
    uploads = root / "uploads"
    (uploads / "2019" / "03").mkdir(parents=True)
    (uploads / "2019" / "04").mkdir(parents=True)
    (uploads / "2020" / "01").mkdir(parents=True)

    Image.new("RGB", (40, 30), color="red").save(uploads / "2019" / "03" / "photo.jpg")
    Image.new("RGB", (16, 16), color="blue").save(uploads / "2019" / "04" / "logo.png")
    Image.new("RGB", (8, 8), color="green").save(uploads / "2020" / "01" / "cat.gif")
    (uploads / "2019" / "03" / "report.pdf").write_bytes(b"%PDF-1.4\n% minimal fixture\n")
    (uploads / "2020" / "01" / "notes.txt").write_text("meeting notes", encoding="utf-8")
    return uploads


@pytest.fixture
def uploads(tmp_path: Path) -> Path:
    return build_uploads_tree(tmp_path)


@pytest.fixture
def store(tmp_path: Path) -> AssetRepository:
    return AssetRepository(tmp_path / "store")


@pytest.fixture
def cli_env(tmp_path: Path) -> dict[str, str | None]:
    """Environment for CliRunner with HOME inside ``tmp_path`` and no wpassets overrides."""
    env: dict[str, str | None] = {key: None for key in os.environ if key.startswith("WPASSETS__")}
    env["HOME"] = str(tmp_path / "home")
    return env


@pytest.fixture
def home_store(tmp_path: Path) -> AssetRepository:
    """Repository at the default store location under the ``cli_env`` HOME."""
    return AssetRepository(tmp_path / "home" / ".wpassets" / "store")
