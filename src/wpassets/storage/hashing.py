"""Content hashing for deduplication."""

from __future__ import annotations

import hashlib
from typing import BinaryIO

CHUNK_SIZE = 1024 * 1024


class HashComputer:
    """Compute SHA-1 digests of file contents."""

    def compute_stream(self, handle: BinaryIO, *, sink: BinaryIO | None = None) -> str:
        """Hash ``handle`` to EOF, optionally copying every chunk into ``sink``."""
        digest = hashlib.sha1()
        for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
            digest.update(chunk)
            if sink is not None:
                sink.write(chunk)
        return digest.hexdigest()


__all__ = ["HashComputer", "CHUNK_SIZE"]
