"""Recursive directory walking for asset imports."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterator, Optional

from .detectors import extension_of, extensions_for
from .errors import InvalidPathError, PathNotReadableError
from .models import FileDescriptor, WalkResult

LOGGER = logging.getLogger(__name__)


class DirectoryWalker:
    """Enumerate regular files below a root directory, depth first.

    Entries are visited in sorted name order so repeated walks over an
    unchanged tree produce identical sequences. Symlinked directories are not
    descended into; symlinked files are reported like regular files.
    """

    def walk(self, root: Path | str, file_type: Optional[str] = None) -> WalkResult:
        """Validate ``root`` and return a lazy walk over its files.

        Args:
            root: Directory to traverse.
            file_type: Optional filter name (see ``FILE_TYPE_FILTERS``).
                Unrecognized names disable filtering.

        Returns:
            WalkResult: Iterator of descriptors plus the list that collects
            non-fatal access errors during iteration.

        Raises:
            InvalidPathError: If ``root`` is not an existing directory.
            PathNotReadableError: If ``root`` cannot be read.
        """
        canonical = self.check_root(root)
        result = WalkResult(root=canonical, files=iter(()))
        result.files = self._iter_files(canonical, extensions_for(file_type), result.errors)
        return result

    def check_root(self, root: Path | str) -> Path:
        """Return the canonical form of ``root`` after checking it can be walked."""
        root_path = Path(root).expanduser()
        if not root_path.is_dir():
            raise InvalidPathError(f'The path "{root}" is not a valid directory.')
        if not os.access(root_path, os.R_OK):
            raise PathNotReadableError(f'The directory "{root}" is not readable.')
        return root_path.resolve()

    def _iter_files(
        self,
        directory: Path,
        extensions: frozenset[str] | None,
        errors: list[str],
    ) -> Iterator[FileDescriptor]:
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(iterator, key=lambda entry: entry.name)
        except OSError as exc:
            message = f'Error accessing path "{directory}": {exc.strerror or exc}'
            LOGGER.debug(message)
            errors.append(message)
            return

        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file()
            except OSError as exc:
                errors.append(f'Error accessing path "{entry.path}": {exc.strerror or exc}')
                continue

            if is_dir:
                yield from self._iter_files(Path(entry.path), extensions, errors)
                continue
            if not is_file:
                continue

            extension = extension_of(entry.name)
            if extensions is not None and extension not in extensions:
                continue
            yield FileDescriptor(path=Path(entry.path), file_name=entry.name, extension=extension)


__all__ = ["DirectoryWalker"]
