"""Map legacy WordPress upload paths to stored assets."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from wpassets.search.text import search_key_from_filename
from wpassets.storage.base import AssetStore
from wpassets.storage.errors import StoreError

LOGGER = logging.getLogger(__name__)

DEFAULT_PATH_MARKER = "/wp-content/uploads/"


@dataclass(frozen=True, slots=True)
class Redirect:
    """Send the client to ``location``."""

    location: str
    status_code: int = 301


@dataclass(frozen=True, slots=True)
class PassThrough:
    """Leave the request to the next handler."""

    reason: str


RedirectDecision = Union[Redirect, PassThrough]


class RedirectResolver:
    """Decide whether a request path should be redirected to a stored asset.

    The resolver only reads from the store. Every failure mode (no marker, no
    match, store error) results in :class:`PassThrough`.
    """

    def __init__(
        self,
        store: AssetStore,
        *,
        path_marker: str = DEFAULT_PATH_MARKER,
        status_code: int = 301,
    ) -> None:
        self.store = store
        self.path_marker = path_marker
        self.status_code = status_code

    def resolve(self, path: str) -> RedirectDecision:
        """Return the decision for the request ``path``."""
        if self.path_marker not in path:
            LOGGER.debug("Path %r does not contain %r", path, self.path_marker)
            return PassThrough("not a legacy upload path")

        filename = path.rsplit("/", 1)[-1]
        search_key = search_key_from_filename(filename)
        context = {"path": path, "filename": filename, "search_key": search_key}

        try:
            matches = self.store.search_by_term_or_tags(search_key)
        except StoreError as exc:
            LOGGER.debug("Asset query failed: %s", exc, extra={"redirect": context})
            return PassThrough("asset query failed")

        if not matches:
            LOGGER.debug("No suitable asset found for %r", search_key, extra={"redirect": context})
            return PassThrough("no matching asset")

        chosen = matches[0]
        LOGGER.debug(
            'Found %d assets, chose first asset "%s"',
            len(matches),
            chosen.resource.filename,
            extra={"redirect": context},
        )
        return Redirect(self.store.public_location_of(chosen), self.status_code)


__all__ = ["Redirect", "PassThrough", "RedirectDecision", "RedirectResolver", "DEFAULT_PATH_MARKER"]
