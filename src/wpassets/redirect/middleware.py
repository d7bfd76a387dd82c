"""FastAPI wiring for legacy upload redirects."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Awaitable, Callable

from fastapi import FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import FileResponse, RedirectResponse, Response

from wpassets.config import ConfigManager, WpAssetsConfig
from wpassets.config.models import RedirectSettings
from wpassets.log import configure_logging
from wpassets.storage import AssetRepository

from .resolver import Redirect, RedirectResolver

LOGGER = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]

_SHA1 = re.compile(r"[0-9a-f]{40}")


def headers_already_sent(request: Request) -> bool:
    """Return True when an outer layer has marked the response as started."""
    return bool(getattr(request.state, "response_started", False))


class LegacyAssetRedirectMiddleware:
    """HTTP middleware answering legacy upload paths with a redirect.

    Register with ``app.middleware("http")(middleware)``. Requests that do not
    resolve to an asset, or whose redirect cannot be emitted, are handed to
    ``call_next`` untouched.
    """

    def __init__(
        self,
        resolver: RedirectResolver,
        *,
        cache_control: str = "no-store, no-cache, must-revalidate",
        expires: str = "Sat, 26 Jul 1997 05:00:00 GMT",
    ) -> None:
        self.resolver = resolver
        self.cache_control = cache_control
        self.expires = expires

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        decision = await run_in_threadpool(self.resolver.resolve, request.url.path)
        if isinstance(decision, Redirect):
            response = self.build_response(request, decision)
            if response is not None:
                return response
        return await call_next(request)

    def build_response(self, request: Request, decision: Redirect) -> Response | None:
        """Return the redirect response, or None when it cannot be sent."""
        if headers_already_sent(request):
            LOGGER.debug("Headers already sent; not redirecting %s", request.url.path)
            return None
        try:
            response = RedirectResponse(decision.location, status_code=decision.status_code)
            response.headers["Cache-Control"] = self.cache_control
            response.headers["Expires"] = self.expires
        except (TypeError, ValueError, UnicodeError) as exc:
            LOGGER.debug("Could not build redirect to %r: %s", decision.location, exc)
            return None
        return response


def install_redirect_middleware(
    app: FastAPI,
    resolver: RedirectResolver,
    settings: RedirectSettings | None = None,
) -> LegacyAssetRedirectMiddleware:
    """Attach a :class:`LegacyAssetRedirectMiddleware` to ``app`` and return it."""
    settings = settings or RedirectSettings()
    middleware = LegacyAssetRedirectMiddleware(
        resolver,
        cache_control=settings.cache_control,
        expires=settings.expires,
    )
    app.middleware("http")(middleware)
    return middleware


def create_app(
    config: WpAssetsConfig | None = None,
    store: AssetRepository | None = None,
) -> FastAPI:
    """Build an app that redirects legacy uploads and serves stored resources.

    Usable as ``uvicorn --factory wpassets.redirect.middleware:create_app``.
    Resources are served only when ``store.public_base_url`` is a local path.
    """
    config = config or ConfigManager().load()
    if store is None:
        store = AssetRepository(
            Path(config.store.path),
            public_base_url=config.store.public_base_url,
        )
    configure_logging(config.logging, log_dir=store.root)
    resolver = RedirectResolver(
        store,
        path_marker=config.redirect.path_marker,
        status_code=config.redirect.status_code,
    )

    app = FastAPI(title="wpassets")
    install_redirect_middleware(app, resolver, config.redirect)

    base_url = config.store.public_base_url.rstrip("/")
    if base_url.startswith("/"):

        @app.get(base_url + "/{sha1}/{filename}")
        def serve_resource(sha1: str, filename: str) -> FileResponse:
            if not _SHA1.fullmatch(sha1):
                raise HTTPException(status_code=404)
            path = store.resource_path(sha1)
            if not path.is_file():
                raise HTTPException(status_code=404)
            return FileResponse(path, filename=filename)

    return app


__all__ = [
    "LegacyAssetRedirectMiddleware",
    "install_redirect_middleware",
    "create_app",
    "headers_already_sent",
]
