"""Request-time redirects from legacy upload URLs to stored assets."""

from .middleware import (
    LegacyAssetRedirectMiddleware,
    create_app,
    headers_already_sent,
    install_redirect_middleware,
)
from .resolver import DEFAULT_PATH_MARKER, PassThrough, Redirect, RedirectDecision, RedirectResolver

__all__ = [
    "Redirect",
    "PassThrough",
    "RedirectDecision",
    "RedirectResolver",
    "DEFAULT_PATH_MARKER",
    "LegacyAssetRedirectMiddleware",
    "install_redirect_middleware",
    "create_app",
    "headers_already_sent",
]
