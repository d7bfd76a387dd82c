"""Configuration models describing wpassets settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WpAssetsBaseModel(BaseModel):
    """Shared configuration for wpassets Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class StoreSettings(WpAssetsBaseModel):
    """Location of the asset store and how its resources are published.

    Attributes:
        path: Directory holding the store document and imported resources.
        public_base_url: URL prefix under which resources are served.
    """

    path: str = "~/.wpassets/store"
    public_base_url: str = "/_Resources/Persistent"


class RedirectSettings(WpAssetsBaseModel):
    """Request-time redirect behavior.

    Attributes:
        path_marker: Substring identifying legacy upload paths.
        status_code: HTTP status emitted for redirects.
        cache_control: Value of the ``Cache-Control`` header on redirects.
        expires: Value of the ``Expires`` header on redirects.
    """

    path_marker: str = "/wp-content/uploads/"
    status_code: Literal[301, 302, 307, 308] = 301
    cache_control: str = "no-store, no-cache, must-revalidate"
    expires: str = "Sat, 26 Jul 1997 05:00:00 GMT"

    @field_validator("path_marker")
    @classmethod
    def _marker_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("path_marker must not be empty")
        return value


class LoggingSettings(WpAssetsBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    max_size_mb: int = Field(default=10, ge=1)
    backup_count: int = Field(default=3, ge=0)


class CLIOptions(WpAssetsBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        show_progress: Whether the import command renders a progress bar.
    """

    quiet_default: bool = False
    show_progress: bool = True


class WpAssetsConfig(WpAssetsBaseModel):
    """Top-level configuration struct for wpassets."""

    store: StoreSettings = Field(default_factory=StoreSettings)
    redirect: RedirectSettings = Field(default_factory=RedirectSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "WpAssetsBaseModel",
    "StoreSettings",
    "RedirectSettings",
    "LoggingSettings",
    "CLIOptions",
    "WpAssetsConfig",
]
