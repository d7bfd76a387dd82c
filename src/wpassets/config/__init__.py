"""Configuration management for wpassets."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import WpAssetsConfig
from .resolver import env_overrides_from, flatten_for_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.wpassets/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # wpassets configuration file
    # Created on first use; edit by hand or with `wpassets config set`.
    """
)


class ConfigManager:
    """Read and write the YAML configuration file and resolve effective settings."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = True,
        env_overrides: Mapping[str, str] | None = None,
    ) -> WpAssetsConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Highest-precedence overrides, keyed by dotted path.
            include_env: Whether ``WPASSETS__*`` variables participate.
            ensure_file: Create the configuration file first when missing.
            env_overrides: Environment mapping to use instead of ``os.environ``.

        Raises:
            ConfigError: If the file cannot be parsed or values are invalid.
        """
        if ensure_file:
            self.ensure_exists()

        env_layer = None
        if include_env:
            env_layer = env_overrides_from(env_overrides if env_overrides is not None else self._env)

        return resolve_with_precedence(
            defaults=WpAssetsConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=env_layer,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored on disk, or an empty mapping."""
        if not self._config_path.exists():
            return {}
        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def save(self, config: WpAssetsConfig | Mapping[str, Any]) -> None:
        """Persist ``config`` to disk with the standard header."""
        if isinstance(config, WpAssetsConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(data, sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def ensure_exists(self) -> Path:
        """Write a default configuration file if none exists yet."""
        if not self._config_path.exists():
            self.save(WpAssetsConfig())
        return self._config_path


__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "WpAssetsConfig",
    "resolve_with_precedence",
    "flatten_for_env",
    "ConfigError",
]
