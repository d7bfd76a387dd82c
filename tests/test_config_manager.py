"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from wpassets.config import (
    ConfigError,
    ConfigManager,
    WpAssetsConfig,
    flatten_for_env,
    resolve_with_precedence,
)


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager(env={})


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".wpassets" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "wpassets configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert isinstance(config, WpAssetsConfig)
    assert config.redirect.path_marker == "/wp-content/uploads/"
    assert config.store.public_base_url == "/_Resources/Persistent"


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.save({"store": {"path": "/srv/assets"}, "redirect": {"status_code": 302}})

    env = {"WPASSETS__REDIRECT__STATUS_CODE": "307", "WPASSETS__LOGGING__LEVEL": "DEBUG"}
    cli = {"redirect.status_code": 308}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.store.path == "/srv/assets"
    assert config.logging.level == "DEBUG"
    # CLI overrides take precedence over environment
    assert config.redirect.status_code == 308


def test_environment_overrides_file(tmp_path: Path) -> None:
    manager = ConfigManager(
        tmp_path / "config.yaml",
        env={"WPASSETS__CLI__SHOW_PROGRESS": "false", "OTHER": "ignored"},
    )
    manager.save({"cli": {"show_progress": True}})

    assert manager.load().cli.show_progress is False
    assert manager.load(include_env=False).cli.show_progress is True


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    manager = ConfigManager(tmp_path / "config.yaml", env={})
    manager.save({"redirect": {"marker": "/uploads/"}})

    with pytest.raises(ConfigError):
        manager.load()


def test_flatten_for_env_round_trips_defaults() -> None:
    flat = flatten_for_env(WpAssetsConfig())

    assert flat["WPASSETS__REDIRECT__STATUS_CODE"] == "301"
    assert flat["WPASSETS__STORE__PUBLIC_BASE_URL"] == "/_Resources/Persistent"
    assert flat["WPASSETS__LOGGING__LEVEL"] == "WARNING"


@pytest.mark.parametrize(
    "overrides",
    [
        {"redirect": {"status_code": 200}},
        {"redirect": {"path_marker": "  "}},
        {"logging": {"max_size_mb": 0}},
    ],
)
def test_resolve_with_precedence_invalid_value_raises(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=WpAssetsConfig(), file_overrides=overrides)
