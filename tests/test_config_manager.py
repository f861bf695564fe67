"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from medialens.config import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    ConfigManager,
    MediaLensConfig,
    flatten_for_env,
    resolve_with_precedence,
)


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager(env={})


def test_default_path_lives_in_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    assert manager.config_path == DEFAULT_CONFIG_PATH.expanduser()
    assert manager.config_path.is_relative_to(tmp_path)


def test_load_without_file_returns_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    config = manager.load()

    assert config == MediaLensConfig()
    assert not manager.config_path.exists()


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    text = path.read_text(encoding="utf-8")
    assert "medialens configuration file" in text
    assert "Last updated:" in text
    assert manager.load(include_env=False).grouping.policy == "numeric_prefix"


def test_precedence_file_then_env_then_cli(tmp_path: Path) -> None:
    manager = ConfigManager(
        tmp_path / "config.yaml",
        env={
            "MEDIALENS__PREVIEW__JPEG_QUALITY": "70",
            "MEDIALENS__SCAN__FOLLOW_SYMLINKS": "true",
            "UNRELATED": "x",
        },
    )
    manager.save({"grouping": {"policy": "batch_code"}, "preview.jpeg_quality": 50})

    config = manager.load(cli_overrides={"preview.jpeg_quality": 95})

    assert config.grouping.policy == "batch_code"
    assert config.scan.follow_symlinks is True
    assert config.preview.jpeg_quality == 95
    assert manager.load(include_env=False).preview.jpeg_quality == 50


def test_invalid_yaml_raises_config_error(tmp_path: Path) -> None:
    manager = ConfigManager(tmp_path / "config.yaml", env={})
    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_save_rejects_invalid_values(tmp_path: Path) -> None:
    manager = ConfigManager(tmp_path / "config.yaml", env={})

    with pytest.raises(ConfigError):
        manager.save({"grouping": {"policy": "both"}})
    assert not manager.config_path.exists()


def test_flatten_for_env_uses_prefix() -> None:
    flat = flatten_for_env(MediaLensConfig())

    assert flat["MEDIALENS__GROUPING__POLICY"] == "numeric_prefix"
    assert flat["MEDIALENS__PREVIEW__JPEG_QUALITY"] == "90"
    assert flat["MEDIALENS__SCAN__FOLLOW_SYMLINKS"] == "False"


def test_resolve_with_precedence_invalid_value_raises() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=MediaLensConfig(),
            file_overrides={"preview": {"jpeg_quality": 500}},
        )


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=MediaLensConfig(), cli_overrides={"scan.depth": 3})
