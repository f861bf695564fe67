"""Configuration management for medialens."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import MediaLensConfig
from .resolver import expand_dotted, flatten_for_env, parse_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.medialens/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # medialens configuration file
    # Edit by hand or with `medialens config set KEY VALUE`.
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
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = False,
    ) -> MediaLensConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Dotted-key overrides supplied on the command line.
            include_env: Whether ``MEDIALENS__`` environment variables apply.
            ensure_file: Create a default file first when none exists.

        Raises:
            ConfigError: If the file is malformed or values fail validation.
        """
        if ensure_file:
            self.ensure_exists()
        return resolve_with_precedence(
            defaults=MediaLensConfig(),
            file_overrides=self._read_file(),
            env_overrides=parse_env(self._env) if include_env else None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored on disk."""
        return self._read_file()

    def save(self, config: MediaLensConfig | Mapping[str, Any]) -> None:
        """Persist ``config`` after validating it."""
        if isinstance(config, MediaLensConfig):
            data = config.model_dump(mode="json")
        else:
            data = expand_dotted(config, source_name="file")
            resolve_with_precedence(defaults=MediaLensConfig(), file_overrides=data)
        self._write_file(data)

    def ensure_exists(self) -> Path:
        """Write a default configuration file if none exists yet."""
        if not self._config_path.exists():
            self._write_file(MediaLensConfig().model_dump(mode="json"))
        return self._config_path

    def read_text(self) -> str:
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}
        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._config_path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(dict(data), sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )


__all__ = [
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "MediaLensConfig",
    "ConfigError",
    "resolve_with_precedence",
    "flatten_for_env",
]
