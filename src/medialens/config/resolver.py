"""Layered configuration resolution."""

from __future__ import annotations

from collections.abc import Mapping
from copy import deepcopy
from typing import Any

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import MediaLensConfig

ENV_PREFIX = "MEDIALENS__"


def resolve_with_precedence(
    *,
    defaults: MediaLensConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> MediaLensConfig:
    """Merge defaults, file, environment and CLI values, later layers winning."""
    merged = defaults.model_dump(mode="python")
    layers = (("file", file_overrides), ("environment", env_overrides), ("cli", cli_overrides))
    for name, layer in layers:
        if layer is not None:
            merged = _deep_merge(merged, expand_dotted(layer, source_name=name))

    try:
        return MediaLensConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def flatten_for_env(config: MediaLensConfig) -> dict[str, str]:
    """Render ``config`` as ``MEDIALENS__SECTION__KEY`` environment assignments."""
    flat: dict[str, str] = {}
    pending: list[tuple[list[str], Any]] = [
        ([key], value) for key, value in config.model_dump(mode="json").items()
    ]
    while pending:
        path, value = pending.pop()
        if isinstance(value, dict):
            pending.extend((path + [str(key)], child) for key, child in value.items())
            continue
        if isinstance(value, list):
            rendered = yaml.safe_dump(value, default_flow_style=True).strip()
        else:
            rendered = "null" if value is None else str(value)
        flat[ENV_PREFIX + "__".join(part.upper() for part in path)] = rendered
    return dict(sorted(flat.items()))


def parse_env(env: Mapping[str, str]) -> dict[str, Any]:
    """Collect ``MEDIALENS__`` variables into a nested override mapping."""
    overrides: dict[str, Any] = {}
    for key, raw in env.items():
        if not key.startswith(ENV_PREFIX):
            continue
        segments = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__") if segment]
        if not segments:
            continue
        try:
            value = yaml.safe_load(raw)
        except yaml.YAMLError:
            value = raw
        _assign(overrides, segments, value, source_name="environment")
    return overrides


def expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    """Return ``source`` with dotted keys such as ``scan.follow_symlinks`` nested."""
    if not isinstance(source, Mapping):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")
    result: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, Mapping):
            value = expand_dotted(value, source_name=source_name)
        _assign(result, key.split("."), value, source_name=source_name)
    return result


def _assign(target: dict[str, Any], path: list[str], value: Any, *, source_name: str) -> None:
    node = target
    for segment in path[:-1]:
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            raise ConfigError(
                f"{source_name.capitalize()} override for {'.'.join(path)} "
                "conflicts with an existing value."
            )
        node = child
    leaf = path[-1]
    existing = node.get(leaf)
    if isinstance(value, dict) and isinstance(existing, dict):
        node[leaf] = _deep_merge(existing, value)
    else:
        node[leaf] = value


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, Mapping) and isinstance(current, Mapping):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = [
    "ENV_PREFIX",
    "resolve_with_precedence",
    "flatten_for_env",
    "parse_env",
    "expand_dotted",
]
