"""Layered configuration: defaults < YAML < environment (.env) < CLI."""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Iterator, Mapping

import yaml
from dotenv import load_dotenv

from dopeflix.domain.exceptions import ConfigError

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTIONS: frozenset[str] = frozenset(
    {"source", "http", "logging", "preferences", "resolver"}
)
_TOP_LEVEL: tuple[str, ...] = ("app_name", "environment")

# Env and CLI layers are flat; each flat key lands in one section.
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "source_domain": ("source", "domain"),
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "http_retry_max_attempts": ("http", "retry_max_attempts"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "preferred_quality": ("preferences", "quality"),
    "preferred_sub_language": ("preferences", "sub_language"),
    "preferred_popular_page": ("preferences", "popular_page"),
    "preferred_latest_page": ("preferences", "latest_page"),
    "resolver_max_concurrent_servers": ("resolver", "max_concurrent_servers"),
    "resolver_timeout_seconds": ("resolver", "resolve_timeout_seconds"),
}


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> None:
    """Merge *layer* into *target* in place; nested sections merge key by key."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        else:
            target[key] = value


def _sectioned(layer: Mapping[str, Any]) -> dict[str, Any]:
    """Reshape a layer into ``{section: {key: value}}`` plus top-level keys.

    Sectioned input (YAML, defaults) passes through; flat keys from the
    environment or CLI are routed via ``_FLAT_KEYS``.  Unknown keys are
    ignored.
    """
    shaped: dict[str, Any] = {
        key: layer[key] for key in _TOP_LEVEL if key in layer
    }
    for section in _SECTIONS:
        block = layer.get(section)
        if isinstance(block, Mapping):
            shaped[section] = dict(block)
    for flat_key, (section, key) in _FLAT_KEYS.items():
        if flat_key in layer:
            shaped.setdefault(section, {})[key] = layer[flat_key]
    return shaped


def _read_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping, not {type(data).__name__}")
    return data


def _layers(
    config_path: Path | None,
    cli_overrides: Mapping[str, Any],
) -> Iterator[Mapping[str, Any]]:
    """Yield raw layers, lowest precedence first."""
    yield deepcopy(DEFAULT_CONFIG)
    if config_path is not None:
        yield _read_yaml(config_path)
    yield EnvOverrides().to_update_dict()
    yield cli_overrides


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Build the validated ``AppConfig``.

    A ``.env`` file only adds variables that are not already set, so it
    ranks with (and below) the real environment.  Nothing is written to
    disk.

    Raises:
        FileNotFoundError: *config_path* or *dotenv_path* does not exist.
        ConfigError: The YAML file is not a mapping.
        pydantic.ValidationError: The merged values are invalid.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    merged: dict[str, Any] = {}
    for layer in _layers(config_path, cli_overrides or {}):
        _merge_into(merged, _sectioned(layer))
    return AppConfig.model_validate(merged)
