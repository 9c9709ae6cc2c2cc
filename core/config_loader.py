"""Configuration loading: built-in defaults merged with an optional YAML file."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from core.errors import ConfigurationError

CONFIG_FILENAMES = ("todotree.yaml", ".todotree.yaml")

DEFAULT_CONFIG: dict[str, Any] = {
    "tree": {
        "format": "term",
        "hide_completed": False,
        "depth": 0,
        "separator": "\n",
        "no_color": False,
        "auto_add": False,
        "hide_comment": False,
        "hide_owner": False,
        "owners": [],
        "reverse": False,
        "width": 0,
    },
    "watch": {
        "interval": 1.0,
    },
}


def load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML from file, returning empty mapping when missing."""
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"cannot parse config file: {exc}", source=str(path)) from exc
    if not isinstance(data, dict):
        raise ConfigurationError("config file must contain a mapping", source=str(path))
    return data


def merge_dicts(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def find_config_file(directory: Path) -> Path | None:
    for filename in CONFIG_FILENAMES:
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


def load_effective_config(config_path: Path | None = None, cwd: Path | None = None) -> dict[str, Any]:
    """Defaults overlaid with ``config_path`` or the first config file found in ``cwd``."""
    if config_path is not None and not config_path.exists():
        raise ConfigurationError("config file not found", source=str(config_path))
    path = config_path or find_config_file((cwd or Path.cwd()).resolve())
    if path is None:
        return copy.deepcopy(DEFAULT_CONFIG)
    return merge_dicts(copy.deepcopy(DEFAULT_CONFIG), load_yaml(path))
