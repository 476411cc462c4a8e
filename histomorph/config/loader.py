"""Locate, read and cache the histomorph configuration files."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml

from .models import ConfigBundle
from .validation import ensure_mapping

ENV_CONFIG_DIR = "HISTOMORPH_CONFIG_DIR"

# bundle field -> file name inside the config directory
CONFIG_FILES = {
    "analysis": "analysis.yaml",
    "dir_paths": "dir_paths.yaml",
}

_BUNDLE_CACHE: dict[Path, ConfigBundle] = {}


def get_config_dir() -> Path:
    """Directory named by ``HISTOMORPH_CONFIG_DIR``, else the repository ``config/``."""

    override = os.environ.get(ENV_CONFIG_DIR)
    if not override:
        return Path(__file__).resolve().parents[2] / "config"
    return Path(override).expanduser().resolve()


def _read_data_file(path: Path) -> dict[str, Any]:
    # an absent or empty file means "use the defaults"
    if not path.is_file():
        return {}
    text = path.read_text(encoding="utf-8")
    parsed = json.loads(text) if path.suffix.lower() == ".json" else yaml.safe_load(text)
    return ensure_mapping(parsed, name=str(path))


def _load_from_dir(config_dir: Path) -> ConfigBundle:
    sections = {
        field: _read_data_file(config_dir / filename)
        for field, filename in CONFIG_FILES.items()
    }
    return ConfigBundle(config_dir=config_dir, **sections)


def clear_config_cache() -> None:
    _BUNDLE_CACHE.clear()


def get_config_bundle(config_dir: Path | None = None) -> ConfigBundle:
    """Bundle for *config_dir* (default :func:`get_config_dir`), loaded once per directory."""

    key = Path(config_dir or get_config_dir()).resolve()
    if key not in _BUNDLE_CACHE:
        _BUNDLE_CACHE[key] = _load_from_dir(key)
    return _BUNDLE_CACHE[key]
