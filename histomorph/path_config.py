"""Utility for accessing configured directories and analysis defaults."""

from __future__ import annotations

import copy
import os
import tempfile
from pathlib import Path
from typing import Any

from histomorph.config import AnalysisSettings, clear_config_cache, get_config_bundle
from histomorph.config.validation import ensure_mapping, ensure_positive, optional_count

DEFAULT_DIRS = {
    "results": str(Path.home() / "histomorph" / "results"),
    "plots": str(Path.home() / "histomorph" / "plots"),
    "temp_root": str(Path(tempfile.gettempdir()) / "histomorph"),
}

DEFAULT_ANALYSIS: dict[str, Any] = {
    "calibration": {"um_per_pixel": 1.0},
    "labels": {"interval_days": None},
    "thickness": {"step": 2, "margin": 2},
    "resample": {"perimeter_points": None, "line_points": None},
    "batch": {"max_workers": 1},
}


def reload_config_cache() -> None:
    """Forget cached configuration so the next lookup re-reads disk."""

    clear_config_cache()


def _merge(base: dict, override: dict) -> dict:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def get_dir(key: str) -> Path:
    """Return the configured directory for *key*, creating it if needed."""

    dirs = {**DEFAULT_DIRS, **get_config_bundle().dir_paths}
    value = dirs.get(key)
    if value is None:
        raise KeyError(f"No directory configured for {key!r}")
    path = Path(os.path.expanduser(str(value)))
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_analysis_config() -> dict:
    """Return ``analysis.yaml`` merged over the built-in defaults."""

    return _merge(DEFAULT_ANALYSIS, get_config_bundle().analysis)


def get_analysis_settings() -> AnalysisSettings:
    """Return validated analysis defaults."""

    cfg = get_analysis_config()
    calibration = ensure_mapping(cfg.get("calibration"), name="calibration")
    labels = ensure_mapping(cfg.get("labels"), name="labels")
    thickness = ensure_mapping(cfg.get("thickness"), name="thickness")
    resample = ensure_mapping(cfg.get("resample"), name="resample")
    batch = ensure_mapping(cfg.get("batch"), name="batch")
    return AnalysisSettings(
        um_per_pixel=ensure_positive(calibration.get("um_per_pixel", 1.0), name="calibration.um_per_pixel"),
        interval_days=ensure_positive(labels.get("interval_days"), name="labels.interval_days", allow_none=True),
        thickness_step=optional_count(thickness.get("step", 2), name="thickness.step"),
        thickness_margin=optional_count(thickness.get("margin", 2), name="thickness.margin", minimum=0),
        perimeter_points=optional_count(resample.get("perimeter_points"), name="resample.perimeter_points", minimum=3),
        line_points=optional_count(resample.get("line_points"), name="resample.line_points", minimum=2),
        max_workers=optional_count(batch.get("max_workers", 1), name="batch.max_workers"),
    )
