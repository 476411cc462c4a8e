"""Typed containers for parsed configuration files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class ConfigBundle:
    """In-memory representation of the project configuration."""

    config_dir: Path
    analysis: dict[str, Any]
    dir_paths: dict[str, Any]


@dataclass(frozen=True)
class AnalysisSettings:
    """Defaults applied when a caller does not pass explicit values."""

    um_per_pixel: float = 1.0
    interval_days: float | None = None
    thickness_step: int = 2
    thickness_margin: int = 2
    perimeter_points: int | None = None
    line_points: int | None = None
    max_workers: int = 1
