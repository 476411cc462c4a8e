"""Config loading helpers for histomorph."""

from .loader import clear_config_cache, get_config_bundle, get_config_dir
from .models import AnalysisSettings, ConfigBundle

__all__ = [
    "AnalysisSettings",
    "ConfigBundle",
    "clear_config_cache",
    "get_config_bundle",
    "get_config_dir",
]
