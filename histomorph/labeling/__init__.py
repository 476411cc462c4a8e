"""Perimeter labeling and interlabel thickness."""

from .segments import classify_runs, extract_color_arcs, label_perimeter
from .thickness import estimate_thickness, pair_curves, surface_thickness

__all__ = [
    "classify_runs",
    "estimate_thickness",
    "extract_color_arcs",
    "label_perimeter",
    "pair_curves",
    "surface_thickness",
]
