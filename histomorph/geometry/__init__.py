"""Curve primitives and nearest-point matching."""

from .matching import TIE_BREAK, match, match_all
from .primitives import arc_length, curve_length, distance, polygon_area, wrap_index
from .types import (
    Arc,
    ArcKind,
    ArcLabel,
    ColorAnnotation,
    Curve,
    LabelColor,
    PerimeterLabels,
    Point,
    Surface,
    ThicknessResult,
    ThicknessSample,
)

__all__ = [
    "TIE_BREAK",
    "Arc",
    "ArcKind",
    "ArcLabel",
    "ColorAnnotation",
    "Curve",
    "LabelColor",
    "PerimeterLabels",
    "Point",
    "Surface",
    "ThicknessResult",
    "ThicknessSample",
    "arc_length",
    "curve_length",
    "distance",
    "match",
    "match_all",
    "polygon_area",
    "wrap_index",
]
