"""Smooth and resample hand-drawn outlines to a fixed number of vertices."""

from __future__ import annotations

import numpy as np
from scipy.interpolate import splev, splprep

from histomorph.errors import DegenerateCurveError

from .types import Curve, as_points


def _drop_repeats(pts: np.ndarray, closed: bool) -> np.ndarray:
    keep = np.ones(pts.shape[0], dtype=bool)
    keep[1:] = np.any(np.diff(pts, axis=0) != 0.0, axis=1)
    pts = pts[keep]
    if closed and pts.shape[0] > 1 and np.array_equal(pts[0], pts[-1]):
        pts = pts[:-1]
    return pts


def _linear_resample(pts: np.ndarray, count: int, closed: bool) -> np.ndarray:
    if closed:
        pts = np.vstack([pts, pts[:1]])
    seg = np.hypot(*np.diff(pts, axis=0).T)
    s = np.concatenate([[0.0], np.cumsum(seg)])
    targets = np.linspace(0.0, s[-1], count, endpoint=not closed)
    return np.column_stack([np.interp(targets, s, pts[:, 0]), np.interp(targets, s, pts[:, 1])])


def resample_curve(points, count: int, *, closed: bool, smoothing: float = 0.0) -> Curve:
    """Fit a parametric spline through *points* and evaluate *count* vertices.

    Closed outlines get a periodic spline. Fewer than four distinct points
    cannot carry a cubic spline, so those are interpolated linearly along
    their arc length instead.
    """

    if count < 2:
        raise ValueError(f"count must be >= 2, got {count}")
    pts = _drop_repeats(as_points(points), closed)
    if pts.shape[0] < 2:
        raise DegenerateCurveError(f"Cannot resample an outline of {pts.shape[0]} distinct points")

    if pts.shape[0] < 4:
        return Curve(_linear_resample(pts, count, closed), closed=closed)

    if closed:
        pts = np.vstack([pts, pts[:1]])
    tck, _ = splprep([pts[:, 0], pts[:, 1]], s=float(smoothing), per=int(closed))
    u = np.linspace(0.0, 1.0, count, endpoint=not closed)
    x, y = splev(u, tck)
    return Curve(np.column_stack([x, y]), closed=closed)
