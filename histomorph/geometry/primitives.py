"""Distance, length and area helpers for curves in pixel space."""

from __future__ import annotations

import math

import numpy as np

from .types import Arc, Curve, Point


def distance(p: Point, q: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p.x - q.x, p.y - q.y)


def wrap_index(index: int, n: int) -> int:
    return (index + n) % n


def segment_lengths(curve: Curve) -> np.ndarray:
    """Return the length of segment ``i -> i + 1`` for every vertex ``i``.

    Closed curves include the segment from the last vertex back to the first,
    so the result has one entry per vertex. Open curves have ``N - 1`` entries.
    """

    pts = curve.points
    if curve.closed:
        nxt = np.roll(pts, -1, axis=0)
    else:
        nxt = pts[1:]
        pts = pts[:-1]
    return np.hypot(nxt[:, 0] - pts[:, 0], nxt[:, 1] - pts[:, 1])


def curve_length(curve: Curve) -> float:
    return float(segment_lengths(curve).sum())


def polygon_area(curve: Curve) -> float:
    """Shoelace area enclosed by a closed curve."""

    x = curve.points[:, 0]
    y = curve.points[:, 1]
    return float(0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))))


def arc_length(curve: Curve, arc: Arc) -> float:
    """Length of *arc* along the closed *curve*.

    Every index in the arc contributes the segment that starts at it, so the
    arcs of a partition add up to :func:`curve_length`.
    """

    if arc.size != len(curve):
        raise ValueError(
            f"arc was built for a perimeter of {arc.size} points, curve has {len(curve)}"
        )
    return float(segment_lengths(curve)[arc.indices()].sum())


def total_arc_length(curve: Curve, arcs) -> float:
    lengths = segment_lengths(curve)
    return float(sum(lengths[arc.indices()].sum() for arc in arcs))
