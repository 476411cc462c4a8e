"""Nearest-vertex correspondence between query points and a curve.

Searches are brute force: every query is compared against every curve
vertex. Curves handled here hold a few hundred vertices, well within what a
dense distance matrix covers.

Exact ties follow :data:`TIE_BREAK`: the lowest curve index wins, which is
the first minimum met when scanning the curve from index 0. Any faster search
substituted here has to keep that rule.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.spatial.distance import cdist

from .types import Curve, Point, as_points

TIE_BREAK = "lowest-index"


def _query_array(points) -> np.ndarray:
    if isinstance(points, Point):
        return points.as_array()[None, :]
    if isinstance(points, Sequence) and points and isinstance(points[0], Point):
        return np.array([p.as_array() for p in points], dtype=np.float64)
    arr = np.asarray(points, dtype=np.float64)
    if arr.ndim == 1 and arr.shape == (2,):
        return arr[None, :]
    return as_points(arr, name="query points")


def distances_to(curve: Curve, points) -> np.ndarray:
    """Return the ``(Q, N)`` matrix of distances from queries to vertices."""

    query = _query_array(points)
    if query.shape[0] == 0:
        return np.zeros((0, len(curve)), dtype=np.float64)
    return cdist(query, curve.points, metric="euclidean")


def _nearest(dist: np.ndarray) -> np.ndarray:
    # argmin reports the first occurrence of the minimum, i.e. the lowest index
    return np.argmin(dist, axis=1).astype(np.intp)


def match(curve: Curve, point) -> int:
    """Index of the curve vertex closest to *point*."""

    query = _query_array(point)
    if query.shape[0] != 1:
        raise ValueError(f"match expects a single point, got {query.shape[0]}")
    return int(_nearest(distances_to(curve, query))[0])


def match_unsorted(curve: Curve, points) -> np.ndarray:
    """Nearest vertex index for every query, in query order."""

    dist = distances_to(curve, points)
    if dist.shape[0] == 0:
        return np.zeros(0, dtype=np.intp)
    return _nearest(dist)


def match_all(curve: Curve, points) -> np.ndarray:
    """Nearest vertex indices for all queries, sorted ascending.

    Two queries landing on the same vertex both keep their entry.
    """

    return np.sort(match_unsorted(curve, points), kind="stable")
