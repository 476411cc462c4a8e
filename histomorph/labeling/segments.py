"""Turn color point annotations into labeled arcs of a closed perimeter.

Two steps are involved. :func:`extract_color_arcs` snaps the color points and
boundary markers of one fluorochrome onto the perimeter and keeps the spans
between consecutive color points that hold a boundary marker.
:func:`classify_runs` then overlays the red and green index sets and cuts the
perimeter into double-labeled and single-labeled runs.
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

from histomorph.geometry.matching import match_all
from histomorph.geometry.types import (
    Arc,
    ArcKind,
    ArcLabel,
    ColorAnnotation,
    Curve,
    LabelColor,
    PerimeterLabels,
    Surface,
)

logger = logging.getLogger(__name__)

_NONE, _DOUBLE = 0, 2


def color_spans(size: int, color_indices) -> list[tuple[int, int]]:
    """Spans ``(start, end)`` between consecutive sorted color indices.

    The last span closes the loop from the highest index through 0 back to the
    lowest one, so its ``end`` exceeds ``size``. Consecutive duplicates give
    no span; when every index is identical the closing span covers the whole
    perimeter.
    """

    idx = np.sort(np.asarray(color_indices, dtype=np.intp))
    if idx.size == 0:
        return []
    spans = [
        (int(a), int(b))
        for a, b in zip(idx[:-1], idx[1:])
        if b > a
    ]
    spans.append((int(idx[-1]), int(idx[0]) + size))
    return spans


def _span_holds_marker(start: int, end: int, size: int, marker_indices: np.ndarray) -> bool:
    if marker_indices.size == 0:
        return False
    offsets = (marker_indices - start) % size
    return bool(np.any(offsets < end - start))


def _merge_spans(spans: list[tuple[int, int]], size: int) -> list[tuple[int, int]]:
    merged: list[list[int]] = []
    for start, end in spans:
        if merged and merged[-1][1] % size == start % size and merged[-1][1] - merged[-1][0] < size:
            merged[-1][1] += end - start
        else:
            merged.append([start, end])
    if len(merged) > 1 and merged[-1][1] % size == merged[0][0]:
        first = merged.pop(0)
        merged[-1][1] += first[1] - first[0]
    return sorted((s, e) for s, e in merged)


def extract_color_arcs(
    perimeter: Curve,
    color_points,
    boundary_markers,
    *,
    color: LabelColor = LabelColor.RED,
    surface: Surface | None = None,
) -> list[Arc]:
    """Arcs of *perimeter* carrying the label traced by *color_points*.

    Only spans between consecutive color points that contain at least one
    boundary marker are trusted; the others are dropped as stray markers.
    Adjacent surviving spans are joined, also across index 0, and the arcs
    are returned in perimeter order.
    """

    size = len(perimeter)
    idx_label = match_all(perimeter, boundary_markers)
    idx_color = match_all(perimeter, color_points)

    kept = []
    for start, end in color_spans(size, idx_color):
        if _span_holds_marker(start, end, size, idx_label):
            kept.append((start, end))
        else:
            logger.debug("Dropping %s span [%d, %d): no boundary marker", color.value, start, end % size)

    arcs = []
    for seq, (start, end) in enumerate(_merge_spans(kept, size), start=1):
        arcs.append(
            Arc(
                start=start,
                end=end,
                size=size,
                kind=color.kind,
                color=color,
                label=ArcLabel(surface, color.kind, seq),
            )
        )
    return arcs


def extract_annotation_arcs(
    perimeter: Curve,
    annotation: ColorAnnotation | None,
    *,
    surface: Surface | None = None,
) -> list[Arc]:
    """:func:`extract_color_arcs` for an annotation that may be missing."""

    if annotation is None:
        logger.debug("No annotation supplied; color contributes no arcs")
        return []
    if annotation.points.shape[0] == 0:
        logger.debug("%s annotation has no color points", annotation.color.value)
        return []
    if annotation.markers.shape[0] == 0:
        logger.warning(
            "%s annotation has no boundary markers; no %s arcs can be anchored",
            annotation.color.value,
            annotation.color.value,
        )
    return extract_color_arcs(
        perimeter,
        annotation.points,
        annotation.markers,
        color=annotation.color,
        surface=surface,
    )


def arc_index_set(arcs: Iterable[Arc]) -> set[int]:
    """Union of the perimeter indices covered by *arcs*."""

    out: set[int] = set()
    for arc in arcs:
        out.update(int(i) for i in arc.indices())
    return out


def _membership(size: int, indices, name: str) -> np.ndarray:
    flags = np.zeros(size, dtype=bool)
    idx = np.fromiter((int(i) for i in indices), dtype=np.intp)
    if idx.size:
        if idx.min() < 0 or idx.max() >= size:
            raise ValueError(f"{name} indices must lie in [0, {size})")
        flags[idx] = True
    return flags


def _run_color(red: np.ndarray, green: np.ndarray) -> LabelColor | None:
    if red.all():
        return LabelColor.RED
    if green.all():
        return LabelColor.GREEN
    return None


def classify_runs(
    size: int,
    red_indices: Iterable[int],
    green_indices: Iterable[int],
    *,
    surface: Surface | None = None,
) -> list[Arc]:
    """Partition the labeled part of a perimeter into double and single runs.

    Indices ``0 .. size - 1`` are scanned in order. An index present in both
    sets is double labeled, one present in a single set is single labeled and
    the rest is skipped. Each maximal stretch of one classification becomes an
    :class:`Arc`, so a red-only stretch followed by a green-only one is a
    single run. Its ``color`` is set only when one color covers the whole run.
    Runs never continue past ``size - 1`` into index 0.
    """

    red = _membership(size, red_indices, "red")
    green = _membership(size, green_indices, "green")
    codes = red.astype(np.int8) + green.astype(np.int8)

    counters = {ArcKind.DOUBLE: 0, ArcKind.SINGLE: 0}
    runs: list[Arc] = []
    i = 0
    while i < size:
        code = int(codes[i])
        j = i + 1
        while j < size and codes[j] == code:
            j += 1
        if code != _NONE:
            if code == _DOUBLE:
                kind, color = ArcKind.DOUBLE, None
            else:
                kind = ArcKind.SINGLE
                color = _run_color(red[i:j], green[i:j])
            counters[kind] += 1
            runs.append(
                Arc(
                    start=i,
                    end=j,
                    size=size,
                    kind=kind,
                    color=color,
                    label=ArcLabel(surface, kind, counters[kind]),
                )
            )
        i = j
    return runs


def label_perimeter(
    perimeter: Curve,
    red: ColorAnnotation | None,
    green: ColorAnnotation | None,
    *,
    surface: Surface | None = None,
) -> PerimeterLabels:
    """Extract both colors and classify the perimeter in one pass."""

    red_arcs = extract_annotation_arcs(perimeter, red, surface=surface)
    green_arcs = extract_annotation_arcs(perimeter, green, surface=surface)
    runs = classify_runs(
        len(perimeter),
        arc_index_set(red_arcs),
        arc_index_set(green_arcs),
        surface=surface,
    )
    return PerimeterLabels(
        size=len(perimeter),
        red=tuple(red_arcs),
        green=tuple(green_arcs),
        runs=tuple(runs),
    )
