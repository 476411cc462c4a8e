"""Interlabel thickness from nearest-point correspondence of two label lines."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from histomorph.geometry.matching import match_unsorted
from histomorph.geometry.types import Curve, ThicknessResult, ThicknessSample

logger = logging.getLogger(__name__)

# The curve with more vertices is the reference; on equal counts the first
# curve of the pair is.
REFERENCE_RULE = "more-points-first-on-tie"

DEFAULT_STEP = 2
DEFAULT_MARGIN = 2


def choose_reference(curve_a: Curve, curve_b: Curve) -> tuple[Curve, Curve, bool]:
    """Return ``(reference, test, reference_is_first)``."""

    if len(curve_b) > len(curve_a):
        return curve_b, curve_a, False
    return curve_a, curve_b, True


def sample_indices(length: int, *, step: int = DEFAULT_STEP, margin: int = DEFAULT_MARGIN) -> np.ndarray:
    """Indices of the test curve to sample.

    ``length // step - margin`` samples are taken every *step* vertices from
    index 0, which keeps away from the far open end where the nearest point on
    the other line stops being a true counterpart.
    """

    if step < 1:
        raise ValueError(f"step must be >= 1, got {step}")
    count = max(0, length // step - margin)
    return np.arange(count, dtype=np.intp) * step


def estimate_thickness(
    curve_a: Curve,
    curve_b: Curve,
    *,
    step: int = DEFAULT_STEP,
    margin: int = DEFAULT_MARGIN,
) -> ThicknessResult:
    """Sample the separation between two paired label lines.

    The mean is ``None`` when the test curve is too short to give a single
    sample.
    """

    reference, test, reference_is_first = choose_reference(curve_a, curve_b)
    test_idx = sample_indices(len(test), step=step, margin=margin)
    if test_idx.size == 0:
        logger.debug("Test curve of %d points yields no thickness samples", len(test))
        return ThicknessResult(samples=(), mean=None, reference_is_first=reference_is_first)

    ref_idx = match_unsorted(reference, test.points[test_idx])
    samples = []
    for ti, ri in zip(test_idx, ref_idx):
        tp = test[int(ti)]
        rp = reference[int(ri)]
        samples.append(
            ThicknessSample(
                test_index=int(ti),
                reference_index=int(ri),
                test_point=tp,
                reference_point=rp,
                distance=float(np.hypot(tp.x - rp.x, tp.y - rp.y)),
            )
        )
    mean = float(np.mean([s.distance for s in samples]))
    return ThicknessResult(samples=tuple(samples), mean=mean, reference_is_first=reference_is_first)


def pair_curves(curves: Sequence[Curve]) -> list[tuple[Curve, Curve]]:
    """Group curves into adjacent pairs ``(0, 1), (2, 3), ...``."""

    if len(curves) % 2:
        logger.warning("Odd number of label lines (%d); the last one has no partner", len(curves))
    return [(curves[i], curves[i + 1]) for i in range(0, len(curves) - 1, 2)]


@dataclass(frozen=True, eq=False)
class SurfaceThickness:
    pairs: tuple[ThicknessResult, ...]
    mean: float | None

    @property
    def sample_count(self) -> int:
        return sum(r.count for r in self.pairs)


def surface_thickness(
    pairs: Sequence[tuple[Curve, Curve]],
    *,
    step: int = DEFAULT_STEP,
    margin: int = DEFAULT_MARGIN,
) -> SurfaceThickness:
    """Estimate every pair of a surface and pool all samples into one mean."""

    results = tuple(estimate_thickness(a, b, step=step, margin=margin) for a, b in pairs)
    pooled = [s.distance for r in results for s in r.samples]
    mean = float(np.mean(pooled)) if pooled else None
    return SurfaceThickness(pairs=results, mean=mean)
