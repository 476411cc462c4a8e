"""Typed analysis entrypoints built on top of the labeling kernels."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

import numpy as np

from histomorph.config.validation import ensure_positive
from histomorph.errors import HistomorphError
from histomorph.geometry.primitives import curve_length, polygon_area, total_arc_length
from histomorph.geometry.types import ArcKind, Curve, PerimeterLabels
from histomorph.io.report import ReportSink, perimeter_record, thickness_record
from histomorph.labeling.segments import label_perimeter
from histomorph.labeling.thickness import (
    DEFAULT_MARGIN,
    DEFAULT_STEP,
    pair_curves,
    surface_thickness,
)

from .indices import dynamic_indices
from .types import PerimeterResult, PerimeterUnit, ThicknessUnit, ThicknessUnitResult

logger = logging.getLogger(__name__)

Labeler = Callable[..., PerimeterLabels]


def analyze_perimeter(
    unit: PerimeterUnit,
    *,
    scale: float = 1.0,
    labeler: Labeler = label_perimeter,
) -> PerimeterResult:
    """Label one perimeter and measure its arcs.

    Everything is measured in pixels and multiplied by *scale* (physical
    length per pixel) at the end.
    """

    perimeter = unit.perimeter
    if not perimeter.closed:
        raise HistomorphError(f"{unit.name}: perimeter curve must be closed")
    if unit.red is None and unit.green is None:
        logger.info("%s: no label annotations; only perimeter and area are reported", unit.name)

    labels = labeler(perimeter, unit.red, unit.green, surface=unit.surface)
    return PerimeterResult(
        name=unit.name,
        surface=unit.surface,
        perimeter_length=curve_length(perimeter) * scale,
        area=polygon_area(perimeter) * scale * scale,
        red_length=total_arc_length(perimeter, labels.red) * scale,
        green_length=total_arc_length(perimeter, labels.green) * scale,
        double_length=total_arc_length(perimeter, labels.runs_of(ArcKind.DOUBLE)) * scale,
        single_length=total_arc_length(perimeter, labels.runs_of(ArcKind.SINGLE)) * scale,
        labels=labels,
    )


def analyze_thickness(
    unit: ThicknessUnit,
    *,
    scale: float = 1.0,
    step: int = DEFAULT_STEP,
    margin: int = DEFAULT_MARGIN,
) -> ThicknessUnitResult:
    """Mean interlabel thickness of one surface, pooled over its line pairs."""

    curves: Sequence[Curve] = unit.curves
    pairs = pair_curves(curves)
    if not pairs:
        logger.warning("%s: no complete pair of label lines", unit.name)
    pooled = surface_thickness(pairs, step=step, margin=margin)
    distances = [s.distance for r in pooled.pairs for s in r.samples]
    median = float(np.median(distances)) if distances else None
    return ThicknessUnitResult(
        name=unit.name,
        surface=unit.surface,
        mean_thickness=pooled.mean * scale if pooled.mean is not None else None,
        median_thickness=median * scale if median is not None else None,
        sample_count=pooled.sample_count,
        pair_count=len(pairs),
    )


@dataclass(frozen=True)
class BatchSummary:
    """Counts of a batch run plus the perimeter results that succeeded.

    ``perimeters`` pairs each analyzed :class:`PerimeterUnit` with its result
    so callers can reuse the labels without labeling again.
    """

    completed: int
    failed: int
    perimeters: tuple[tuple[PerimeterUnit, PerimeterResult], ...] = ()


def _guarded(func: Callable[..., Any], unit, **kwargs) -> tuple[Any, str | None]:
    try:
        return func(unit, **kwargs), None
    except HistomorphError as exc:
        logger.exception("Analysis of %s failed", unit.name)
        return None, str(exc)


def _run_all(func, units: Sequence, max_workers: int, **kwargs) -> list[tuple[Any, str | None]]:
    if max_workers > 1 and len(units) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = [pool.submit(_guarded, func, unit, **kwargs) for unit in units]
            return [f.result() for f in futures]
    return [_guarded(func, unit, **kwargs) for unit in units]


def _key(unit) -> tuple[str, str]:
    return unit.name, unit.surface.value if unit.surface is not None else ""


def _split_duplicates(units: Iterable, section: str) -> tuple[list, list[dict[str, Any]]]:
    """Keep the first unit per (name, surface); report the others as errors."""

    unique, rejected = [], []
    seen: set[tuple[str, str]] = set()
    for unit in units:
        key = _key(unit)
        if key in seen:
            logger.warning("Duplicate %s unit %s %s; skipped", section, *key)
            rejected.append(
                {
                    "name": key[0],
                    "surface": key[1],
                    "error": f"duplicate {section} unit for {key[0]} {key[1]}".rstrip(),
                }
            )
            continue
        seen.add(key)
        unique.append(unit)
    return unique, rejected


def run_batch(
    perimeters: Iterable[PerimeterUnit],
    thickness: Iterable[ThicknessUnit] = (),
    *,
    sink: ReportSink,
    scale: float = 1.0,
    step: int = DEFAULT_STEP,
    margin: int = DEFAULT_MARGIN,
    max_workers: int = 1,
    interval_days: float | None = None,
) -> BatchSummary:
    """Analyze every unit and append one record per (name, surface) to *sink*.

    A perimeter and a thickness unit with the same name and surface share a
    record. A unit that fails with :class:`HistomorphError` is logged and
    reported in the ``error`` column; the remaining units are still processed.
    A second unit of the same section with an already used name and surface is
    not analyzed and gets its own error record. *interval_days* is checked
    before any unit is analyzed.
    """

    interval_days = ensure_positive(interval_days, name="interval_days", allow_none=True)
    perimeters, duplicates = _split_duplicates(perimeters, "perimeter")
    thickness, more = _split_duplicates(thickness, "thickness")
    duplicates.extend(more)

    perim_out = _run_all(analyze_perimeter, perimeters, max_workers, scale=scale)
    thick_out = _run_all(
        analyze_thickness, thickness, max_workers, scale=scale, step=step, margin=margin
    )

    records: dict[tuple[str, str], dict[str, Any]] = {}
    perim_results: dict[tuple[str, str], PerimeterResult] = {}
    thick_results: dict[tuple[str, str], ThicknessUnitResult] = {}
    analyzed: list[tuple[PerimeterUnit, PerimeterResult]] = []
    failed = len(duplicates)

    def _record(key):
        return records.setdefault(key, {"name": key[0], "surface": key[1]})

    for unit, (result, error) in zip(perimeters, perim_out):
        rec = _record(_key(unit))
        if error is not None:
            failed += 1
            rec["error"] = error
            continue
        perim_results[_key(unit)] = result
        analyzed.append((unit, result))
        rec.update(perimeter_record(result))

    for unit, (result, error) in zip(thickness, thick_out):
        rec = _record(_key(unit))
        if error is not None:
            failed += 1
            rec["error"] = "; ".join(filter(None, [rec.get("error"), error]))
            continue
        thick_results[_key(unit)] = result
        rec.update(thickness_record(result))

    if interval_days is not None:
        for key, result in perim_results.items():
            idx = dynamic_indices(result, thick_results.get(key), interval_days)
            records[key].update({"ms_bs": idx.ms_bs, "mar": idx.mar, "bfr_bs": idx.bfr_bs})

    sink.extend(records.values())
    sink.extend(duplicates)
    total = len(perimeters) + len(thickness) + len(duplicates)
    return BatchSummary(completed=total - failed, failed=failed, perimeters=tuple(analyzed))
