"""Read perimeters, color annotations and label lines from YAML/JSON.

Expected layout::

    perimeters:
      - name: femur01
        surface: Ps
        perimeter: [[x, y], ...]
        red:   {points: [[x, y], ...], markers: [[x, y], ...]}
        green: {points: [[x, y], ...], marker_count: 2}
    thickness:
      - name: femur01
        surface: Ps
        curves: [[[x, y], ...], [[x, y], ...]]

``marker_count`` means the last points of ``points`` are the boundary
markers. Adjacent entries of ``curves`` are paired for thickness.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from histomorph.analysis.types import PerimeterUnit, ThicknessUnit
from histomorph.errors import AnnotationError, DegenerateCurveError, HistomorphError
from histomorph.geometry.resample import resample_curve
from histomorph.geometry.types import ColorAnnotation, Curve, LabelColor, Surface, as_points

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RejectedUnit:
    name: str
    surface: Surface | None
    reason: str


@dataclass
class AnnotationDocument:
    perimeters: list[PerimeterUnit] = field(default_factory=list)
    thickness: list[ThicknessUnit] = field(default_factory=list)
    rejected: list[RejectedUnit] = field(default_factory=list)


def _read_mapping(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise AnnotationError(f"{path}: could not parse annotation file: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise AnnotationError(f"{path} must contain a mapping at top level")
    return data


def _points(value, *, where: str):
    try:
        return as_points(value if value is not None else [], name=where)
    except (TypeError, ValueError) as exc:
        raise AnnotationError(f"{where}: {exc}") from exc


def _curve(value, *, closed: bool, count: int | None, where: str) -> Curve:
    pts = _points(value, where=where)
    try:
        if count is not None:
            return resample_curve(pts, count, closed=closed)
        return Curve(pts, closed=closed)
    except DegenerateCurveError as exc:
        raise DegenerateCurveError(f"{where}: {exc}") from exc


def _surface(entry: dict, where: str) -> Surface | None:
    try:
        return Surface.parse(entry.get("surface"))
    except ValueError as exc:
        raise AnnotationError(f"{where}: {exc}") from exc


def _color(entry: dict, color: LabelColor, where: str) -> ColorAnnotation | None:
    block = entry.get(color.value)
    if block is None:
        return None
    if not isinstance(block, dict):
        raise AnnotationError(f"{where}.{color.value} must be a mapping")
    points = _points(block.get("points"), where=f"{where}.{color.value}.points")
    if "marker_count" in block:
        if "markers" in block:
            raise AnnotationError(f"{where}.{color.value}: give either markers or marker_count")
        try:
            return ColorAnnotation.split(color, points, int(block["marker_count"]))
        except ValueError as exc:
            raise AnnotationError(f"{where}.{color.value}: {exc}") from exc
    markers = _points(block.get("markers"), where=f"{where}.{color.value}.markers")
    return ColorAnnotation(color, points, markers)


def _name(entry: Any, index: int, section: str) -> str:
    if not isinstance(entry, dict):
        raise AnnotationError(f"{section}[{index}] must be a mapping")
    return str(entry.get("name", f"{section}{index + 1}"))


def _perimeter_unit(entry: dict, name: str, count: int | None) -> PerimeterUnit:
    if "perimeter" not in entry:
        raise AnnotationError(f"{name}: missing 'perimeter'")
    return PerimeterUnit(
        name=name,
        surface=_surface(entry, name),
        perimeter=_curve(entry["perimeter"], closed=True, count=count, where=name),
        red=_color(entry, LabelColor.RED, name),
        green=_color(entry, LabelColor.GREEN, name),
    )


def _thickness_unit(entry: dict, name: str, count: int | None) -> ThicknessUnit:
    raw_curves = entry.get("curves") or []
    if not isinstance(raw_curves, list):
        raise AnnotationError(f"{name}: 'curves' must be a list of point lists")
    curves = tuple(
        _curve(c, closed=False, count=count, where=f"{name}.curves[{j}]")
        for j, c in enumerate(raw_curves)
    )
    return ThicknessUnit(name=name, surface=_surface(entry, name), curves=curves)


def _reject(doc: AnnotationDocument, entry: dict, name: str, exc: HistomorphError) -> None:
    try:
        surface = Surface.parse(entry.get("surface"))
    except ValueError:
        surface = None
    logger.warning("Skipping %s: %s", name, exc)
    doc.rejected.append(RejectedUnit(name, surface, str(exc)))


def parse_document(
    data: dict[str, Any],
    *,
    perimeter_points: int | None = None,
    line_points: int | None = None,
) -> AnnotationDocument:
    """Build analysis units from an already parsed mapping.

    An entry that cannot be turned into a unit (bad points, unknown surface,
    degenerate curve) is recorded in ``rejected`` and the remaining entries
    are still read. Only a non-mapping entry fails the whole document.
    """

    doc = AnnotationDocument()
    for i, entry in enumerate(data.get("perimeters") or []):
        name = _name(entry, i, "perimeters")
        try:
            doc.perimeters.append(_perimeter_unit(entry, name, perimeter_points))
        except HistomorphError as exc:
            _reject(doc, entry, name, exc)

    for i, entry in enumerate(data.get("thickness") or []):
        name = _name(entry, i, "thickness")
        try:
            doc.thickness.append(_thickness_unit(entry, name, line_points))
        except HistomorphError as exc:
            _reject(doc, entry, name, exc)

    logger.debug(
        "Parsed %d perimeter unit(s) and %d thickness unit(s)",
        len(doc.perimeters),
        len(doc.thickness),
    )
    return doc


def load_annotation_file(
    path: str | Path,
    *,
    perimeter_points: int | None = None,
    line_points: int | None = None,
) -> AnnotationDocument:
    """Load an annotation document from a ``.yaml``/``.yml``/``.json`` file."""

    path = Path(path).expanduser()
    if not path.exists():
        raise FileNotFoundError(f"Annotation file not found: {path}")
    return parse_document(
        _read_mapping(path),
        perimeter_points=perimeter_points,
        line_points=line_points,
    )
