"""Typed request/response models for per-section analyses."""

from __future__ import annotations

from dataclasses import dataclass, field

from histomorph.geometry.types import ArcKind, ColorAnnotation, Curve, PerimeterLabels, Surface


@dataclass(frozen=True, eq=False)
class PerimeterUnit:
    name: str
    surface: Surface | None
    perimeter: Curve
    red: ColorAnnotation | None = None
    green: ColorAnnotation | None = None


@dataclass(frozen=True, eq=False)
class ThicknessUnit:
    """Label lines of one surface; adjacent curves form a pair."""

    name: str
    surface: Surface | None
    curves: tuple[Curve, ...] = field(default_factory=tuple)


@dataclass(frozen=True, eq=False)
class PerimeterResult:
    """Lengths in physical units, area in squared physical units."""

    name: str
    surface: Surface | None
    perimeter_length: float
    area: float
    red_length: float
    green_length: float
    double_length: float
    single_length: float
    labels: PerimeterLabels

    @property
    def double_count(self) -> int:
        return len(self.labels.runs_of(ArcKind.DOUBLE))

    @property
    def single_count(self) -> int:
        return len(self.labels.runs_of(ArcKind.SINGLE))


@dataclass(frozen=True, eq=False)
class ThicknessUnitResult:
    name: str
    surface: Surface | None
    mean_thickness: float | None
    median_thickness: float | None
    sample_count: int
    pair_count: int
