"""Value types shared by the geometry and labeling modules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

import numpy as np

from histomorph.errors import DegenerateCurveError


class ArcKind(Enum):
    """Classification of a run of perimeter indices."""

    UNLABELED = "unlabeled"
    RED = "red"
    GREEN = "green"
    DOUBLE = "double"
    SINGLE = "single"


class LabelColor(Enum):
    """Fluorochrome colors that can be annotated on a perimeter."""

    RED = "red"
    GREEN = "green"

    @property
    def kind(self) -> ArcKind:
        return ArcKind(self.value)


class Surface(Enum):
    """Bone envelope a perimeter or label line belongs to."""

    PERIOSTEAL = "Ps"
    ENDOSTEAL = "Es"

    @classmethod
    def parse(cls, value: str | Surface | None) -> Surface | None:
        """Accept ``"Ps"``/``"Es"`` or the full names, case-insensitively."""

        if value is None or isinstance(value, Surface):
            return value
        text = str(value).strip()
        for member in cls:
            if text.lower() in (member.value.lower(), member.name.lower()):
                return member
        raise ValueError(f"Unknown surface {value!r}; expected 'Ps' or 'Es'")


def as_points(values, *, name: str = "points") -> np.ndarray:
    """Return *values* as a float ``(N, 2)`` array (``N`` may be zero)."""

    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return np.zeros((0, 2), dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"{name} must have shape (N, 2), got {arr.shape}")
    return arr


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def as_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=np.float64)


@dataclass(frozen=True, eq=False)
class Curve:
    """Ordered polyline in pixel coordinates.

    Closed curves wrap from the last vertex back to index 0; open curves do
    not. The vertex array is copied and made read-only on construction.
    """

    points: np.ndarray
    closed: bool = True

    def __post_init__(self) -> None:
        arr = as_points(self.points, name="curve points").copy()
        if arr.shape[0] < 2:
            raise DegenerateCurveError(
                f"A curve needs at least 2 points, got {arr.shape[0]}"
            )
        arr.setflags(write=False)
        object.__setattr__(self, "points", arr)

    @classmethod
    def closed_from(cls, points) -> Curve:
        return cls(points, closed=True)

    @classmethod
    def open_from(cls, points) -> Curve:
        return cls(points, closed=False)

    def __len__(self) -> int:
        return int(self.points.shape[0])

    def __getitem__(self, index: int) -> Point:
        x, y = self.points[index]
        return Point(float(x), float(y))

    def __iter__(self) -> Iterator[Point]:
        for i in range(len(self)):
            yield self[i]

    def wrap(self, index: int) -> int:
        n = len(self)
        return (index + n) % n


@dataclass(frozen=True, eq=False)
class ColorAnnotation:
    """Point markers for one color on one perimeter.

    ``points`` trace where the label was seen; ``markers`` delimit where the
    label really starts and ends.
    """

    color: LabelColor
    points: np.ndarray
    markers: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", as_points(self.points, name="color points"))
        object.__setattr__(self, "markers", as_points(self.markers, name="boundary markers"))

    @classmethod
    def split(cls, color: LabelColor, points, marker_count: int) -> ColorAnnotation:
        """Build an annotation whose last *marker_count* points are markers."""

        arr = as_points(points)
        marker_count = int(marker_count)
        if marker_count < 0 or marker_count > arr.shape[0]:
            raise ValueError(
                f"marker_count must be between 0 and {arr.shape[0]}, got {marker_count}"
            )
        cut = arr.shape[0] - marker_count
        return cls(color, arr[:cut], arr[cut:])


@dataclass(frozen=True)
class ArcLabel:
    surface: Surface | None
    kind: ArcKind
    sequence: int

    def __str__(self) -> str:
        prefix = f"{self.surface.value}_" if self.surface is not None else ""
        return f"{prefix}{self.kind.value}_{self.sequence}"


@dataclass(frozen=True)
class Arc:
    """Contiguous run of perimeter indices ``start .. end - 1`` (mod ``size``).

    ``start`` lies in ``[0, size)`` and ``end`` in ``(start, start + size]``;
    an arc that passes index 0 therefore has ``end > size``.
    """

    start: int
    end: int
    size: int
    kind: ArcKind
    color: LabelColor | None = None
    label: ArcLabel | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.start < self.size:
            raise ValueError(f"arc start {self.start} outside [0, {self.size})")
        if not self.start < self.end <= self.start + self.size:
            raise ValueError(
                f"arc end {self.end} must lie in ({self.start}, {self.start + self.size}]"
            )

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def stop(self) -> int:
        return self.end % self.size

    @property
    def wraps(self) -> bool:
        return self.end > self.size

    def indices(self) -> np.ndarray:
        return np.arange(self.start, self.end, dtype=np.intp) % self.size

    def __contains__(self, index: int) -> bool:
        return (int(index) - self.start) % self.size < len(self)


@dataclass(frozen=True, eq=False)
class ThicknessSample:
    test_index: int
    reference_index: int
    test_point: Point
    reference_point: Point
    distance: float


@dataclass(frozen=True, eq=False)
class ThicknessResult:
    samples: tuple[ThicknessSample, ...]
    mean: float | None
    reference_is_first: bool = True

    @property
    def count(self) -> int:
        return len(self.samples)

    def distances(self) -> np.ndarray:
        return np.array([s.distance for s in self.samples], dtype=np.float64)

    @property
    def median(self) -> float | None:
        if not self.samples:
            return None
        return float(np.median(self.distances()))

    @property
    def std(self) -> float | None:
        if not self.samples:
            return None
        return float(np.std(self.distances()))


@dataclass(frozen=True, eq=False)
class PerimeterLabels:
    """Arcs derived for one perimeter."""

    size: int
    red: tuple[Arc, ...] = ()
    green: tuple[Arc, ...] = ()
    runs: tuple[Arc, ...] = field(default_factory=tuple)

    def runs_of(self, kind: ArcKind) -> tuple[Arc, ...]:
        return tuple(arc for arc in self.runs if arc.kind is kind)
