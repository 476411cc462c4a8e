import math

import numpy as np
import pytest

from histomorph.errors import DegenerateCurveError
from histomorph.geometry.primitives import (
    arc_length,
    curve_length,
    distance,
    polygon_area,
    segment_lengths,
    total_arc_length,
    wrap_index,
)
from histomorph.geometry.types import Arc, ArcKind, Curve, Point

from helpers import square_points


def test_distance_is_euclidean():
    assert distance(Point(0, 0), Point(3, 4)) == pytest.approx(5.0)


def test_wrap_index_handles_negative_and_overflow():
    assert wrap_index(-1, 12) == 11
    assert wrap_index(12, 12) == 0
    assert wrap_index(5, 12) == 5


def test_closed_curve_length_includes_closing_segment():
    square = Curve.closed_from(square_points(4))
    assert len(segment_lengths(square)) == 16
    assert curve_length(square) == pytest.approx(16.0)


def test_open_curve_length_stops_at_last_vertex():
    line = Curve.open_from([(0, 0), (3, 4), (3, 10)])
    assert len(segment_lengths(line)) == 2
    assert curve_length(line) == pytest.approx(11.0)


def test_polygon_area_is_orientation_independent():
    pts = square_points(4)
    assert polygon_area(Curve.closed_from(pts)) == pytest.approx(16.0)
    assert polygon_area(Curve.closed_from(pts[::-1])) == pytest.approx(16.0)


def test_arc_length_of_wrapping_arc():
    square = Curve.closed_from(square_points(4))
    arc = Arc(start=14, end=18, size=16, kind=ArcKind.RED)
    assert arc.wraps
    assert arc.stop == 2
    assert arc_length(square, arc) == pytest.approx(4.0)


def test_partition_lengths_add_up_to_perimeter():
    t = np.linspace(0.0, 2.0 * math.pi, 30, endpoint=False)
    curve = Curve.closed_from(np.column_stack([5 * np.cos(t), 3 * np.sin(t)]))
    arcs = [
        Arc(start=0, end=7, size=30, kind=ArcKind.SINGLE),
        Arc(start=7, end=19, size=30, kind=ArcKind.DOUBLE),
        Arc(start=19, end=30, size=30, kind=ArcKind.UNLABELED),
    ]
    assert total_arc_length(curve, arcs) == pytest.approx(curve_length(curve))


def test_arc_length_rejects_foreign_arc():
    square = Curve.closed_from(square_points(4))
    with pytest.raises(ValueError):
        arc_length(square, Arc(start=0, end=3, size=12, kind=ArcKind.RED))


def test_curve_needs_two_points():
    with pytest.raises(DegenerateCurveError):
        Curve.closed_from([(1.0, 2.0)])
    with pytest.raises(DegenerateCurveError):
        Curve.open_from([])


def test_curve_points_are_read_only_copy():
    src = np.array([[0.0, 0.0], [1.0, 1.0]])
    curve = Curve.open_from(src)
    src[0, 0] = 99.0
    assert curve[0] == Point(0.0, 0.0)
    with pytest.raises(ValueError):
        curve.points[0, 0] = 5.0


def test_curve_wrap_and_iteration():
    curve = Curve.closed_from(square_points(2))
    assert curve.wrap(-1) == len(curve) - 1
    assert list(curve)[1] == Point(1.0, 0.0)


@pytest.mark.parametrize(
    "start,end",
    [(-1, 2), (12, 13), (3, 3), (3, 16)],
)
def test_arc_bounds_are_validated(start, end):
    with pytest.raises(ValueError):
        Arc(start=start, end=end, size=12, kind=ArcKind.RED)


def test_arc_membership_wraps():
    arc = Arc(start=10, end=14, size=12, kind=ArcKind.GREEN)
    assert list(arc.indices()) == [10, 11, 0, 1]
    assert 0 in arc and 11 in arc
    assert 2 not in arc and 9 not in arc
