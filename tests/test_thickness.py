import logging
import math

import numpy as np
import pytest

from histomorph.geometry.types import Curve
from histomorph.labeling.thickness import (
    REFERENCE_RULE,
    choose_reference,
    estimate_thickness,
    pair_curves,
    sample_indices,
    surface_thickness,
)


def _line(n, y, x0=0.0, dx=1.0):
    xs = x0 + dx * np.arange(n)
    return Curve.open_from(np.column_stack([xs, np.full(n, y)]))


def test_sample_indices_default_policy():
    assert sample_indices(20).tolist() == [0, 2, 4, 6, 8, 10, 12, 14]
    assert sample_indices(21).tolist() == [0, 2, 4, 6, 8, 10, 12, 14]
    assert sample_indices(6).tolist() == [0]
    assert sample_indices(5).tolist() == []


def test_sample_indices_custom_step():
    assert sample_indices(12, step=3, margin=1).tolist() == [0, 3, 6]
    with pytest.raises(ValueError):
        sample_indices(12, step=0)


def test_forty_point_reference_twenty_point_test():
    t_ref = np.linspace(0.0, 1.0, 40)
    reference = Curve.open_from(np.column_stack([40 * t_ref, 2.0 * np.sin(3 * t_ref)]))
    t_test = np.linspace(0.0, 1.0, 20)
    test = Curve.open_from(np.column_stack([38 * t_test + 0.7, 6.0 + np.cos(4 * t_test)]))

    result = estimate_thickness(reference, test)

    assert result.count == 8
    assert result.reference_is_first
    expected = []
    for sample, ti in zip(result.samples, range(0, 16, 2)):
        assert sample.test_index == ti
        tx, ty = test.points[ti]
        dists = [math.hypot(tx - rx, ty - ry) for rx, ry in reference.points]
        best = min(dists)
        assert sample.distance == pytest.approx(best)
        assert sample.reference_index == dists.index(best)
        expected.append(best)
    assert result.mean == pytest.approx(sum(expected) / len(expected))


def test_short_test_curve_reports_missing_mean():
    result = estimate_thickness(_line(30, 0.0), _line(5, 3.0))
    assert result.count == 0
    assert result.mean is None
    assert result.median is None
    assert result.std is None


def test_parallel_lines_have_constant_thickness():
    result = estimate_thickness(_line(40, 0.0), _line(20, 2.5))
    assert result.mean == pytest.approx(2.5)
    assert result.std == pytest.approx(0.0)
    assert result.median == pytest.approx(2.5)


def test_longer_curve_becomes_reference_regardless_of_order():
    short, long_ = _line(10, 1.0), _line(30, 0.0)
    reference, test, first = choose_reference(short, long_)
    assert reference is long_ and test is short and not first
    result = estimate_thickness(short, long_)
    assert not result.reference_is_first
    assert result.count == 3


def test_equal_lengths_use_first_curve_as_reference():
    assert REFERENCE_RULE == "more-points-first-on-tie"
    a = _line(10, 0.0)
    b = _line(10, 4.0, x0=0.5)
    reference, test, first = choose_reference(a, b)
    assert reference is a and test is b and first
    result = estimate_thickness(a, b)
    for sample in result.samples:
        assert sample.test_point.y == pytest.approx(4.0)
        assert sample.reference_point.y == pytest.approx(0.0)


def test_pair_curves_groups_adjacent_entries(caplog):
    curves = [_line(10, float(i)) for i in range(5)]
    with caplog.at_level(logging.WARNING, logger="histomorph.labeling.thickness"):
        pairs = pair_curves(curves)
    assert [(a, b) for a, b in pairs] == [(curves[0], curves[1]), (curves[2], curves[3])]
    assert "no partner" in caplog.text


def test_surface_thickness_pools_samples():
    pairs = [(_line(20, 0.0), _line(20, 2.0)), (_line(20, 10.0), _line(20, 14.0))]
    pooled = surface_thickness(pairs)
    assert pooled.sample_count == 16
    assert pooled.mean == pytest.approx(3.0)
    assert [r.mean for r in pooled.pairs] == [pytest.approx(2.0), pytest.approx(4.0)]


def test_surface_thickness_without_samples_is_missing():
    assert surface_thickness([]).mean is None
    assert surface_thickness([(_line(4, 0.0), _line(4, 1.0))]).mean is None
