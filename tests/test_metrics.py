"""Tests for separable Lp metrics."""

import math

import pytest
from py_dgeom.core.errors import InvalidMetricParameterError
from py_dgeom.core.metrics import (
    Closest, SeparableMetric, ExactLpSeparableMetric, InexactLpSeparableMetric, make_metric
)


class TestMetricConstruction:
    """Test exponent validation."""

    @pytest.mark.parametrize("p", [1, 2, 3, 6, 2.0])
    def test_valid_exact(self, p):
        """Test integer exponents in exact mode."""
        metric = ExactLpSeparableMetric(p)
        assert metric.p == int(p)
        assert type(metric.p) is int
        assert metric.exact

    @pytest.mark.parametrize("p", [1, 1.5, 2, 3.7])
    def test_valid_inexact(self, p):
        """Test real exponents in inexact mode."""
        metric = InexactLpSeparableMetric(p)
        assert metric.p == float(p)
        assert not metric.exact

    @pytest.mark.parametrize("p", [0, -2, 0.5])
    def test_exponent_below_one(self, p):
        """Test that p < 1 is rejected by both back-ends."""
        with pytest.raises(InvalidMetricParameterError):
            InexactLpSeparableMetric(p)
        with pytest.raises(InvalidMetricParameterError):
            ExactLpSeparableMetric(p)

    def test_exact_rejects_real_exponent(self):
        """Test that exact mode never rounds a real exponent."""
        with pytest.raises(InvalidMetricParameterError):
            ExactLpSeparableMetric(2.5)

    @pytest.mark.parametrize("p", [math.inf, math.nan, "2", True, None])
    def test_inexact_rejects_non_finite(self, p):
        """Test that non-numeric or non-finite exponents are rejected."""
        with pytest.raises(InvalidMetricParameterError):
            InexactLpSeparableMetric(p)

    def test_invalid_parameter_is_value_error(self):
        """Test that callers catching ValueError also catch metric errors."""
        with pytest.raises(ValueError):
            make_metric(0)

    def test_make_metric(self):
        """Test back-end selection."""
        assert isinstance(make_metric(2), ExactLpSeparableMetric)
        assert isinstance(make_metric(2, exact=False), InexactLpSeparableMetric)
        assert make_metric(3) == ExactLpSeparableMetric(3)
        assert make_metric(3) != InexactLpSeparableMetric(3)
        assert "p=3" in repr(make_metric(3))


class TestDistances:
    """Test distance evaluation."""

    def test_l2(self):
        """Test Euclidean raw and true distances."""
        metric = ExactLpSeparableMetric(2)
        assert metric.raw_distance((0, 0), (3, 4)) == 25
        assert metric.distance((0, 0), (3, 4)) == 5.0

    def test_l1(self):
        """Test Manhattan distances."""
        metric = ExactLpSeparableMetric(1)
        assert metric.raw_distance((1, -1), (-2, 3)) == 7
        assert metric.distance((1, -1), (-2, 3)) == 7.0

    def test_l3(self):
        """Test an odd exponent."""
        metric = ExactLpSeparableMetric(3)
        assert metric.raw_distance((0, 0), (-3, 4)) == 91
        assert metric.distance((0, 0), (-3, 4)) == pytest.approx(91 ** (1 / 3))

    def test_exact_is_integer(self):
        """Test that exact raw distances stay Python ints, even when huge."""
        metric = ExactLpSeparableMetric(12)
        raw = metric.raw_distance((0, 0), (1000, 999))
        assert type(raw) is int
        assert raw == 1000 ** 12 + 999 ** 12

    def test_inexact_matches_formula(self):
        """Test the float back-end against the Lp formula."""
        metric = InexactLpSeparableMetric(1.5)
        expected = (2 ** 1.5 + 5 ** 1.5) ** (1 / 1.5)
        assert metric.distance((0, 0), (2, -5)) == pytest.approx(expected)

    def test_raw_distance_to_line(self):
        """Test that the swept axis is ignored."""
        metric = ExactLpSeparableMetric(2)
        assert metric.raw_distance_to_line((7, 3, -1), (0, 0, 0), axis=0) == 10
        assert metric.raw_distance_to_line((7, 3, -1), (0, 0, 0), axis=1) == 50

    def test_closest(self):
        """Test the three-way comparison."""
        metric = ExactLpSeparableMetric(2)
        assert metric.closest((0, 0), (1, 0), (0, 2)) is Closest.FIRST
        assert metric.closest((0, 0), (3, 0), (0, 2)) is Closest.SECOND
        assert metric.closest((0, 0), (0, -6), (6, 0)) is Closest.BOTH


class TestTakeover:
    """Test the position where one site overtakes another along a line."""

    @pytest.mark.parametrize("u,v", [
        ((0, 0), (10, 0)),
        ((0, 4), (3, 0)),
        ((-5, 0), (-4, 9)),
        ((2, -7), (9, 7)),
        ((0, 20), (1, 0)),
    ])
    def test_l2_closed_form_matches_search(self, u, v):
        """Test the integer closed form against the generic binary search."""
        metric = ExactLpSeparableMetric(2)
        for lo, hi in [(-10, 10), (0, 3), (5, 5), (-20, -15)]:
            fast = metric.takeover_position(u, v, (0, 0), 0, lo, hi)
            slow = SeparableMetric.takeover_position(metric, u, v, (0, 0), 0, lo, hi)
            assert fast == slow

    def test_takeover_definition(self):
        """Test that v wins strictly from the takeover position on."""
        for metric in (ExactLpSeparableMetric(1), ExactLpSeparableMetric(3),
                       InexactLpSeparableMetric(1.5)):
            u, v = (0, 2), (6, -3)
            x0 = metric.takeover_position(u, v, (0, 0), 0, -10, 10)
            for x in range(-10, 11):
                wins = metric.raw_distance((x, 0), v) < metric.raw_distance((x, 0), u)
                assert wins == (x >= x0)

    def test_never_taken_over(self):
        """Test the hi + 1 sentinel."""
        metric = ExactLpSeparableMetric(2)
        assert metric.takeover_position((0, 0), (5, 100), (0, 0), 0, 0, 10) == 11


class TestHiddenBy:
    """Test the Hidden-Point-Removal predicate."""

    @pytest.fixture(params=[
        ExactLpSeparableMetric(1), ExactLpSeparableMetric(2), ExactLpSeparableMetric(3),
        InexactLpSeparableMetric(2), InexactLpSeparableMetric(1.5),
    ], ids=repr)
    def metric(self, request):
        return request.param

    def test_far_middle_site_is_hidden(self, metric):
        """Test that a site far from the line is hidden by its neighbours."""
        assert metric.hidden_by((0, 0), (5, 10), (10, 0), (0, 0), (10, 0), 0)

    def test_close_middle_site_is_kept(self, metric):
        """Test that a site on the line wins around its own position."""
        assert not metric.hidden_by((0, 3), (5, 0), (10, 3), (0, 0), (10, 0), 0)

    def test_one_dimensional(self, metric):
        """Test three sites on the line itself."""
        assert not metric.hidden_by((0,), (1,), (2,), (0,), (2,), 0)

    def test_segment_bounds_matter(self):
        """Test that winning only outside the segment counts as hidden."""
        metric = ExactLpSeparableMetric(2)
        # v would win around x = 20, which the segment does not reach
        assert metric.hidden_by((0, 0), (20, 1), (21, 0), (0, 0), (10, 0), 0)
        assert not metric.hidden_by((0, 0), (20, 1), (40, 0), (0, 0), (30, 0), 0)

    def test_tie_goes_to_lower_site(self):
        """Test that a middle site tying everywhere it could win is hidden."""
        metric = ExactLpSeparableMetric(2)
        # at x = 1, u, v and w are all at raw distance 1
        assert metric.hidden_by((0, 0), (1, 1), (2, 0), (0, 0), (2, 0), 0)
