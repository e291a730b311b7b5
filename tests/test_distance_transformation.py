"""Tests for the distance transformation."""

import math

import pytest
import numpy as np
from py_dgeom.core import (
    HyperRectDomain, DistanceTransformation, ExactLpSeparableMetric, InexactLpSeparableMetric,
    SetPredicate,
)
from py_dgeom.core.validation import edt_reference, reference_distances
from py_dgeom.utils.random import random_sites


class TestDistanceTransformation:
    """Test distance values against independent references."""

    def test_indexing_returns_distance(self):
        """Test that dt[point] is the Lp distance."""
        dt = DistanceTransformation(((0, 0), (9, 9)), SetPredicate([(0, 0)]),
                                    ExactLpSeparableMetric(2))

        assert dt[(3, 4)] == 5.0
        assert dt[(0, 0)] == 0.0
        assert dt.nearest_site((9, 9)) == (0, 0)

    def test_matches_scipy_edt(self):
        """Test L2 distances against scipy's Euclidean distance transform."""
        domain = HyperRectDomain((0, 0), (40, 30))
        sites = random_sites(domain, 25, seed=4)
        dt = DistanceTransformation(domain, SetPredicate(sites), ExactLpSeparableMetric(2))

        np.testing.assert_allclose(dt.distance_array(), edt_reference(domain, sites))

    def test_matches_scipy_edt_3d(self):
        """Test 3D L2 distances against scipy."""
        domain = HyperRectDomain((-5, -5, -5), (5, 6, 7))
        sites = random_sites(domain, 12, seed=9)
        dt = DistanceTransformation(domain, SetPredicate(sites), ExactLpSeparableMetric(2))

        np.testing.assert_allclose(dt.distance_array(), edt_reference(domain, sites))

    @pytest.mark.parametrize("metric", [
        ExactLpSeparableMetric(1), ExactLpSeparableMetric(3), InexactLpSeparableMetric(1.5),
    ], ids=repr)
    def test_matches_kdtree(self, metric):
        """Test other exponents against k-d tree queries."""
        domain = HyperRectDomain((0, 0), (30, 25))
        sites = random_sites(domain, 20, seed=12)
        dt = DistanceTransformation(domain, SetPredicate(sites), metric)

        np.testing.assert_allclose(
            dt.distance_array(), reference_distances(domain, sites, p=metric.p)
        )

    def test_empty_site_set(self):
        """Test that distances are infinite without sites."""
        dt = DistanceTransformation(((0, 0), (4, 4)), SetPredicate([]), ExactLpSeparableMetric(2))

        assert np.isinf(dt.distance_array()).all()
        assert dt[(2, 2)] == math.inf

    def test_distance_array_read_only(self):
        """Test that the cached array cannot be modified."""
        dt = DistanceTransformation(((0, 0), (4, 4)), SetPredicate([(1, 1)]),
                                    ExactLpSeparableMetric(2))
        values = dt.distance_array()

        assert values is dt.distance_array()
        with pytest.raises(ValueError):
            values[0, 0] = 1.0

    def test_raw_distance_array(self):
        """Test exact raw distances and masking."""
        dt = DistanceTransformation(((0,), (4,)), SetPredicate([(1,)]), ExactLpSeparableMetric(3))
        raw = dt.raw_distance_array()

        assert raw.tolist() == [1, 0, 1, 8, 27]
        assert not raw.mask.any()

    def test_raw_distance_array_large_exponent(self):
        """Test that huge exact values fall back to Python ints."""
        dt = DistanceTransformation(((0,), (200,)), SetPredicate([(0,)]), ExactLpSeparableMetric(10))
        raw = dt.raw_distance_array()

        assert raw[200] == 200 ** 10
        assert dt.distance((200,)) == pytest.approx(200.0)
