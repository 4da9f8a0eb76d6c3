"""Tests for the Atlantic/Arctic region partition."""

import numpy as np
import pytest

from liar.errors import DatasetUnavailable
from liar.regions import RegionPartitioner, split_rings

from conftest import SAMPLE_POLYGONS


@pytest.fixture
def partitioner():
    return RegionPartitioner(SAMPLE_POLYGONS)


class TestRegionPartitioner:
    """Test suite for RegionPartitioner."""

    def test_known_points(self, partitioner):
        """Test classification of points inside and outside each sub-polygon."""
        lon = np.array([300.0, 320.0, 10.0, 180.0, 200.0, 100.0, 250.0])
        lat = np.array([30.0, -30.0, 30.0, 80.0, 10.0, -40.0, -75.0])
        expected = [True, True, True, True, False, False, False]
        np.testing.assert_array_equal(partitioner.classify(lon, lat), expected)

    def test_boundary_is_inside(self, partitioner):
        """Test points on a polygon edge belong to the Atlantic/Arctic."""
        assert partitioner.classify(np.array([280.0]), np.array([30.0]))[0]

    def test_total_and_disjoint(self, partitioner):
        """Test every point falls in exactly one of the two regions."""
        rng = np.random.default_rng(0)
        lon = rng.uniform(0, 360, 500)
        lat = rng.uniform(-90, 90, 500)
        flags = partitioner.classify(lon, lat)
        assert flags.dtype == bool
        assert flags.shape == (500,)
        assert (flags.sum() + (~flags).sum()) == 500

    def test_empty(self, partitioner):
        """Test classifying no points returns an empty array."""
        assert partitioner.classify(np.array([]), np.array([])).shape == (0,)

    def test_nan_separated_vertices(self):
        """Test trailing NaN vertices are ignored."""
        polygons = {name: np.vstack([v, [np.nan, np.nan]]) for name, v in SAMPLE_POLYGONS.items()}
        partitioner = RegionPartitioner(polygons)
        assert partitioner.classify(np.array([300.0]), np.array([30.0]))[0]

    def test_missing_polygon(self):
        """Test a missing named polygon is reported."""
        polygons = dict(SAMPLE_POLYGONS)
        del polygons['LNOPoly']
        with pytest.raises(DatasetUnavailable):
            RegionPartitioner(polygons)

    def test_custom_names(self):
        """Test a region built from a subset of polygons."""
        partitioner = RegionPartitioner(SAMPLE_POLYGONS, names=['LNAPoly'])
        flags = partitioner.classify(np.array([300.0, 10.0]), np.array([30.0, 30.0]))
        np.testing.assert_array_equal(flags, [True, False])

    def test_nan_separated_rings(self):
        """Test NaN-separated loops are separate polygons rather than one joined ring."""
        vertices = np.array([
            [0, 0], [10, 0], [10, 10], [0, 10], [0, 0],
            [np.nan, np.nan],
            [20, 0], [30, 0], [30, 10], [20, 10], [20, 0],
        ], dtype=float)
        partitioner = RegionPartitioner({'Split': vertices}, names=['Split'])
        flags = partitioner.classify(np.array([5.0, 25.0, 15.0, 15.0]), np.array([5.0, 5.0, 0.0, 5.0]))
        np.testing.assert_array_equal(flags, [True, True, False, False])


class TestSplitRings:
    """Test suite for split_rings."""

    def test_ring_count(self):
        """Test each NaN-separated run becomes its own polygon."""
        vertices = np.array([
            [np.nan, np.nan],
            [0, 0], [1, 0], [1, 1], [0, 0],
            [np.nan, np.nan],
            [5, 5], [6, 5], [6, 6], [5, 5],
            [np.nan, np.nan],
        ], dtype=float)
        rings = split_rings(vertices)
        assert len(rings) == 2
        assert rings[0].area == pytest.approx(0.5)
        assert rings[1].area == pytest.approx(0.5)

    def test_short_runs_skipped(self):
        """Test runs with fewer than three vertices are ignored."""
        vertices = np.array([[0, 0], [1, 1], [np.nan, np.nan], [0, 0], [2, 0], [2, 2]], dtype=float)
        rings = split_rings(vertices)
        assert len(rings) == 1
        assert rings[0].area == pytest.approx(2.0)
