"""
Scattered linear interpolation of regression coefficients within one region.

This module interpolates precomputed coefficients from an irregular grid of
sites to arbitrary query coordinates. It is needed because:

1. Expensive Triangulation, Cheap Values:
   - The Delaunay triangulation of the sites depends only on the region
   - Every equation and coefficient channel reuses it with different values
   - Values are bound per channel without retriangulating

2. Smooth Extrapolation:
   - Nearest-neighbour extrapolation outside the data hull causes steps
   - Eight synthetic sites at the corners of a large cube hold the mean value
   - The cube must stay small enough for qhull to resolve the site spacing;
     far corners (e.g. 1e10) make it discard almost every real site
   - Queries outside the data hull blend smoothly toward that mean
   - Queries inside the hull are interpolated exactly as before

Coordinates are (longitude, latitude, scaled depth).
"""

import logging
from typing import Optional

import numpy as np
from scipy.interpolate import LinearNDInterpolator
from scipy.spatial import Delaunay

from .config import CORNER_MAGNITUDE
from .errors import ShapeMismatch

logger = logging.getLogger(__name__)


def corner_sites(magnitude: float = CORNER_MAGNITUDE) -> np.ndarray:
    """Vertices of a cube of half-width `magnitude` centred on the origin."""
    signs = np.array([
        [1, 1, 1],
        [1, -1, 1],
        [1, 1, -1],
        [1, -1, -1],
        [-1, 1, 1],
        [-1, -1, 1],
        [-1, 1, -1],
        [-1, -1, -1],
    ], dtype=float)
    return signs * magnitude


NUM_CORNERS = 8


class RegionalInterpolator:
    """Linear interpolant over one region's sites plus eight far corners."""

    def __init__(self,
                 sites: Optional[np.ndarray] = None,
                 corner_magnitude: float = CORNER_MAGNITUDE):
        """
        Initialize the interpolator.

        Args:
            sites: Optional m x 3 array of region site coordinates; when given
                the triangulation is built immediately
            corner_magnitude: Distance of the synthetic corners along each axis
        """
        self.corner_magnitude = corner_magnitude
        self._triangulation = None
        self._active = None
        self.num_sites = 0
        if sites is not None:
            self.rebuild_sites(sites)

    def rebuild_sites(self, sites: np.ndarray) -> None:
        """
        Triangulate the region's sites together with the synthetic corners.

        This is the slow step and should be done once per region.

        Args:
            sites: m x 3 array of site coordinates
        """
        sites = np.asarray(sites, dtype=float).reshape(-1, 3)
        points = np.vstack([sites, corner_sites(self.corner_magnitude)])
        self._triangulation = Delaunay(points)
        self._active = None
        self.num_sites = len(sites)

        dropped = len(self._triangulation.coplanar)
        if dropped:
            logger.warning(
                f"Triangulation left out {dropped} of {self.num_sites} sites as coplanar; "
                f"values at those sites will not be reproduced"
            )
        logger.info(f"Triangulated {self.num_sites} sites (+{NUM_CORNERS} corners)")

    @property
    def triangulation(self) -> Optional[Delaunay]:
        """Delaunay triangulation of the sites and corners, or None before rebuild_sites."""
        return self._triangulation

    def with_values(self, site_values: np.ndarray, corner_value: float) -> LinearNDInterpolator:
        """
        Bind values to the sites without changing this interpolator.

        Args:
            site_values: Length-m array of values aligned with the sites
            corner_value: Value held by every synthetic corner

        Returns:
            Callable interpolant sharing this interpolator's triangulation
        """
        if self._triangulation is None:
            raise RuntimeError("rebuild_sites must be called before binding values")

        site_values = np.asarray(site_values, dtype=float).ravel()
        if len(site_values) != self.num_sites:
            raise ShapeMismatch(
                f"Expected {self.num_sites} site values, got {len(site_values)}"
            )
        values = np.concatenate([site_values, np.full(NUM_CORNERS, corner_value, dtype=float)])
        return LinearNDInterpolator(self._triangulation, values)

    def set_values(self, site_values: np.ndarray, corner_value: float) -> None:
        """Load values for subsequent evaluate() calls."""
        self._active = self.with_values(site_values, corner_value)

    def evaluate(self, points: np.ndarray) -> np.ndarray:
        """
        Interpolate the currently loaded values at query points.

        Args:
            points: q x 3 array of query coordinates

        Returns:
            Length-q array of interpolated values
        """
        if self._active is None:
            raise RuntimeError("set_values must be called before evaluate")
        return evaluate_bound(self._active, points)


def evaluate_bound(interpolant: LinearNDInterpolator, points: np.ndarray) -> np.ndarray:
    """Evaluate a bound interpolant, tolerating an empty set of points."""
    points = np.asarray(points, dtype=float).reshape(-1, 3)
    if len(points) == 0:
        return np.empty(0)
    return np.real(interpolant(points))
