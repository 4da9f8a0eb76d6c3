"""
Binary partition of the ocean into the Atlantic/Arctic and everywhere else.

Regression coefficients vary smoothly within a basin but not across land
barriers such as the Isthmus of Panama, so coefficients are interpolated
separately on each side of the partition. The Atlantic/Arctic region is the
union of several named sub-polygons given in longitude (0-360) and latitude.
"""

import logging
from typing import Dict, Iterable, List, Optional

import numpy as np
import shapely
from shapely.geometry import Polygon
from shapely.ops import unary_union

from .config import ATLANTIC_ARCTIC_POLYGONS
from .errors import DatasetUnavailable

logger = logging.getLogger(__name__)


def split_rings(vertices: np.ndarray) -> List[Polygon]:
    """
    Split a vertex array into one polygon per NaN-separated ring.

    Args:
        vertices: k x 2 array of (longitude, latitude) vertices; rows
            containing NaN separate independent rings

    Returns:
        List of valid polygons, skipping runs with fewer than three vertices
    """
    vertices = np.asarray(vertices, dtype=float).reshape(-1, 2)
    separators = np.isnan(vertices).any(axis=1)
    rings = []
    start = 0
    for stop in list(np.flatnonzero(separators)) + [len(vertices)]:
        ring = vertices[start:stop]
        if len(ring) >= 3:
            rings.append(Polygon(ring).buffer(0))
        start = stop + 1
    return rings


class RegionPartitioner:
    """Classifies coordinates as Atlantic/Arctic or not."""

    def __init__(self,
                 polygons: Dict[str, np.ndarray],
                 names: Optional[Iterable[str]] = None):
        """
        Build the composite region.

        Args:
            polygons: Mapping of polygon name to an k x 2 array of
                (longitude, latitude) vertices
            names: Names of the polygons forming the region
                (default: the Atlantic/Arctic names from the settings)

        Raises:
            DatasetUnavailable: If a named polygon is missing
        """
        self.names = tuple(names) if names is not None else ATLANTIC_ARCTIC_POLYGONS

        missing = [name for name in self.names if name not in polygons]
        if missing:
            raise DatasetUnavailable(f"Region polygons not found: {missing}")

        parts = []
        for name in self.names:
            parts.extend(split_rings(polygons[name]))

        self.region = unary_union(parts)
        shapely.prepare(self.region)
        logger.debug(f"Built Atlantic/Arctic region from {len(parts)} rings in {len(self.names)} polygons")

    def classify(self, longitude: np.ndarray, latitude: np.ndarray) -> np.ndarray:
        """
        Flag points inside (or on the boundary of) the Atlantic/Arctic region.

        Args:
            longitude: Longitudes in degrees E (0-360)
            latitude: Latitudes in degrees N

        Returns:
            Boolean array, True for Atlantic/Arctic points
        """
        longitude = np.asarray(longitude, dtype=float)
        latitude = np.asarray(latitude, dtype=float)
        if longitude.size == 0:
            return np.zeros(longitude.shape, dtype=bool)
        return np.asarray(shapely.intersects_xy(self.region, longitude, latitude), dtype=bool)
