"""
Input normalization for alkalinity estimation.

Callers supply measurements in any column order together with a vector of
parameter identities. This module checks the shapes, drops rows whose
coordinates are incomplete and places measurements and uncertainties into
the fixed seven-slot canonical layout.
"""

import logging
import warnings
from dataclasses import dataclass
from typing import FrozenSet, Optional

import numpy as np
import numpy.typing as npt

from .config import DEFAULT_UNCERTAINTIES, SENTINEL_VALUES
from .equations import NUM_SLOTS, Parameter
from .errors import ShapeMismatch, SuspiciousSentinelValue, UnknownIdentifier

logger = logging.getLogger(__name__)


@dataclass
class NormalizedInputs:
    """Canonical view of one estimation request.

    Attributes:
        valid_rows: Boolean mask over input rows with complete coordinates
        coordinates: Coordinates of the valid rows (n_valid x 3)
        measurements: Canonical measurements of the valid rows (n_valid x 7)
        uncertainties: Canonical uncertainties of the valid rows (n_valid x 7)
        supplied: Parameters present in the input
    """
    valid_rows: np.ndarray
    coordinates: np.ndarray
    measurements: np.ndarray
    uncertainties: np.ndarray
    supplied: FrozenSet[Parameter]

    @property
    def num_total(self) -> int:
        return len(self.valid_rows)

    @property
    def num_valid(self) -> int:
        return len(self.coordinates)


def _parameter_ids(parameter_ids: npt.ArrayLike) -> np.ndarray:
    ids = np.atleast_1d(np.asarray(parameter_ids)).ravel().astype(int)
    known = [int(p) for p in Parameter]
    unknown = sorted(set(ids.tolist()) - set(known))
    if unknown:
        raise UnknownIdentifier(
            f"Unknown parameter identifier(s) {unknown}; parameters are numbered 1-{NUM_SLOTS}"
        )
    if len(set(ids.tolist())) != len(ids):
        raise UnknownIdentifier(f"Parameter identifiers must not repeat: {ids.tolist()}")
    return ids


def _expand_uncertainties(uncertainties: Optional[npt.ArrayLike],
                          measurements: np.ndarray,
                          ids: np.ndarray) -> np.ndarray:
    """Return an uncertainty array with the same shape as the measurements."""
    num_rows, num_cols = measurements.shape

    if uncertainties is None:
        return np.tile(DEFAULT_UNCERTAINTIES[ids - 1], (num_rows, 1))

    uncertainties = np.asarray(uncertainties, dtype=float)
    if uncertainties.size == 0:
        return np.tile(DEFAULT_UNCERTAINTIES[ids - 1], (num_rows, 1))

    if uncertainties.shape == measurements.shape:
        return uncertainties.copy()

    # One value per column, applied uniformly to every row
    if uncertainties.ndim == 1 and len(uncertainties) == num_cols:
        return np.tile(uncertainties, (num_rows, 1))
    if uncertainties.ndim == 2 and uncertainties.shape == (1, num_cols):
        return np.tile(uncertainties[0], (num_rows, 1))

    raise ShapeMismatch(
        f"Measurement uncertainties must have shape {measurements.shape} or "
        f"({num_cols},), got {uncertainties.shape}"
    )


def check_sentinels(measurements: np.ndarray) -> bool:
    """
    Warn if a common non-NaN missing data marker appears in the measurements.

    The values are left untouched; estimates using them will be meaningless.

    Args:
        measurements: Measurement array

    Returns:
        True if a sentinel value was found
    """
    found = bool(np.isin(measurements, SENTINEL_VALUES).any())
    if found:
        message = (
            "A common non-NaN missing data indicator (e.g. -999) was detected in the "
            "input measurements. Missing data should be replaced with NaN; otherwise "
            "the values are used as given and estimates will be poor."
        )
        logger.warning(message)
        warnings.warn(message, SuspiciousSentinelValue, stacklevel=3)
    return found


def normalize_inputs(coordinates: npt.ArrayLike,
                     measurements: npt.ArrayLike,
                     parameter_ids: npt.ArrayLike,
                     measurement_uncertainties: Optional[npt.ArrayLike] = None) -> NormalizedInputs:
    """
    Validate an estimation request and map it onto canonical slots.

    Args:
        coordinates: n x 3 array of longitude (deg E), latitude (deg N), depth (m)
        measurements: n x y array of measurements, columns ordered by parameter_ids
        parameter_ids: Length-y vector of Parameter numbers (1-7)
        measurement_uncertainties: None for defaults, a length-y vector applied
            to every row, or an n x y array

    Returns:
        NormalizedInputs for the rows with complete coordinates

    Raises:
        ShapeMismatch: If array dimensions are inconsistent
        UnknownIdentifier: If a parameter identifier is unknown or repeated
    """
    coordinates = np.atleast_2d(np.asarray(coordinates, dtype=float))
    if coordinates.ndim != 2 or coordinates.shape[1] != 3:
        raise ShapeMismatch(
            f"Coordinates must be an n x 3 array (longitude, latitude, depth), got {coordinates.shape}"
        )
    num_rows = coordinates.shape[0]

    ids = _parameter_ids(parameter_ids)

    measurements = np.asarray(measurements, dtype=float)
    if measurements.ndim < 2:
        if num_rows == 0 or measurements.size % num_rows:
            raise ShapeMismatch(
                f"Cannot arrange {measurements.size} measurements into {num_rows} rows"
            )
        measurements = measurements.reshape(num_rows, -1)
    if measurements.ndim != 2 or measurements.shape[0] != num_rows:
        raise ShapeMismatch(
            f"Measurements have {measurements.shape[0]} rows but coordinates have {num_rows}"
        )
    if measurements.shape[1] != len(ids):
        raise ShapeMismatch(
            f"parameter_ids has {len(ids)} entries but measurements have "
            f"{measurements.shape[1]} columns; it is unclear which measurement is in which column"
        )

    uncertainties = _expand_uncertainties(measurement_uncertainties, measurements, ids)
    check_sentinels(measurements)

    # Rows with any missing coordinate are excluded from estimation
    valid_rows = ~np.isnan(coordinates).any(axis=1)
    num_valid = int(valid_rows.sum())
    if num_valid < num_rows:
        logger.debug(f"Skipping {num_rows - num_valid} rows with missing coordinates")

    canonical_m = np.full((num_valid, NUM_SLOTS), np.nan)
    canonical_u = np.full((num_valid, NUM_SLOTS), np.nan)
    canonical_m[:, ids - 1] = measurements[valid_rows]
    canonical_u[:, ids - 1] = uncertainties[valid_rows]

    return NormalizedInputs(
        valid_rows=valid_rows,
        coordinates=coordinates[valid_rows].copy(),
        measurements=canonical_m,
        uncertainties=canonical_u,
        supplied=frozenset(Parameter(int(p)) for p in ids),
    )
