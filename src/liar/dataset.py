"""
Precomputed regression coefficient dataset.
Handles loading and validation of the coefficient file.
"""

import logging
import warnings
from dataclasses import dataclass, field
from functools import cached_property, lru_cache
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import scipy.io

from .config import ATLANTIC_ARCTIC_POLYGONS, DATASET_KEYS, default_dataset_path
from .equations import NUM_EQUATIONS, NUM_PREDICTORS
from .errors import DatasetUnavailable

logger = logging.getLogger(__name__)

NUM_CHANNELS = NUM_PREDICTORS + 1


def _read_only(array: np.ndarray) -> np.ndarray:
    array = np.array(array, copy=True)
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class CoefficientDataset:
    """Regression coefficients on an irregular grid of sites.

    Attributes:
        site_coordinates: N x 3 array of longitude, latitude, depth (m)
        coefficients: N x 6 x 16 array; channel 0 is the intercept and channel
            k (1-5) the weight of predictor k for each equation
        model_error: M x 17 table; column 0 is salinity, column e the model
            error of equation e
        region_polygons: Named (longitude, latitude) vertex arrays
        atlantic_arctic: Optional per-site Atlantic/Arctic flags
    """
    site_coordinates: np.ndarray
    coefficients: np.ndarray
    model_error: np.ndarray
    region_polygons: Dict[str, np.ndarray] = field(default_factory=dict)
    atlantic_arctic: Optional[np.ndarray] = None

    def __post_init__(self):
        coords = np.asarray(self.site_coordinates, dtype=float)
        coefficients = np.asarray(self.coefficients, dtype=float)
        model_error = np.asarray(self.model_error, dtype=float)

        if coords.ndim != 2 or coords.shape[1] != 3:
            raise DatasetUnavailable(f"Site coordinates must be N x 3, got {coords.shape}")
        if coefficients.shape != (len(coords), NUM_CHANNELS, NUM_EQUATIONS):
            raise DatasetUnavailable(
                f"Coefficients must be {len(coords)} x {NUM_CHANNELS} x {NUM_EQUATIONS}, "
                f"got {coefficients.shape}"
            )
        if model_error.ndim != 2 or model_error.shape[1] != NUM_EQUATIONS + 1:
            raise DatasetUnavailable(
                f"Model error table must have {NUM_EQUATIONS + 1} columns, got {model_error.shape}"
            )

        # Frozen dataclass: assign through object.__setattr__
        object.__setattr__(self, 'site_coordinates', _read_only(coords))
        object.__setattr__(self, 'coefficients', _read_only(coefficients))
        object.__setattr__(self, 'model_error', _read_only(model_error))
        object.__setattr__(self, 'region_polygons', {
            name: _read_only(np.asarray(vertices, dtype=float))
            for name, vertices in self.region_polygons.items()
        })

        if self.atlantic_arctic is not None:
            flags = np.asarray(self.atlantic_arctic).ravel().astype(bool)
            if len(flags) != len(coords):
                raise DatasetUnavailable(
                    f"Expected {len(coords)} region flags, got {len(flags)}"
                )
            object.__setattr__(self, 'atlantic_arctic', _read_only(flags))

    @property
    def num_sites(self) -> int:
        return len(self.site_coordinates)

    @cached_property
    def corner_values(self) -> np.ndarray:
        """Per-channel value for the synthetic corner sites.

        The mean over sites for each channel and equation, then the mean over
        equations, ignoring NaN.
        """
        # Channels unused by an equation are all NaN
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', RuntimeWarning)
            site_means = np.nanmean(self.coefficients, axis=0)
            return _read_only(np.nanmean(site_means, axis=1))


def load_dataset(path: Optional[Union[str, Path]] = None) -> CoefficientDataset:
    """
    Load the coefficient dataset from a MATLAB .mat file.

    Args:
        path: Dataset file; defaults to the LIAR_DATA_FILE environment
            variable or the project data directory

    Returns:
        Validated CoefficientDataset

    Raises:
        DatasetUnavailable: If the file is missing, unreadable or malformed
    """
    path = Path(path) if path is not None else default_dataset_path()

    if not path.exists():
        message = (
            f"Coefficient dataset not found: {path}. This mandatory file is distributed "
            f"alongside LIAR; set the LIAR_DATA_FILE environment variable to its location."
        )
        logger.error(message)
        raise DatasetUnavailable(message, path=path)

    try:
        contents = scipy.io.loadmat(path)
    except Exception as e:
        logger.error(f"Error loading coefficient dataset {path}: {str(e)}")
        raise DatasetUnavailable(f"Could not read coefficient dataset {path}: {e}", path=path) from e

    missing = [
        key for key in (DATASET_KEYS['coordinates'], DATASET_KEYS['coefficients'], DATASET_KEYS['model_error'])
        if key not in contents
    ]
    if missing:
        message = f"Coefficient dataset {path} is missing required variables: {missing}"
        logger.error(message)
        raise DatasetUnavailable(message, path=path)

    flags = contents.get(DATASET_KEYS['atlantic_arctic'])
    polygons = {
        name: contents[name] for name in ATLANTIC_ARCTIC_POLYGONS if name in contents
    }

    dataset = CoefficientDataset(
        site_coordinates=contents[DATASET_KEYS['coordinates']],
        coefficients=contents[DATASET_KEYS['coefficients']],
        model_error=contents[DATASET_KEYS['model_error']],
        region_polygons=polygons,
        atlantic_arctic=flags,
    )
    logger.info(f"Loaded {dataset.num_sites} coefficient sites from {path}")
    return dataset


@lru_cache(maxsize=1)
def get_default_dataset() -> CoefficientDataset:
    """Load the default dataset once per process."""
    return load_dataset()
