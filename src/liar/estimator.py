"""
Locally interpolated alkalinity regression.

Estimates total alkalinity (umol/kg) and its uncertainty from combinations of
salinity, potential temperature, nitrate, AOU and silicate. For each
requested equation the regression coefficients are interpolated from a
precomputed grid to the query coordinates, separately within the
Atlantic/Arctic and elsewhere, and then applied to the measurements.

Missing data should be NaN. A NaN coordinate yields NaN estimates for every
equation at that row; a NaN measurement yields NaN for the equations that use
it.
"""

import logging
from functools import lru_cache
from typing import Iterable, Optional, Tuple

import numpy as np
import numpy.typing as npt
from scipy.interpolate import interp1d

from .config import BASELINE_UNCERTAINTY, DEPTH_TO_DEGREE_CONVERSION
from .dataset import CoefficientDataset, get_default_dataset
from .derived import fill_derived_quantities
from .equations import (
    Parameter,
    coefficient_channels,
    equation_label,
    predictor_slots,
    validate_equations,
)
from .inputs import normalize_inputs
from .interpolation import RegionalInterpolator, evaluate_bound
from .regions import RegionPartitioner
from .requirements import resolve_requirements

logger = logging.getLogger(__name__)


def normalize_longitude(longitude: np.ndarray) -> np.ndarray:
    """Wrap longitudes above 360 or below 0 into the 0-360 range."""
    longitude = np.array(longitude, dtype=float, copy=True)
    outside = (longitude > 360) | (longitude < 0)
    longitude[outside] = np.mod(longitude[outside], 360)
    return longitude


def scale_coordinates(coordinates: np.ndarray) -> np.ndarray:
    """Normalize longitude and convert depth so that it is commensurate with degrees."""
    scaled = np.array(coordinates, dtype=float, copy=True).reshape(-1, 3)
    scaled[:, 0] = normalize_longitude(scaled[:, 0])
    scaled[:, 2] = scaled[:, 2] / DEPTH_TO_DEGREE_CONVERSION
    return scaled


class AlkalinityEstimator:
    """Estimates alkalinity from a loaded coefficient dataset.

    The region partition and both regional triangulations are built once on
    construction and reused for every equation and every call.
    """

    def __init__(self, dataset: CoefficientDataset):
        self.dataset = dataset
        self.partitioner = RegionPartitioner(dataset.region_polygons)

        self.site_coordinates = scale_coordinates(dataset.site_coordinates)
        if dataset.atlantic_arctic is not None:
            self.site_regions = np.asarray(dataset.atlantic_arctic, dtype=bool)
        else:
            self.site_regions = self.partitioner.classify(
                self.site_coordinates[:, 0], self.site_coordinates[:, 1]
            )

        # True: Atlantic/Arctic, False: everywhere else
        self.interpolators = {
            region: RegionalInterpolator(self.site_coordinates[self.site_regions == region])
            for region in (True, False)
        }
        logger.info(
            f"Built interpolators with {int(self.site_regions.sum())} Atlantic/Arctic "
            f"and {int((~self.site_regions).sum())} other sites"
        )

    def local_coefficients(self,
                           equation: int,
                           coordinates: np.ndarray,
                           regions: np.ndarray) -> np.ndarray:
        """
        Interpolate an equation's coefficients to scaled query coordinates.

        Args:
            equation: Equation number (1-16)
            coordinates: n x 3 scaled query coordinates
            regions: Length-n Atlantic/Arctic flags for the queries

        Returns:
            n x (1 + number of predictors) array, intercept first
        """
        channels = coefficient_channels(equation)
        local = np.full((len(coordinates), len(channels)), np.nan)

        for column, channel in enumerate(channels):
            corner_value = self.dataset.corner_values[channel]
            for region, interpolator in self.interpolators.items():
                rows = regions == region
                if not rows.any():
                    continue
                site_values = self.dataset.coefficients[self.site_regions == region, channel, equation - 1]
                bound = interpolator.with_values(site_values, corner_value)
                local[rows, column] = evaluate_bound(bound, coordinates[rows])
        return local

    def model_error(self, equation: int, salinity: np.ndarray) -> np.ndarray:
        """Salinity-dependent methodological error for an equation."""
        table = self.dataset.model_error
        return interp1d(
            table[:, 0], table[:, equation], bounds_error=False, fill_value=np.nan
        )(salinity)

    def estimate(self,
                 coordinates: npt.ArrayLike,
                 measurements: npt.ArrayLike,
                 parameter_ids: npt.ArrayLike,
                 equations: Optional[Iterable[int]] = None,
                 measurement_uncertainties: Optional[npt.ArrayLike] = None,
                 molality: bool = True) -> Tuple[np.ndarray, np.ndarray]:
        """
        Estimate alkalinity and alkalinity uncertainty.

        Args:
            coordinates: n x 3 array of longitude (deg E), latitude (deg N), depth (m)
            measurements: n x y array of measurements in the column order given by
                parameter_ids. Concentrations (including AOU) in umol/kg unless
                molality is False, temperatures in deg C, practical salinity.
            parameter_ids: Length-y vector of Parameter numbers:
                1 salinity, 2 potential temperature, 3 nitrate, 4 AOU,
                5 silicate, 6 oxygen, 7 temperature
            equations: Equation numbers (1-16) in the desired output column
                order; default all 16
            measurement_uncertainties: None for default WOCE-quality values,
                a length-y vector applied to every row, or an n x y array
            molality: False if concentrations are in umol/L

        Returns:
            Tuple of (estimates, uncertainties), each n x e, in umol/kg

        Raises:
            ShapeMismatch: If input dimensions are inconsistent
            UnknownIdentifier: If an equation or parameter number is unknown
            MissingRequiredParameter: If an equation's predictors cannot be provided
        """
        equations = validate_equations(equations)
        inputs = normalize_inputs(coordinates, measurements, parameter_ids, measurement_uncertainties)
        requirements = resolve_requirements(equations, inputs.supplied, molality)

        estimates = np.full((inputs.num_total, len(equations)), np.nan)
        uncertainties = np.full((inputs.num_total, len(equations)), np.nan)
        if inputs.num_valid == 0:
            logger.warning("No rows with complete coordinates; returning NaN estimates")
            return estimates, uncertainties

        m, u = fill_derived_quantities(
            inputs.coordinates,
            inputs.measurements,
            inputs.uncertainties,
            requirements,
            molality=molality,
            supplied_temperature=Parameter.TEMPERATURE in inputs.supplied,
        )

        query = scale_coordinates(inputs.coordinates)
        regions = self.partitioner.classify(query[:, 0], query[:, 1])
        logger.debug(f"{int(regions.sum())} of {len(regions)} queries in the Atlantic/Arctic")

        n = inputs.num_valid
        alk_est = np.full((n, len(equations)), np.nan)
        uncert_est = np.full((n, len(equations)), np.nan)

        for column, equation in enumerate(equations):
            logger.info(f"Using equation {equation}: {equation_label(equation)}")
            slots = predictor_slots(equation)
            local = self.local_coefficients(equation, query, regions)

            values = np.column_stack([np.ones(n), m[:, slots]])
            weights = np.column_stack([np.zeros(n), u[:, slots]])
            model_error = self.model_error(equation, m[:, 0])

            est = np.real(np.sum(local * values, axis=1))
            uncert = np.real(np.sqrt(
                np.sum((local * weights) ** 2, axis=1)
                + BASELINE_UNCERTAINTY ** 2
                + model_error ** 2
            ))
            # No uncertainty without an estimate
            uncert[np.isnan(est)] = np.nan

            alk_est[:, column] = est
            uncert_est[:, column] = uncert

        estimates[inputs.valid_rows] = alk_est
        uncertainties[inputs.valid_rows] = uncert_est
        return estimates, uncertainties


@lru_cache(maxsize=1)
def get_default_estimator() -> AlkalinityEstimator:
    """Estimator over the default dataset, built once per process."""
    return AlkalinityEstimator(get_default_dataset())


@lru_cache(maxsize=8)
def get_estimator(dataset: CoefficientDataset) -> AlkalinityEstimator:
    """Estimator for a dataset, reused while the dataset stays in the cache."""
    return AlkalinityEstimator(dataset)


def estimate(coordinates: npt.ArrayLike,
             measurements: npt.ArrayLike,
             parameter_ids: npt.ArrayLike,
             equations: Optional[Iterable[int]] = None,
             measurement_uncertainties: Optional[npt.ArrayLike] = None,
             molality: bool = True,
             dataset: Optional[CoefficientDataset] = None) -> Tuple[np.ndarray, np.ndarray]:
    """
    Estimate alkalinity and alkalinity uncertainty.

    See AlkalinityEstimator.estimate for the arguments. When no dataset is
    given the default dataset is loaded (once per process). Triangulations are
    cached per dataset object, so repeated calls with the same dataset do not
    rebuild them.

    Raises:
        DatasetUnavailable: If the default dataset cannot be loaded
    """
    estimator = get_default_estimator() if dataset is None else get_estimator(dataset)
    return estimator.estimate(
        coordinates,
        measurements,
        parameter_ids,
        equations=equations,
        measurement_uncertainties=measurement_uncertainties,
        molality=molality,
    )
