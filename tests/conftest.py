"""Shared fixtures: a small synthetic coefficient dataset."""

import os
import sys

import numpy as np
import pytest

# Add the src directory to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

from liar.dataset import CoefficientDataset
from liar.equations import EQUATION_PREDICTORS, NUM_EQUATIONS
from liar.estimator import AlkalinityEstimator

# Spatially uniform coefficients: intercept, S, Theta, N, AOU, Si
UNIFORM_COEFFICIENTS = np.array([400.0, 50.0, 1.5, 2.0, 0.2, 0.5])

# Atlantic/Arctic test polygons (longitude, latitude)
SAMPLE_POLYGONS = {
    'LNAPoly': np.array([[280, 0], [359.9, 0], [359.9, 70], [280, 70], [280, 0]], dtype=float),
    'LSAPoly': np.array([[290, -60], [359.9, -60], [359.9, 0], [290, 0], [290, -60]], dtype=float),
    'LNAPolyExtra': np.array([[0, 0], [20, 0], [20, 70], [0, 70], [0, 0]], dtype=float),
    'LSAPolyExtra': np.array([[0, -60], [20, -60], [20, 0], [0, 0], [0, -60]], dtype=float),
    'LNOPoly': np.array([[0, 70], [360, 70], [360, 90], [0, 90], [0, 70]], dtype=float),
}


def model_error_for(equation: int) -> float:
    """Model error used by the synthetic table (independent of salinity)."""
    return 1.0 + 0.1 * equation


def make_sites() -> np.ndarray:
    lon, lat, depth = np.meshgrid(
        np.arange(0, 360, 30, dtype=float),
        np.arange(-60, 61, 30, dtype=float),
        np.array([0.0, 2000.0, 4000.0]),
        indexing='ij',
    )
    return np.column_stack([lon.ravel(), lat.ravel(), depth.ravel()])


def make_model_error_table() -> np.ndarray:
    salinity = np.linspace(25.0, 40.0, 16)
    columns = [np.full_like(salinity, model_error_for(e)) for e in range(1, NUM_EQUATIONS + 1)]
    return np.column_stack([salinity] + columns)


def make_uniform_coefficients(num_sites: int) -> np.ndarray:
    """Uniform coefficients with NaN in channels an equation does not use."""
    coefficients = np.full((num_sites, 6, NUM_EQUATIONS), np.nan)
    for e in range(NUM_EQUATIONS):
        coefficients[:, 0, e] = UNIFORM_COEFFICIENTS[0]
        for slot in np.flatnonzero(EQUATION_PREDICTORS[e]):
            coefficients[:, slot + 1, e] = UNIFORM_COEFFICIENTS[slot + 1]
    return coefficients


@pytest.fixture
def uniform_dataset():
    """Dataset whose coefficients are the same at every site."""
    sites = make_sites()
    return CoefficientDataset(
        site_coordinates=sites,
        coefficients=make_uniform_coefficients(len(sites)),
        model_error=make_model_error_table(),
        region_polygons=SAMPLE_POLYGONS,
    )


@pytest.fixture
def uniform_estimator(uniform_dataset):
    return AlkalinityEstimator(uniform_dataset)


@pytest.fixture
def varying_dataset():
    """Dataset with random intercepts and otherwise uniform coefficients."""
    rng = np.random.default_rng(42)
    sites = make_sites()
    coefficients = make_uniform_coefficients(len(sites))
    coefficients[:, 0, :] = rng.uniform(300.0, 500.0, size=(len(sites), NUM_EQUATIONS))
    return CoefficientDataset(
        site_coordinates=sites,
        coefficients=coefficients,
        model_error=make_model_error_table(),
        region_polygons=SAMPLE_POLYGONS,
    )


def expected_estimate(equation: int, values: dict) -> float:
    """Closed-form estimate under the uniform coefficients.

    Args:
        equation: Equation number
        values: Mapping of predictor slot (0-4) to measurement
    """
    total = UNIFORM_COEFFICIENTS[0]
    for slot in np.flatnonzero(EQUATION_PREDICTORS[equation - 1]):
        total += UNIFORM_COEFFICIENTS[slot + 1] * values[slot]
    return total


def expected_uncertainty(equation: int, uncertainties: dict) -> float:
    """Closed-form uncertainty under the uniform coefficients."""
    total = 3.3 ** 2 + model_error_for(equation) ** 2
    for slot in np.flatnonzero(EQUATION_PREDICTORS[equation - 1]):
        total += (UNIFORM_COEFFICIENTS[slot + 1] * uncertainties[slot]) ** 2
    return np.sqrt(total)
