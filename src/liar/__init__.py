"""Locally Interpolated Alkalinity Regression (LIAR).

Estimates seawater total alkalinity and its uncertainty from combinations
of salinity, temperature, nutrient and oxygen measurements.
"""

from .dataset import CoefficientDataset, load_dataset
from .equations import EQUATION_PREDICTORS, Parameter
from .errors import (
    DatasetUnavailable,
    LIARError,
    MissingRequiredParameter,
    ShapeMismatch,
    SuspiciousSentinelValue,
    UnknownIdentifier,
)
from .estimator import AlkalinityEstimator, estimate
from .frame import estimate_dataframe

__version__ = "2.0.0"
__all__ = [
    # Estimation
    'estimate',
    'estimate_dataframe',
    'AlkalinityEstimator',

    # Data
    'CoefficientDataset',
    'load_dataset',
    'Parameter',
    'EQUATION_PREDICTORS',

    # Errors
    'LIARError',
    'ShapeMismatch',
    'UnknownIdentifier',
    'MissingRequiredParameter',
    'DatasetUnavailable',
    'SuspiciousSentinelValue',
]
