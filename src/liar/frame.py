"""
DataFrame interface to the alkalinity estimator.
"""

import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .config import DEFAULT_UNCERTAINTIES
from .dataset import CoefficientDataset
from .equations import PARAMETER_NAMES, validate_equations
from .errors import ShapeMismatch
from .estimator import estimate

logger = logging.getLogger(__name__)

COORDINATE_COLUMNS = ['longitude', 'latitude', 'depth']
UNCERTAINTY_SUFFIX = '_uncertainty'


def estimate_dataframe(df: pd.DataFrame,
                       equations: Optional[Iterable[int]] = None,
                       molality: bool = True,
                       dataset: Optional[CoefficientDataset] = None) -> pd.DataFrame:
    """
    Estimate alkalinity for each row of a DataFrame.

    Measurement columns are recognised by name (salinity, potential_temperature,
    nitrate, aou, silicate, oxygen, temperature). A column named
    '<measurement>_uncertainty' gives per-row uncertainties for that
    measurement; measurements without one use the default uncertainty.

    Args:
        df: DataFrame with longitude, latitude and depth columns plus measurements
        equations: Equation numbers (1-16); default all 16
        molality: False if concentrations are in umol/L
        dataset: Coefficient dataset; default dataset if None

    Returns:
        DataFrame on the same index with alkalinity_eq{n} and
        alkalinity_uncertainty_eq{n} columns
    """
    missing = [col for col in COORDINATE_COLUMNS if col not in df.columns]
    if missing:
        raise ShapeMismatch(f"DataFrame missing coordinate columns: {missing}")

    present = [(param, name) for param, name in PARAMETER_NAMES.items() if name in df.columns]
    if not present:
        raise ShapeMismatch(
            f"DataFrame has no measurement columns; expected any of {list(PARAMETER_NAMES.values())}"
        )
    logger.info(f"Estimating alkalinity for {len(df)} rows from {[name for _, name in present]}")

    parameter_ids = [int(param) for param, _ in present]
    measurements = df[[name for _, name in present]].to_numpy(dtype=float)

    uncertainties = np.column_stack([
        df[name + UNCERTAINTY_SUFFIX].to_numpy(dtype=float)
        if name + UNCERTAINTY_SUFFIX in df.columns
        else np.full(len(df), DEFAULT_UNCERTAINTIES[param.slot])
        for param, name in present
    ])

    equations = validate_equations(equations)
    estimates, uncerts = estimate(
        df[COORDINATE_COLUMNS].to_numpy(dtype=float),
        measurements,
        parameter_ids,
        equations=equations,
        measurement_uncertainties=uncertainties,
        molality=molality,
        dataset=dataset,
    )

    results = {}
    for column, equation in enumerate(equations):
        results[f"alkalinity_eq{equation}"] = estimates[:, column]
    for column, equation in enumerate(equations):
        results[f"alkalinity_uncertainty_eq{equation}"] = uncerts[:, column]
    return pd.DataFrame(results, index=df.index)
