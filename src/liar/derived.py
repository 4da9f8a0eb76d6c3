"""
Fill in predictors that were not measured but can be derived.

Potential temperature comes from temperature, AOU from oxygen, and molar
concentrations are converted to per-kilogram units with in-situ density.
Derived quantities inherit the uncertainty of the measurement they were
derived from without further adjustment.
"""

import logging
from typing import Tuple

import numpy as np

from . import seawater
from .equations import Parameter
from .requirements import Requirements

logger = logging.getLogger(__name__)

S = Parameter.SALINITY.slot
THETA = Parameter.POTENTIAL_TEMPERATURE.slot
NITRATE = Parameter.NITRATE.slot
AOU = Parameter.AOU.slot
SILICATE = Parameter.SILICATE.slot
O2 = Parameter.OXYGEN.slot
T = Parameter.TEMPERATURE.slot

# Concentrations converted from per litre to per kilogram
MOLAR_SLOTS = [NITRATE, AOU, SILICATE, O2]


def fill_derived_quantities(coordinates: np.ndarray,
                            measurements: np.ndarray,
                            uncertainties: np.ndarray,
                            requirements: Requirements,
                            molality: bool = True,
                            supplied_temperature: bool = False) -> Tuple[np.ndarray, np.ndarray]:
    """
    Derive potential temperature and AOU where needed and convert molar units.

    Args:
        coordinates: n x 3 coordinates (longitude, latitude, depth in m)
        measurements: n x 7 canonical measurements
        uncertainties: n x 7 canonical uncertainties
        requirements: Output of resolve_requirements
        molality: False if concentrations are in umol/L
        supplied_temperature: True if in-situ temperature was measured

    Returns:
        Tuple of new (measurements, uncertainties) arrays
    """
    m = measurements.copy()
    u = uncertainties.copy()

    if not (requirements.derive_potential_temperature or requirements.derive_aou or not molality):
        return m, u

    longitude, latitude, depth = coordinates[:, 0], coordinates[:, 1], coordinates[:, 2]
    pressure = seawater.pressure_from_depth(depth, latitude)

    if requirements.derive_potential_temperature:
        logger.debug("Deriving potential temperature from temperature")
        m[:, THETA] = seawater.potential_temperature(m[:, S], m[:, T], pressure, longitude, latitude)
        u[:, THETA] = u[:, T]

    if not molality:
        if supplied_temperature:
            temperature = m[:, T]
        else:
            temperature = seawater.in_situ_temperature(m[:, S], m[:, THETA], pressure, longitude, latitude)
        density = seawater.in_situ_density(m[:, S], temperature, pressure, longitude, latitude)
        logger.debug("Converting molar concentrations to umol/kg")
        m[:, MOLAR_SLOTS] = m[:, MOLAR_SLOTS] / density[:, np.newaxis]

    if requirements.derive_aou:
        logger.debug("Deriving AOU from oxygen")
        m[:, AOU] = seawater.oxygen_solubility(m[:, S], m[:, THETA]) - m[:, O2]
        u[:, AOU] = u[:, O2]

    return m, u
