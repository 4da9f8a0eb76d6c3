"""
Seawater property conversions used to derive missing predictors.

Thin wrappers over the TEOS-10 Gibbs SeaWater (gsw) toolbox. Inputs are
practical salinity, temperatures in degrees C, pressure in dbar and depth
in metres (positive down).
"""

import gsw
import numpy as np


def pressure_from_depth(depth, latitude):
    """Sea pressure (dbar) at a depth (m, positive down) and latitude."""
    return gsw.p_from_z(-np.asarray(depth, dtype=float), latitude)


def _absolute_salinity(salinity, pressure, longitude, latitude):
    return gsw.SA_from_SP(salinity, pressure, longitude, latitude)


def potential_temperature(salinity, temperature, pressure, longitude, latitude):
    """Potential temperature (deg C) referenced to the sea surface."""
    sa = _absolute_salinity(salinity, pressure, longitude, latitude)
    return gsw.pt0_from_t(sa, temperature, pressure)


def in_situ_temperature(salinity, theta, pressure, longitude, latitude):
    """In-situ temperature (deg C) from potential temperature referenced to 0 dbar."""
    sa = _absolute_salinity(salinity, pressure, longitude, latitude)
    return gsw.t_from_CT(sa, gsw.CT_from_pt(sa, theta), pressure)


def in_situ_density(salinity, temperature, pressure, longitude, latitude):
    """In-situ seawater density in kg per litre."""
    sa = _absolute_salinity(salinity, pressure, longitude, latitude)
    return gsw.rho_t_exact(sa, temperature, pressure) / 1000.0


def oxygen_solubility(salinity, theta):
    """Oxygen solubility (umol/kg) at one atmosphere from salinity and potential temperature."""
    return gsw.O2sol_SP_pt(salinity, theta)
