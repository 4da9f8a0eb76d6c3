"""
Parameter identities and the fixed table of regression equations.

Each of the 16 equations regresses alkalinity on a subset of five predictors
(salinity, potential temperature, nitrate, AOU, silicate). Salinity appears
in every equation. Measurements are held internally in seven canonical slots;
the first five slots are the predictors, in the same order as the columns of
EQUATION_PREDICTORS.
"""

from enum import IntEnum
from typing import Iterable, List, Optional

import numpy as np

from .errors import UnknownIdentifier


class Parameter(IntEnum):
    """Measurement identities, numbered as in the public interface."""
    SALINITY = 1
    POTENTIAL_TEMPERATURE = 2
    NITRATE = 3
    AOU = 4
    SILICATE = 5
    OXYGEN = 6
    TEMPERATURE = 7

    @property
    def slot(self) -> int:
        """Zero-based canonical slot index."""
        return int(self) - 1


NUM_SLOTS = len(Parameter)
NUM_PREDICTORS = 5
NUM_EQUATIONS = 16

PARAMETER_NAMES = {
    Parameter.SALINITY: 'salinity',
    Parameter.POTENTIAL_TEMPERATURE: 'potential_temperature',
    Parameter.NITRATE: 'nitrate',
    Parameter.AOU: 'aou',
    Parameter.SILICATE: 'silicate',
    Parameter.OXYGEN: 'oxygen',
    Parameter.TEMPERATURE: 'temperature',
}

# Short labels used when reporting equations
PREDICTOR_LABELS = ('S', 'Theta', 'N', 'AOU', 'Si')

# Rows: equations 1-16. Columns: S, Theta, N, AOU, Si
EQUATION_PREDICTORS = np.array([
    [1, 1, 1, 1, 1],
    [1, 1, 1, 0, 1],
    [1, 1, 0, 1, 1],
    [1, 1, 0, 0, 1],
    [1, 1, 1, 1, 0],
    [1, 1, 1, 0, 0],
    [1, 1, 0, 1, 0],
    [1, 1, 0, 0, 0],
    [1, 0, 1, 1, 1],
    [1, 0, 1, 0, 1],
    [1, 0, 0, 1, 1],
    [1, 0, 0, 0, 1],
    [1, 0, 1, 1, 0],
    [1, 0, 1, 0, 0],
    [1, 0, 0, 1, 0],
    [1, 0, 0, 0, 0],
], dtype=bool)
EQUATION_PREDICTORS.setflags(write=False)

ALL_EQUATIONS = tuple(range(1, NUM_EQUATIONS + 1))


def validate_equations(equations: Optional[Iterable[int]]) -> List[int]:
    """
    Check requested equation numbers against the known set.

    Args:
        equations: Equation numbers (1-16), or None for all of them

    Returns:
        List of equation numbers in the requested order

    Raises:
        UnknownIdentifier: If any number is outside 1-16
    """
    if equations is None:
        return list(ALL_EQUATIONS)

    requested = [int(e) for e in np.atleast_1d(np.asarray(equations)).ravel()]
    unknown = [e for e in requested if e not in ALL_EQUATIONS]
    if unknown:
        raise UnknownIdentifier(
            f"Unknown equation number(s) {unknown}; equations are numbered 1-{NUM_EQUATIONS}"
        )
    return requested


def predictor_slots(equation: int) -> np.ndarray:
    """Zero-based canonical slots of the predictors used by an equation."""
    return np.flatnonzero(EQUATION_PREDICTORS[equation - 1])


def coefficient_channels(equation: int) -> np.ndarray:
    """Coefficient channels for an equation: intercept (0) then one per predictor."""
    return np.concatenate(([0], predictor_slots(equation) + 1))


def equation_label(equation: int) -> str:
    """Human-readable predictor list, e.g. 'S Theta AOU Si'."""
    return ' '.join(PREDICTOR_LABELS[i] for i in predictor_slots(equation))
