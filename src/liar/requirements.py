"""
Work out which parameters the requested equations need and whether the
caller supplied enough to provide them.

Temperature can stand in for potential temperature, and oxygen together
with temperature (or potential temperature) can stand in for AOU. Molar
inputs need potential temperature for the density correction.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List

from .equations import (
    EQUATION_PREDICTORS,
    NUM_PREDICTORS,
    PARAMETER_NAMES,
    Parameter,
)
from .errors import MissingRequiredParameter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Requirements:
    """Parameters needed for a set of equations.

    Attributes:
        needed: Parameters that must be available for every requested equation
        derive_potential_temperature: Compute potential temperature from temperature
        derive_aou: Compute AOU from oxygen and potential temperature
    """
    needed: FrozenSet[Parameter]
    derive_potential_temperature: bool
    derive_aou: bool


def _available(supplied: FrozenSet[Parameter]) -> FrozenSet[Parameter]:
    have = set(supplied)
    if Parameter.TEMPERATURE in supplied:
        have.add(Parameter.POTENTIAL_TEMPERATURE)
    if Parameter.OXYGEN in supplied and (
            Parameter.TEMPERATURE in supplied or Parameter.POTENTIAL_TEMPERATURE in supplied):
        have.add(Parameter.AOU)
    return frozenset(have)


def resolve_requirements(equations: List[int],
                         supplied: Iterable[Parameter],
                         molality: bool = True) -> Requirements:
    """
    Determine needed parameters and fail fast if any cannot be provided.

    Args:
        equations: Validated equation numbers
        supplied: Parameters present in the input
        molality: False if concentrations are per litre rather than per kg

    Returns:
        Requirements describing what is needed and what must be derived

    Raises:
        MissingRequiredParameter: If an equation needs a parameter that is
            neither supplied nor derivable
    """
    supplied = frozenset(Parameter(int(p)) for p in supplied)

    needed = set()
    for equation in equations:
        row = EQUATION_PREDICTORS[equation - 1]
        needed.update(Parameter(slot + 1) for slot in range(NUM_PREDICTORS) if row[slot])

    # Oxygen converts to AOU only with potential temperature
    if (Parameter.AOU in needed and Parameter.AOU not in supplied
            and Parameter.OXYGEN in supplied):
        needed.add(Parameter.POTENTIAL_TEMPERATURE)

    # Density correction of molar inputs uses potential temperature
    if not molality:
        needed.add(Parameter.POTENTIAL_TEMPERATURE)

    missing = needed - _available(supplied)
    if missing:
        missing_names = [PARAMETER_NAMES[p] for p in sorted(missing)]
        affected = [
            e for e in equations
            if any(EQUATION_PREDICTORS[e - 1][p.slot] for p in missing if p.slot < NUM_PREDICTORS)
        ] or list(equations)
        message = (
            f"One or more selected equations require parameters that are not provided "
            f"or not labeled correctly: {', '.join(missing_names)}. "
            f"Check the equations and parameter_ids inputs."
        )
        logger.error(message)
        raise MissingRequiredParameter(message, missing=missing_names, equations=affected)

    requirements = Requirements(
        needed=frozenset(needed),
        derive_potential_temperature=(
            Parameter.POTENTIAL_TEMPERATURE in needed
            and Parameter.POTENTIAL_TEMPERATURE not in supplied
        ),
        derive_aou=Parameter.AOU in needed and Parameter.AOU not in supplied,
    )
    logger.debug(f"Resolved requirements: {requirements}")
    return requirements
