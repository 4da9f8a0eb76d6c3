"""
Exceptions and warnings raised by the alkalinity estimator.
"""

from pathlib import Path
from typing import Optional, Sequence


class LIARError(Exception):
    """Base exception for alkalinity estimation failures."""
    def __init__(self, message: str):
        """Initialize the error.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(self.message)


class ShapeMismatch(LIARError, ValueError):
    """Raised when input arrays have inconsistent dimensions."""


class UnknownIdentifier(LIARError, ValueError):
    """Raised for an equation or parameter number outside the known set."""


class MissingRequiredParameter(LIARError):
    """Raised when a requested equation needs a parameter that is neither supplied nor derivable."""
    def __init__(self, message: str,
                 missing: Sequence[str] = (),
                 equations: Sequence[int] = ()):
        """Initialize the error.

        Args:
            message: Error message
            missing: Names of the parameters that cannot be supplied
            equations: Equation numbers that need them
        """
        self.missing = list(missing)
        self.equations = list(equations)
        super().__init__(message)


class DatasetUnavailable(LIARError):
    """Raised when the coefficient dataset cannot be located, read or validated."""
    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        super().__init__(message)


class SuspiciousSentinelValue(UserWarning):
    """Warning issued when a non-NaN missing data marker appears in measurements."""
