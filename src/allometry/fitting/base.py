"""
Base classes for power-law fitters.

Both stages of an allometric fit share a fit/predict interface modelled
on scikit-learn estimators and report their coefficients as a FitResult.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np


def power_law(x: np.ndarray, a: float, b: float) -> np.ndarray:
    """Allometric scaling law ``y = a * x^b``."""
    return a * np.power(x, b)


@dataclass(frozen=True)
class FitResult:
    """Coefficients of a fitted power law ``y = a * x^b``.

    Attributes:
        a: Scale coefficient.
        b: Allometric exponent.
        a_start: Scale coefficient from the log-linear starting fit.
        b_start: Exponent from the log-linear starting fit.
        n_observations: Number of complete (x, y) pairs used.
        n_evaluations: Model evaluations spent by the nonlinear solver
            (0 for a log-linear fit).
    """

    a: float
    b: float
    a_start: float
    b_start: float
    n_observations: int
    n_evaluations: int = 0

    def predict(self, x: np.ndarray) -> np.ndarray:
        """Evaluate the fitted law at x."""
        return power_law(np.asarray(x, dtype=float), self.a, self.b)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)


class PowerLawFitterBase(ABC):
    """Abstract base class for fitting ``y = a * x^b``.

    1. fit() - estimate a and b from paired measurements
    2. predict() - evaluate the fitted law
    3. get_result() - coefficients as a FitResult
    """

    def __init__(self) -> None:
        self._is_fitted = False

    @abstractmethod
    def fit(self, x: np.ndarray, y: np.ndarray) -> "PowerLawFitterBase":
        """Fit the power law.

        Args:
            x: Size measurements (predictor).
            y: Character measurements (response).

        Returns:
            self (for method chaining)
        """
        ...

    @abstractmethod
    def get_result(self) -> FitResult:
        """Get the fitted coefficients.

        Raises:
            RuntimeError: If the fitter has not been fitted.
        """
        ...

    def predict(self, x: np.ndarray) -> np.ndarray:
        """Evaluate the fitted power law at x.

        Raises:
            RuntimeError: If the fitter has not been fitted.
        """
        return self.get_result().predict(x)

    @property
    def is_fitted(self) -> bool:
        """Whether the fitter has been fitted."""
        return self._is_fitted

    def _check_is_fitted(self) -> None:
        """Raise RuntimeError if not fitted."""
        if not self._is_fitted:
            raise RuntimeError(
                f"{self.__class__.__name__} has not been fitted. "
                "Call fit() before predict() or get_result()."
            )
