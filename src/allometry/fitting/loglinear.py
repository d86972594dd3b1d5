"""
Log-linear power-law fit.

Linearizes the power law and fits it by ordinary least squares:
    log(y) = log(a) + b * log(x)

The estimates are closed-form and serve as starting values for the
nonlinear refinement.
"""

import numpy as np
from sklearn.linear_model import LinearRegression

from allometry.exceptions import InvalidInputError
from allometry.fitting.base import FitResult, PowerLawFitterBase


class LogLinearPowerFit(PowerLawFitterBase):
    """Ordinary least squares in log-log space.

    Minimizes squared residuals of log(y), which weights small and large
    individuals equally in relative terms.

    Attributes:
        a_: Fitted scale, exp(intercept).
        b_: Fitted exponent, the log-log slope.
    """

    def __init__(self) -> None:
        super().__init__()
        self.a_: float | None = None
        self.b_: float | None = None
        self._n_observations: int = 0

    def fit(self, x: np.ndarray, y: np.ndarray) -> "LogLinearPowerFit":
        """Fit log(y) on log(x).

        Args:
            x: Strictly positive size measurements.
            y: Strictly positive character measurements.

        Returns:
            self (for method chaining)

        Raises:
            InvalidInputError: If any value is not strictly positive.
        """
        x = np.asarray(x, dtype=float).ravel()
        y = np.asarray(y, dtype=float).ravel()

        if not (np.all(x > 0) and np.all(y > 0)):
            raise InvalidInputError(
                "Log-linear fit requires strictly positive measurements"
            )

        model = LinearRegression()
        model.fit(np.log(x).reshape(-1, 1), np.log(y))

        self.a_ = float(np.exp(model.intercept_))
        self.b_ = float(model.coef_[0])
        self._n_observations = len(x)
        self._is_fitted = True
        return self

    def get_result(self) -> FitResult:
        """Get fitted coefficients.

        Returns:
            FitResult whose start values equal the fitted values.

        Raises:
            RuntimeError: If the fitter has not been fitted.
        """
        self._check_is_fitted()
        return FitResult(
            a=self.a_,
            b=self.b_,
            a_start=self.a_,
            b_start=self.b_,
            n_observations=self._n_observations,
        )
