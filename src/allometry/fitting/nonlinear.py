"""
Nonlinear least-squares power-law fit.

Fits ``y = a * x^b`` in the original measurement scale with the
Levenberg-Marquardt solver, so residuals are weighted by their absolute
size rather than their relative size. The solver is sensitive to its
starting point; it is normally started from the log-linear estimates.
"""

import numpy as np
from scipy.optimize import curve_fit

from allometry.config.settings import FitConfig
from allometry.exceptions import ModelFittingError
from allometry.fitting.base import FitResult, PowerLawFitterBase, power_law
from allometry.utils.logging import get_logger

log = get_logger(__name__)


def _power_law_jacobian(x: np.ndarray, a: float, b: float) -> np.ndarray:
    """Partial derivatives of a * x^b with respect to (a, b)."""
    xb = np.power(x, b)
    return np.column_stack([xb, a * xb * np.log(x)])


class NonlinearPowerFit(PowerLawFitterBase):
    """Levenberg-Marquardt fit of ``y = a * x^b``.

    Attributes:
        a_start: Initial scale coefficient.
        b_start: Initial exponent.
        config: Solver settings.
        a_: Fitted scale.
        b_: Fitted exponent.
    """

    def __init__(
        self,
        a_start: float,
        b_start: float,
        config: FitConfig | None = None,
    ) -> None:
        """Initialize fitter.

        Args:
            a_start: Initial scale coefficient.
            b_start: Initial exponent.
            config: Solver settings (defaults to FitConfig()).
        """
        super().__init__()
        self.a_start = float(a_start)
        self.b_start = float(b_start)
        self.config = config or FitConfig()
        self.a_: float | None = None
        self.b_: float | None = None
        self._n_observations: int = 0
        self._n_evaluations: int = 0

    def fit(self, x: np.ndarray, y: np.ndarray) -> "NonlinearPowerFit":
        """Refine a and b by nonlinear least squares.

        Args:
            x: Strictly positive size measurements.
            y: Character measurements.

        Returns:
            self (for method chaining)

        Raises:
            ModelFittingError: If the solver does not converge, the
                gradient is singular, or the solution is not finite.
        """
        x = np.asarray(x, dtype=float).ravel()
        y = np.asarray(y, dtype=float).ravel()

        if not (np.isfinite(self.a_start) and np.isfinite(self.b_start)):
            raise ModelFittingError(
                f"Degenerate starting values: a={self.a_start}, b={self.b_start}"
            )

        try:
            popt, pcov, infodict, mesg, _ = curve_fit(
                power_law,
                x,
                y,
                p0=(self.a_start, self.b_start),
                jac=_power_law_jacobian,
                method="lm",
                full_output=True,
                maxfev=self.config.max_evaluations,
                ftol=self.config.ftol,
                xtol=self.config.xtol,
                gtol=self.config.gtol,
            )
        except RuntimeError as err:
            log.warning(
                "Nonlinear fit failed",
                a_start=self.a_start,
                b_start=self.b_start,
                n=len(x),
                error=str(err),
            )
            raise ModelFittingError(f"Nonlinear power-law fit failed: {err}") from err
        except (ValueError, TypeError) as err:
            raise ModelFittingError(f"Nonlinear power-law fit failed: {err}") from err

        if not np.all(np.isfinite(popt)):
            raise ModelFittingError(
                f"Nonlinear fit produced non-finite coefficients: {popt}"
            )
        # curve_fit reports an inestimable covariance as inf
        if not np.all(np.isfinite(pcov)):
            log.warning(
                "Nonlinear fit failed",
                a_start=self.a_start,
                b_start=self.b_start,
                n=len(x),
                error="singular gradient",
            )
            raise ModelFittingError(
                "Nonlinear power-law fit failed: singular gradient, "
                "a and b cannot both be estimated from these data"
            )

        self.a_ = float(popt[0])
        self.b_ = float(popt[1])
        self._n_observations = len(x)
        self._n_evaluations = int(infodict["nfev"])
        self._is_fitted = True

        log.debug(
            "Nonlinear fit converged",
            a=self.a_,
            b=self.b_,
            nfev=self._n_evaluations,
            message=mesg,
        )
        return self

    def get_result(self) -> FitResult:
        """Get fitted coefficients.

        Returns:
            FitResult with refined and starting coefficients.

        Raises:
            RuntimeError: If the fitter has not been fitted.
        """
        self._check_is_fitted()
        return FitResult(
            a=self.a_,
            b=self.b_,
            a_start=self.a_start,
            b_start=self.b_start,
            n_observations=self._n_observations,
            n_evaluations=self._n_evaluations,
        )
