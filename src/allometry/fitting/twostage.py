"""
Two-stage allometric fit.

1. Ordinary least squares in log-log space gives closed-form, well
   conditioned estimates of a and b.
2. Levenberg-Marquardt refines them in the original scale.

The log-linear estimates are only starting values; when the refinement
fails the fit fails. There is no fallback to the log-linear estimates.
"""

import numpy as np

from allometry.config.settings import FitConfig
from allometry.exceptions import InvalidInputError, ModelFittingError
from allometry.fitting.base import FitResult
from allometry.fitting.loglinear import LogLinearPowerFit
from allometry.fitting.nonlinear import NonlinearPowerFit
from allometry.utils.logging import get_logger

log = get_logger(__name__)


def fit_power_law(
    x: np.ndarray,
    y: np.ndarray,
    config: FitConfig | None = None,
) -> FitResult:
    """Fit ``y = a * x^b`` with a log-linear start and nonlinear refinement.

    Args:
        x: Strictly positive size measurements, no missing values.
        y: Strictly positive character measurements, no missing values.
        config: Solver settings (defaults to FitConfig()).

    Returns:
        FitResult holding the refined a and b and their starting values.

    Raises:
        InvalidInputError: If x and y differ in length or any value is
            not strictly positive.
        ModelFittingError: If there are too few observations, x does
            not vary, or the nonlinear refinement fails.
    """
    config = config or FitConfig()
    x = np.asarray(x, dtype=float).ravel()
    y = np.asarray(y, dtype=float).ravel()

    if len(x) != len(y):
        raise InvalidInputError(
            f"x and y must have the same length, got {len(x)} and {len(y)}"
        )
    if len(x) < config.min_observations:
        raise ModelFittingError(
            f"At least {config.min_observations} complete observations are "
            f"required to fit a power law, got {len(x)}"
        )
    if np.ptp(x) == 0:
        raise ModelFittingError(
            "Size measurements do not vary; the exponent is not identifiable"
        )

    start = LogLinearPowerFit().fit(x, y).get_result()

    log.debug(
        "Log-linear starting values",
        a_start=start.a,
        b_start=start.b,
        n=start.n_observations,
    )

    refined = NonlinearPowerFit(start.a, start.b, config).fit(x, y)
    return refined.get_result()
