"""
Power-law fitting for allometric scaling relationships.

Available fitters:
    - LogLinearPowerFit: OLS on log(y) ~ log(x), closed form
    - NonlinearPowerFit: Levenberg-Marquardt on y = a * x^b

fit_power_law() chains the two: the log-linear estimates start the
nonlinear refinement.

Example usage:
    >>> from allometry.fitting import fit_power_law
    >>> result = fit_power_law(length_cm, width_cm)
    >>> print(f"exponent b = {result.b:.3f}")
"""

from allometry.fitting.base import FitResult, PowerLawFitterBase, power_law
from allometry.fitting.loglinear import LogLinearPowerFit
from allometry.fitting.nonlinear import NonlinearPowerFit
from allometry.fitting.twostage import fit_power_law

__all__ = [
    "FitResult",
    "LogLinearPowerFit",
    "NonlinearPowerFit",
    "PowerLawFitterBase",
    "fit_power_law",
    "power_law",
]
