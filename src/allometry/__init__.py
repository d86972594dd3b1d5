"""
Allometry: allometric normalization of morphological measurements.

Fits a power law ``character = a * normalize_by^b`` between two measured
traits and rescales each measurement to the population-mean reference
size, removing size-correlated variation before shape analysis.

Reference:
    Hamilton, A.M. et al. (2020): Biogeography of shell morphology in
    over-exploited shellfish. Journal of Biogeography, 47(7), 1494-1509.
"""

from importlib.metadata import version

from allometry.exceptions import AllometryError, InvalidInputError, ModelFittingError
from allometry.fitting import FitResult, fit_power_law
from allometry.normalization import normalize_character

__version__ = version("allometry")

__all__ = [
    "AllometryError",
    "FitResult",
    "InvalidInputError",
    "ModelFittingError",
    "__version__",
    "fit_power_law",
    "normalize_character",
]
