"""Exception hierarchy for allometric normalization."""


class AllometryError(Exception):
    """Base class for all errors raised by this package."""


class InvalidInputError(AllometryError, ValueError):
    """
    Input data cannot be normalized.

    Raised for absent or non-numeric columns, non-positive or non-finite
    values, and missing values when missing values are not allowed.
    Always raised before any model fitting.
    """


class ModelFittingError(AllometryError, RuntimeError):
    """The power-law model could not be fitted to the data."""
