"""
Allometric normalization of morphological measurements.

Rescales a character to the population-mean reference size using a
fitted power law, and provides the column naming and validation helpers
it relies on.
"""

from allometry.normalization.columns import (
    normalized_column_name,
    validate_numeric_columns,
    validate_required_columns,
)
from allometry.normalization.core import normalize_character

__all__ = [
    "normalize_character",
    "normalized_column_name",
    "validate_numeric_columns",
    "validate_required_columns",
]
