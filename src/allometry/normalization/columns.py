"""
Column naming and column checks for normalization.

Columns are addressed by plain string names.
"""

import pandas as pd

from allometry.config.settings import NormalizationConfig
from allometry.exceptions import InvalidInputError
from allometry.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_SUFFIX = NormalizationConfig().suffix


def normalized_column_name(character: str, suffix: str = DEFAULT_SUFFIX) -> str:
    """
    Default name for the normalized version of a character column.

    Args:
        character: Name of the column being normalized.
        suffix: Literal suffix appended to the name.

    Returns:
        ``character + suffix``, e.g. ``"width_cm_normalized"``.
    """
    return f"{character}{suffix}"


def validate_required_columns(df: pd.DataFrame, required: list[str]) -> None:
    """
    Check that required columns are present, each under a unique label.

    Args:
        df: DataFrame to check.
        required: List of required column names.

    Raises:
        InvalidInputError: If any column is missing or its label repeats.
    """
    missing = [col for col in required if col not in df.columns]

    if missing:
        log.warning("Missing columns", missing=missing, available=list(df.columns))
        msg = f"Missing required columns: {missing}"
        raise InvalidInputError(msg)

    repeated = df.columns[df.columns.duplicated()]
    ambiguous = [col for col in required if col in repeated]
    if ambiguous:
        msg = f"Column labels must be unique, found repeats of: {ambiguous}"
        raise InvalidInputError(msg)


def validate_numeric_columns(df: pd.DataFrame, columns: list[str]) -> None:
    """
    Check that columns hold numeric (non-boolean) data.

    Args:
        df: DataFrame to check.
        columns: Column names to check.

    Raises:
        InvalidInputError: If any column is not numeric.
    """
    non_numeric = {
        col: str(df[col].dtype)
        for col in columns
        if not pd.api.types.is_numeric_dtype(df[col])
        or pd.api.types.is_bool_dtype(df[col])
    }

    if non_numeric:
        msg = f"Columns must be numeric: {non_numeric}"
        raise InvalidInputError(msg)
