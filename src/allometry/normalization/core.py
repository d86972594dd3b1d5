"""
Allometric normalization of a morphological character.

Removes size-correlated variation from a measurement by rescaling each
individual to the population-mean reference size under a fitted power
law, following the procedure of Hamilton et al. (2020):

    normalized = character * (mean(normalize_by) / normalize_by) ^ b

where b is the allometric exponent of ``character = a * normalize_by^b``.
"""

import numpy as np
import pandas as pd
from pandera.errors import SchemaError

from allometry.config.settings import AllometryConfig, MissingValuePolicy
from allometry.exceptions import InvalidInputError
from allometry.fitting.twostage import fit_power_law
from allometry.normalization.columns import (
    normalized_column_name,
    validate_numeric_columns,
    validate_required_columns,
)
from allometry.normalization.tabular import Table, to_frame, with_column
from allometry.schemas.measurements import build_measurement_schema
from allometry.utils.logging import get_logger

log = get_logger(__name__)


def _as_float(series: pd.Series) -> pd.Series:
    """Float copy of a numeric column with missing values as NaN."""
    return pd.Series(
        series.to_numpy(dtype=float, na_value=np.nan),
        index=series.index,
        name=series.name,
    )


def _validate_measurements(
    df: pd.DataFrame,
    character: str,
    normalize_by: str,
    missing: MissingValuePolicy,
) -> None:
    """Reject data that cannot enter a log transform, before any fitting."""
    columns = list(dict.fromkeys([character, normalize_by]))
    validate_required_columns(df, columns)
    validate_numeric_columns(df, columns)

    schema = build_measurement_schema(
        character,
        normalize_by,
        allow_missing=missing == MissingValuePolicy.DROP,
    )
    try:
        schema.validate(df[columns])
    except SchemaError as err:
        log.warning(
            "Invalid measurements",
            character=character,
            normalize_by=normalize_by,
            error=str(err),
        )
        reason = getattr(getattr(err, "check", None), "error", None)
        msg = f"Invalid measurements for allometric normalization: {reason or err}"
        raise InvalidInputError(msg) from err


def normalize_character(
    data: Table,
    character: str,
    normalize_by: str,
    new_column_name: str | None = None,
    *,
    config: AllometryConfig | None = None,
) -> Table:
    """
    Normalize a character by another following an allometric scaling law.

    Fits ``character = a * normalize_by^b`` by ordinary least squares in
    log-log space, refines the fit by nonlinear least squares in the
    original scale, then rescales every row to the mean of
    ``normalize_by``.

    Rows with a missing value in either column are left out of the fit
    and get NaN in the new column, unless the config's missing-value
    policy is ``raise``. The mean of ``normalize_by`` is taken over all
    its non-missing values.

    Args:
        data: DataFrame, or mapping of column name to equal-length values.
        character: Name of the column to normalize.
        normalize_by: Name of the column to normalize by.
        new_column_name: Name of the new column. Defaults to
            ``character + "_normalized"`` (the suffix is configurable).
        config: Optional AllometryConfig; defaults are used when omitted.

    Returns:
        A copy of ``data`` in the same structure type with the new column
        added or replaced. The caller's object is never modified.

    Raises:
        InvalidInputError: If a column is absent or non-numeric, or holds
            non-positive, non-finite or (under ``raise``) missing values.
        ModelFittingError: If the power law cannot be fitted.

    Example:
        >>> shells = {"width_cm": [8, 10, 12, 9, 11],
        ...           "length_cm": [40, 50, 60, 45, 55]}
        >>> out = normalize_character(shells, "width_cm", "length_cm")
        >>> out["width_cm_normalized"][1]
        10.0
    """
    config = config or AllometryConfig()
    if new_column_name is None:
        new_column_name = normalized_column_name(
            character, config.normalization.suffix
        )

    df = to_frame(data)
    _validate_measurements(df, character, normalize_by, config.normalization.missing)

    y = _as_float(df[character])
    x = _as_float(df[normalize_by])
    complete = x.notna() & y.notna()

    n_incomplete = int((~complete).sum())
    if n_incomplete:
        log.warning(
            "Excluding incomplete rows from fit",
            character=character,
            normalize_by=normalize_by,
            n_excluded=n_incomplete,
        )

    fit = fit_power_law(
        x[complete].to_numpy(),
        y[complete].to_numpy(),
        config.fit,
    )

    reference_size = x.mean(skipna=True)
    normalized = y * (reference_size / x) ** fit.b

    log.info(
        "Normalized character",
        character=character,
        normalize_by=normalize_by,
        column=new_column_name,
        exponent=fit.b,
        scale=fit.a,
        reference_size=float(reference_size),
        n_rows=len(df),
        n_fitted=fit.n_observations,
    )

    return with_column(data, new_column_name, normalized)
