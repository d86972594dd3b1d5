"""
Pandera schema for the two measurement columns of an allometric fit.

Column names are chosen by the caller, so the schema is built per call
rather than declared as a DataFrameModel.
"""

import numpy as np
import pandas as pd
import pandera.pandas as pa


def _is_finite(series: pd.Series) -> pd.Series:
    values = series.to_numpy(dtype=float, na_value=np.nan)
    return pd.Series(np.isfinite(values), index=series.index)


def measurement_column(name: str, *, nullable: bool) -> pa.Column:
    """
    Column definition for one strictly positive, finite measurement.

    Args:
        name: Column name.
        nullable: Whether missing values are allowed.

    Returns:
        Pandera Column. The dtype is not constrained; numeric dtypes are
        checked separately so the caller's integer columns stay intact.
    """
    return pa.Column(
        None,
        checks=[
            pa.Check.gt(0, error="values must be strictly positive"),
            pa.Check(_is_finite, error="values must be finite"),
        ],
        nullable=nullable,
        coerce=False,
        required=True,
        name=name,
        description="Morphological measurement used in a power-law fit",
    )


def build_measurement_schema(
    character: str,
    normalize_by: str,
    *,
    allow_missing: bool = True,
) -> pa.DataFrameSchema:
    """
    Build the schema that a dataset must satisfy before fitting.

    Both columns must be present with strictly positive, finite values.
    Other columns are ignored.

    Args:
        character: Column holding the measurement to normalize.
        normalize_by: Column holding the size measurement.
        allow_missing: Whether missing values pass validation.

    Returns:
        DataFrameSchema for the two columns.
    """
    columns = {
        name: measurement_column(name, nullable=allow_missing)
        for name in dict.fromkeys([character, normalize_by])
    }
    return pa.DataFrameSchema(
        columns,
        strict=False,
        name="AllometricMeasurementSchema",
    )
