"""
Conversion between caller tables and working DataFrames.

Callers pass either a pandas DataFrame or a mapping from column name to
an equal-length sequence. Results are returned in the same structure.
"""

from collections.abc import Mapping, Sequence
from typing import Any, TypeAlias

import pandas as pd

from allometry.exceptions import InvalidInputError

ColumnMapping: TypeAlias = Mapping[str, Sequence[Any]]
Table: TypeAlias = pd.DataFrame | ColumnMapping


def to_frame(data: Table) -> pd.DataFrame:
    """
    Build a working DataFrame without touching the caller's data.

    Args:
        data: DataFrame or mapping of column name to values.

    Returns:
        A DataFrame copy (or a new DataFrame built from the mapping).

    Raises:
        InvalidInputError: If the input is not tabular or columns differ
            in length.
    """
    if isinstance(data, pd.DataFrame):
        return data.copy()

    if not isinstance(data, Mapping):
        msg = (
            "Data must be a pandas DataFrame or a mapping of column names "
            f"to sequences, got {type(data).__name__}"
        )
        raise InvalidInputError(msg)

    try:
        lengths = {name: len(values) for name, values in data.items()}
    except TypeError as err:
        msg = f"Every column must be a sequence of values: {err}"
        raise InvalidInputError(msg) from err
    if len(set(lengths.values())) > 1:
        msg = f"All columns must have the same length, got {lengths}"
        raise InvalidInputError(msg)

    return pd.DataFrame({name: list(values) for name, values in data.items()})


def with_column(data: Table, name: str, values: pd.Series) -> Table:
    """
    Return a copy of the caller's table with one column added or replaced.

    Args:
        data: The caller's original table.
        name: Column name to set.
        values: Column values aligned with the table's rows.

    Returns:
        DataFrame copy for DataFrame input; a new dict whose original
        columns are the caller's own sequences for mapping input.
    """
    if isinstance(data, pd.DataFrame):
        result = data.copy()
        result[name] = values.to_numpy()
        return result

    result_map: dict[str, Any] = dict(data)
    result_map[name] = values.tolist()
    return result_map
