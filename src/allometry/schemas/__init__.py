"""
Schema definitions using Pandera for data validation.

Measurement columns are validated before any model is fitted.
"""

from allometry.schemas.measurements import build_measurement_schema, measurement_column

__all__ = [
    "build_measurement_schema",
    "measurement_column",
]
