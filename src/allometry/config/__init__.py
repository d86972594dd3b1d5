"""
Configuration management with typed Pydantic models.

Solver tolerances, missing-value handling and logging output are all
configured through AllometryConfig, loaded from YAML or built in code.
"""

from allometry.config.loader import load_config
from allometry.config.settings import (
    AllometryConfig,
    FitConfig,
    LoggingConfig,
    MissingValuePolicy,
    NormalizationConfig,
)

__all__ = [
    "AllometryConfig",
    "FitConfig",
    "LoggingConfig",
    "MissingValuePolicy",
    "NormalizationConfig",
    "load_config",
]
