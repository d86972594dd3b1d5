"""
Typed configuration models using Pydantic.

Solver tolerances, the missing-value policy and logging are configured
here; the fitting and normalization code reads them from these models
instead of hardcoding them.
"""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MissingValuePolicy(str, Enum):
    """How rows with a missing measurement are treated."""

    DROP = "drop"  # excluded from the fit, NaN in the normalized column
    RAISE = "raise"  # any missing value is invalid input


class FitConfig(BaseModel):
    """Levenberg-Marquardt solver settings for the nonlinear refinement."""

    model_config = ConfigDict(frozen=True)

    max_evaluations: int = Field(
        default=600,
        gt=0,
        description="Maximum number of model evaluations before giving up",
    )
    ftol: float = Field(
        default=1.49012e-08,
        gt=0.0,
        description="Relative tolerance on the sum of squared residuals",
    )
    xtol: float = Field(
        default=1.49012e-08,
        gt=0.0,
        description="Relative tolerance on the parameter estimates",
    )
    gtol: float = Field(
        default=0.0,
        ge=0.0,
        description="Orthogonality tolerance between residuals and Jacobian",
    )
    min_observations: int = Field(
        default=3,
        ge=3,
        description="Minimum number of complete rows required to fit a and b",
    )


class NormalizationConfig(BaseModel):
    """Settings for building the normalized column."""

    model_config = ConfigDict(frozen=True)

    suffix: str = Field(
        default="_normalized",
        min_length=1,
        description="Appended to the character name when no column name is given",
    )
    missing: MissingValuePolicy = Field(
        default=MissingValuePolicy.DROP,
        description="Treatment of rows with a missing measurement",
    )


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = Field(default="INFO", description="Log level name")
    json_output: bool = Field(default=False, description="Render logs as JSON")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure level names a standard logging level."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            msg = f"Unknown log level: {v!r}"
            raise ValueError(msg)
        return level


class AllometryConfig(BaseModel):
    """Complete configuration for allometric normalization."""

    model_config = ConfigDict(frozen=True)

    fit: FitConfig = Field(default_factory=FitConfig)
    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
