"""Pytest configuration and shared fixtures."""

import pandas as pd
import pytest

from allometry.synthetic import simulate_measurements


@pytest.fixture
def shell_measurements() -> pd.DataFrame:
    """Shell widths exactly proportional to length; mean length is 50."""
    return pd.DataFrame(
        {
            "specimen": ["A1", "A2", "A3", "A4", "A5"],
            "width": [8.0, 10.0, 12.0, 9.0, 11.0],
            "length": [40.0, 50.0, 60.0, 45.0, 55.0],
        }
    )


@pytest.fixture
def noisy_measurements() -> pd.DataFrame:
    """Widths with scatter around a power law; mean length 50 is row 2."""
    return pd.DataFrame(
        {
            "width": [6.3, 8.1, 9.7, 12.4, 13.8],
            "length": [30.0, 40.0, 50.0, 60.0, 70.0],
        },
        index=[101, 102, 103, 104, 105],
    )


@pytest.fixture
def exact_sample() -> pd.DataFrame:
    """Noise-free sample of width = 0.35 * length^1.27."""
    return simulate_measurements(
        n=60,
        a=0.35,
        b=1.27,
        noise_sd=0.0,
        seed=7,
        character="width",
        normalize_by="length",
    )


@pytest.fixture
def noisy_sample() -> pd.DataFrame:
    """Sample of width = 0.5 * length^1.3 with 5% log-normal scatter."""
    return simulate_measurements(
        n=500,
        a=0.5,
        b=1.3,
        noise_sd=0.05,
        seed=42,
        character="width",
        normalize_by="length",
    )
