"""
Synthetic allometric measurements.

Generates paired size/character samples that follow a known power law,
for examples and for checking that a fit recovers the true exponent.
"""

import numpy as np
import pandas as pd


def simulate_measurements(
    n: int = 100,
    a: float = 0.2,
    b: float = 1.0,
    *,
    size_mean: float = 50.0,
    size_sd: float = 10.0,
    noise_sd: float = 0.0,
    seed: int | None = None,
    character: str = "width_cm",
    normalize_by: str = "length_cm",
) -> pd.DataFrame:
    """
    Simulate measurements following ``character = a * size^b``.

    Sizes are drawn from a normal distribution; non-positive draws are
    redrawn so every measurement stays valid for a log transform. Noise
    is multiplicative (log-normal), so the character stays positive.

    Args:
        n: Number of individuals.
        a: True scale coefficient (> 0).
        b: True allometric exponent.
        size_mean: Mean of the size distribution.
        size_sd: Standard deviation of the size distribution.
        noise_sd: Standard deviation of the log-scale noise; 0 gives an
            exact power law.
        seed: Seed for the random generator.
        character: Name of the character column.
        normalize_by: Name of the size column.

    Returns:
        DataFrame with the size and character columns.
    """
    if n < 1:
        msg = f"n must be positive, got {n}"
        raise ValueError(msg)
    if a <= 0:
        msg = f"a must be positive, got {a}"
        raise ValueError(msg)
    if size_mean <= 0 or size_sd < 0 or noise_sd < 0:
        msg = "size_mean must be positive; size_sd and noise_sd non-negative"
        raise ValueError(msg)

    rng = np.random.default_rng(seed)

    size = rng.normal(size_mean, size_sd, n)
    invalid = size <= 0
    while invalid.any():
        size[invalid] = rng.normal(size_mean, size_sd, int(invalid.sum()))
        invalid = size <= 0

    noise = rng.normal(0.0, noise_sd, n) if noise_sd > 0 else np.zeros(n)
    value = a * np.power(size, b) * np.exp(noise)

    return pd.DataFrame({character: value, normalize_by: size})
