"""Tests for allometric normalization of a character."""

import threading
import warnings
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pandas as pd
import pytest
from scipy.optimize import OptimizeWarning
from structlog.testing import capture_logs

from allometry.config import AllometryConfig, MissingValuePolicy, NormalizationConfig
from allometry.exceptions import InvalidInputError, ModelFittingError
from allometry.fitting import fit_power_law
from allometry.normalization import normalize_character, normalized_column_name


class TestColumnNaming:
    """Tests for the normalized column name."""

    def test_default_suffix(self) -> None:
        """Test that the default name appends '_normalized'."""
        assert normalized_column_name("width_cm") == "width_cm_normalized"

    def test_default_column_created(self, shell_measurements) -> None:
        """Test that omitting the name creates character + '_normalized'."""
        result = normalize_character(shell_measurements, "width", "length")
        assert "width_normalized" in result.columns

    def test_custom_column_name(self, shell_measurements) -> None:
        """Test an explicit column name."""
        result = normalize_character(
            shell_measurements, "width", "length", "width_size_free"
        )
        assert "width_size_free" in result.columns
        assert "width_normalized" not in result.columns

    def test_suffix_from_config(self, shell_measurements) -> None:
        """Test that the default suffix comes from the config."""
        config = AllometryConfig(
            normalization=NormalizationConfig(suffix="_adj"),
        )
        result = normalize_character(
            shell_measurements, "width", "length", config=config
        )
        assert "width_adj" in result.columns

    def test_overwrites_existing_column(self, shell_measurements) -> None:
        """Test that an existing column of the same name is replaced in place."""
        df = shell_measurements.assign(width_normalized=0.0, other=1)
        result = normalize_character(df, "width", "length")

        assert list(result.columns) == list(df.columns)
        assert (result["width_normalized"] > 0).all()
        assert (df["width_normalized"] == 0.0).all()


class TestNormalizeCharacter:
    """Tests for normalize_character on DataFrames."""

    def test_concrete_scenario(self, shell_measurements) -> None:
        """Test the documented shell example row by row."""
        result = normalize_character(shell_measurements, "width", "length")

        # Mean length is 50, present at row 1
        assert result["width_normalized"].iloc[1] == shell_measurements["width"].iloc[1]

        b = fit_power_law(
            shell_measurements["length"].to_numpy(),
            shell_measurements["width"].to_numpy(),
        ).b
        width, length = shell_measurements["width"], shell_measurements["length"]
        expected = width * (50.0 / length) ** b
        np.testing.assert_allclose(result["width_normalized"], expected, rtol=1e-12)
        # Width is exactly proportional to length, so all rows map to 10
        np.testing.assert_allclose(result["width_normalized"], 10.0, rtol=1e-6)

    def test_shape_preservation(self, noisy_sample) -> None:
        """Test row count, row order and original columns are preserved."""
        original = noisy_sample.copy()
        result = normalize_character(noisy_sample, "width", "length")

        assert len(result) == len(noisy_sample)
        assert list(result.columns) == [*original.columns, "width_normalized"]
        pd.testing.assert_frame_equal(result[original.columns], original)
        pd.testing.assert_index_equal(result.index, original.index)

    def test_input_not_mutated(self, noisy_measurements) -> None:
        """Test that the caller's DataFrame is left untouched."""
        original = noisy_measurements.copy()
        normalize_character(noisy_measurements, "width", "length")

        pd.testing.assert_frame_equal(noisy_measurements, original)

    def test_scale_invariance_at_mean(self, noisy_measurements) -> None:
        """Test that the row at the mean size keeps its raw value exactly."""
        result = normalize_character(noisy_measurements, "width", "length")

        normalized = result["width_normalized"]
        assert normalized.loc[103] == noisy_measurements.loc[103, "width"]
        assert normalized.loc[101] != noisy_measurements.loc[101, "width"]

    def test_general_formula(self, noisy_sample) -> None:
        """Test every row follows character * (mean / size) ^ b."""
        result = normalize_character(noisy_sample, "width", "length")

        b = fit_power_law(
            noisy_sample["length"].to_numpy(), noisy_sample["width"].to_numpy()
        ).b
        mean_size = noisy_sample["length"].mean()
        expected = noisy_sample["width"] * (mean_size / noisy_sample["length"]) ** b
        np.testing.assert_allclose(result["width_normalized"], expected, rtol=1e-10)

    def test_removes_size_correlation(self, noisy_sample) -> None:
        """Test that normalized values no longer scale with size."""
        result = normalize_character(noisy_sample, "width", "length")

        raw_corr = np.corrcoef(result["length"], result["width"])[0, 1]
        norm_corr = np.corrcoef(result["length"], result["width_normalized"])[0, 1]
        assert raw_corr > 0.9
        assert abs(norm_corr) < 0.2

    def test_exact_recovery_normalizes_to_constant(self, exact_sample) -> None:
        """Test that an exact power law normalizes to a single value."""
        result = normalize_character(exact_sample, "width", "length")

        mean_size = exact_sample["length"].mean()
        np.testing.assert_allclose(
            result["width_normalized"], 0.35 * mean_size**1.27, rtol=1e-6
        )

    def test_integer_columns(self) -> None:
        """Test that integer measurements are accepted and left as integers."""
        df = pd.DataFrame({"width": [8, 10, 12, 9, 11], "length": [40, 50, 60, 45, 55]})
        result = normalize_character(df, "width", "length")

        assert result["width"].dtype == df["width"].dtype
        assert result["width_normalized"].iloc[1] == 10.0


class TestInvalidInput:
    """Tests for input rejection."""

    @pytest.mark.parametrize("column", ["width", "length"])
    @pytest.mark.parametrize("bad_value", [0.0, -3.0])
    def test_non_positive_rejected_before_fit(
        self, shell_measurements, monkeypatch, column, bad_value
    ) -> None:
        """Test that non-positive values fail before any model fitting."""
        calls = []
        monkeypatch.setattr(
            "allometry.normalization.core.fit_power_law",
            lambda *args, **kwargs: calls.append(args),
        )
        df = shell_measurements.copy()
        df.loc[2, column] = bad_value

        with pytest.raises(InvalidInputError, match="strictly positive"):
            normalize_character(df, "width", "length")
        assert calls == []

    def test_infinite_rejected(self, shell_measurements) -> None:
        """Test that infinite values are rejected."""
        df = shell_measurements.copy()
        df.loc[0, "length"] = np.inf

        with pytest.raises(InvalidInputError, match="finite"):
            normalize_character(df, "width", "length")

    def test_missing_column(self, shell_measurements) -> None:
        """Test that an absent column is rejected."""
        with pytest.raises(InvalidInputError, match="Missing required columns"):
            normalize_character(shell_measurements, "height", "length")

    def test_non_numeric_column(self, shell_measurements) -> None:
        """Test that a non-numeric column is rejected."""
        with pytest.raises(InvalidInputError, match="must be numeric"):
            normalize_character(shell_measurements, "specimen", "length")

    def test_boolean_column(self, shell_measurements) -> None:
        """Test that a boolean column is not treated as numeric."""
        df = shell_measurements.assign(flag=[True, False, True, True, False])
        with pytest.raises(InvalidInputError, match="must be numeric"):
            normalize_character(df, "width", "flag")

    def test_not_tabular(self) -> None:
        """Test that a non-tabular input is rejected."""
        with pytest.raises(InvalidInputError, match="DataFrame or a mapping"):
            normalize_character([1, 2, 3], "width", "length")

    def test_repeated_column_label(self) -> None:
        """Test that a column label present twice is rejected."""
        df = pd.DataFrame(
            [[8.0, 40.0, 1.0], [10.0, 50.0, 2.0], [12.0, 60.0, 3.0]],
            columns=["width", "length", "length"],
        )
        with pytest.raises(InvalidInputError, match="must be unique"):
            normalize_character(df, "width", "length")

    def test_repeated_unrelated_label_allowed(self, shell_measurements) -> None:
        """Test that repeats outside the two measurement columns are ignored."""
        df = pd.concat([shell_measurements, shell_measurements[["specimen"]]], axis=1)
        result = normalize_character(df, "width", "length")

        np.testing.assert_allclose(result["width_normalized"], 10.0, rtol=1e-6)

    def test_invalid_input_is_value_error(self, shell_measurements) -> None:
        """Test that callers can catch invalid input as ValueError."""
        with pytest.raises(ValueError):
            normalize_character(shell_measurements, "height", "length")


class TestMissingValues:
    """Tests for missing-value handling."""

    @pytest.fixture
    def measurements_with_gaps(self, exact_sample) -> pd.DataFrame:
        df = exact_sample.head(20).copy()
        df.loc[3, "width"] = np.nan
        df.loc[7, "length"] = np.nan
        return df

    def test_drop_policy_excludes_rows(self, measurements_with_gaps) -> None:
        """Test that incomplete rows are left out and get NaN."""
        result = normalize_character(measurements_with_gaps, "width", "length")

        assert len(result) == 20
        assert np.isnan(result.loc[3, "width_normalized"])
        assert np.isnan(result.loc[7, "width_normalized"])
        assert result["width_normalized"].notna().sum() == 18

    def test_mean_ignores_missing_sizes(self, measurements_with_gaps) -> None:
        """Test that the reference size is the mean of non-missing sizes."""
        df = measurements_with_gaps
        result = normalize_character(df, "width", "length")

        # Row 3 has no width but its length still counts toward the mean
        mean_size = df["length"].dropna().mean()
        expected = df["width"] * (mean_size / df["length"]) ** 1.27
        np.testing.assert_allclose(
            result["width_normalized"], expected, rtol=1e-6, equal_nan=True
        )

    def test_drop_policy_logs_warning(self, measurements_with_gaps) -> None:
        """Test that excluded rows are reported."""
        with capture_logs() as logs:
            normalize_character(measurements_with_gaps, "width", "length")

        warnings = [
            e for e in logs if e["event"] == "Excluding incomplete rows from fit"
        ]
        assert len(warnings) == 1
        assert warnings[0]["n_excluded"] == 2
        assert warnings[0]["log_level"] == "warning"

    def test_raise_policy(self, measurements_with_gaps) -> None:
        """Test that missing values are invalid under the raise policy."""
        config = AllometryConfig(
            normalization=NormalizationConfig(missing=MissingValuePolicy.RAISE),
        )
        with pytest.raises(InvalidInputError):
            normalize_character(
                measurements_with_gaps, "width", "length", config=config
            )

    def test_too_few_complete_rows(self) -> None:
        """Test that gaps leaving fewer than three rows fail the fit."""
        df = pd.DataFrame(
            {
                "width": [8.0, np.nan, 12.0, np.nan],
                "length": [40.0, 50.0, 60.0, 45.0],
            }
        )
        with pytest.raises(ModelFittingError, match="At least 3"):
            normalize_character(df, "width", "length")


class TestMappingInput:
    """Tests for column-mapping input."""

    def test_returns_mapping(self) -> None:
        """Test that mapping input gives mapping output with the new column."""
        data = {"width": [8, 10, 12, 9, 11], "length": [40, 50, 60, 45, 55]}
        result = normalize_character(data, "width", "length")

        assert isinstance(result, dict)
        assert list(result) == ["width", "length", "width_normalized"]
        assert len(result["width_normalized"]) == 5
        assert result["width_normalized"][1] == 10
        assert result["width"] is data["width"]
        assert "width_normalized" not in data

    def test_unequal_lengths(self) -> None:
        """Test that ragged columns are rejected."""
        data = {"width": [8, 10, 12], "length": [40, 50]}
        with pytest.raises(InvalidInputError, match="same length"):
            normalize_character(data, "width", "length")

    def test_scalar_column(self) -> None:
        """Test that a column that is not a sequence is rejected."""
        data = {"width": 8, "length": [40, 50]}
        with pytest.raises(InvalidInputError, match="sequence"):
            normalize_character(data, "width", "length")


class TestLogging:
    """Tests for log output of a normalization."""

    def test_logs_fitted_exponent(self, shell_measurements) -> None:
        """Test that a completed normalization logs its exponent."""
        with capture_logs() as logs:
            normalize_character(shell_measurements, "width", "length")

        events = [e for e in logs if e["event"] == "Normalized character"]
        assert len(events) == 1
        assert events[0]["exponent"] == pytest.approx(1.0, abs=1e-6)
        assert events[0]["reference_size"] == 50.0
        assert events[0]["column"] == "width_normalized"


class TestConcurrentUse:
    """Tests for normalizing while other threads are running."""

    @pytest.mark.filterwarnings("ignore::scipy.optimize.OptimizeWarning")
    def test_other_threads_warnings_stay_warnings(self, noisy_sample) -> None:
        """Test that a fit never turns another thread's warnings into errors."""
        stop = threading.Event()
        raised = []

        def emit() -> None:
            while not stop.is_set():
                try:
                    warnings.warn("unrelated", OptimizeWarning, stacklevel=1)
                except OptimizeWarning:
                    raised.append(True)

        worker = threading.Thread(target=emit)
        worker.start()
        try:
            for _ in range(10):
                normalize_character(noisy_sample, "width", "length")
        finally:
            stop.set()
            worker.join()

        assert raised == []

    def test_parallel_calls_agree(self, noisy_sample) -> None:
        """Test that concurrent normalizations give the serial result."""
        expected = normalize_character(noisy_sample, "width", "length")

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(
                pool.map(
                    lambda _: normalize_character(noisy_sample, "width", "length"),
                    range(8),
                )
            )

        for result in results:
            pd.testing.assert_frame_equal(result, expected)
