"""Tests for base indicator class."""

import pytest
import pandas as pd
import numpy as np
from kline_indicators.bars import Bar, BarSeries
from kline_indicators.exceptions import (
    InsufficientDataError,
    InvalidConfigurationError,
    MissingColumnsError,
    NonMonotonicTimestampsError,
)
from kline_indicators.indicators.base_indicator import (
    BaseIndicator,
    IndicatorPoint,
    IndicatorResult,
    validate_multiplier,
    validate_period,
)
from kline_indicators.signals.base_signal import Signal


class TestIndicatorResult:
    """Tests for IndicatorResult dataclass."""

    def test_indicator_result_creation(self):
        """Test IndicatorResult can be created with required fields."""
        result = IndicatorResult(
            name="TEST_IND",
            values=pd.Series([1.0, 2.0, 3.0], index=[10, 20, 30]),
            params={"period": 10}
        )
        assert result.name == "TEST_IND"
        assert len(result) == 3
        assert result.params["period"] == 10

    def test_indicator_result_optional_signal(self):
        """Test IndicatorResult signal field defaults to None."""
        result = IndicatorResult(
            name="TEST_IND",
            values=pd.Series([1.0], index=[10]),
            params={}
        )
        assert result.signal is None
        assert result.points()[0].signal is None

    def test_points_from_series(self):
        """Test scalar results become IndicatorPoints with timestamps and signals."""
        result = IndicatorResult(
            name="TEST_IND",
            values=pd.Series([25.0, 50.0, 75.0], index=[10, 20, 30]),
            signal=pd.Series([1, 0, -1], index=[10, 20, 30]),
        )
        points = result.points()

        assert points == [
            IndicatorPoint(timestamp=10, value=25.0, signal=Signal.BUY),
            IndicatorPoint(timestamp=20, value=50.0, signal=Signal.NONE),
            IndicatorPoint(timestamp=30, value=75.0, signal=Signal.SELL),
        ]
        assert result.timestamps == [10, 20, 30]

    def test_points_from_dataframe(self):
        """Test multi-line results become record-valued points."""
        result = IndicatorResult(
            name="BANDS",
            values=pd.DataFrame(
                {"upper": [3.0], "middle": [2.0], "lower": [1.0]},
                index=[10],
            ),
        )
        point = result.points()[0]
        assert point.timestamp == 10
        assert point.value == {"upper": 3.0, "middle": 2.0, "lower": 1.0}


class ConcreteIndicator(BaseIndicator):
    """Concrete implementation for testing abstract base class."""

    @property
    def name(self) -> str:
        return "CONCRETE"

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        values = df["close"] * 2
        return IndicatorResult(
            name=self.name,
            values=values,
            params={}
        )


class TestBaseIndicator:
    """Tests for BaseIndicator abstract base class."""

    @pytest.fixture
    def sample_df(self):
        """Create sample OHLC dataframe for testing."""
        return pd.DataFrame({
            "timestamp": [1000, 2000, 3000, 4000, 5000],
            "open": [10.0, 11.0, 12.0, 11.5, 13.0],
            "high": [10.5, 11.5, 12.5, 12.0, 13.5],
            "low": [9.5, 10.5, 11.5, 11.0, 12.5],
            "close": [10.2, 11.2, 12.2, 11.8, 13.2],
        })

    @pytest.fixture
    def indicator(self):
        """Create concrete indicator instance."""
        return ConcreteIndicator()

    def test_abstract_class_cannot_be_instantiated(self):
        """Test that BaseIndicator cannot be instantiated directly."""
        with pytest.raises(TypeError):
            BaseIndicator()

    def test_validate_data_success(self, indicator, sample_df):
        """Test validation indexes the frame by its timestamp column."""
        df = indicator.validate_data(sample_df)
        assert list(df.index) == [1000, 2000, 3000, 4000, 5000]
        assert df.index.name == "timestamp"

    def test_validate_data_missing_column(self, indicator):
        """Test validation fails with missing required column."""
        df = pd.DataFrame({"open": [1.0], "high": [1.1]})
        with pytest.raises(MissingColumnsError, match="Missing required columns"):
            indicator.validate_data(df)

    def test_validate_data_empty_dataframe(self, indicator):
        """Test validation fails with empty dataframe."""
        df = pd.DataFrame({"close": []})
        with pytest.raises(InsufficientDataError, match="at least 1"):
            indicator.validate_data(df)

    def test_validate_data_rejects_unordered_timestamps(self, indicator, sample_df):
        """Test out-of-order timestamps are rejected, not silently sorted."""
        df = sample_df.copy()
        df.loc[3, "timestamp"] = 2500
        with pytest.raises(NonMonotonicTimestampsError) as exc_info:
            indicator.validate_data(df)
        assert exc_info.value.position == 3

    def test_validate_data_rejects_duplicate_index(self, indicator):
        """Test repeated timestamps in the index are rejected."""
        df = pd.DataFrame({"close": [1.0, 2.0, 3.0]}, index=[10, 20, 20])
        with pytest.raises(NonMonotonicTimestampsError):
            indicator.validate_data(df)

    def test_validate_data_datetime_index(self, indicator):
        """Test datetime indexes are converted to epoch milliseconds."""
        index = pd.date_range("2024-01-01", periods=3, freq="h")
        df = pd.DataFrame({"close": [1.0, 2.0, 3.0]}, index=index)
        result = indicator.validate_data(df)
        assert list(result.index) == [1704067200000, 1704070800000, 1704074400000]

    def test_validate_data_accepts_bar_series(self, indicator):
        """Test BarSeries input is projected onto a DataFrame."""
        bars = BarSeries([Bar(1, 1.0, 1.0, 1.0, 1.0), Bar(2, 2.0, 2.0, 2.0, 2.0)])
        df = indicator.validate_data(bars)
        assert list(df.index) == [1, 2]
        assert list(df["close"]) == [1.0, 2.0]

    def test_calculate_returns_result(self, indicator, sample_df):
        """Test calculate returns IndicatorResult."""
        result = indicator.calculate(indicator.validate_data(sample_df))
        assert isinstance(result, IndicatorResult)
        assert result.name == "CONCRETE"
        assert len(result.values) == len(sample_df)

    def test_call_validates_and_calculates(self, indicator, sample_df):
        """Test __call__ validates data before calculating."""
        result = indicator(sample_df)
        assert isinstance(result, IndicatorResult)
        assert result.timestamps == [1000, 2000, 3000, 4000, 5000]

    def test_call_fails_with_invalid_data(self, indicator):
        """Test __call__ raises on invalid data."""
        df = pd.DataFrame({"wrong_column": [1.0]})
        with pytest.raises(ValueError):
            indicator(df)


class TestValidatePeriod:
    """Tests for period validation."""

    def test_accepts_positive_integers(self):
        assert validate_period(14) == 14
        assert validate_period(np.int64(3)) == 3

    @pytest.mark.parametrize("value", [0, -1, 2.5, "14", True, None])
    def test_rejects_invalid_periods(self, value):
        with pytest.raises(ValueError):
            validate_period(value)


class TestValidateMultiplier:
    """Tests for band multiplier validation."""

    def test_accepts_python_and_numpy_numbers(self):
        assert validate_multiplier(2) == 2.0
        assert validate_multiplier(1.5) == 1.5
        assert validate_multiplier(np.int64(3)) == 3.0
        assert validate_multiplier(np.float64(0.5)) == 0.5

    @pytest.mark.parametrize("value", [0, -2.0, "2", True, None, float("inf"), float("nan")])
    def test_rejects_invalid_multipliers(self, value):
        with pytest.raises(InvalidConfigurationError):
            validate_multiplier(value)
