"""Tests for moving average primitives and indicators (SMA, EMA)."""

import pytest
import pandas as pd
import numpy as np
from kline_indicators.bars import Bar, BarSeries
from kline_indicators.exceptions import InsufficientDataError, InvalidConfigurationError
from kline_indicators.indicators.base_indicator import IndicatorResult
from kline_indicators.indicators.moving_average import sma, ema, MAIndicator, EMAIndicator


def make_bars(closes, start=1_700_000_000_000, step=3_600_000):
    """Build a BarSeries with one-hour bars around the given closes."""
    return BarSeries(
        Bar(start + i * step, c, c + 1.0, c - 1.0, c)
        for i, c in enumerate(closes)
    )


@pytest.fixture
def sample_bars():
    """Create a random-walk bar series for testing."""
    np.random.seed(42)
    closes = 100 + np.cumsum(np.random.randn(100) * 2)
    return make_bars([float(c) for c in closes])


class TestSMA:
    """Tests for the sma primitive."""

    def test_trailing_window_mean(self):
        """Test each value is the mean of the trailing window."""
        result = sma([1.0, 2.0, 3.0, 4.0, 5.0], 3)
        assert np.isnan(result[0])
        assert np.isnan(result[1])
        np.testing.assert_allclose(result[2:], [2.0, 3.0, 4.0])

    def test_constant_series(self):
        """Test SMA of a constant series equals the constant after warm-up."""
        result = sma([2.5] * 10, 4)
        assert np.isnan(result[:3]).all()
        assert result[3:] == pytest.approx([2.5] * 7)

    @pytest.mark.parametrize("value", [0.1, 0.7, 1e-3, 123.456])
    def test_constant_series_is_exact(self, value):
        """Test a flat window averages to exactly the repeated value."""
        result = sma([value] * 25, 20)
        assert (result[19:] == value).all()

    def test_mixed_windows_after_flat_run(self):
        """Test flat windows stay exact while moving windows still average."""
        result = sma([0.1, 0.1, 0.1, 0.4], 3)
        assert result[2] == 0.1
        assert result[3] == pytest.approx(0.2)

    def test_period_longer_than_series(self):
        """Test all positions are undefined when history is too short."""
        result = sma([1.0, 2.0], 5)
        assert len(result) == 2
        assert np.isnan(result).all()

    def test_period_one_is_identity(self):
        """Test a one-bar window returns the input."""
        np.testing.assert_allclose(sma([3.0, 1.0, 4.0], 1), [3.0, 1.0, 4.0])

    def test_empty_input_raises(self):
        """Test empty input is rejected."""
        with pytest.raises(InsufficientDataError):
            sma([], 3)

    @pytest.mark.parametrize("period", [0, -3, 2.5])
    def test_invalid_period_raises(self, period):
        """Test non-positive or fractional periods are rejected."""
        with pytest.raises(InvalidConfigurationError):
            sma([1.0, 2.0, 3.0], period)


class TestEMA:
    """Tests for the ema primitive."""

    def test_seeded_with_first_value(self):
        """Test EMA starts at the first input value for any period."""
        values = [7.0, 1.0, 9.0, 4.0]
        for period in (1, 3, 12, 50):
            assert ema(values, period)[0] == 7.0

    def test_recurrence(self):
        """Test EMA follows value * k + prev * (1 - k) with k = 2 / (period + 1)."""
        # period 3 -> k = 0.5
        np.testing.assert_allclose(ema([5.0, 7.0, 9.0], 3), [5.0, 6.0, 7.5])

    def test_constant_series_is_fixed_point(self):
        """Test EMA of a constant series stays at the constant."""
        result = ema([42.0] * 30, 9)
        assert result == pytest.approx([42.0] * 30)

    def test_matches_recurrence_on_random_walk(self, sample_bars):
        """Test EMA equals the first-value-seeded recurrence step by step."""
        closes = sample_bars.closes
        for period in (1, 9, 12, 26):
            k = 2.0 / (period + 1)
            expected = [closes[0]]
            for close in closes[1:]:
                expected.append(close * k + expected[-1] * (1 - k))
            np.testing.assert_allclose(ema(closes, period), expected, rtol=1e-12)

    def test_defined_everywhere(self):
        """Test EMA has no warm-up gap."""
        result = ema([1.0, 2.0, 3.0], 26)
        assert len(result) == 3
        assert not np.isnan(result).any()

    def test_period_one_is_identity(self):
        """Test k = 1 reproduces the input."""
        np.testing.assert_array_equal(ema([3.0, 1.0, 4.0], 1), [3.0, 1.0, 4.0])

    def test_accepts_pandas_series(self):
        """Test pandas input is accepted."""
        result = ema(pd.Series([5.0, 7.0, 9.0]), 3)
        np.testing.assert_allclose(result, [5.0, 6.0, 7.5])

    def test_empty_input_raises(self):
        """Test empty input is rejected."""
        with pytest.raises(InsufficientDataError):
            ema([], 3)

    def test_invalid_period_raises(self):
        """Test non-positive period is rejected."""
        with pytest.raises(InvalidConfigurationError):
            ema([1.0], 0)


class TestMAIndicator:
    """Tests for Simple Moving Average indicator."""

    def test_ma_name(self):
        """Test MA indicator name includes period."""
        assert MAIndicator(period=20).name == "MA_20"

    def test_ma_required_columns(self):
        """Test MA requires close column."""
        assert "close" in MAIndicator().required_columns

    def test_ma_omits_warm_up(self, sample_bars):
        """Test MA output starts at bar period - 1."""
        result = MAIndicator(period=20)(sample_bars)

        assert isinstance(result, IndicatorResult)
        assert len(result) == len(sample_bars) - 20 + 1
        assert result.timestamps[0] == sample_bars[19].timestamp
        assert not result.values.isna().any()

    def test_ma_values(self, sample_bars):
        """Test MA values match the trailing mean of closes."""
        result = MAIndicator(period=5)(sample_bars)
        closes = sample_bars.closes
        assert result.values.iloc[0] == pytest.approx(closes[:5].mean())
        assert result.values.iloc[-1] == pytest.approx(closes[-5:].mean())

    def test_ma_insufficient_data(self):
        """Test MA rejects series shorter than the period."""
        with pytest.raises(InsufficientDataError):
            MAIndicator(period=5)(make_bars([1.0, 2.0, 3.0, 4.0]))

    def test_ma_invalid_period(self):
        """Test MA rejects non-positive periods at construction."""
        with pytest.raises(InvalidConfigurationError):
            MAIndicator(period=0)


class TestEMAIndicator:
    """Tests for Exponential Moving Average indicator."""

    def test_ema_name(self):
        """Test EMA indicator name includes period."""
        assert EMAIndicator(period=12).name == "EMA_12"

    def test_ema_one_point_per_bar(self, sample_bars):
        """Test EMA output covers every bar."""
        result = EMAIndicator(period=12)(sample_bars)

        assert len(result) == len(sample_bars)
        assert result.timestamps == list(sample_bars.timestamps)
        assert result.values.iloc[0] == sample_bars[0].close

    def test_ema_reacts_faster_than_ma(self):
        """Test EMA moves toward a price jump faster than SMA."""
        bars = make_bars([10.0] * 20 + [20.0] * 5)
        ema_last = EMAIndicator(period=10)(bars).values.iloc[-1]
        ma_last = MAIndicator(period=10)(bars).values.iloc[-1]
        assert ema_last > ma_last
