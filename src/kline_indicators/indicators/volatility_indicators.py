"""Volatility band indicators."""

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

from .base_indicator import BaseIndicator, IndicatorResult, validate_multiplier, validate_period
from .moving_average import flat_windows, sma


class BollingerBandsIndicator(BaseIndicator):
    """Bollinger Bands indicator.

    Bands sit ``multiplier`` standard deviations above and below the SMA:
    - Middle: SMA of close over the period
    - Upper/Lower: middle +/- multiplier * stddev

    The standard deviation is the population estimator (divide by period)
    around the window's SMA. Warm-up bars are omitted, leaving
    ``n - period + 1`` points, each carrying the bar's close as ``price``.
    """

    def __init__(self, period: int = 20, multiplier: float = 2.0):
        """Initialize Bollinger Bands indicator.

        Args:
            period: Number of periods for SMA and stddev (default: 20)
            multiplier: Band width in standard deviations (default: 2)
        """
        self.period = validate_period(period)
        self.multiplier = validate_multiplier(multiplier)

    @property
    def name(self) -> str:
        return f"BOLL_{self.period}_{self.multiplier:g}"

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    @property
    def min_bars(self) -> int:
        return self.period

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate upper, middle and lower bands.

        Args:
            df: DataFrame with 'close' column, indexed by timestamp

        Returns:
            IndicatorResult with columns upper/middle/lower/price
        """
        closes = df["close"].to_numpy(dtype=float)
        start = self.period - 1

        middle = sma(closes, self.period)[start:]
        windows = sliding_window_view(closes, self.period)
        stddev = np.sqrt(((windows - middle[:, None]) ** 2).mean(axis=1))
        stddev[flat_windows(windows)] = 0.0

        values = pd.DataFrame(
            {
                "upper": middle + self.multiplier * stddev,
                "middle": middle,
                "lower": middle - self.multiplier * stddev,
                "price": closes[start:],
            },
            index=df.index[start:],
        )
        return IndicatorResult(
            name=self.name,
            values=values,
            params={
                "period": self.period,
                "multiplier": self.multiplier,
                "stddev": pd.Series(stddev, index=values.index),
            }
        )
