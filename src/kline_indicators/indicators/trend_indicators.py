"""Trend-following indicators."""

import numpy as np
import pandas as pd

from kline_indicators.utils.logger import get_logger
from .base_indicator import BaseIndicator, IndicatorResult, validate_period
from .moving_average import ema

logger = get_logger(__name__)


class MACDIndicator(BaseIndicator):
    """Moving Average Convergence Divergence indicator.

    MACD shows the relationship between two EMAs and includes:
    - MACD line: Difference between fast and slow EMAs
    - Signal line: EMA of MACD line
    - Histogram: Difference between MACD and signal

    All three are emitted for every bar, including the early bars where
    the slow EMA has not converged yet; those readings are unreliable but
    are kept so output lines up one-to-one with the price chart.
    ``histogram_trend`` ("positive"/"negative") is the sign of the
    histogram, used by renderers to color histogram bars.
    """

    def __init__(
        self,
        fast_period: int = 12,
        slow_period: int = 26,
        signal_period: int = 9
    ):
        """Initialize MACD indicator.

        Args:
            fast_period: Fast EMA period (default: 12)
            slow_period: Slow EMA period (default: 26)
            signal_period: Signal line EMA period (default: 9)
        """
        self.fast_period = validate_period(fast_period, "fast_period")
        self.slow_period = validate_period(slow_period, "slow_period")
        self.signal_period = validate_period(signal_period, "signal_period")
        if self.fast_period >= self.slow_period:
            logger.warning(
                f"MACD fast_period ({self.fast_period}) is not shorter than "
                f"slow_period ({self.slow_period})"
            )

    @property
    def name(self) -> str:
        return f"MACD_{self.fast_period}_{self.slow_period}_{self.signal_period}"

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate MACD line, signal line, and histogram.

        Args:
            df: DataFrame with 'close' column, indexed by timestamp

        Returns:
            IndicatorResult with columns line/signal_line/histogram/histogram_trend
        """
        closes = df["close"].to_numpy(dtype=float)
        line = ema(closes, self.fast_period) - ema(closes, self.slow_period)
        signal_line = ema(line, self.signal_period)
        histogram = line - signal_line

        values = pd.DataFrame(
            {
                "line": line,
                "signal_line": signal_line,
                "histogram": histogram,
                "histogram_trend": np.where(histogram >= 0, "positive", "negative"),
            },
            index=df.index,
        )
        return IndicatorResult(
            name=self.name,
            values=values,
            params={
                "fast_period": self.fast_period,
                "slow_period": self.slow_period,
                "signal_period": self.signal_period,
            }
        )
