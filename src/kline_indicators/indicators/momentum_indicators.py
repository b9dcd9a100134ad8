"""Momentum oscillators: Wilder RSI and KD stochastic."""

import numpy as np
import pandas as pd

from kline_indicators.exceptions import InvalidConfigurationError
from kline_indicators.signals.base_signal import Signal
from kline_indicators.utils.logger import get_logger
from .base_indicator import BaseIndicator, IndicatorResult, validate_period

logger = get_logger(__name__)

# Neutral reading substituted when a stochastic window has zero range
NEUTRAL_RSV = 50.0


def classify_rsi(value: float, oversold: float = 30.0, overbought: float = 70.0) -> Signal:
    """Map an RSI reading to a signal by level.

    This is a level check, not a crossing check: every reading below
    ``oversold`` is BUY, every reading above ``overbought`` is SELL.

    Args:
        value: RSI reading (0-100)
        oversold: BUY threshold (default: 30)
        overbought: SELL threshold (default: 70)

    Returns:
        Signal for the reading
    """
    if value < oversold:
        return Signal.BUY
    if value > overbought:
        return Signal.SELL
    return Signal.NONE


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


class RSIIndicator(BaseIndicator):
    """Relative Strength Index indicator (Wilder smoothing).

    RSI measures the speed and magnitude of price changes:
    - RSI > 70: Overbought, SELL signal
    - RSI < 30: Oversold, BUY signal
    - RSI 30-70: Neutral zone

    Average gain/loss are seeded with the simple mean of the first
    ``period`` close-to-close changes and then smoothed with
    ``avg = (avg * (period - 1) + current) / period``. The seed itself is
    not emitted: the first reading belongs to bar ``period + 1``, so a
    series of n bars yields ``n - period - 1`` points.
    """

    def __init__(
        self,
        period: int = 14,
        oversold: float = 30.0,
        overbought: float = 70.0
    ):
        """Initialize RSI indicator.

        Args:
            period: Number of periods for calculation (default: 14)
            oversold: Level below which a BUY signal is attached (default: 30)
            overbought: Level above which a SELL signal is attached (default: 70)
        """
        self.period = validate_period(period)
        if not 0 <= oversold < overbought <= 100:
            raise InvalidConfigurationError(
                f"RSI thresholds must satisfy 0 <= oversold < overbought <= 100, "
                f"got oversold={oversold}, overbought={overbought}"
            )
        self.oversold = oversold
        self.overbought = overbought

    @property
    def name(self) -> str:
        return f"RSI_{self.period}"

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    @property
    def min_bars(self) -> int:
        return self.period + 1

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate RSI and its level signals.

        Args:
            df: DataFrame with 'close' column, indexed by timestamp

        Returns:
            IndicatorResult with RSI values (0-100) and BUY/SELL/NONE signals
        """
        period = self.period
        changes = np.diff(df["close"].to_numpy(dtype=float))
        gains = np.where(changes > 0, changes, 0.0)
        losses = np.where(changes < 0, -changes, 0.0)

        avg_gain = gains[:period].sum() / period
        avg_loss = losses[:period].sum() / period

        readings = []
        for i in range(period, changes.size):
            avg_gain = (avg_gain * (period - 1) + gains[i]) / period
            avg_loss = (avg_loss * (period - 1) + losses[i]) / period
            readings.append(_rsi_from_averages(avg_gain, avg_loss))

        index = df.index[period + 1:]
        values = pd.Series(readings, index=index, name=self.name, dtype=float)
        signal = pd.Series(
            [int(classify_rsi(v, self.oversold, self.overbought)) for v in readings],
            index=index,
            name=f"{self.name}_signal",
            dtype=int,
        )
        logger.debug(f"{self.name}: {len(values)} readings from {len(df)} bars")

        return IndicatorResult(
            name=self.name,
            values=values,
            params={
                "period": period,
                "oversold": self.oversold,
                "overbought": self.overbought,
            },
            signal=signal
        )


class KDIndicator(BaseIndicator):
    """KD Stochastic indicator with recursive 1/3 smoothing.

    - RSV: position of the close within the trailing high/low range (0-100)
    - K: 2/3 of previous K plus 1/3 of RSV, seeded at 50
    - D: 2/3 of previous D plus 1/3 of K, seeded at 50
    - J: 3K - 2D (more sensitive, can exceed 0-100)

    A window whose highest high equals its lowest low has no range; its
    RSV is taken as the neutral 50. Output starts at bar ``period - 1``,
    giving ``n - period + 1`` points.
    """

    def __init__(self, period: int = 14):
        """Initialize KD indicator.

        Args:
            period: Look-back window for the high/low range (default: 14)
        """
        self.period = validate_period(period)

    @property
    def name(self) -> str:
        return f"KD_{self.period}"

    @property
    def required_columns(self) -> list[str]:
        return ["high", "low", "close"]

    @property
    def min_bars(self) -> int:
        return self.period

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate RSV, K, D and J values.

        Args:
            df: DataFrame with 'high', 'low', 'close' columns, indexed by timestamp

        Returns:
            IndicatorResult with columns k/d/j and the RSV series in params
        """
        start = self.period - 1
        highest = df["high"].rolling(window=self.period).max().to_numpy()[start:]
        lowest = df["low"].rolling(window=self.period).min().to_numpy()[start:]
        closes = df["close"].to_numpy(dtype=float)[start:]

        rsv_values = []
        k_values = []
        d_values = []
        flat_count = 0
        prev_k = 50.0
        prev_d = 50.0
        for high, low, close in zip(highest, lowest, closes):
            price_range = high - low
            if price_range == 0:
                rsv = NEUTRAL_RSV
                flat_count += 1
            else:
                rsv = (close - low) / price_range * 100
            k = (2 / 3) * prev_k + (1 / 3) * rsv
            d = (2 / 3) * prev_d + (1 / 3) * k
            rsv_values.append(rsv)
            k_values.append(k)
            d_values.append(d)
            prev_k = k
            prev_d = d

        if flat_count:
            logger.debug(
                f"{self.name}: {flat_count} zero-range windows, RSV set to {NEUTRAL_RSV}"
            )

        index = df.index[start:]
        values = pd.DataFrame({"k": k_values, "d": d_values}, index=index, dtype=float)
        values["j"] = 3 * values["k"] - 2 * values["d"]

        return IndicatorResult(
            name=self.name,
            values=values,
            params={
                "period": self.period,
                "rsv": pd.Series(rsv_values, index=index, dtype=float),
            }
        )
