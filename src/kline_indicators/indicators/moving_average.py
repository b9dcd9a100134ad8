"""Moving average primitives and indicators.

``sma`` and ``ema`` work on plain sequences and are reused by every other
indicator in this package. The indicator classes wrap them over bar closes.
"""

from typing import Sequence, Union

import numpy as np
import pandas as pd
from numpy.lib.stride_tricks import sliding_window_view

from kline_indicators.exceptions import InsufficientDataError
from .base_indicator import BaseIndicator, IndicatorResult, validate_period

ArrayLike = Union[Sequence[float], np.ndarray, pd.Series]


def _as_array(values: ArrayLike, label: str) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"{label} expects a one-dimensional sequence")
    if arr.size == 0:
        raise InsufficientDataError(label, 1, 0)
    return arr


def flat_windows(windows: np.ndarray) -> np.ndarray:
    """Boolean mask of sliding windows whose values are all equal."""
    return windows.max(axis=1) == windows.min(axis=1)


def sma(values: ArrayLike, period: int) -> np.ndarray:
    """Simple moving average over a trailing window.

    Args:
        values: Input sequence, oldest first
        period: Window length

    Returns:
        Array the same length as values; positions before ``period - 1``
        are NaN (insufficient history).

    Raises:
        InsufficientDataError: If values is empty
        InvalidConfigurationError: If period is not positive
    """
    period = validate_period(period)
    arr = _as_array(values, "SMA")

    result = np.full(arr.size, np.nan)
    if arr.size >= period:
        windows = sliding_window_view(arr, period)
        means = windows.mean(axis=1)
        # flat windows average to the value itself, free of summation rounding
        flat = flat_windows(windows)
        means[flat] = windows[flat, 0]
        result[period - 1:] = means
    return result


def ema(values: ArrayLike, period: int) -> np.ndarray:
    """Exponential moving average seeded with the first value.

    ``ema[0] = values[0]`` and ``ema[i] = values[i] * k + ema[i-1] * (1 - k)``
    with ``k = 2 / (period + 1)``. The first-value seed (rather than an SMA
    of the first ``period`` values) differs from TA-Lib, so early values
    will not match TA-Lib's EMA.

    Returns:
        Array the same length as values, defined at every position.

    Raises:
        InsufficientDataError: If values is empty
        InvalidConfigurationError: If period is not positive
    """
    period = validate_period(period)
    arr = _as_array(values, "EMA")

    # adjust=False is the plain recurrence with span=period giving k = 2 / (period + 1)
    return pd.Series(arr).ewm(span=period, adjust=False).mean().to_numpy()


class MAIndicator(BaseIndicator):
    """Simple Moving Average indicator.

    SMA smooths price data by calculating the average over a fixed window.
    Warm-up bars are omitted, so the result has ``n - period + 1`` points.
    """

    def __init__(self, period: int = 20):
        """Initialize MA indicator.

        Args:
            period: Number of periods for calculation (default: 20)
        """
        self.period = validate_period(period)

    @property
    def name(self) -> str:
        return f"MA_{self.period}"

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    @property
    def min_bars(self) -> int:
        return self.period

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate Simple Moving Average.

        Args:
            df: DataFrame with 'close' column, indexed by timestamp

        Returns:
            IndicatorResult with MA values from bar ``period - 1`` onward
        """
        values = sma(df["close"].to_numpy(dtype=float), self.period)
        start = self.period - 1
        return IndicatorResult(
            name=self.name,
            values=pd.Series(values[start:], index=df.index[start:], name=self.name),
            params={"period": self.period}
        )


class EMAIndicator(BaseIndicator):
    """Exponential Moving Average indicator.

    EMA gives more weight to recent prices, making it more responsive
    to new information than SMA. Defined for every bar.
    """

    def __init__(self, period: int = 20):
        """Initialize EMA indicator.

        Args:
            period: Number of periods for calculation (default: 20)
        """
        self.period = validate_period(period)

    @property
    def name(self) -> str:
        return f"EMA_{self.period}"

    @property
    def required_columns(self) -> list[str]:
        return ["close"]

    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate Exponential Moving Average.

        Args:
            df: DataFrame with 'close' column, indexed by timestamp

        Returns:
            IndicatorResult with one EMA value per bar
        """
        values = ema(df["close"].to_numpy(dtype=float), self.period)
        return IndicatorResult(
            name=self.name,
            values=pd.Series(values, index=df.index, name=self.name),
            params={"period": self.period}
        )
