"""Base class for all technical indicators."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional, Union

import numpy as np
import pandas as pd

from kline_indicators.bars import BarSeries, to_epoch_millis
from kline_indicators.exceptions import (
    InsufficientDataError,
    InvalidConfigurationError,
    MissingColumnsError,
    NonMonotonicTimestampsError,
)
from kline_indicators.signals.base_signal import Signal


@dataclass(frozen=True)
class IndicatorPoint:
    """One defined indicator reading, stamped with its bar's timestamp.

    Attributes:
        timestamp: Originating bar timestamp (epoch millis)
        value: Scalar reading or a record such as {'upper', 'middle', 'lower'}
        signal: Optional signal annotation for the same timestamp
    """
    timestamp: int
    value: Any
    signal: Optional[Signal] = None


@dataclass
class IndicatorResult:
    """Container for indicator calculation results.

    Only defined positions are present: warm-up bars are omitted rather
    than padded, so ``len(result)`` is the number of defined points.

    Attributes:
        name: Indicator identifier (e.g., 'MA_20', 'MACD_12_26_9')
        values: Series (single line) or DataFrame (multi-line) indexed by timestamp
        params: Parameters used for calculation
        signal: Optional signal codes (-1, 0, 1 for sell/none/buy) keyed by timestamp
    """
    name: str
    values: Union[pd.Series, pd.DataFrame]
    params: dict = field(default_factory=dict)
    signal: Optional[pd.Series] = None

    def __len__(self) -> int:
        return len(self.values)

    @property
    def timestamps(self) -> list[int]:
        return [int(ts) for ts in self.values.index]

    def points(self) -> list[IndicatorPoint]:
        """Materialize the result as a list of IndicatorPoint, oldest first."""
        timestamps = self.timestamps
        if isinstance(self.values, pd.DataFrame):
            values = self.values.to_dict("records")
        else:
            values = [float(v) for v in self.values.to_numpy()]

        if self.signal is None:
            signals = [None] * len(timestamps)
        else:
            signals = [Signal(int(code)) for code in self.signal.to_numpy()]

        return [
            IndicatorPoint(timestamp=ts, value=value, signal=sig)
            for ts, value, sig in zip(timestamps, values, signals)
        ]


def validate_period(value: int, label: str = "period") -> int:
    """Reject non-positive or non-integer periods.

    Raises:
        InvalidConfigurationError: If value is not a positive integer
    """
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidConfigurationError(f"{label} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidConfigurationError(f"{label} must be positive, got {value}")
    return int(value)


def validate_multiplier(value: float, label: str = "multiplier") -> float:
    """Reject non-numeric, non-finite or non-positive multipliers.

    Raises:
        InvalidConfigurationError: If value is not a positive real number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, np.integer, np.floating)):
        raise InvalidConfigurationError(f"{label} must be a number, got {value!r}")
    if not (np.isfinite(value) and value > 0):
        raise InvalidConfigurationError(f"{label} must be positive, got {value}")
    return float(value)


class BaseIndicator(ABC):
    """Abstract base class for all technical indicators.

    Subclasses must implement:
        - name: Property returning indicator name
        - required_columns: Property returning list of required DataFrame columns
        - min_bars: Property returning the shortest series the indicator accepts
        - calculate: Method performing the actual calculation

    Usage:
        indicator = ConcreteIndicator()
        result = indicator(bars)  # Validates and calculates
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return indicator name."""
        pass

    @property
    @abstractmethod
    def required_columns(self) -> list[str]:
        """Return list of required DataFrame columns."""
        pass

    @property
    def min_bars(self) -> int:
        """Return the minimum number of bars needed for a calculation."""
        return 1

    @abstractmethod
    def calculate(self, df: pd.DataFrame) -> IndicatorResult:
        """Calculate indicator values.

        Args:
            df: Validated DataFrame indexed by timestamp

        Returns:
            IndicatorResult with calculated values
        """
        pass

    def validate_data(self, data: Union[BarSeries, pd.DataFrame]) -> pd.DataFrame:
        """Validate input and normalize it to a DataFrame indexed by timestamp.

        DataFrame input takes its timestamps from a ``timestamp`` column
        when present, otherwise from its index.

        Args:
            data: BarSeries or DataFrame with the required columns

        Returns:
            DataFrame indexed by integer timestamps

        Raises:
            MissingColumnsError: If required columns are missing
            NonMonotonicTimestampsError: If timestamps are not strictly increasing
            InsufficientDataError: If there are fewer than min_bars rows
        """
        if isinstance(data, BarSeries):
            df = data.to_frame()
        else:
            missing = set(self.required_columns) - set(data.columns)
            if missing:
                raise MissingColumnsError(f"Missing required columns: {sorted(missing)}")
            df = _index_by_timestamp(data)

        if len(df) < self.min_bars:
            raise InsufficientDataError(self.name, self.min_bars, len(df))

        return df

    def __call__(self, data: Union[BarSeries, pd.DataFrame]) -> IndicatorResult:
        """Validate data and calculate indicator.

        Args:
            data: BarSeries or OHLC DataFrame

        Returns:
            IndicatorResult with calculated values
        """
        df = self.validate_data(data)
        return self.calculate(df)


def _index_by_timestamp(df: pd.DataFrame) -> pd.DataFrame:
    if "timestamp" in df.columns:
        df = df.set_index("timestamp")

    timestamps = to_epoch_millis(df.index)
    bad = np.flatnonzero(np.diff(timestamps) <= 0)
    if bad.size:
        i = int(bad[0]) + 1
        raise NonMonotonicTimestampsError(i, int(timestamps[i - 1]), int(timestamps[i]))

    df = df.copy()
    df.index = pd.Index(timestamps, name="timestamp")
    return df
