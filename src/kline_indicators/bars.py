"""Bar data model shared by all indicator calculations."""

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Union

import numpy as np
import pandas as pd

from kline_indicators.exceptions import MissingColumnsError, NonMonotonicTimestampsError

OHLC_COLUMNS = ["open", "high", "low", "close"]


@dataclass(frozen=True)
class Bar:
    """One OHLC interval.

    Attributes:
        timestamp: Interval open time in epoch milliseconds
        open: Opening price
        high: Highest price
        low: Lowest price
        close: Closing price
    """
    timestamp: int
    open: float
    high: float
    low: float
    close: float


class BarSeries:
    """Immutable, strictly time-ordered sequence of bars (position 0 = oldest).

    Construction rejects series whose timestamps are not strictly
    increasing. Price sanity (low <= open/close <= high) is left to the
    data provider.

    Usage:
        bars = BarSeries.from_klines(rows)
        closes = bars.closes
        df = bars.to_frame()
    """

    __slots__ = ("_bars",)

    def __init__(self, bars: Iterable[Bar] = ()):
        self._bars = tuple(bars)
        self._validate_timestamps()

    def _validate_timestamps(self) -> None:
        for i in range(1, len(self._bars)):
            previous = self._bars[i - 1].timestamp
            current = self._bars[i].timestamp
            if current <= previous:
                raise NonMonotonicTimestampsError(i, previous, current)

    @classmethod
    def from_klines(cls, rows: Iterable[Sequence]) -> "BarSeries":
        """Build a series from exchange kline rows.

        Each row is ``[open_time, open, high, low, close, ...]``; prices may
        arrive as strings and trailing fields (volume, close time, ...) are
        ignored.

        Args:
            rows: Kline rows in ascending time order

        Returns:
            Validated BarSeries
        """
        bars = []
        for row in rows:
            if len(row) < 5:
                raise ValueError(f"Kline row needs at least 5 fields, got {len(row)}")
            bars.append(Bar(
                timestamp=int(row[0]),
                open=float(row[1]),
                high=float(row[2]),
                low=float(row[3]),
                close=float(row[4]),
            ))
        return cls(bars)

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "BarSeries":
        """Build a series from an OHLC DataFrame.

        Timestamps come from a ``timestamp`` column when present, otherwise
        from the index (integer epoch millis or datetimes).

        Raises:
            MissingColumnsError: If any of open/high/low/close is missing
        """
        missing = set(OHLC_COLUMNS) - set(df.columns)
        if missing:
            raise MissingColumnsError(f"Missing required columns: {sorted(missing)}")

        if "timestamp" in df.columns:
            timestamps = to_epoch_millis(pd.Index(df["timestamp"]))
        else:
            timestamps = to_epoch_millis(df.index)

        return cls(
            Bar(int(ts), float(o), float(h), float(lo), float(c))
            for ts, o, h, lo, c in zip(
                timestamps,
                df["open"].to_numpy(),
                df["high"].to_numpy(),
                df["low"].to_numpy(),
                df["close"].to_numpy(),
            )
        )

    def __len__(self) -> int:
        return len(self._bars)

    def __iter__(self) -> Iterator[Bar]:
        return iter(self._bars)

    def __getitem__(self, index: Union[int, slice]) -> Union[Bar, "BarSeries"]:
        if isinstance(index, slice):
            return BarSeries(self._bars[index])
        return self._bars[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BarSeries):
            return NotImplemented
        return self._bars == other._bars

    def __repr__(self) -> str:
        if not self._bars:
            return "BarSeries([])"
        return (
            f"BarSeries(len={len(self._bars)}, "
            f"first={self._bars[0].timestamp}, last={self._bars[-1].timestamp})"
        )

    @property
    def bars(self) -> tuple[Bar, ...]:
        return self._bars

    @property
    def timestamps(self) -> np.ndarray:
        return np.array([b.timestamp for b in self._bars], dtype=np.int64)

    @property
    def opens(self) -> np.ndarray:
        return np.array([b.open for b in self._bars], dtype=float)

    @property
    def highs(self) -> np.ndarray:
        return np.array([b.high for b in self._bars], dtype=float)

    @property
    def lows(self) -> np.ndarray:
        return np.array([b.low for b in self._bars], dtype=float)

    @property
    def closes(self) -> np.ndarray:
        return np.array([b.close for b in self._bars], dtype=float)

    def to_frame(self) -> pd.DataFrame:
        """Project the series onto an OHLC DataFrame indexed by timestamp."""
        return pd.DataFrame(
            {
                "open": self.opens,
                "high": self.highs,
                "low": self.lows,
                "close": self.closes,
            },
            index=pd.Index(self.timestamps, name="timestamp"),
        )


def to_epoch_millis(index: pd.Index) -> np.ndarray:
    """Convert an integer or datetime index to epoch milliseconds."""
    if pd.api.types.is_datetime64_any_dtype(index.dtype):
        return pd.DatetimeIndex(index).as_unit("ms").asi8
    return np.asarray(index, dtype=np.int64)
