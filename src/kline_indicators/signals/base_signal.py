"""Signal types attached to oscillator output."""

from enum import IntEnum


class Signal(IntEnum):
    """Discrete trading signal derived from an indicator reading.

    Values match the -1/0/1 sell/none/buy convention used in
    IndicatorResult.signal series.
    """
    SELL = -1
    NONE = 0
    BUY = 1

    def is_bullish(self) -> bool:
        """Check if signal suggests buying."""
        return self is Signal.BUY

    def is_bearish(self) -> bool:
        """Check if signal suggests selling."""
        return self is Signal.SELL
