"""Trading signal types.

Trading advice lives in ``kline_indicators.signals.trading_advice``; it
depends on the indicators package, which itself imports Signal from here.
"""

from .base_signal import Signal

__all__ = ["Signal"]
