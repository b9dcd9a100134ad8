"""Plain-language trading advice from the latest RSI reading."""

from dataclasses import dataclass
from typing import Optional

from kline_indicators.bars import BarSeries
from kline_indicators.exceptions import InsufficientDataError
from kline_indicators.indicators.momentum_indicators import RSIIndicator
from kline_indicators.utils.logger import get_logger
from .base_signal import Signal

logger = get_logger(__name__)

ADVICE_WAITING = "Waiting for data..."
ADVICE_OVERSOLD = "Market may be oversold, consider buying"
ADVICE_OVERBOUGHT = "Market may be overbought, consider taking profit"
ADVICE_NEUTRAL = "Market is neutral"

_ADVICE_BY_SIGNAL = {
    Signal.BUY: ADVICE_OVERSOLD,
    Signal.SELL: ADVICE_OVERBOUGHT,
    Signal.NONE: ADVICE_NEUTRAL,
}


@dataclass
class TradingAdvice:
    """Advice derived from the most recent bar.

    Attributes:
        timestamp: Timestamp of the RSI reading, None while waiting for data
        rsi: Latest RSI reading, None while waiting for data
        signal: BUY when oversold, SELL when overbought, else NONE
        advice: Human-readable advice text
        last_close: Close of the most recent bar
        price_change_pct: Percent change of the last close vs the previous close
    """
    timestamp: Optional[int]
    rsi: Optional[float]
    signal: Signal
    advice: str
    last_close: Optional[float] = None
    price_change_pct: Optional[float] = None

    @property
    def is_ready(self) -> bool:
        return self.rsi is not None


def price_change_pct(bars: BarSeries) -> Optional[float]:
    """Percent change between the last two closes, None if undefined."""
    if len(bars) < 2:
        return None
    previous = bars[-2].close
    if previous == 0:
        return None
    return (bars[-1].close - previous) / previous * 100


def get_trading_advice(
    bars: BarSeries,
    rsi_period: int = 14,
    oversold: float = 30.0,
    overbought: float = 70.0
) -> TradingAdvice:
    """Summarize the latest RSI reading as trading advice.

    Not having enough history is an expected state while a chart is
    loading, so it yields a waiting advice instead of an error.

    Args:
        bars: Bar history, oldest first
        rsi_period: RSI period (default: 14)
        oversold: BUY threshold (default: 30)
        overbought: SELL threshold (default: 70)

    Returns:
        TradingAdvice for the most recent bar
    """
    rsi = RSIIndicator(period=rsi_period, oversold=oversold, overbought=overbought)
    last_close = bars[-1].close if len(bars) else None
    change = price_change_pct(bars)

    try:
        result = rsi(bars)
    except InsufficientDataError as e:
        logger.debug(f"Trading advice waiting for data: {e}")
        result = None

    if result is None or len(result) == 0:
        return TradingAdvice(
            timestamp=None,
            rsi=None,
            signal=Signal.NONE,
            advice=ADVICE_WAITING,
            last_close=last_close,
            price_change_pct=change,
        )

    latest = result.points()[-1]
    return TradingAdvice(
        timestamp=latest.timestamp,
        rsi=latest.value,
        signal=latest.signal,
        advice=_ADVICE_BY_SIGNAL[latest.signal],
        last_close=last_close,
        price_change_pct=change,
    )
