"""Technical indicators over OHLC bar series.

Pure functions from bar history to indicator series: moving averages,
Bollinger Bands, RSI, KD stochastic and MACD, plus level-based signals.
"""

from .exceptions import (
    IndicatorError,
    InsufficientDataError,
    InvalidConfigurationError,
    MissingColumnsError,
    NonMonotonicTimestampsError,
)
from .bars import Bar, BarSeries
from .signals.base_signal import Signal
from .indicators import (
    BaseIndicator,
    IndicatorPoint,
    IndicatorResult,
    sma,
    ema,
    MAIndicator,
    EMAIndicator,
    BollingerBandsIndicator,
    RSIIndicator,
    KDIndicator,
    classify_rsi,
    MACDIndicator,
    IndicatorCalculator,
    IndicatorConfig,
)
from .signals.trading_advice import TradingAdvice, get_trading_advice

__version__ = "0.1.0"

__all__ = [
    "IndicatorError",
    "InsufficientDataError",
    "InvalidConfigurationError",
    "MissingColumnsError",
    "NonMonotonicTimestampsError",
    "Bar",
    "BarSeries",
    "Signal",
    "BaseIndicator",
    "IndicatorPoint",
    "IndicatorResult",
    "sma",
    "ema",
    "MAIndicator",
    "EMAIndicator",
    "BollingerBandsIndicator",
    "RSIIndicator",
    "KDIndicator",
    "classify_rsi",
    "MACDIndicator",
    "IndicatorCalculator",
    "IndicatorConfig",
    "TradingAdvice",
    "get_trading_advice",
]
