"""Technical indicator calculation module.

Provides technical analysis indicators over a BarSeries:
- Moving averages: SMA, EMA (plus the sma/ema primitives)
- Volatility: Bollinger Bands
- Momentum: RSI (Wilder), KD stochastic
- Trend: MACD
- Unified calculator for batch processing
"""

from .base_indicator import BaseIndicator, IndicatorPoint, IndicatorResult
from .moving_average import sma, ema, MAIndicator, EMAIndicator
from .volatility_indicators import BollingerBandsIndicator
from .momentum_indicators import RSIIndicator, KDIndicator, classify_rsi
from .trend_indicators import MACDIndicator
from .indicator_calculator import IndicatorCalculator, IndicatorConfig

__all__ = [
    # Base
    "BaseIndicator",
    "IndicatorPoint",
    "IndicatorResult",
    # Moving averages
    "sma",
    "ema",
    "MAIndicator",
    "EMAIndicator",
    # Volatility
    "BollingerBandsIndicator",
    # Momentum
    "RSIIndicator",
    "KDIndicator",
    "classify_rsi",
    # Trend
    "MACDIndicator",
    # Calculator
    "IndicatorCalculator",
    "IndicatorConfig",
]
