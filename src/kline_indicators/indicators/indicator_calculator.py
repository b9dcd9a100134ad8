"""Unified indicator calculator for batch processing."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

import pandas as pd

from kline_indicators.bars import BarSeries
from kline_indicators.exceptions import InvalidConfigurationError
from kline_indicators.utils.config import Config
from kline_indicators.utils.logger import get_logger
from .base_indicator import IndicatorResult, validate_multiplier, validate_period
from .moving_average import MAIndicator, EMAIndicator
from .volatility_indicators import BollingerBandsIndicator
from .momentum_indicators import RSIIndicator, KDIndicator
from .trend_indicators import MACDIndicator

logger = get_logger(__name__)


@dataclass
class IndicatorConfig:
    """Configuration for indicator calculation.

    MA/EMA periods are lists so one run can produce several lines,
    e.g. ma_periods=[5, 20] yields both MA_5 and MA_20.
    """
    ma_periods: list[int] = field(default_factory=lambda: [5, 10, 20])
    ema_periods: list[int] = field(default_factory=lambda: [12, 26])
    bollinger_params: tuple[int, float] = (20, 2.0)
    rsi_period: int = 14
    rsi_oversold: float = 30.0
    rsi_overbought: float = 70.0
    kd_period: int = 14
    macd_params: tuple[int, int, int] = (12, 26, 9)

    def __post_init__(self):
        for period in self.ma_periods:
            validate_period(period, "ma period")
        for period in self.ema_periods:
            validate_period(period, "ema period")
        if len(self.bollinger_params) != 2:
            raise InvalidConfigurationError(
                f"bollinger_params must be (period, multiplier), got {self.bollinger_params!r}"
            )
        validate_period(self.bollinger_params[0], "bollinger period")
        validate_multiplier(self.bollinger_params[1], "bollinger multiplier")
        validate_period(self.rsi_period, "rsi period")
        validate_period(self.kd_period, "kd period")
        if len(self.macd_params) != 3:
            raise InvalidConfigurationError(
                f"macd_params must be (fast, slow, signal), got {self.macd_params!r}"
            )
        for label, period in zip(("fast", "slow", "signal"), self.macd_params):
            validate_period(period, f"macd {label} period")

    @staticmethod
    def from_config(config: Config) -> "IndicatorConfig":
        """Build config from the ``indicators`` section of a YAML config.

        Missing keys fall back to the defaults. Expected layout::

            indicators:
              ma: {periods: [5, 10, 20]}
              ema: {periods: [12, 26]}
              bollinger: {period: 20, multiplier: 2}
              rsi: {period: 14, oversold: 30, overbought: 70}
              kd: {period: 14}
              macd: {fast: 12, slow: 26, signal: 9}

        Raises:
            InvalidConfigurationError: If a configured value is unusable
        """
        defaults = IndicatorConfig()
        try:
            return IndicatorConfig(
                ma_periods=list(config.get("indicators.ma.periods", defaults.ma_periods)),
                ema_periods=list(config.get("indicators.ema.periods", defaults.ema_periods)),
                bollinger_params=(
                    config.get("indicators.bollinger.period", defaults.bollinger_params[0]),
                    float(config.get("indicators.bollinger.multiplier",
                                     defaults.bollinger_params[1])),
                ),
                rsi_period=config.get("indicators.rsi.period", defaults.rsi_period),
                rsi_oversold=float(config.get("indicators.rsi.oversold", defaults.rsi_oversold)),
                rsi_overbought=float(config.get("indicators.rsi.overbought",
                                                defaults.rsi_overbought)),
                kd_period=config.get("indicators.kd.period", defaults.kd_period),
                macd_params=(
                    config.get("indicators.macd.fast", defaults.macd_params[0]),
                    config.get("indicators.macd.slow", defaults.macd_params[1]),
                    config.get("indicators.macd.signal", defaults.macd_params[2]),
                ),
            )
        except InvalidConfigurationError:
            raise
        except (TypeError, ValueError) as e:
            raise InvalidConfigurationError(f"Invalid indicator configuration: {e}") from e


class IndicatorCalculator:
    """Unified calculator for all technical indicators.

    Results are keyed by parameterized indicator names:
      MA_20, EMA_12, BOLL_20_2, RSI_14, KD_14, MACD_12_26_9, etc.
    Each result keeps its own warm-up omission, so results are not forced
    into a common index.
    """

    AVAILABLE_INDICATORS = ["ma", "ema", "boll", "rsi", "kd", "macd"]

    def __init__(self, config: Optional[IndicatorConfig] = None):
        self.config = config or IndicatorConfig()

    def get_indicator_names(self) -> list[str]:
        return self.AVAILABLE_INDICATORS.copy()

    def calculate_all(
        self,
        bars: Union[BarSeries, pd.DataFrame]
    ) -> Dict[str, IndicatorResult]:
        return self.calculate_subset(bars, indicators=self.AVAILABLE_INDICATORS)

    def calculate_subset(
        self,
        bars: Union[BarSeries, pd.DataFrame],
        indicators: List[str]
    ) -> Dict[str, IndicatorResult]:
        """Calculate the named indicator groups.

        Args:
            bars: BarSeries or OHLC DataFrame
            indicators: Group names from AVAILABLE_INDICATORS

        Returns:
            Results keyed by indicator name

        Raises:
            InvalidConfigurationError: For unknown indicator names
            InsufficientDataError: If the series is too short for any indicator
        """
        unknown = [name for name in indicators if name not in self.AVAILABLE_INDICATORS]
        if unknown:
            raise InvalidConfigurationError(f"Unknown indicators: {unknown}")

        data = bars.to_frame() if isinstance(bars, BarSeries) else bars
        results: Dict[str, IndicatorResult] = {}

        for indicator in indicators:
            if indicator == "ma":
                self._add_ma(data, results)
            elif indicator == "ema":
                self._add_ema(data, results)
            elif indicator == "boll":
                self._add_boll(data, results)
            elif indicator == "rsi":
                self._add_rsi(data, results)
            elif indicator == "kd":
                self._add_kd(data, results)
            elif indicator == "macd":
                self._add_macd(data, results)

        logger.debug(f"Calculated {len(results)} indicators over {len(data)} bars")
        return results

    def _add_ma(self, data: pd.DataFrame, results: Dict[str, IndicatorResult]) -> None:
        for period in self.config.ma_periods:
            ind_result = MAIndicator(period=period)(data)
            results[ind_result.name] = ind_result

    def _add_ema(self, data: pd.DataFrame, results: Dict[str, IndicatorResult]) -> None:
        for period in self.config.ema_periods:
            ind_result = EMAIndicator(period=period)(data)
            results[ind_result.name] = ind_result

    def _add_boll(self, data: pd.DataFrame, results: Dict[str, IndicatorResult]) -> None:
        period, multiplier = self.config.bollinger_params
        ind_result = BollingerBandsIndicator(period=period, multiplier=multiplier)(data)
        results[ind_result.name] = ind_result

    def _add_rsi(self, data: pd.DataFrame, results: Dict[str, IndicatorResult]) -> None:
        rsi = RSIIndicator(
            period=self.config.rsi_period,
            oversold=self.config.rsi_oversold,
            overbought=self.config.rsi_overbought,
        )
        ind_result = rsi(data)
        results[ind_result.name] = ind_result

    def _add_kd(self, data: pd.DataFrame, results: Dict[str, IndicatorResult]) -> None:
        ind_result = KDIndicator(period=self.config.kd_period)(data)
        results[ind_result.name] = ind_result

    def _add_macd(self, data: pd.DataFrame, results: Dict[str, IndicatorResult]) -> None:
        fast, slow, signal = self.config.macd_params
        macd = MACDIndicator(fast_period=fast, slow_period=slow, signal_period=signal)
        ind_result = macd(data)
        results[ind_result.name] = ind_result
