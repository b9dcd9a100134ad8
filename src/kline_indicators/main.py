"""kline-indicators命令行入口"""
import argparse
import json
import sys
from typing import Optional

from kline_indicators.bars import BarSeries
from kline_indicators.indicators.indicator_calculator import IndicatorCalculator, IndicatorConfig
from kline_indicators.signals.trading_advice import get_trading_advice
from kline_indicators.utils.config import Config, ConfigError
from kline_indicators.utils.logger import setup_logger_from_config, get_logger


def init_system(config_path: Optional[str] = None):
    """初始化日志和指标计算器

    Args:
        config_path: 配置文件路径，为空时使用默认参数

    Returns:
        (config, calculator)，未提供配置文件时config为None
    """
    config = Config(config_path) if config_path else None
    setup_logger_from_config(config)

    if config is not None:
        indicator_config = IndicatorConfig.from_config(config)
    else:
        indicator_config = IndicatorConfig()

    return config, IndicatorCalculator(indicator_config)


def load_klines(path: str) -> BarSeries:
    """读取K线JSON文件 (交易所kline数组格式)"""
    with open(path, "r", encoding="utf-8") as f:
        rows = json.load(f)
    return BarSeries.from_klines(rows)


def cmd_compute(args) -> int:
    """计算指标并输出JSON"""
    _, calculator = init_system(args.config)
    logger = get_logger(__name__)

    bars = load_klines(args.klines)
    indicators = args.indicators or calculator.get_indicator_names()
    results = calculator.calculate_subset(bars, indicators)

    output = {}
    for name, result in results.items():
        output[name] = [
            {
                "timestamp": point.timestamp,
                "value": point.value,
                **({"signal": point.signal.name} if point.signal is not None else {}),
            }
            for point in result.points()
        ]
    json.dump(output, sys.stdout, ensure_ascii=False)
    sys.stdout.write("\n")
    logger.info(f"输出 {len(output)} 个指标, K线数量 {len(bars)}")
    return 0


def cmd_advice(args) -> int:
    """根据最新RSI输出交易建议"""
    init_system(args.config)

    bars = load_klines(args.klines)
    advice = get_trading_advice(
        bars,
        rsi_period=args.rsi_period,
        oversold=args.oversold,
        overbought=args.overbought,
    )
    json.dump(
        {
            "timestamp": advice.timestamp,
            "rsi": advice.rsi,
            "signal": advice.signal.name,
            "advice": advice.advice,
            "last_close": advice.last_close,
            "price_change_pct": advice.price_change_pct,
        },
        sys.stdout,
        ensure_ascii=False,
    )
    sys.stdout.write("\n")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="kline-indicators - K线技术指标计算")
    parser.add_argument(
        "--config",
        default=None,
        help="配置文件路径 (如 config/config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compute_parser = subparsers.add_parser("compute", help="计算技术指标")
    compute_parser.add_argument("klines", help="K线JSON文件路径")
    compute_parser.add_argument(
        "--indicators",
        nargs="+",
        choices=IndicatorCalculator.AVAILABLE_INDICATORS,
        help="要计算的指标，默认全部",
    )
    compute_parser.set_defaults(func=cmd_compute)

    advice_parser = subparsers.add_parser("advice", help="输出交易建议")
    advice_parser.add_argument("klines", help="K线JSON文件路径")
    advice_parser.add_argument("--rsi-period", type=int, default=14)
    advice_parser.add_argument("--oversold", type=float, default=30.0)
    advice_parser.add_argument("--overbought", type=float, default=70.0)
    advice_parser.set_defaults(func=cmd_advice)

    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except (ConfigError, ValueError, OSError) as e:
        get_logger(__name__).error(str(e))
        print(f"错误: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
