"""日志配置模块，基于loguru

指标计算模块只在模块级通过 get_logger 取得logger，输出由命令行入口
调用 setup_logger / setup_logger_from_config 统一配置。
"""
import sys
from typing import Optional

from loguru import logger

from .config import Config

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

# 未提供配置文件时只向控制台输出警告
QUIET_LEVEL = "WARNING"

# 移除默认的stderr handler
logger.remove()

# 本模块添加的sink，重新配置时只移除这些
_handler_ids: list[int] = []


def setup_logger(
    log_file: Optional[str] = "logs/kline_indicators.log",
    level: str = "INFO",
    rotation: str = "10 MB",
    retention: str = "30 days",
    console: bool = True,
) -> None:
    """配置日志系统

    重复调用会替换上一次添加的sink，其他地方添加的sink不受影响。

    Args:
        log_file: 日志文件路径，为空时不写文件
        level: 日志级别 (DEBUG, INFO, WARNING, ERROR)
        rotation: 日志轮转大小
        retention: 日志保留时间
        console: 是否输出到stderr
    """
    for handler_id in _handler_ids:
        logger.remove(handler_id)
    _handler_ids.clear()

    if console:
        _handler_ids.append(logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT))

    if log_file:
        _handler_ids.append(
            logger.add(
                log_file,
                level=level,
                format=FILE_FORMAT,
                rotation=rotation,
                retention=retention,
                encoding="utf-8",
            )
        )


def setup_logger_from_config(config: Optional[Config]) -> None:
    """按配置文件的 logging 段落配置日志

    Args:
        config: 已加载的配置，为None时只输出WARNING以上的控制台日志
    """
    if config is None:
        setup_logger(log_file="", level=QUIET_LEVEL)
        return

    setup_logger(
        log_file=config.get("logging.log_file", "logs/kline_indicators.log"),
        level=config.get("logging.level", "INFO"),
        rotation=config.get("logging.rotation", "10 MB"),
        retention=config.get("logging.retention", "30 days"),
        console=config.get("logging.console", True),
    )


def get_logger(name: str):
    """获取命名logger

    Args:
        name: 模块名称

    Returns:
        绑定了模块名的logger
    """
    return logger.bind(name=name)
