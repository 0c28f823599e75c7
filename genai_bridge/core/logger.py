"""
日志配置

统一使用 loguru，业务代码统一 `from genai_bridge.core.logger import logger`。

作为库使用时不改动调用方已注册的 sink：导入时只禁用本包的日志，
需要查看时由调用方显式调用 setup_logger() 开启。
"""

import sys
from typing import Optional

from loguru import logger

from genai_bridge.config import config

_PACKAGE = "genai_bridge"

_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def setup_logger(level: Optional[str] = None) -> int:
    """
    开启本包日志并追加一个 stderr sink

    Args:
        level: 日志级别，默认取 LOG_LEVEL

    Returns:
        新 sink 的 id，可用 logger.remove(sink_id) 移除
    """
    logger.enable(_PACKAGE)
    return logger.add(
        sys.stderr,
        level=level or config.log_level,
        format=_LOG_FORMAT,
        filter=_PACKAGE,
        enqueue=False,
        backtrace=False,
    )


logger.disable(_PACKAGE)

__all__ = ["logger", "setup_logger"]
