"""
日志模块

基于 loguru。终端输出按级别过滤，可选的日志文件总是记录 DEBUG 级别。
"""

import os
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


DEBUG_ENV = "PACKWEAVE_DEBUG"
CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} | {message}"


def default_level() -> str:
    """PACKWEAVE_DEBUG=1 时为 DEBUG，否则为 INFO"""
    return "DEBUG" if os.environ.get(DEBUG_ENV, "0") == "1" else "INFO"


def setup_logger(
    level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
    sink=None,
    colorize: bool = True,
) -> None:
    """
    配置日志输出

    Args:
        level: 终端日志级别，默认由环境变量决定
        log_file: 日志文件路径，按 10 MB 轮转
        sink: 终端输出目标，默认为 sys.stderr
        colorize: 终端输出是否着色
    """
    level = (level or default_level()).upper()
    debug = level == "DEBUG"

    logger.remove()
    logger.add(
        sink or sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=colorize,
        backtrace=debug,
        diagnose=debug,
    )

    if log_file is not None:
        logger.add(
            str(log_file),
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="10 MB",
            encoding="utf-8",
        )

    logger.debug(f"日志级别: {level}")


__all__ = ["logger", "setup_logger", "default_level"]
