"""
统一的日志处理模块
使用 loguru 提供一致的日志接口，支持可选的日志文件输出
"""
import sys

from loguru import logger


CONSOLE_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}"

# 当前由本模块安装的处理器 ID
_handler_ids: list[int] = []


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """
    配置全局 loguru logger

    重复调用会先移除上一次安装的处理器。

    Args:
        level: 控制台日志级别
        log_file: 日志文件路径，None 表示不写文件
    """
    global _handler_ids
    if not _handler_ids:
        logger.remove()  # 移除默认处理器
    for handler_id in _handler_ids:
        logger.remove(handler_id)
    _handler_ids = []

    # 控制台输出（仅在有 stderr 时）
    if sys.stderr is not None:
        _handler_ids.append(logger.add(
            sys.stderr,
            format=CONSOLE_FORMAT,
            level=level.upper(),
            colorize=True
        ))

    # 文件输出（自动轮转，保留最近 7 天）
    if log_file:
        _handler_ids.append(logger.add(
            log_file,
            format=FILE_FORMAT,
            level="DEBUG",
            rotation="1 day",
            retention="7 days",
            encoding="utf-8"
        ))


__all__ = ["logger", "setup_logging"]
