"""
统一日志配置
"""

import logging
import sys


LOGGER_NAME = "citation_monitor"


def get_logger(name: str = LOGGER_NAME,
               level: int = logging.INFO) -> logging.Logger:
    """
    获取/创建 logger 实例

    子模块传 "citation_monitor.xxx"，只在根 logger 上挂 handler，
    避免同一条日志被打印两次。

    Args:
        name:  logger 名称
        level: 日志级别
    """
    logger = logging.getLogger(name)

    if name != LOGGER_NAME and name.startswith(LOGGER_NAME + "."):
        get_logger(LOGGER_NAME, level)
        return logger

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger
