"""
Утилиты: логгер, конфигурация, профайлер.
"""

from pbrtscene.utils.logger import logger, init_logger, set_log_level
from pbrtscene.utils.config import Config, DEFAULT_CONFIG
from pbrtscene.utils.profiler import Profiler

__all__ = ["logger", "init_logger", "set_log_level",
           "Config", "DEFAULT_CONFIG", "Profiler"]
