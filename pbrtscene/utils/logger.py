# pbrtscene/utils/logger.py
# ---------------------------------------------------------------
# Минимальный логгер для парсера, интерпретатора и сериализатора.
# ---------------------------------------------------------------

import logging

LOGGER_NAME = "pbrtscene"


def init_logger(level=logging.INFO):
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    return logging.getLogger(LOGGER_NAME)


logger = init_logger()


def set_log_level(level) -> None:
    """Принимает как число (logging.DEBUG), так и строку ("debug")."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)
