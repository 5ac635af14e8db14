# bvfit3d/utils/logger.py
# ---------------------------------------------------------------
# Минимальный логгер пакета. Вырожденные входы (совпадающие точки,
# коллинеарные треугольники) пишутся на уровне DEBUG.
# ---------------------------------------------------------------

import logging

LOGGER_NAME = "bvfit3d"


def init_logger(level: str = "INFO"):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    log = logging.getLogger(LOGGER_NAME)
    log.setLevel(level)
    return log


logger = init_logger()


def set_level(level) -> None:
    """Сменить уровень логгера пакета ("DEBUG", logging.INFO, ...)."""
    if isinstance(level, str):
        level = level.upper()
    logger.setLevel(level)
