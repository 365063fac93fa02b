"""Настройка loguru для скриптов и отладки."""

import sys
from typing import Optional

from loguru import logger

from config.settings import LOG_FORMAT, LOG_LEVEL


def configure_logging(level: Optional[str] = None) -> None:
    """Заменяет стандартный sink loguru на stdout с форматом проекта."""
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level or LOG_LEVEL)
