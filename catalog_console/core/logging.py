"""
Настройка логирования приложения.
"""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    Настроить корневой логгер один раз при старте приложения.

    Args:
        level: Уровень логирования (DEBUG/INFO/WARNING/...)
    """
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)

    # Шумные библиотеки
    logging.getLogger("botocore").setLevel(logging.WARNING)
