"""
Временные метки записей каталога.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_timestamp(clock: Clock, previous: Optional[datetime] = None) -> datetime:
    """
    Текущее время, строго большее предыдущей метки.

    Args:
        clock: Источник текущего времени
        previous: Предыдущая метка (если есть)

    Returns:
        datetime: Новая временная метка
    """
    now = clock()
    if previous is not None and now <= previous:
        # Две операции в пределах разрешения часов
        now = previous + timedelta(microseconds=1)
    return now
