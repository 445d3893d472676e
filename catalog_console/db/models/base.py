"""
Базовый класс для всех моделей SQLAlchemy.

Использует Declarative API SQLAlchemy 2.0.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Базовый класс для всех моделей.
    """
    pass
