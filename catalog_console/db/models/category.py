"""
Модель категории товаров.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Category(Base):
    """
    Модель категории товаров.

    Attributes:
        id: Уникальный идентификатор категории
        name: Название категории
        description: Описание категории
        created_at: Дата создания
        products: Товары, ссылающиеся на категорию
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    # Без каскадного удаления: при удалении категории ссылка обнуляется
    products: Mapped[List["Product"]] = relationship(
        back_populates="category",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Category(id='{self.id}', name='{self.name}')>"
