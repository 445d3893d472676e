"""
Модель товара.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class Product(Base):
    """
    Модель товара.

    Attributes:
        id: Уникальный идентификатор товара
        category_id: ID категории товара (может быть пустым)
        name: Название товара
        description: Описание товара
        price: Цена товара
        image_url: Главное изображение
        images: Дополнительные изображения (галерея)
        is_active: Флаг активности товара
        created_at: Дата создания
        updated_at: Дата обновления
        category: Связь с категорией
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    category_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(Text)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Float)
    image_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    images: Mapped[Optional[List[str]]] = mapped_column(JSON, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Временные метки
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    category: Mapped[Optional["Category"]] = relationship(back_populates="products")

    def __repr__(self) -> str:
        return f"<Product(id='{self.id}', name='{self.name}')>"
