"""
Pydantic схемы каталога: категории, товары и статистика.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryOut(BaseModel):
    """Категория каталога."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    created_at: datetime


class CategoryCreate(BaseModel):
    """Схема для создания категории."""

    name: str = Field("", description="Название категории")
    description: Optional[str] = Field(None, description="Описание категории")


class ProductRecord(BaseModel):
    """
    Нормализованная запись товара, передаваемая в хранилище.

    Все изменяемые поля товара; ID и временные метки назначает хранилище.
    """

    name: str
    description: Optional[str] = None
    price: float
    category_id: Optional[str] = None
    is_active: bool = True
    main_image: Optional[str] = None
    gallery_images: List[str] = Field(default_factory=list)


class ProductOut(ProductRecord):
    """Товар каталога."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
    updated_at: datetime


class ProductForm(BaseModel):
    """
    Данные формы товара в том виде, в каком их ввёл пользователь.

    Цена хранится текстом и разбирается только при отправке формы.
    """

    name: str = ""
    description: Optional[str] = ""
    price: str = ""
    category_id: Optional[str] = None
    is_active: bool = True
    main_image: Optional[str] = None
    gallery_images: List[str] = Field(default_factory=list)

    @field_validator("price", mode="before")
    @classmethod
    def price_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ProductListItem(ProductOut):
    """Товар в списке с отображаемым названием категории."""

    category_name: str


class CatalogStats(BaseModel):
    """
    Сводная статистика каталога.

    Attributes:
        total_products: Общее количество товаров
        active_count: Количество активных товаров
        total_categories: Количество категорий
        average_price: Средняя цена (округлена до 2 знаков)
        per_category: Количество товаров по ID категории
    """

    total_products: int
    active_count: int
    total_categories: int
    average_price: float
    per_category: Dict[str, int]

    def per_category_count(self, category_id: str) -> int:
        return self.per_category.get(category_id, 0)


class UploadOut(BaseModel):
    """Результат загрузки изображения."""

    url: str
    filename: str
    content_type: str
    size: int
