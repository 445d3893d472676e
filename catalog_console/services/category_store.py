"""
Хранилище категорий каталога.
"""

import logging
import uuid
from typing import List, Optional

from catalog_console.core.errors import ValidationError
from catalog_console.schemas.catalog import CategoryOut
from catalog_console.services.catalog_query import category_display_name
from catalog_console.services.clock import Clock, next_timestamp, utcnow
from catalog_console.services.persistence import CatalogRepository
from catalog_console.services.product_store import ProductStore

logger = logging.getLogger(__name__)


class CategoryStore:
    """
    Категории каталога в порядке добавления.

    Удаление категории синхронно обнуляет ссылки на неё в хранилище товаров.

    Args:
        repository: Постоянное хранилище каталога
        product_store: Хранилище товаров для каскадного обнуления
        clock: Источник текущего времени
    """

    def __init__(
        self,
        repository: CatalogRepository,
        product_store: ProductStore,
        clock: Clock = utcnow,
    ):
        self.repository = repository
        self.product_store = product_store
        self.clock = clock
        self._categories: List[CategoryOut] = []
        self.refresh()

    def refresh(self) -> None:
        """Перечитать категории из постоянного хранилища."""
        self._categories = self.repository.list_categories()

    def add(self, name: str, description: Optional[str] = None) -> CategoryOut:
        """
        Добавить категорию.

        Args:
            name: Название (обязательно)
            description: Описание (пустое превращается в None)

        Raises:
            ValidationError: Пустое название
        """
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required")
        description = (description or "").strip() or None

        latest = self._categories[-1].created_at if self._categories else None
        category = CategoryOut(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            created_at=next_timestamp(self.clock, latest),
        )

        self.repository.insert_category(category)
        self._categories.append(category)
        logger.info("Category %s created: %s", category.id, category.name)
        return category.model_copy()

    def delete(self, category_id: str) -> None:
        """
        Удалить категорию; отсутствующая категория игнорируется.

        Хранилище удаляет категорию и обнуляет ссылки товаров одной
        транзакцией; локальное состояние меняется только после этого.
        """
        if self.get(category_id) is None:
            logger.debug("Category %s already absent, nothing to delete", category_id)
            return

        self.repository.delete_category(category_id)
        self._categories = [c for c in self._categories if c.id != category_id]
        logger.info("Category %s deleted", category_id)

        self.product_store.on_category_deleted(category_id)

    def get(self, category_id: str) -> Optional[CategoryOut]:
        for category in self._categories:
            if category.id == category_id:
                return category.model_copy()
        return None

    def list(self) -> List[CategoryOut]:
        return [c.model_copy() for c in self._categories]

    def name_for(self, category_id: Optional[str]) -> str:
        """Отображаемое название категории товара."""
        return category_display_name(category_id, self._categories)
