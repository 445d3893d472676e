"""
Хранилище товаров каталога.

Держит локальное состояние списка товаров поверх постоянного хранилища.
Локальное состояние меняется только после подтверждения от хранилища.
"""

import logging
import math
import uuid
from typing import List, Optional

from catalog_console.core.config import settings
from catalog_console.core.errors import NotFoundError, ValidationError
from catalog_console.schemas.catalog import ProductOut, ProductRecord
from catalog_console.services.catalog_query import recent_products
from catalog_console.services.clock import Clock, next_timestamp, utcnow
from catalog_console.services.persistence import CatalogRepository

logger = logging.getLogger(__name__)


class ProductStore:
    """
    Товары каталога в порядке добавления.

    Args:
        repository: Постоянное хранилище каталога
        max_gallery_images: Максимальный размер галереи товара
        clock: Источник текущего времени
    """

    def __init__(
        self,
        repository: CatalogRepository,
        max_gallery_images: Optional[int] = None,
        clock: Clock = utcnow,
    ):
        self.repository = repository
        self.max_gallery_images = (
            settings.MAX_GALLERY_IMAGES if max_gallery_images is None else max_gallery_images
        )
        self.clock = clock
        self._products: List[ProductOut] = []
        self.refresh()

    def refresh(self) -> None:
        """Перечитать товары из постоянного хранилища."""
        # Хранилище отдаёт товары от новых к старым
        self._products = list(reversed(self.repository.list_products()))

    def validate_record(self, record: ProductRecord) -> ProductRecord:
        """
        Проверка записи товара перед сохранением.

        Raises:
            ValidationError: Нет названия, некорректная цена или нет изображения
        """
        if not record.name or not record.name.strip():
            raise ValidationError("Please fill in all required fields")
        if not math.isfinite(record.price) or record.price < 0:
            raise ValidationError("Price must be a non-negative number")
        if not record.main_image:
            raise ValidationError("Please add at least one image")
        if len(record.gallery_images) > self.max_gallery_images:
            raise ValidationError(
                f"You cannot add more than {self.max_gallery_images} images"
            )
        if record.main_image in record.gallery_images:
            raise ValidationError("Main image cannot also be a gallery image")
        return record

    def _index_of(self, product_id: str) -> Optional[int]:
        for index, product in enumerate(self._products):
            if product.id == product_id:
                return index
        return None

    def add(self, record: ProductRecord) -> ProductOut:
        """
        Добавить товар.

        Returns:
            ProductOut: Созданный товар (created_at == updated_at)
        """
        self.validate_record(record)

        latest = self._products[-1].created_at if self._products else None
        now = next_timestamp(self.clock, latest)
        product = ProductOut(
            id=str(uuid.uuid4()),
            created_at=now,
            updated_at=now,
            **record.model_dump(),
        )

        self.repository.insert_product(product)
        self._products.append(product)
        logger.info("Product %s created: %s", product.id, product.name)
        return product.model_copy(deep=True)

    def update(self, product_id: str, record: ProductRecord) -> ProductOut:
        """
        Полная замена изменяемых полей товара.

        Raises:
            NotFoundError: Товар не найден
            ValidationError: Запись не прошла проверку
        """
        index = self._index_of(product_id)
        if index is None:
            raise NotFoundError("Product not found")
        self.validate_record(record)

        existing = self._products[index]
        product = ProductOut(
            id=existing.id,
            created_at=existing.created_at,
            updated_at=next_timestamp(self.clock, existing.updated_at),
            **record.model_dump(),
        )

        self.repository.update_product(product)
        self._products[index] = product
        logger.info("Product %s updated", product.id)
        return product.model_copy(deep=True)

    def delete(self, product_id: str) -> None:
        index = self._index_of(product_id)
        if index is None:
            logger.debug("Product %s already absent, nothing to delete", product_id)
            return

        self.repository.delete_product(product_id)
        del self._products[index]
        logger.info("Product %s deleted", product_id)

    def on_category_deleted(self, category_id: str) -> None:
        """
        Обнулить категорию у товаров, ссылавшихся на удалённую категорию.

        Вызывается после того, как хранилище удалило категорию вместе
        со ссылками на неё; меняется только локальное состояние.
        """
        detached = 0
        for index, product in enumerate(self._products):
            if product.category_id == category_id:
                self._products[index] = product.model_copy(update={"category_id": None})
                detached += 1
        if detached:
            logger.info("Detached %d products from category %s", detached, category_id)

    def get(self, product_id: str) -> Optional[ProductOut]:
        index = self._index_of(product_id)
        if index is None:
            return None
        return self._products[index].model_copy(deep=True)

    def list(self) -> List[ProductOut]:
        return [p.model_copy(deep=True) for p in self._products]

    def recent(self, limit: int = 5) -> List[ProductOut]:
        """Последние добавленные товары, начиная с самого нового."""
        return [p.model_copy(deep=True) for p in recent_products(self._products, limit)]
