"""
Постоянное хранилище каталога.

Определяет интерфейс хранилища категорий и товаров и две реализации:
базу данных через SQLAlchemy и хранение в памяти процесса
(режим без постоянного хранения).
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from catalog_console.core.errors import StoreError
from catalog_console.db.models import Category, Product
from catalog_console.schemas.catalog import CategoryOut, ProductOut

logger = logging.getLogger(__name__)


class CatalogRepository(ABC):
    """
    Абстрактный интерфейс постоянного хранилища каталога.

    Каждая операция выполняется одной транзакцией и может завершиться
    ошибкой StoreError; при ошибке данные хранилища не меняются.
    """

    @abstractmethod
    def list_categories(self) -> List[CategoryOut]:
        pass

    @abstractmethod
    def insert_category(self, category: CategoryOut) -> CategoryOut:
        pass

    @abstractmethod
    def delete_category(self, category_id: str) -> None:
        """Удалить категорию и обнулить category_id у её товаров."""

    @abstractmethod
    def list_products(self) -> List[ProductOut]:
        """Товары, начиная с самого нового."""

    @abstractmethod
    def insert_product(self, product: ProductOut) -> ProductOut:
        pass

    @abstractmethod
    def update_product(self, product: ProductOut) -> ProductOut:
        pass

    @abstractmethod
    def delete_product(self, product_id: str) -> None:
        pass


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite возвращает naive datetime даже для DateTime(timezone=True)
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlCatalogRepository(CatalogRepository):
    """
    Хранилище каталога в реляционной базе данных.

    Любая ошибка SQLAlchemy откатывает транзакцию сессии
    и превращается в StoreError.

    Args:
        db: Сессия SQLAlchemy (одна на запрос)
    """

    def __init__(self, db: Session):
        self.db = db

    def _category_out(self, row: Category) -> CategoryOut:
        return CategoryOut(
            id=row.id,
            name=row.name,
            description=row.description,
            created_at=_aware(row.created_at),
        )

    def _product_out(self, row: Product) -> ProductOut:
        return ProductOut(
            id=row.id,
            name=row.name,
            description=row.description,
            price=row.price,
            category_id=row.category_id,
            is_active=row.is_active,
            main_image=row.image_url,
            gallery_images=list(row.images or []),
            created_at=_aware(row.created_at),
            updated_at=_aware(row.updated_at),
        )

    def _failure(self, action: str, error: SQLAlchemyError) -> StoreError:
        self.db.rollback()
        logger.error("Database error during %s: %s", action, error)
        return StoreError(f"Failed to {action}")

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._failure(action, e) from e

    def _detach_products(self, category_id: str) -> None:
        self.db.execute(
            update(Product)
            .where(Product.category_id == category_id)
            .values(category_id=None)
        )

    def list_categories(self) -> List[CategoryOut]:
        try:
            rows = self.db.scalars(select(Category).order_by(Category.created_at)).all()
        except SQLAlchemyError as e:
            raise self._failure("load categories", e) from e
        return [self._category_out(row) for row in rows]

    def insert_category(self, category: CategoryOut) -> CategoryOut:
        row = Category(
            id=category.id,
            name=category.name,
            description=category.description,
            created_at=category.created_at,
        )
        self.db.add(row)
        self._commit("insert category")
        return category

    def delete_category(self, category_id: str) -> None:
        try:
            self._detach_products(category_id)
            row = self.db.get(Category, category_id)
            if row is not None:
                self.db.delete(row)
        except SQLAlchemyError as e:
            raise self._failure("delete category", e) from e
        self._commit("delete category")

    def list_products(self) -> List[ProductOut]:
        try:
            rows = self.db.scalars(
                select(Product).order_by(Product.created_at.desc())
            ).all()
        except SQLAlchemyError as e:
            raise self._failure("load products", e) from e
        return [self._product_out(row) for row in rows]

    def insert_product(self, product: ProductOut) -> ProductOut:
        row = Product(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            category_id=product.category_id,
            is_active=product.is_active,
            image_url=product.main_image,
            images=list(product.gallery_images),
            created_at=product.created_at,
            updated_at=product.updated_at,
        )
        self.db.add(row)
        self._commit("insert product")
        return product

    def update_product(self, product: ProductOut) -> ProductOut:
        try:
            row = self.db.get(Product, product.id)
        except SQLAlchemyError as e:
            raise self._failure("update product", e) from e
        if row is None:
            raise StoreError(f"Product {product.id} is missing in the database")

        row.name = product.name
        row.description = product.description
        row.price = product.price
        row.category_id = product.category_id
        row.is_active = product.is_active
        row.image_url = product.main_image
        row.images = list(product.gallery_images)
        row.updated_at = product.updated_at
        self._commit("update product")
        return product

    def delete_product(self, product_id: str) -> None:
        try:
            row = self.db.get(Product, product_id)
            if row is None:
                return
            self.db.delete(row)
        except SQLAlchemyError as e:
            raise self._failure("delete product", e) from e
        self._commit("delete product")


class MemoryCatalogRepository(CatalogRepository):
    """
    Хранилище каталога в памяти процесса.

    Используется в режиме без постоянного хранения (PERSISTENCE=memory)
    и в тестах. Порядок вставки сохраняется.
    """

    def __init__(self):
        self._categories: Dict[str, CategoryOut] = {}
        self._products: Dict[str, ProductOut] = {}

    def list_categories(self) -> List[CategoryOut]:
        return [c.model_copy() for c in self._categories.values()]

    def insert_category(self, category: CategoryOut) -> CategoryOut:
        self._categories[category.id] = category.model_copy()
        return category

    def delete_category(self, category_id: str) -> None:
        # Новое состояние собирается целиком до замены
        products = {
            product_id: (
                product.model_copy(update={"category_id": None})
                if product.category_id == category_id
                else product
            )
            for product_id, product in self._products.items()
        }
        categories = {k: v for k, v in self._categories.items() if k != category_id}
        self._products, self._categories = products, categories

    def list_products(self) -> List[ProductOut]:
        return [p.model_copy(deep=True) for p in reversed(list(self._products.values()))]

    def insert_product(self, product: ProductOut) -> ProductOut:
        self._products[product.id] = product.model_copy(deep=True)
        return product

    def update_product(self, product: ProductOut) -> ProductOut:
        if product.id not in self._products:
            raise StoreError(f"Product {product.id} is missing in the store")
        self._products[product.id] = product.model_copy(deep=True)
        return product

    def delete_product(self, product_id: str) -> None:
        self._products.pop(product_id, None)

