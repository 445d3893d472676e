"""
Зависимости API: хранилища каталога и загрузчик изображений.

Хранилища создаются на каждый запрос поверх постоянного хранилища,
выбранного настройкой PERSISTENCE.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from catalog_console.core.config import settings
from catalog_console.db.database import get_db
from catalog_console.services.category_store import CategoryStore
from catalog_console.services.persistence import (
    CatalogRepository,
    MemoryCatalogRepository,
    SqlCatalogRepository,
)
from catalog_console.services.product_store import ProductStore
from catalog_console.services.storage_service import StorageProvider, create_storage_provider
from catalog_console.services.uploads import ImageUploader


@lru_cache
def get_memory_repository() -> MemoryCatalogRepository:
    """Хранилище в памяти, общее для всех запросов процесса."""
    return MemoryCatalogRepository()


def get_repository(db: Session = Depends(get_db)) -> CatalogRepository:
    if settings.PERSISTENCE == "memory":
        return get_memory_repository()
    return SqlCatalogRepository(db)


def get_product_store(repository: CatalogRepository = Depends(get_repository)) -> ProductStore:
    return ProductStore(repository, max_gallery_images=settings.MAX_GALLERY_IMAGES)


def get_category_store(
    repository: CatalogRepository = Depends(get_repository),
    product_store: ProductStore = Depends(get_product_store),
) -> CategoryStore:
    return CategoryStore(repository, product_store)


@lru_cache
def get_storage_provider() -> StorageProvider:
    return create_storage_provider(settings)


def get_image_uploader(
    provider: StorageProvider = Depends(get_storage_provider),
) -> ImageUploader:
    return ImageUploader(provider)
