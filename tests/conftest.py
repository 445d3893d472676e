"""
Конфигурация pytest - общие fixtures
"""
import os
from datetime import datetime, timedelta, timezone
from typing import Generator

# Настройки читаются при импорте пакета
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["PERSISTENCE"] = "memory"
os.environ["STORAGE_TYPE"] = "local"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from catalog_console.api.deps import get_repository, get_storage_provider
from catalog_console.db.models import Base
from catalog_console.main import app
from catalog_console.schemas.catalog import ProductRecord
from catalog_console.services.category_store import CategoryStore
from catalog_console.services.persistence import MemoryCatalogRepository, SqlCatalogRepository
from catalog_console.services.product_store import ProductStore
from catalog_console.services.storage_service import LocalStorageProvider
from catalog_console.services.uploads import ImageUploader


class FrozenClock:
    """Часы, которые двигаются только вручную."""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def test_db() -> Generator[Session, None, None]:
    """In-memory SQLite база данных для тестов"""
    engine = create_engine("sqlite:///:memory:", echo=False, connect_args={"check_same_thread": False})
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(engine)


@pytest.fixture
def memory_repository() -> MemoryCatalogRepository:
    return MemoryCatalogRepository()


@pytest.fixture
def sql_repository(test_db) -> SqlCatalogRepository:
    return SqlCatalogRepository(test_db)


@pytest.fixture
def product_store(memory_repository, clock) -> ProductStore:
    return ProductStore(memory_repository, max_gallery_images=5, clock=clock)


@pytest.fixture
def category_store(memory_repository, product_store, clock) -> CategoryStore:
    return CategoryStore(memory_repository, product_store, clock=clock)


@pytest.fixture
def storage_provider(tmp_path) -> LocalStorageProvider:
    return LocalStorageProvider(base_path=str(tmp_path), cdn_base_url="")


@pytest.fixture
def uploader(storage_provider) -> ImageUploader:
    return ImageUploader(storage_provider)


@pytest.fixture
def make_record():
    """Фабрика корректных записей товара"""

    def _make(**overrides) -> ProductRecord:
        data = {
            "name": "Vitamin C",
            "description": "Immune support",
            "price": 19.99,
            "category_id": None,
            "is_active": True,
            "main_image": "https://cdn.example.com/products/vitc.jpg",
            "gallery_images": [],
        }
        data.update(overrides)
        return ProductRecord(**data)

    return _make


@pytest.fixture
def client(memory_repository, storage_provider) -> Generator[TestClient, None, None]:
    """TestClient поверх хранилища в памяти и локального хранилища файлов"""
    app.dependency_overrides[get_repository] = lambda: memory_repository
    app.dependency_overrides[get_storage_provider] = lambda: storage_provider
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
