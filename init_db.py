#!/usr/bin/env python3
"""
Скрипт для инициализации базы данных каталога.

Создаёт таблицы и добавляет категории по умолчанию, если их ещё нет.
"""

import logging
import sys

from sqlalchemy import inspect

from catalog_console.core.config import settings
from catalog_console.core.errors import CatalogError
from catalog_console.core.logging import configure_logging
from catalog_console.db.database import SessionLocal, engine
from catalog_console.db.models import Base
from catalog_console.services.category_store import CategoryStore
from catalog_console.services.persistence import SqlCatalogRepository
from catalog_console.services.product_store import ProductStore

logger = logging.getLogger("init_db")

DEFAULT_CATEGORIES = [
    ("Compléments alimentaires", "Vitamines et suppléments naturels"),
    ("Soins naturels", "Produits de soin à base d'ingrédients naturels"),
    ("Huiles essentielles", "Huiles essentielles pures et biologiques"),
]


def seed_categories(categories: CategoryStore) -> int:
    """
    Добавить категории по умолчанию в пустой каталог.

    Returns:
        int: Количество добавленных категорий
    """
    if categories.list():
        return 0
    for name, description in DEFAULT_CATEGORIES:
        categories.add(name, description)
    return len(DEFAULT_CATEGORIES)


def init_database() -> bool:
    """Создает все таблицы и категории по умолчанию."""
    logger.info("Инициализация базы данных...")

    try:
        Base.metadata.create_all(bind=engine)
        tables = inspect(engine).get_table_names()
        logger.info("Таблиц в базе: %d (%s)", len(tables), ", ".join(tables))

        with SessionLocal() as db:
            repository = SqlCatalogRepository(db)
            products = ProductStore(repository, max_gallery_images=settings.MAX_GALLERY_IMAGES)
            added = seed_categories(CategoryStore(repository, products))
        logger.info("Добавлено категорий по умолчанию: %d", added)
        return True

    except CatalogError as e:
        logger.error("Ошибка инициализации каталога: %s", e.message)
        return False


if __name__ == "__main__":
    configure_logging(settings.LOG_LEVEL)
    if not init_database():
        sys.exit(1)
