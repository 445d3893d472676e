"""
Tests for default catalog seeding.
"""
from init_db import DEFAULT_CATEGORIES, init_database, seed_categories
from catalog_console.db.database import get_db
from catalog_console.services.category_store import CategoryStore
from catalog_console.services.persistence import SqlCatalogRepository
from catalog_console.services.product_store import ProductStore


def test_seed_empty_catalog(sql_repository):
    categories = CategoryStore(sql_repository, ProductStore(sql_repository))

    added = seed_categories(categories)

    assert added == len(DEFAULT_CATEGORIES)
    assert [c.name for c in categories.list()] == [name for name, _ in DEFAULT_CATEGORIES]


def test_seed_is_skipped_when_categories_exist(sql_repository):
    categories = CategoryStore(sql_repository, ProductStore(sql_repository))
    categories.add("Soins naturels")

    assert seed_categories(categories) == 0
    assert len(categories.list()) == 1


def test_init_database_uses_configured_engine():

    assert init_database() is True

    db_gen = get_db()
    db = next(db_gen)
    try:
        names = [c.name for c in SqlCatalogRepository(db).list_categories()]
    finally:
        db_gen.close()

    assert names == [name for name, _ in DEFAULT_CATEGORIES]
