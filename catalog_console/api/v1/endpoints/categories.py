"""
API endpoints для работы с категориями товаров.

Содержит операции получения списка, создания и удаления категорий.
"""

from typing import List

from fastapi import APIRouter, Depends, status

from catalog_console.api.deps import get_category_store, get_product_store
from catalog_console.schemas.catalog import CategoryCreate, CategoryOut
from catalog_console.services.catalog_query import catalog_stats
from catalog_console.services.category_store import CategoryStore
from catalog_console.services.form_session import CategoryFormSession
from catalog_console.services.product_store import ProductStore

router = APIRouter()


@router.get("", response_model=List[dict])
def list_categories(
    categories: CategoryStore = Depends(get_category_store),
    products: ProductStore = Depends(get_product_store),
):
    """
    Получить список категорий с количеством товаров.

    Категории возвращаются в порядке добавления.

    Returns:
        List[dict]: Категории с полем products_count

    Example:
        [
            {"id": "...", "name": "Huiles essentielles", "description": null,
             "created_at": "...", "products_count": 3}
        ]
    """
    items = categories.list()
    stats = catalog_stats(products.list(), items)
    return [
        {
            **category.model_dump(mode="json"),
            "products_count": stats.per_category_count(category.id),
        }
        for category in items
    ]


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
def create_category(
    category_data: CategoryCreate,
    categories: CategoryStore = Depends(get_category_store),
):
    """
    Создать категорию.

    Raises:
        ValidationError: Пустое название категории
    """
    session = CategoryFormSession(categories)
    session.name = category_data.name
    session.description = category_data.description or ""
    return session.submit()


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    categories: CategoryStore = Depends(get_category_store),
):
    """
    Удалить категорию.

    Товары этой категории остаются без категории. Удаление
    несуществующей категории ничего не делает.
    """
    categories.delete(category_id)
    return {"message": "Category deleted successfully"}
