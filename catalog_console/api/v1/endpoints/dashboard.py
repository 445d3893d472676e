"""
API endpoints панели управления: статистика и последние товары.
"""

from typing import List

from fastapi import APIRouter, Depends, Query

from catalog_console.api.deps import get_category_store, get_product_store
from catalog_console.schemas.catalog import ProductListItem
from catalog_console.services.catalog_query import catalog_stats, format_price
from catalog_console.services.category_store import CategoryStore
from catalog_console.services.product_store import ProductStore

router = APIRouter()


@router.get("/stats", response_model=dict)
def get_stats(
    products: ProductStore = Depends(get_product_store),
    categories: CategoryStore = Depends(get_category_store),
):
    """
    Сводная статистика каталога.

    Returns:
        dict: Количество товаров, активных товаров, категорий и средняя цена
    """
    stats = catalog_stats(products.list(), categories.list())
    return {
        **stats.model_dump(),
        "average_price_display": format_price(stats.average_price),
    }


@router.get("/recent", response_model=List[ProductListItem])
def get_recent(
    limit: int = Query(5, ge=0, le=50),
    products: ProductStore = Depends(get_product_store),
    categories: CategoryStore = Depends(get_category_store),
):
    """Последние добавленные товары, начиная с самого нового."""
    return [
        ProductListItem(
            **product.model_dump(),
            category_name=categories.name_for(product.category_id),
        )
        for product in products.recent(limit)
    ]
