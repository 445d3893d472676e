"""
Производные представления каталога.

Поиск, фильтрация и статистика по спискам товаров и категорий.
Функции чистые и пересчитываются полностью при каждом вызове.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Iterator, List, Optional, Sequence

from catalog_console.schemas.catalog import CatalogStats, CategoryOut, ProductOut

ALL_CATEGORIES = "all"
NO_CATEGORY_LABEL = "No category"
UNKNOWN_CATEGORY_LABEL = "Unknown category"


def _matches_search(product: ProductOut, term: str) -> bool:
    if term in product.name.lower():
        return True
    # Пустое описание не совпадает с непустым запросом
    return product.description is not None and term in product.description.lower()


def filter_products(
    products: Iterable[ProductOut],
    search_term: str = "",
    category_id: Optional[str] = ALL_CATEGORIES,
) -> Iterator[ProductOut]:
    """
    Отфильтровать товары по поисковому запросу и категории.

    Поиск регистронезависимый, по вхождению подстроки в название
    или описание.

    Args:
        products: Товары
        search_term: Поисковый запрос (пустой совпадает со всеми)
        category_id: ID категории или "all"

    Yields:
        ProductOut: Подходящие товары в исходном порядке
    """
    term = (search_term or "").lower()
    for product in products:
        if not _matches_search(product, term):
            continue
        if category_id != ALL_CATEGORIES and product.category_id != category_id:
            continue
        yield product


def round_price(value: float) -> float:
    """Округление цены до 2 знаков для отображения."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def format_price(value: float) -> str:
    return f"{round_price(value):.2f}"


def catalog_stats(
    products: Sequence[ProductOut], categories: Sequence[CategoryOut]
) -> CatalogStats:
    """
    Сводная статистика каталога.

    Args:
        products: Товары
        categories: Категории

    Returns:
        CatalogStats: Количество товаров, активных товаров, категорий,
            средняя цена и количество товаров по категориям
    """
    total = len(products)
    average = sum(p.price for p in products) / total if total else 0

    per_category = {category.id: 0 for category in categories}
    for product in products:
        if product.category_id is not None:
            per_category[product.category_id] = per_category.get(product.category_id, 0) + 1

    return CatalogStats(
        total_products=total,
        active_count=sum(1 for p in products if p.is_active),
        total_categories=len(categories),
        average_price=round_price(average),
        per_category=per_category,
    )


def recent_products(products: Sequence[ProductOut], limit: int = 5) -> List[ProductOut]:
    """Последние добавленные товары, начиная с самого нового."""
    if limit <= 0:
        return []
    return list(reversed(products[-limit:]))


def category_display_name(
    category_id: Optional[str], categories: Iterable[CategoryOut]
) -> str:
    """
    Отображаемое название категории.

    Висячая ссылка на удалённую категорию не считается ошибкой.
    """
    if not category_id:
        return NO_CATEGORY_LABEL
    for category in categories:
        if category.id == category_id:
            return category.name
    return UNKNOWN_CATEGORY_LABEL
