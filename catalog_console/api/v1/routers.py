"""
Основной роутер API v1.

Подключает все endpoint'ы консоли каталога.
"""

from fastapi import APIRouter

from catalog_console.api.v1.endpoints import categories, dashboard, images, products

api_router = APIRouter()

api_router.include_router(products.router, prefix="/products", tags=["products"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(images.router, prefix="/images", tags=["images"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
