"""
Главный модуль FastAPI приложения консоли каталога.

Содержит конфигурацию приложения, middleware, обработку ошибок каталога
и подключение роутеров.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from catalog_console.api.v1.routers import api_router
from catalog_console.core.config import settings
from catalog_console.core.errors import (
    CapacityError,
    CatalogError,
    ConflictError,
    GalleryIndexError,
    NotFoundError,
    StoreError,
    UploadError,
    ValidationError,
)
from catalog_console.core.logging import configure_logging

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ValidationError: 422,
    CapacityError: 422,
    GalleryIndexError: 422,
    ConflictError: 409,
    NotFoundError: 404,
    StoreError: 502,
    UploadError: 502,
}


def status_for(exc: CatalogError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS:
            return ERROR_STATUS[cls]
    return 500


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    logger.info(
        "Catalog console started (persistence=%s, storage=%s)",
        settings.PERSISTENCE,
        settings.STORAGE_TYPE,
    )
    yield


app = FastAPI(
    title="Catalog Console API",
    description="API консоли администратора каталога товаров и категорий",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Статические файлы для локального хранилища
if settings.STORAGE_TYPE == "local":
    uploads_path = os.path.abspath(settings.STORAGE_PATH)
    app.mount(
        "/static",
        StaticFiles(directory=uploads_path, check_dir=False),
        name="static",
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError):
    """
    Преобразовать ошибку каталога в JSON ответ.

    Сбои хранилищ логируются как ошибки, остальное как предупреждения.
    """
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


@app.get("/healthz")
def healthz():
    """
    Health check endpoint для мониторинга состояния приложения.

    Returns:
        dict: Статус приложения
    """
    return {"status": "ok", "service": "Catalog Console API", "version": "1.0.0"}


app.include_router(api_router, prefix="/api/v1")
