"""
Подключение к базе данных каталога.

Движок строится по DATABASE_URL: PostgreSQL в рабочем режиме,
SQLite для локального запуска и тестов. Используется только
при PERSISTENCE=database.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from catalog_console.core.config import settings


def _connect_args(url: str) -> dict:
    # SQLite-соединение используется из пула потоков FastAPI
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    echo=bool(settings.DEBUG),
    connect_args=_connect_args(settings.DATABASE_URL),
)

# Репозиторий сам фиксирует каждую операцию каталога
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=True)


def get_db() -> Generator[Session, None, None]:
    """
    Сессия базы данных на время одного запроса к API.

    Yields:
        Session: Сессия, из которой строится SqlCatalogRepository
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
