"""
Иерархия ошибок каталога.

Все ошибки обрабатываются на границе пользовательской операции,
которая их вызвала. Автоматических повторов нет.
"""


class CatalogError(Exception):
    """
    Базовая ошибка каталога.

    Attributes:
        message: Сообщение для пользователя
        kind: Короткий код типа ошибки для API
    """

    kind = "catalog_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    """Некорректные или отсутствующие обязательные данные."""

    kind = "validation_error"


class CapacityError(CatalogError):
    """Галерея изображений заполнена."""

    kind = "capacity_error"


class ConflictError(CatalogError):
    """Слот уже занят (главное изображение или загрузка в процессе)."""

    kind = "conflict_error"


class NotFoundError(CatalogError):
    """Запись с указанным ID больше не существует."""

    kind = "not_found"


class StoreError(CatalogError):
    """Сбой постоянного хранилища каталога."""

    kind = "store_error"


class UploadError(CatalogError):
    """Сбой загрузки файла в объектное хранилище."""

    kind = "upload_error"


class GalleryIndexError(CatalogError, IndexError):
    """Индекс вне границ галереи."""

    kind = "index_error"
