"""
Сервис для работы с изображениями товаров.

Обеспечивает валидацию загружаемых файлов и генерацию ключей хранения.
"""

import logging
import mimetypes
import secrets
import time
from pathlib import Path
from typing import Optional

from catalog_console.core.config import settings
from catalog_console.core.errors import ValidationError

logger = logging.getLogger(__name__)


class ImageService:
    """
    Сервис для работы с изображениями товаров.

    Обеспечивает:
    - Валидацию загружаемых файлов до передачи в хранилище
    - Генерацию уникальных ключей для объектного хранилища
    """

    KEY_PREFIX = "products"

    def __init__(self, max_file_size: Optional[int] = None):
        self.max_file_size = max_file_size or settings.MAX_IMAGE_SIZE

    def resolve_content_type(self, filename: str, content_type: Optional[str]) -> Optional[str]:
        """
        Определить MIME тип файла.

        Если клиент не передал тип, он угадывается по расширению.

        Args:
            filename: Имя файла
            content_type: MIME тип, переданный клиентом

        Returns:
            Optional[str]: MIME тип или None
        """
        if content_type:
            return content_type.split(";")[0].strip().lower()
        guessed, _ = mimetypes.guess_type(filename or "")
        return guessed

    def validate_upload(self, filename: str, content_type: Optional[str], size: int) -> str:
        """
        Валидация загружаемого файла.

        Args:
            filename: Имя файла
            content_type: MIME тип файла
            size: Размер файла в байтах

        Returns:
            str: Нормализованный MIME тип

        Raises:
            ValidationError: Если файл не изображение или слишком большой
        """
        mime_type = self.resolve_content_type(filename, content_type)
        if not mime_type or not mime_type.startswith("image/"):
            logger.warning("Rejected upload %s: content type %s", filename, mime_type)
            raise ValidationError("Please select an image file")

        if size > self.max_file_size:
            logger.warning("Rejected upload %s: %s bytes", filename, size)
            max_mb = self.max_file_size // (1024 * 1024)
            raise ValidationError(f"Image must not exceed {max_mb}MB")

        return mime_type

    def generate_key(self, suggested_name: str) -> str:
        """
        Генерация уникального ключа для сохранения изображения.

        Структура: products/{timestamp_ms}-{random}.{ext}

        Args:
            suggested_name: Исходное имя файла

        Returns:
            str: Ключ объекта в хранилище
        """
        ext = Path(suggested_name or "").suffix.lower().lstrip(".") or "bin"
        token = secrets.token_hex(6)
        return f"{self.KEY_PREFIX}/{int(time.time() * 1000)}-{token}.{ext}"


# Глобальный экземпляр сервиса
image_service = ImageService()
