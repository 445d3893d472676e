"""
Загрузка изображений товаров в объектное хранилище.
"""

import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from catalog_console.schemas.catalog import UploadOut
from catalog_console.services.image_service import ImageService, image_service
from catalog_console.services.storage_service import StorageProvider

logger = logging.getLogger(__name__)


class ImageUploader:
    """
    Валидирует изображение и загружает его в хранилище.

    Проверка типа и размера выполняется локально до обращения к хранилищу.

    Args:
        provider: Провайдер хранилища
        images: Сервис валидации изображений
    """

    def __init__(self, provider: StorageProvider, images: ImageService = image_service):
        self.provider = provider
        self.images = images

    async def upload(
        self, data: bytes, suggested_name: str, content_type: Optional[str] = None
    ) -> UploadOut:
        """
        Загрузить изображение.

        Args:
            data: Содержимое файла
            suggested_name: Исходное имя файла
            content_type: MIME тип файла

        Returns:
            UploadOut: Публичный URL и метаданные файла

        Raises:
            ValidationError: Файл не изображение или слишком большой
            UploadError: Сбой хранилища
        """
        mime_type = self.images.validate_upload(suggested_name, content_type, len(data))
        key = self.images.generate_key(suggested_name)

        # Провайдеры синхронные (boto3, файловая система)
        url = await run_in_threadpool(self.provider.save_file, key, data, mime_type)
        logger.info("Uploaded %s as %s", suggested_name, key)

        return UploadOut(
            url=url,
            filename=suggested_name,
            content_type=mime_type,
            size=len(data),
        )
