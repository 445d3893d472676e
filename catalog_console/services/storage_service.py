"""
Сервис для работы с хранилищами файлов.

Поддерживает локальное хранилище и S3-совместимые хранилища.
Обеспечивает единый интерфейс для загрузки изображений товаров
независимо от типа хранилища.
"""

import logging
from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from catalog_console.core.config import Settings, settings
from catalog_console.core.errors import UploadError

logger = logging.getLogger(__name__)


class StorageProvider(ABC):
    """
    Абстрактный базовый класс для провайдеров хранилища.
    """

    @abstractmethod
    def save_file(self, file_path: str, data: bytes, content_type: Optional[str] = None) -> str:
        """
        Сохранить файл и вернуть его публичный URL.

        Raises:
            UploadError: При сбое хранилища
        """

    @abstractmethod
    def get_file_url(self, file_path: str) -> str:
        pass


class LocalStorageProvider(StorageProvider):
    """
    Локальное хранилище файлов.
    """

    def __init__(self, base_path: Optional[str] = None, cdn_base_url: Optional[str] = None):
        self.base_path = Path(base_path or settings.STORAGE_PATH)
        self.cdn_base_url = settings.CDN_BASE_URL if cdn_base_url is None else cdn_base_url

    def save_file(self, file_path: str, data: bytes, content_type: Optional[str] = None) -> str:
        full_path = self.base_path / file_path
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(data)
        except OSError as e:
            logger.error("Local storage: failed to save %s: %s", full_path, e)
            raise UploadError("Could not upload the image") from e

        logger.info("Local storage: saved %s (%d bytes)", full_path, len(data))
        return self.get_file_url(file_path)

    def get_file_url(self, file_path: str) -> str:
        if self.cdn_base_url:
            return f"{self.cdn_base_url.rstrip('/')}/{file_path.lstrip('/')}"
        return f"/static/{file_path}"


class S3StorageProvider(StorageProvider):
    """
    Amazon S3 хранилище (или совместимые сервисы, например MinIO).
    """

    def __init__(
        self,
        bucket_name: str,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        cdn_base_url: Optional[str] = None,
        client=None,
    ):
        self.bucket_name = bucket_name
        self.region = region or "us-east-1"
        self.endpoint_url = endpoint_url or None
        self.cdn_base_url = cdn_base_url or ""

        if client is None:
            config = Config(
                retries={"max_attempts": 3, "mode": "adaptive"},
                connect_timeout=10,
                read_timeout=30,
                signature_version="s3v4",
                s3={"addressing_style": "path"},
            )
            client = boto3.client(
                "s3",
                region_name=self.region,
                endpoint_url=self.endpoint_url,
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
                config=config,
            )
        self.s3_client = client

    def save_file(self, file_path: str, data: bytes, content_type: Optional[str] = None) -> str:
        extra_args = {"ContentLength": len(data)}
        if content_type:
            extra_args["ContentType"] = content_type

        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=file_path,
                Body=BytesIO(data),
                **extra_args,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 storage: failed to upload %s: %s", file_path, e)
            raise UploadError("Could not upload the image") from e

        logger.info("S3 storage: uploaded %s to bucket %s", file_path, self.bucket_name)
        return self.get_file_url(file_path)

    def get_file_url(self, file_path: str) -> str:
        key = file_path.lstrip("/")
        if self.cdn_base_url:
            return f"{self.cdn_base_url.rstrip('/')}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"


def create_storage_provider(config: Settings = settings) -> StorageProvider:
    """
    Создать провайдер хранилища по настройкам.

    Args:
        config: Настройки приложения

    Returns:
        StorageProvider: Локальное или S3 хранилище
    """
    if config.STORAGE_TYPE == "s3":
        logger.info(
            "Using S3 storage: bucket=%s endpoint=%s",
            config.S3_BUCKET_NAME,
            config.S3_ENDPOINT_URL or "aws",
        )
        return S3StorageProvider(
            bucket_name=config.S3_BUCKET_NAME,
            region=config.AWS_REGION,
            endpoint_url=config.S3_ENDPOINT_URL,
            cdn_base_url=config.CDN_BASE_URL,
        )

    logger.info("Using local storage at %s", config.STORAGE_PATH)
    return LocalStorageProvider(base_path=config.STORAGE_PATH, cdn_base_url=config.CDN_BASE_URL)
