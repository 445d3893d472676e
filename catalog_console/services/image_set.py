"""
Управление набором изображений товара.

Товар имеет один слот главного изображения и упорядоченную галерею
дополнительных изображений ограниченного размера. Галерея не содержит
главное изображение.
"""

import logging
from typing import List, Optional, Sequence

from catalog_console.core.config import settings
from catalog_console.core.errors import (
    CapacityError,
    ConflictError,
    GalleryIndexError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class ImageSetManager:
    """
    Главное изображение и галерея товара в рамках одной сессии редактирования.

    Состояния: без главного изображения / с главным изображением.
    Порядок галереи совпадает с порядком отображения.

    Args:
        main_image: Текущее главное изображение
        gallery: Текущая галерея
        max_images: Максимальный размер галереи
    """

    def __init__(
        self,
        main_image: Optional[str] = None,
        gallery: Optional[Sequence[str]] = None,
        max_images: Optional[int] = None,
    ):
        self.max_images = settings.MAX_GALLERY_IMAGES if max_images is None else max_images
        self._main: Optional[str] = main_image or None
        self._gallery: List[str] = list(gallery or [])

    @property
    def main_image(self) -> Optional[str]:
        return self._main

    @property
    def gallery(self) -> List[str]:
        return list(self._gallery)

    @property
    def has_main(self) -> bool:
        return self._main is not None

    @property
    def is_full(self) -> bool:
        return len(self._gallery) >= self.max_images

    def _check_ref(self, image_ref: str) -> str:
        if not image_ref or not image_ref.strip():
            raise ValidationError("Image reference is empty")
        return image_ref.strip()

    def set_main(self, image_ref: str) -> None:
        """
        Установить главное изображение.

        Raises:
            ConflictError: Главное изображение уже задано
            ValidationError: Изображение уже находится в галерее
        """
        image_ref = self._check_ref(image_ref)
        if self._main is not None:
            raise ConflictError("Product already has a main image, remove it first")
        if image_ref in self._gallery:
            raise ValidationError("Image is already in the gallery, promote it instead")
        self._main = image_ref

    def add_to_gallery(self, image_ref: str) -> None:
        """
        Добавить изображение в конец галереи.

        Raises:
            CapacityError: Галерея заполнена
            ValidationError: Изображение совпадает с главным
        """
        image_ref = self._check_ref(image_ref)
        if self.is_full:
            raise CapacityError(f"You cannot add more than {self.max_images} images")
        if image_ref == self._main:
            raise ValidationError("Image is already the main image")
        self._gallery.append(image_ref)

    def remove_from_gallery(self, index: int) -> str:
        """
        Удалить изображение из галереи; последующие индексы сдвигаются.

        Raises:
            GalleryIndexError: Индекс вне границ галереи
        """
        if not 0 <= index < len(self._gallery):
            raise GalleryIndexError(f"No gallery image at position {index}")
        return self._gallery.pop(index)

    def remove_main(self) -> Optional[str]:
        """Убрать главное изображение; галерея сохраняется."""
        removed, self._main = self._main, None
        return removed

    def promote(self, index: int) -> None:
        """
        Сделать изображение галереи главным.

        Прежнее главное изображение занимает освободившуюся позицию,
        поэтому длина галереи не меняется. Без прежнего главного
        изображения элемент просто уходит из галереи.

        Raises:
            GalleryIndexError: Индекс вне границ галереи
        """
        # Индекс разрешается по галерее до изменения
        if not 0 <= index < len(self._gallery):
            raise GalleryIndexError(f"No gallery image at position {index}")

        gallery = list(self._gallery)
        promoted = gallery.pop(index)
        if self._main is not None:
            gallery.insert(index, self._main)

        self._gallery = gallery
        self._main = promoted
        logger.debug("Promoted gallery image %d to main", index)

    def snapshot(self) -> tuple:
        """Текущее состояние (главное изображение, галерея)."""
        return self._main, list(self._gallery)
