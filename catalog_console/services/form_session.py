"""
Сессии форм категорий и товаров.

Сессия держит черновик введённых значений и передаёт запись в хранилище
только после успешной проверки. При ошибке черновик не меняется,
а хранилище не затрагивается.
"""

import logging
import math
from typing import Optional, Set

from catalog_console.core.errors import (
    CapacityError,
    ConflictError,
    UploadError,
    ValidationError,
)
from catalog_console.schemas.catalog import CategoryOut, ProductForm, ProductOut, ProductRecord
from catalog_console.services.category_store import CategoryStore
from catalog_console.services.image_set import ImageSetManager
from catalog_console.services.product_store import ProductStore
from catalog_console.services.uploads import ImageUploader

logger = logging.getLogger(__name__)

MAIN_SLOT = "main"
GALLERY_SLOT = "gallery"


class CategoryFormSession:
    """Черновик формы категории."""

    def __init__(self, store: CategoryStore):
        self.store = store
        self.name = ""
        self.description = ""

    def reset(self) -> None:
        self.name = ""
        self.description = ""

    def submit(self) -> CategoryOut:
        """
        Создать категорию из черновика.

        Raises:
            ValidationError: Пустое название (черновик сохраняется)
        """
        category = self.store.add(self.name, self.description)
        self.reset()
        return category

    def cancel(self) -> None:
        self.reset()


class ProductFormSession:
    """
    Черновик формы товара с набором изображений.

    В режиме редактирования сессия создаётся по существующему товару
    и при отправке заменяет его поля; иначе создаёт новый товар.

    Args:
        store: Хранилище товаров
        uploader: Загрузчик изображений (нужен только для загрузок)
        product: Редактируемый товар
    """

    def __init__(
        self,
        store: ProductStore,
        uploader: Optional[ImageUploader] = None,
        product: Optional[ProductOut] = None,
    ):
        self.store = store
        self.uploader = uploader
        self.product_id: Optional[str] = product.id if product else None
        self.closed = False
        self._busy: Set[str] = set()
        self.reset()

        if product is not None:
            self.name = product.name
            self.description = product.description or ""
            self.price = str(product.price)
            self.category_id = product.category_id
            self.is_active = product.is_active
            self.images = ImageSetManager(
                product.main_image,
                product.gallery_images,
                max_images=store.max_gallery_images,
            )

    @classmethod
    def from_form(
        cls,
        store: ProductStore,
        form: ProductForm,
        product: Optional[ProductOut] = None,
        uploader: Optional[ImageUploader] = None,
    ) -> "ProductFormSession":
        """
        Собрать сессию из данных формы.

        Изображения проходят через набор изображений, поэтому
        переполненная галерея отклоняется здесь же.

        Raises:
            CapacityError: Слишком много изображений в галерее
            ValidationError: Некорректная ссылка на изображение
        """
        session = cls(store, uploader=uploader)
        session.product_id = product.id if product else None
        session.name = form.name
        session.description = form.description
        session.price = form.price
        session.category_id = form.category_id
        session.is_active = form.is_active
        if form.main_image:
            session.images.set_main(form.main_image)
        for image_ref in form.gallery_images:
            session.images.add_to_gallery(image_ref)
        return session

    @property
    def is_edit(self) -> bool:
        return self.product_id is not None

    def reset(self) -> None:
        """Очистить черновик."""
        self.name = ""
        self.description = ""
        self.price = ""
        self.category_id = None
        self.is_active = True
        self.images = ImageSetManager(max_images=self.store.max_gallery_images)

    def parse_price(self) -> float:
        """
        Разобрать цену из текста черновика.

        Raises:
            ValidationError: Цена отсутствует, не число или отрицательна
        """
        text = (self.price or "").strip()
        if not text:
            raise ValidationError("Please fill in all required fields")
        try:
            value = float(text.replace(",", "."))
        except ValueError:
            raise ValidationError("Price must be a number")
        if not math.isfinite(value) or value < 0:
            raise ValidationError("Price must be a non-negative number")
        return value

    def build_record(self) -> ProductRecord:
        """
        Нормализованная запись товара из черновика.

        Raises:
            ValidationError: Черновик не проходит проверку
        """
        name = (self.name or "").strip()
        if not name:
            raise ValidationError("Please fill in all required fields")
        price = self.parse_price()

        main_image, gallery = self.images.snapshot()
        if not main_image:
            raise ValidationError("Please add at least one image")

        return ProductRecord(
            name=name,
            description=(self.description or "").strip() or None,
            price=price,
            category_id=self.category_id or None,
            is_active=self.is_active,
            main_image=main_image,
            gallery_images=gallery,
        )

    def submit(self) -> ProductOut:
        """
        Проверить черновик и передать запись в хранилище.

        Raises:
            ConflictError: Сессия закрыта или идёт загрузка изображения
            ValidationError: Черновик не проходит проверку
            NotFoundError: Редактируемый товар удалён
        """
        if self.closed:
            raise ConflictError("This form has been closed")
        if self._busy:
            raise ConflictError("Please wait for the image upload to finish")

        record = self.build_record()
        if self.is_edit:
            product = self.store.update(self.product_id, record)
        else:
            product = self.store.add(record)

        self.reset()
        return product

    def cancel(self) -> None:
        """Закрыть сессию без изменений в хранилище."""
        self.closed = True
        self.reset()
        logger.debug("Product form session cancelled")

    def is_busy(self, slot: str) -> bool:
        return slot in self._busy

    async def _upload(
        self, slot: str, data: bytes, filename: str, content_type: Optional[str]
    ) -> Optional[str]:
        if self.closed:
            raise ConflictError("This form has been closed")
        if self.uploader is None:
            raise UploadError("Image uploads are not configured")
        if slot in self._busy:
            raise ConflictError("An upload is already in progress for this image slot")

        self._busy.add(slot)
        try:
            result = await self.uploader.upload(data, filename, content_type)
        finally:
            self._busy.discard(slot)

        if self.closed:
            # Объект в хранилище остаётся без ссылок
            logger.info("Upload %s finished after the form was closed, discarding", result.url)
            return None
        return result.url

    async def upload_main(
        self, data: bytes, filename: str, content_type: Optional[str] = None
    ) -> Optional[str]:
        """
        Загрузить главное изображение.

        Returns:
            Optional[str]: URL изображения или None, если сессия закрыта

        Raises:
            ConflictError: Главное изображение уже задано или слот занят
        """
        if self.images.has_main:
            raise ConflictError("Product already has a main image, remove it first")
        url = await self._upload(MAIN_SLOT, data, filename, content_type)
        if url is not None:
            self.images.set_main(url)
        return url

    async def upload_to_gallery(
        self, data: bytes, filename: str, content_type: Optional[str] = None
    ) -> Optional[str]:
        """
        Загрузить изображение в галерею.

        Returns:
            Optional[str]: URL изображения или None, если сессия закрыта

        Raises:
            CapacityError: Галерея заполнена
            ConflictError: Слот галереи занят загрузкой
        """
        if self.images.is_full:
            raise CapacityError(f"You cannot add more than {self.images.max_images} images")
        url = await self._upload(GALLERY_SLOT, data, filename, content_type)
        if url is not None:
            self.images.add_to_gallery(url)
        return url
