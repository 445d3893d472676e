"""
API endpoints для работы с товарами.

Содержит CRUD операции для товаров с поиском и фильтрацией по категории,
а также управление главным изображением и галереей товара.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status
from pydantic import BaseModel

from catalog_console.api.deps import get_category_store, get_image_uploader, get_product_store
from catalog_console.core.errors import NotFoundError
from catalog_console.schemas.catalog import ProductForm, ProductListItem, ProductOut
from catalog_console.services.catalog_query import ALL_CATEGORIES, filter_products
from catalog_console.services.category_store import CategoryStore
from catalog_console.services.form_session import ProductFormSession
from catalog_console.services.product_store import ProductStore
from catalog_console.services.uploads import ImageUploader

router = APIRouter()


class GalleryImageIn(BaseModel):
    url: str


def _load_product(products: ProductStore, product_id: str) -> ProductOut:
    product = products.get(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


@router.get("", response_model=dict)
def list_products(
    q: Optional[str] = None,
    category_id: str = ALL_CATEGORIES,
    products: ProductStore = Depends(get_product_store),
    categories: CategoryStore = Depends(get_category_store),
):
    """
    Получить список товаров с поиском и фильтром по категории.

    Args:
        q: Поиск по названию и описанию (регистронезависимый)
        category_id: ID категории или "all"

    Returns:
        dict: Товары в порядке добавления и их количество
    """
    items = [
        ProductListItem(
            **product.model_dump(),
            category_name=categories.name_for(product.category_id),
        )
        for product in filter_products(products.list(), q or "", category_id)
    ]
    return {"items": items, "total": len(items)}


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
def create_product(
    form: ProductForm,
    products: ProductStore = Depends(get_product_store),
):
    """
    Создать товар из данных формы.

    Raises:
        ValidationError: Нет названия, цены или главного изображения
        CapacityError: Слишком много изображений в галерее
    """
    session = ProductFormSession.from_form(products, form)
    return session.submit()


@router.get("/{product_id}", response_model=ProductListItem)
def get_product(
    product_id: str,
    products: ProductStore = Depends(get_product_store),
    categories: CategoryStore = Depends(get_category_store),
):
    """
    Получить товар по ID.

    Raises:
        NotFoundError: Товар не найден
    """
    product = _load_product(products, product_id)
    return ProductListItem(
        **product.model_dump(),
        category_name=categories.name_for(product.category_id),
    )


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: str,
    form: ProductForm,
    products: ProductStore = Depends(get_product_store),
):
    """
    Полностью заменить поля товара данными формы.

    Raises:
        NotFoundError: Товар не найден
        ValidationError: Данные формы не прошли проверку
    """
    product = _load_product(products, product_id)
    session = ProductFormSession.from_form(products, form, product=product)
    return session.submit()


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    products: ProductStore = Depends(get_product_store),
):
    """Удалить товар; отсутствующий товар игнорируется."""
    products.delete(product_id)
    return {"message": "Product deleted successfully"}


@router.post("/{product_id}/images/promote/{index}", response_model=ProductOut)
def promote_image(
    product_id: str,
    index: int,
    products: ProductStore = Depends(get_product_store),
):
    """
    Сделать изображение галереи главным.

    Прежнее главное изображение занимает его место в галерее.
    """
    session = ProductFormSession(products, product=_load_product(products, product_id))
    session.images.promote(index)
    return session.submit()


@router.post("/{product_id}/images/gallery", response_model=ProductOut)
def add_gallery_image(
    product_id: str,
    image: GalleryImageIn,
    products: ProductStore = Depends(get_product_store),
):
    """
    Добавить уже загруженное изображение в конец галереи.

    Raises:
        CapacityError: Галерея заполнена
    """
    session = ProductFormSession(products, product=_load_product(products, product_id))
    session.images.add_to_gallery(image.url)
    return session.submit()


@router.post("/{product_id}/images/gallery/upload", response_model=ProductOut)
async def upload_gallery_image(
    product_id: str,
    file: UploadFile = File(...),
    products: ProductStore = Depends(get_product_store),
    uploader: ImageUploader = Depends(get_image_uploader),
):
    """
    Загрузить файл и добавить его в галерею товара.

    Raises:
        CapacityError: Галерея заполнена (файл не загружается)
        ValidationError: Файл не изображение или слишком большой
        UploadError: Сбой хранилища
    """
    session = ProductFormSession(
        products, uploader=uploader, product=_load_product(products, product_id)
    )
    content = await file.read()
    await session.upload_to_gallery(content, file.filename or "image", file.content_type)
    return session.submit()


@router.delete("/{product_id}/images/gallery/{index}", response_model=ProductOut)
def remove_gallery_image(
    product_id: str,
    index: int,
    products: ProductStore = Depends(get_product_store),
):
    """
    Удалить изображение из галереи; последующие изображения сдвигаются.
    """
    session = ProductFormSession(products, product=_load_product(products, product_id))
    session.images.remove_from_gallery(index)
    return session.submit()
