"""
API endpoints для загрузки изображений товаров.
"""

from fastapi import APIRouter, Depends, File, UploadFile, status

from catalog_console.api.deps import get_image_uploader
from catalog_console.schemas.catalog import UploadOut
from catalog_console.services.uploads import ImageUploader

router = APIRouter()


@router.post("/upload", response_model=UploadOut, status_code=status.HTTP_201_CREATED)
async def upload_image(
    file: UploadFile = File(...),
    uploader: ImageUploader = Depends(get_image_uploader),
):
    """
    Загрузить изображение в хранилище.

    Возвращённый URL затем передаётся в форму товара как главное
    изображение или изображение галереи.

    Args:
        file: Загружаемый файл

    Returns:
        UploadOut: Публичный URL и метаданные файла

    Raises:
        ValidationError: Файл не изображение или больше допустимого размера
        UploadError: Сбой хранилища
    """
    content = await file.read()
    return await uploader.upload(content, file.filename or "image", file.content_type)
