"""
Unit tests for category and product form sessions.
"""
import asyncio

import pytest

from catalog_console.core.errors import (
    CapacityError,
    ConflictError,
    NotFoundError,
    UploadError,
    ValidationError,
)
from catalog_console.schemas.catalog import ProductForm, UploadOut
from catalog_console.services.form_session import (
    GALLERY_SLOT,
    MAIN_SLOT,
    CategoryFormSession,
    ProductFormSession,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


class BlockingUploader:
    """Загрузчик, который ждёт разрешения перед завершением"""

    def __init__(self):
        self.release = asyncio.Event()
        self.started = asyncio.Event()
        self.count = 0

    async def upload(self, data, suggested_name, content_type=None):
        self.count += 1
        self.started.set()
        await self.release.wait()
        return UploadOut(
            url=f"https://cdn.example.com/products/{self.count}-{suggested_name}",
            filename=suggested_name,
            content_type=content_type or "image/png",
            size=len(data),
        )


def filled_session(product_store, **values):
    session = ProductFormSession(product_store)
    session.name = values.get("name", "Vitamin C")
    session.price = values.get("price", "19.99")
    session.images.set_main(values.get("main_image", "main.jpg"))
    return session


class TestCategoryFormSession:

    def test_submit_creates_and_resets(self, category_store):
        session = CategoryFormSession(category_store)
        session.name = " Soins naturels "
        session.description = "Cosmétiques"

        category = session.submit()

        assert category.name == "Soins naturels"
        assert session.name == ""
        assert session.description == ""

    def test_failed_submit_keeps_draft(self, category_store):
        session = CategoryFormSession(category_store)
        session.description = "No name"

        with pytest.raises(ValidationError):
            session.submit()
        assert session.description == "No name"
        assert category_store.list() == []

    def test_cancel_discards_draft(self, category_store):
        session = CategoryFormSession(category_store)
        session.name = "Draft"

        session.cancel()

        assert session.name == ""
        assert category_store.list() == []


class TestProductFormSession:

    def test_submit_creates_product(self, product_store):
        session = filled_session(product_store)
        session.description = "  "
        session.category_id = ""

        product = session.submit()

        assert product.price == 19.99
        assert product.description is None
        assert product.category_id is None
        assert product.main_image == "main.jpg"
        assert session.name == ""
        assert not session.images.has_main

    def test_price_with_comma(self, product_store):
        product = filled_session(product_store, price="12,50").submit()

        assert product.price == 12.5

    @pytest.mark.parametrize("price", ["", "abc", "-3", "nan", "inf"])
    def test_invalid_price_keeps_draft(self, product_store, price):
        session = filled_session(product_store, price=price)

        with pytest.raises(ValidationError):
            session.submit()
        assert session.name == "Vitamin C"
        assert product_store.list() == []

    def test_missing_name(self, product_store):
        session = filled_session(product_store, name="   ")

        with pytest.raises(ValidationError, match="required fields"):
            session.submit()

    def test_missing_main_image(self, product_store):
        session = ProductFormSession(product_store)
        session.name = "Vitamin C"
        session.price = "10"

        with pytest.raises(ValidationError, match="at least one image"):
            session.submit()

    def test_edit_mode_preloads_and_updates(self, product_store, make_record):
        product = product_store.add(make_record(gallery_images=["a.jpg", "b.jpg"]))

        session = ProductFormSession(product_store, product=product)
        assert session.is_edit
        assert session.name == product.name
        assert session.price == "19.99"
        assert session.images.gallery == ["a.jpg", "b.jpg"]

        session.images.promote(0)
        updated = session.submit()

        assert updated.id == product.id
        assert updated.main_image == "a.jpg"
        assert updated.gallery_images == [product.main_image, "b.jpg"]
        assert len(product_store.list()) == 1

    def test_edit_of_deleted_product(self, product_store, make_record):
        product = product_store.add(make_record())
        session = ProductFormSession(product_store, product=product)
        product_store.delete(product.id)

        with pytest.raises(NotFoundError):
            session.submit()

    def test_from_form(self, product_store):
        form = ProductForm(
            name="Argan oil",
            price=24.5,
            main_image="main.jpg",
            gallery_images=["a.jpg"],
        )

        product = ProductFormSession.from_form(product_store, form).submit()

        assert product.price == 24.5
        assert product.gallery_images == ["a.jpg"]

    def test_from_form_rejects_overfull_gallery(self, product_store):
        form = ProductForm(
            name="Argan oil",
            price="24.5",
            main_image="main.jpg",
            gallery_images=[f"g{i}.jpg" for i in range(6)],
        )

        with pytest.raises(CapacityError):
            ProductFormSession.from_form(product_store, form)

    def test_cancelled_session_cannot_submit(self, product_store):
        session = filled_session(product_store)

        session.cancel()

        with pytest.raises(ConflictError):
            session.submit()
        assert product_store.list() == []


class TestProductFormUploads:

    @pytest.mark.asyncio
    async def test_upload_main_sets_image(self, product_store, uploader):
        session = ProductFormSession(product_store, uploader=uploader)

        url = await session.upload_main(PNG_BYTES, "photo.png", "image/png")

        assert url.startswith("/static/products/")
        assert url.endswith(".png")
        assert session.images.main_image == url

    @pytest.mark.asyncio
    async def test_upload_main_when_present_is_conflict(self, product_store, uploader):
        session = filled_session(product_store)

        with pytest.raises(ConflictError):
            await session.upload_main(PNG_BYTES, "photo.png", "image/png")

    @pytest.mark.asyncio
    async def test_upload_to_full_gallery(self, product_store, uploader):
        session = ProductFormSession(product_store, uploader=uploader)
        for i in range(5):
            session.images.add_to_gallery(f"g{i}.jpg")

        with pytest.raises(CapacityError):
            await session.upload_to_gallery(PNG_BYTES, "photo.png", "image/png")

    @pytest.mark.asyncio
    async def test_rejected_file_leaves_images(self, product_store, uploader):
        session = ProductFormSession(product_store, uploader=uploader)

        with pytest.raises(ValidationError, match="image file"):
            await session.upload_to_gallery(b"%PDF", "doc.pdf", "application/pdf")
        assert session.images.gallery == []
        assert not session.is_busy(GALLERY_SLOT)

    @pytest.mark.asyncio
    async def test_upload_without_uploader(self, product_store):
        session = ProductFormSession(product_store)

        with pytest.raises(UploadError):
            await session.upload_main(PNG_BYTES, "photo.png", "image/png")

    @pytest.mark.asyncio
    async def test_busy_slot_blocks_second_upload_and_submit(self, product_store):
        fake = BlockingUploader()
        session = filled_session(product_store)
        session.uploader = fake

        task = asyncio.create_task(session.upload_to_gallery(PNG_BYTES, "a.png", "image/png"))
        await fake.started.wait()

        assert session.is_busy(GALLERY_SLOT)
        assert not session.is_busy(MAIN_SLOT)
        with pytest.raises(ConflictError):
            await session.upload_to_gallery(PNG_BYTES, "b.png", "image/png")
        with pytest.raises(ConflictError):
            session.submit()

        fake.release.set()
        url = await task

        assert not session.is_busy(GALLERY_SLOT)
        assert session.images.gallery == [url]
        assert session.submit().gallery_images == [url]

    @pytest.mark.asyncio
    async def test_upload_finishing_after_cancel_is_discarded(self, product_store):
        fake = BlockingUploader()
        session = ProductFormSession(product_store, uploader=fake)

        task = asyncio.create_task(session.upload_main(PNG_BYTES, "a.png", "image/png"))
        await fake.started.wait()
        session.cancel()
        fake.release.set()

        assert await task is None
        assert session.images.main_image is None
        assert product_store.list() == []
