"""
Unit tests for the product image set.
"""
import pytest

from catalog_console.core.errors import (
    CapacityError,
    ConflictError,
    GalleryIndexError,
    ValidationError,
)
from catalog_console.services.image_set import ImageSetManager


class TestImageSetManager:

    def test_empty_set(self):
        images = ImageSetManager(max_images=5)

        assert images.main_image is None
        assert images.gallery == []
        assert not images.has_main
        assert not images.is_full

    def test_set_main_when_empty(self):
        images = ImageSetManager(max_images=5)
        images.set_main("a.jpg")

        assert images.main_image == "a.jpg"
        assert images.has_main

    def test_set_main_twice_is_conflict(self):
        images = ImageSetManager("a.jpg", max_images=5)

        with pytest.raises(ConflictError):
            images.set_main("b.jpg")
        assert images.main_image == "a.jpg"

    def test_set_main_rejects_gallery_image(self):
        images = ImageSetManager(gallery=["a.jpg"], max_images=5)

        with pytest.raises(ValidationError):
            images.set_main("a.jpg")

    def test_blank_reference_rejected(self):
        images = ImageSetManager(max_images=5)

        with pytest.raises(ValidationError):
            images.set_main("   ")
        with pytest.raises(ValidationError):
            images.add_to_gallery("")

    def test_gallery_capacity(self):
        images = ImageSetManager("main.jpg", max_images=5)
        for i in range(5):
            images.add_to_gallery(f"g{i}.jpg")

        assert images.is_full
        with pytest.raises(CapacityError):
            images.add_to_gallery("g5.jpg")
        assert len(images.gallery) == 5

    def test_add_main_to_gallery_rejected(self):
        images = ImageSetManager("main.jpg", max_images=5)

        with pytest.raises(ValidationError):
            images.add_to_gallery("main.jpg")

    def test_remove_from_gallery_shifts(self):
        images = ImageSetManager("m.jpg", ["a.jpg", "b.jpg", "c.jpg"], max_images=5)

        removed = images.remove_from_gallery(1)

        assert removed == "b.jpg"
        assert images.gallery == ["a.jpg", "c.jpg"]

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_remove_out_of_range(self, index):
        images = ImageSetManager("m.jpg", ["a.jpg", "b.jpg", "c.jpg"], max_images=5)

        with pytest.raises(GalleryIndexError):
            images.remove_from_gallery(index)
        assert images.gallery == ["a.jpg", "b.jpg", "c.jpg"]

    def test_index_error_is_also_builtin_index_error(self):
        images = ImageSetManager(max_images=5)

        with pytest.raises(IndexError):
            images.remove_from_gallery(0)

    def test_remove_main_keeps_gallery(self):
        images = ImageSetManager("m.jpg", ["a.jpg"], max_images=5)

        assert images.remove_main() == "m.jpg"
        assert images.main_image is None
        assert images.gallery == ["a.jpg"]
        assert images.remove_main() is None

    def test_promote_swaps_into_vacated_position(self):
        images = ImageSetManager("m.jpg", ["a.jpg", "b.jpg", "c.jpg"], max_images=5)

        images.promote(1)

        assert images.main_image == "b.jpg"
        assert images.gallery == ["a.jpg", "m.jpg", "c.jpg"]

    def test_promote_keeps_gallery_length_when_full(self):
        gallery = [f"g{i}.jpg" for i in range(5)]
        images = ImageSetManager("m.jpg", gallery, max_images=5)

        images.promote(4)

        assert images.main_image == "g4.jpg"
        assert images.gallery == ["g0.jpg", "g1.jpg", "g2.jpg", "g3.jpg", "m.jpg"]
        assert images.is_full

    def test_promote_without_main(self):
        images = ImageSetManager(gallery=["a.jpg", "b.jpg"], max_images=5)

        images.promote(0)

        assert images.main_image == "a.jpg"
        assert images.gallery == ["b.jpg"]

    def test_promote_out_of_range_leaves_state(self):
        images = ImageSetManager("m.jpg", ["a.jpg"], max_images=5)

        with pytest.raises(GalleryIndexError):
            images.promote(1)
        assert images.snapshot() == ("m.jpg", ["a.jpg"])

    def test_gallery_property_is_a_copy(self):
        images = ImageSetManager("m.jpg", ["a.jpg"], max_images=5)

        images.gallery.append("b.jpg")

        assert images.gallery == ["a.jpg"]
