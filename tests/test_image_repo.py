"""Tests for the image repository: attach, ordering, atomic primary reassignment."""

import sys
import unittest
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from catalog.db import Database
from catalog.db.repositories import ImageGallery, ItemCatalog
from catalog.errors import ItemNotFound, ValidationError
from catalog.models import ImageEntry, PrimaryImageSet, SetPrimaryNotFound


class TestImageGallery(unittest.TestCase):
    def setUp(self):
        self.db = Database("sqlite://")
        self.db.create_all()
        self.catalog = ItemCatalog(self.db)
        self.gallery = ImageGallery(self.db)
        self.item = self._draft()

    def tearDown(self):
        self.db.dispose()

    def _draft(self):
        public_id = uuid.uuid4().hex
        return self.catalog.create_draft(public_id=public_id, sku=f"DRAFT-{public_id}", name="Draft")

    def _attach(self, item_id, *keys, primary=None):
        entries = [
            ImageEntry(storage_key=key, is_primary=(key == primary), sort_order=i + 1)
            for i, key in enumerate(keys)
        ]
        return self.gallery.attach(item_id, entries)

    def _primary_ids(self, item_id):
        return [img.image_id for img in self.gallery.list_images(item_id) if img.is_primary]

    def test_attach_returns_ordered_images(self):
        entries = [
            ImageEntry(storage_key="images/x/03.jpg", sort_order=3),
            ImageEntry(storage_key="images/x/01.jpg", sort_order=1),
            ImageEntry(storage_key="images/x/02.jpg", sort_order=2),
        ]
        images = self.gallery.attach(self.item.item_id, entries)
        self.assertEqual(
            [img.storage_key for img in images],
            ["images/x/01.jpg", "images/x/02.jpg", "images/x/03.jpg"],
        )

    def test_attach_validation(self):
        with self.assertRaises(ValidationError):
            self.gallery.attach(self.item.item_id, [])
        with self.assertRaises(ValidationError):
            self.gallery.attach(self.item.item_id, [ImageEntry(storage_key="  ")])
        with self.assertRaises(ItemNotFound):
            self._attach(12345, "images/x/01.jpg")

    def test_set_primary_moves_flag(self):
        images = self._attach(self.item.item_id, "k1", "k2", "k3", primary="k1")
        first, second = images[0].image_id, images[1].image_id

        result = self.gallery.set_primary(self.item.item_id, second)
        self.assertIsInstance(result, PrimaryImageSet)
        self.assertEqual(result.primary_image_id, second)
        self.assertEqual([img.image_id for img in result.images if img.is_primary], [second])
        self.assertEqual(self._primary_ids(self.item.item_id), [second])
        self.assertNotIn(first, self._primary_ids(self.item.item_id))

    def test_set_primary_is_idempotent(self):
        images = self._attach(self.item.item_id, "k1", "k2")
        target = images[1].image_id
        self.gallery.set_primary(self.item.item_id, target)
        result = self.gallery.set_primary(self.item.item_id, target)
        self.assertIsInstance(result, PrimaryImageSet)
        self.assertEqual(self._primary_ids(self.item.item_id), [target])

    def test_set_primary_image_of_other_item(self):
        images = self._attach(self.item.item_id, "k1", "k2", primary="k1")
        other = self._draft()
        foreign = self._attach(other.item_id, "o1")[0].image_id

        result = self.gallery.set_primary(self.item.item_id, foreign)
        self.assertEqual(result, SetPrimaryNotFound(missing="image"))
        self.assertEqual(self._primary_ids(self.item.item_id), [images[0].image_id])
        self.assertEqual(self._primary_ids(other.item_id), [])

    def test_set_primary_missing_or_deleted_item(self):
        images = self._attach(self.item.item_id, "k1", primary="k1")
        self.assertEqual(self.gallery.set_primary(999, images[0].image_id), SetPrimaryNotFound(missing="item"))

        self.catalog.soft_delete(self.item.item_id)
        result = self.gallery.set_primary(self.item.item_id, images[0].image_id)
        self.assertEqual(result, SetPrimaryNotFound(missing="item"))

    def test_set_primary_rejects_non_positive_ids(self):
        with self.assertRaises(ValidationError):
            self.gallery.set_primary(0, 1)
        with self.assertRaises(ValidationError):
            self.gallery.set_primary(self.item.item_id, -1)

    def test_attach_keeps_multiple_primaries_until_set_primary(self):
        entries = [
            ImageEntry(storage_key="k1", is_primary=True),
            ImageEntry(storage_key="k2", is_primary=True, sort_order=2),
        ]
        images = self.gallery.attach(self.item.item_id, entries)
        self.assertEqual(len(self._primary_ids(self.item.item_id)), 2)

        offenders = self.gallery.find_multiple_primaries()
        self.assertEqual([(o.item_id, o.primary_count) for o in offenders], [(self.item.item_id, 2)])

        self.gallery.set_primary(self.item.item_id, images[1].image_id)
        self.assertEqual(self._primary_ids(self.item.item_id), [images[1].image_id])
        self.assertEqual(self.gallery.find_multiple_primaries(), [])

    def test_list_images_of_deleted_item(self):
        self._attach(self.item.item_id, "k1")
        self.catalog.soft_delete(self.item.item_id)
        with self.assertRaises(ItemNotFound):
            self.gallery.list_images(self.item.item_id)


if __name__ == "__main__":
    unittest.main()
