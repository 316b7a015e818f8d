"""Tests for the item repository: drafts, lifecycle transitions, partial update, soft delete."""

import sys
import time
import unittest
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from catalog.db import Database
from catalog.db.models import Lifecycle
from catalog.db.repositories import ItemCatalog
from catalog.errors import ItemNotFound, PersistenceError, ValidationError


def new_draft(catalog: ItemCatalog, name: str = "Draft"):
    public_id = uuid.uuid4().hex
    return catalog.create_draft(public_id=public_id, sku=f"DRAFT-{public_id}", name=name)


class TestItemCatalog(unittest.TestCase):
    def setUp(self):
        self.db = Database("sqlite://")
        self.db.create_all()
        self.catalog = ItemCatalog(self.db)

    def tearDown(self):
        self.db.dispose()

    def test_create_draft_defaults(self):
        item = new_draft(self.catalog, name="Linen towel")
        self.assertGreater(item.item_id, 0)
        self.assertTrue(item.is_draft)
        self.assertFalse(item.is_active)
        self.assertEqual(item.unit_price_cents, 0)
        self.assertEqual(item.quantity_on_hand, 1)
        self.assertEqual(item.sku, f"DRAFT-{item.public_id}")
        self.assertEqual(self.catalog.get(item.item_id), item)

    def test_duplicate_sku_is_persistence_error(self):
        item = new_draft(self.catalog)
        with self.assertRaises(PersistenceError):
            self.catalog.create_draft(public_id=uuid.uuid4().hex, sku=item.sku, name="Other")

    def test_publish_and_unpublish(self):
        item = new_draft(self.catalog)
        published = self.catalog.publish(item.item_id)
        self.assertFalse(published.is_draft)
        self.assertTrue(published.is_active)
        self.assertGreaterEqual(published.updated_at, item.updated_at)

        unpublished = self.catalog.unpublish(item.item_id)
        self.assertTrue(unpublished.is_draft)
        self.assertFalse(unpublished.is_active)

    def test_publish_twice_keeps_state_and_bumps_updated_at(self):
        item = new_draft(self.catalog)
        first = self.catalog.publish(item.item_id)
        time.sleep(0.02)
        second = self.catalog.publish(item.item_id)
        self.assertTrue(second.is_active)
        self.assertFalse(second.is_draft)
        self.assertGreater(second.updated_at, first.updated_at)

    def test_publish_missing_item(self):
        with self.assertRaises(ItemNotFound):
            self.catalog.publish(999)

    def test_non_positive_id_is_validation_error(self):
        for bad in (0, -3):
            with self.assertRaises(ValidationError):
                self.catalog.get(bad)
            with self.assertRaises(ValidationError):
                self.catalog.publish(bad)

    def test_soft_delete_hides_item(self):
        item = new_draft(self.catalog)
        self.catalog.soft_delete(item.item_id)
        with self.assertRaises(ItemNotFound):
            self.catalog.get(item.item_id)
        with self.assertRaises(ItemNotFound):
            self.catalog.publish(item.item_id)
        with self.assertRaises(ItemNotFound):
            self.catalog.soft_delete(item.item_id)
        self.assertEqual(self.catalog.list_items(Lifecycle.DRAFT), [])

    def test_update_fields(self):
        item = new_draft(self.catalog)
        updated = self.catalog.update(
            item.item_id,
            {"name": "  Blue quilt ", "description": "Queen size", "unit_price_cents": 4500},
        )
        self.assertEqual(updated.name, "Blue quilt")
        self.assertEqual(updated.description, "Queen size")
        self.assertEqual(updated.unit_price_cents, 4500)
        self.assertTrue(updated.is_draft)

    def test_update_rejects_lifecycle_and_bad_values(self):
        item = new_draft(self.catalog)
        with self.assertRaises(ValidationError):
            self.catalog.update(item.item_id, {"is_active": True})
        with self.assertRaises(ValidationError):
            self.catalog.update(item.item_id, {})
        with self.assertRaises(ValidationError):
            self.catalog.update(item.item_id, {"unit_price_cents": -1})
        with self.assertRaises(ValidationError):
            self.catalog.update(item.item_id, {"name": "   "})
        self.assertEqual(self.catalog.get(item.item_id).name, "Draft")

    def test_list_items_by_state(self):
        a = new_draft(self.catalog, name="A")
        b = new_draft(self.catalog, name="B")
        self.catalog.publish(b.item_id)
        drafts = self.catalog.list_items(Lifecycle.DRAFT)
        published = self.catalog.list_items(Lifecycle.PUBLISHED)
        self.assertEqual([i.item_id for i in drafts], [a.item_id])
        self.assertEqual([i.item_id for i in published], [b.item_id])
        with self.assertRaises(ValidationError):
            self.catalog.list_items(Lifecycle.DRAFT, limit=0)


if __name__ == "__main__":
    unittest.main()
