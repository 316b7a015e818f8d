"""Tests for the HTTP API: draft-to-publish flow and error mapping."""

import sys
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))
sys.path.insert(0, str(Path(__file__).resolve().parent))

from fastapi.testclient import TestClient

from catalog.api.server import create_app, error_response
from catalog.config import DEVELOPMENT_STORAGE, Settings
from catalog.db import Database
from catalog.db.repositories import content_hash
from catalog.errors import ImageNotFound, ItemNotFound
from catalog.models import ItemSuggestion

from catalog_fakes import FakeIssuer


class FakeSuggester:
    async def suggest(self, image_urls, name, description):
        return ItemSuggestion(name="Cotton tablecloth", description="White, 60 x 84.", unit_price_cents=2500)


class FakeEmbedder:
    model = "fake-embedding"

    async def embed(self, text):
        return [0.25, 0.5]


class TestApiRoutes(unittest.TestCase):
    def setUp(self):
        self.settings = Settings(
            database_url="sqlite://",
            storage_connection_string=DEVELOPMENT_STORAGE,
        )
        self.db = Database("sqlite://")
        self.db.create_all()
        self.app = create_app(
            settings=self.settings,
            database=self.db,
            issuer=FakeIssuer(),
            suggester=FakeSuggester(),
            embedder=FakeEmbedder(),
        )
        self.client = TestClient(self.app)

    def tearDown(self):
        self.db.dispose()

    def _create_draft(self, body=None):
        r = self.client.post("/api/items/drafts", json=body or {"count": 2})
        self.assertEqual(r.status_code, 200, r.text)
        return r.json()

    def _attach(self, draft, primary_index=0):
        images = [
            {"storageKey": u["storageKey"], "isPrimary": i == primary_index, "sortOrder": u["index"]}
            for i, u in enumerate(draft["uploads"])
        ]
        r = self.client.post(f"/api/items/{draft['itemId']}/images", json={"images": images})
        self.assertEqual(r.status_code, 201, r.text)
        return r.json()["images"]

    def test_health(self):
        r = self.client.get("/health")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"status": "ok", "database": True})

    def test_draft_to_published_flow(self):
        draft = self._create_draft(
            {"titleHint": "Quilt", "files": [{"fileName": "a.png"}, {"fileName": "b.jpg", "contentType": "image/jpeg"}]}
        )
        self.assertEqual(len(draft["uploads"]), 2)
        self.assertEqual(draft["container"], "inventory-images")
        self.assertEqual(draft["uploads"][0]["contentType"], "image/png")
        self.assertEqual(draft["uploads"][0]["requiredHeaders"]["x-ms-blob-type"], "BlockBlob")
        self.assertIn(draft["uploads"][0]["storageKey"], draft["uploads"][0]["uploadUrl"])

        item_id = draft["itemId"]
        images = self._attach(draft)
        second = images[1]["imageId"]

        r = self.client.post(f"/api/items/{item_id}/images/{second}/set-primary")
        self.assertEqual(r.status_code, 200)
        body = r.json()
        self.assertEqual(body["primaryImageId"], second)
        self.assertEqual([img["imageId"] for img in body["images"] if img["isPrimary"]], [second])

        r = self.client.patch(f"/api/items/{item_id}", json={"unitPriceCents": 1200})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()["unitPriceCents"], 1200)

        r = self.client.post(f"/api/items/{item_id}/publish")
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.json()["isActive"])
        self.assertFalse(r.json()["isDraft"])

        listed = self.client.get("/api/items", params={"state": "published"}).json()
        self.assertEqual([i["itemId"] for i in listed["items"]], [item_id])
        drafts = self.client.get("/api/items").json()
        self.assertEqual(drafts["items"], [])

        r = self.client.post(f"/api/items/{item_id}/unpublish")
        self.assertTrue(r.json()["isDraft"])

    def test_create_draft_requires_slots(self):
        r = self.client.post("/api/items/drafts", json={"files": []})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.json()["detail"], "Provide files[] or count > 0.")
        r = self.client.post("/api/items/drafts")
        self.assertEqual(r.status_code, 400)

    def test_create_draft_clamps_slots(self):
        draft = self._create_draft({"count": 7})
        self.assertEqual([u["index"] for u in draft["uploads"]], [1, 2, 3, 4])

    def test_set_primary_not_found(self):
        draft = self._create_draft()
        images = self._attach(draft)
        other = self._create_draft({"count": 1})
        foreign = self._attach(other)[0]["imageId"]

        r = self.client.post(f"/api/items/{draft['itemId']}/images/{foreign}/set-primary")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["detail"], "Image not found for this item.")

        r = self.client.post(f"/api/items/9999/images/{images[0]['imageId']}/set-primary")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["detail"], "Item not found.")

        listed = self.client.get(f"/api/items/{draft['itemId']}/images").json()["images"]
        self.assertEqual([img["imageId"] for img in listed if img["isPrimary"]], [images[0]["imageId"]])

    def test_not_found_errors_map_to_404(self):
        self.assertEqual(error_response(ItemNotFound(7)), (404, "Item not found."))
        self.assertEqual(error_response(ImageNotFound(9)), (404, "Image not found for this item."))

    def test_invalid_ids(self):
        self.assertEqual(self.client.post("/api/items/0/publish").status_code, 400)
        self.assertEqual(self.client.post("/api/items/-4/images/1/set-primary").status_code, 400)
        self.assertEqual(self.client.post("/api/items/1/images/0/set-primary").status_code, 400)
        self.assertEqual(self.client.get("/api/items/abc").status_code, 400)

    def test_patch_rejects_lifecycle_fields(self):
        draft = self._create_draft()
        r = self.client.patch(f"/api/items/{draft['itemId']}", json={"isActive": True})
        self.assertEqual(r.status_code, 400)
        r = self.client.patch(f"/api/items/{draft['itemId']}", json={})
        self.assertEqual(r.status_code, 400)

    def test_soft_delete(self):
        draft = self._create_draft()
        item_id = draft["itemId"]
        self.assertEqual(self.client.delete(f"/api/items/{item_id}").status_code, 204)
        r = self.client.get(f"/api/items/{item_id}")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["detail"], "Item not found.")
        self.assertEqual(self.client.post(f"/api/items/{item_id}/publish").status_code, 404)
        self.assertEqual(self.client.get(f"/api/items/{item_id}/images").status_code, 404)

    def test_embedding_upsert(self):
        draft = self._create_draft()
        url = f"/api/items/{draft['itemId']}/embeddings"
        body = {
            "purpose": "description-embedding",
            "model": "text-embedding-3-small",
            "dimensions": 3,
            "contentHash": content_hash("Quilt").hex(),
            "vector": [0.1, 0.2, 0.3],
        }
        first = self.client.put(url, json=body).json()
        second = self.client.put(url, json=body).json()
        self.assertTrue(first["changed"])
        self.assertFalse(second["changed"])
        self.assertEqual(first["embeddingId"], second["embeddingId"])

        rows = self.client.get(url).json()
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]["contentHash"], body["contentHash"])

        self.assertEqual(self.client.put(url, json=dict(body, contentHash="abc")).status_code, 400)
        self.assertEqual(self.client.put(url, json=dict(body, purpose="thumbnail")).status_code, 400)
        self.assertEqual(self.client.put(url, json=dict(body, dimensions=4)).status_code, 400)

    def test_prefill(self):
        draft = self._create_draft({"count": 1})
        self._attach(draft)
        r = self.client.post(f"/api/items/{draft['itemId']}/prefill")
        self.assertEqual(r.status_code, 200, r.text)
        body = r.json()
        self.assertEqual(body["item"]["name"], "Cotton tablecloth")
        self.assertEqual(
            body["suggestion"],
            {"name": "Cotton tablecloth", "description": "White, 60 x 84.", "unitPriceCents": 2500},
        )
        self.assertTrue(body["embedding"]["changed"])

    def test_prefill_without_images(self):
        draft = self._create_draft({"count": 1})
        r = self.client.post(f"/api/items/{draft['itemId']}/prefill")
        self.assertEqual(r.status_code, 400)

    def test_capability_failure_is_500(self):
        app = create_app(
            settings=self.settings,
            database=self.db,
            issuer=FakeIssuer(fail=True),
        )
        r = TestClient(app).post("/api/items/drafts", json={"count": 1})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["detail"], "Upload capability generation failed.")
        listed = self.client.get("/api/items").json()["items"]
        self.assertEqual(len(listed), 1)

    def test_prefill_disabled_without_api_key(self):
        app = create_app(settings=self.settings, database=self.db)
        draft = self._create_draft({"count": 1})
        self._attach(draft)
        r = TestClient(app).post(f"/api/items/{draft['itemId']}/prefill")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["detail"], "Server misconfigured.")


if __name__ == "__main__":
    unittest.main()
