"""Re-export all ORM models so Base.metadata has all tables."""

from catalog.db.models.embedding import EmbeddingPurpose, ItemEmbedding
from catalog.db.models.image import ItemImage
from catalog.db.models.item import InventoryItem, Lifecycle

__all__ = [
    "InventoryItem",
    "Lifecycle",
    "ItemImage",
    "ItemEmbedding",
    "EmbeddingPurpose",
]
