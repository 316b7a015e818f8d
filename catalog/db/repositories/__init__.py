"""DB repositories: one class per owned table, each taking a Database."""

from catalog.db.repositories.embedding_repo import EmbeddingCache, content_hash, parse_content_hash
from catalog.db.repositories.image_repo import ImageGallery
from catalog.db.repositories.item_repo import ItemCatalog, require_positive_id

__all__ = [
    "ItemCatalog",
    "ImageGallery",
    "EmbeddingCache",
    "content_hash",
    "parse_content_hash",
    "require_positive_id",
]
