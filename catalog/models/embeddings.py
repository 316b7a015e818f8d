"""Embedding cache request/response models."""

from datetime import datetime

from pydantic import Field

from catalog.db.base import as_utc
from catalog.db.models import EmbeddingPurpose, ItemEmbedding
from catalog.models.base import ApiModel


class EmbeddingUpsertRequest(ApiModel):
    purpose: EmbeddingPurpose
    model: str
    dimensions: int
    content_hash: str = Field(..., description="Hex SHA-256 of the source content (64 chars)")
    vector: list[float]


class UpsertOutcome(ApiModel):
    stored: bool
    changed: bool
    embedding_id: int


class EmbeddingOut(ApiModel):
    embedding_id: int
    item_id: int
    purpose: str
    model: str
    dimensions: int
    content_hash: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: ItemEmbedding) -> "EmbeddingOut":
        return cls(
            embedding_id=row.id,
            item_id=row.item_id,
            purpose=row.purpose,
            model=row.model,
            dimensions=row.dimensions,
            content_hash=row.content_hash.hex(),
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
        )
