"""ORM model for cached content embeddings: one row per (item, purpose, model)."""

import enum

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Integer, LargeBinary, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from catalog.db.base import Base, TimestampMixin

CONTENT_HASH_LENGTH = 32
MODEL_MAX_LENGTH = 100


class EmbeddingPurpose(str, enum.Enum):
    DESCRIPTION = "description-embedding"
    IMAGE = "image-embedding"


class ItemEmbedding(Base, TimestampMixin):
    """Current embedding for one (item, purpose, model) triple; not a history."""

    __tablename__ = "item_embeddings"
    __table_args__ = (
        UniqueConstraint("item_id", "purpose", "model", name="uq_item_embeddings_item_purpose_model"),
        CheckConstraint("dimensions > 0", name="ck_item_embeddings_dimensions_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("inventory_items.id"), nullable=False, index=True)
    purpose: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str] = mapped_column(String(MODEL_MAX_LENGTH), nullable=False)
    dimensions: Mapped[int] = mapped_column(Integer, nullable=False)
    # SHA-256 of the exact source content
    content_hash: Mapped[bytes] = mapped_column(LargeBinary(CONTENT_HASH_LENGTH), nullable=False)
    vector: Mapped[list[float]] = mapped_column(JSON, nullable=False)

    def __repr__(self) -> str:
        return f"<ItemEmbedding(id={self.id}, item_id={self.item_id}, purpose={self.purpose!r}, model={self.model!r})>"
