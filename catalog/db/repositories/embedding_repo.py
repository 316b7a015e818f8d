"""Embedding cache repository: one current vector per (item, purpose, model).

Rows are keyed by the triple and refreshed by content hash. Upserting the same
hash twice is a cache hit and leaves the row (including updated_at) untouched, so
callers can skip the expensive model call upstream.
"""

import hashlib
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog.db import Database
from catalog.db.base import utcnow
from catalog.db.models.embedding import (
    CONTENT_HASH_LENGTH,
    MODEL_MAX_LENGTH,
    EmbeddingPurpose,
    ItemEmbedding,
)
from catalog.db.repositories.item_repo import load_live_item, require_positive_id
from catalog.errors import ValidationError
from catalog.models.embeddings import EmbeddingOut, UpsertOutcome
from catalog.utils.logger import get_logger

logger = get_logger("catalog.embeddings")


def content_hash(text: str) -> bytes:
    """SHA-256 digest of the exact source content (UTF-8)."""
    return hashlib.sha256(text.encode("utf-8")).digest()


def parse_content_hash(value: str) -> bytes:
    """Decode a hex digest as sent over the wire; must be exactly 32 bytes."""
    try:
        digest = bytes.fromhex((value or "").strip())
    except ValueError as e:
        raise ValidationError("contentHash must be hex.") from e
    if len(digest) != CONTENT_HASH_LENGTH:
        raise ValidationError(f"contentHash must be {CONTENT_HASH_LENGTH} bytes ({CONTENT_HASH_LENGTH * 2} hex chars).")
    return digest


def _purpose_value(purpose: EmbeddingPurpose | str) -> str:
    try:
        return EmbeddingPurpose(purpose).value
    except ValueError as e:
        allowed = ", ".join(p.value for p in EmbeddingPurpose)
        raise ValidationError(f"purpose must be one of: {allowed}.") from e


def _clean_model(model: str) -> str:
    model = (model or "").strip()
    if not model:
        raise ValidationError("model must be non-empty.")
    if len(model) > MODEL_MAX_LENGTH:
        raise ValidationError(f"model must be at most {MODEL_MAX_LENGTH} characters.")
    return model


def _find(session: Session, item_id: int, purpose: str, model: str) -> Optional[ItemEmbedding]:
    return session.scalars(
        select(ItemEmbedding).where(
            ItemEmbedding.item_id == item_id,
            ItemEmbedding.purpose == purpose,
            ItemEmbedding.model == model,
        )
    ).first()


class EmbeddingCache:
    """Owns ItemEmbedding rows scoped to a live InventoryItem."""

    def __init__(self, db: Database):
        self._db = db

    def upsert(
        self,
        item_id: int,
        purpose: EmbeddingPurpose | str,
        model: str,
        dimensions: int,
        content_hash: bytes,
        vector: Sequence[float],
    ) -> UpsertOutcome:
        """Insert, refresh or leave alone the row for (item, purpose, model).

        Runs in one transaction with the item row locked so two concurrent upserts
        for the same item cannot both insert.
        """
        require_positive_id(item_id)
        purpose_value = _purpose_value(purpose)
        model = _clean_model(model)
        if isinstance(dimensions, bool) or not isinstance(dimensions, int) or dimensions <= 0:
            raise ValidationError("dimensions must be > 0.")
        if not isinstance(content_hash, (bytes, bytearray)) or len(content_hash) != CONTENT_HASH_LENGTH:
            raise ValidationError(f"contentHash must be {CONTENT_HASH_LENGTH} bytes.")
        if len(vector) != dimensions:
            raise ValidationError(f"vector has {len(vector)} values but dimensions is {dimensions}.")
        payload = [float(v) for v in vector]

        log = logger.bind(item_id=item_id, purpose=purpose_value, model=model)
        with self._db.session() as session:
            load_live_item(session, item_id, for_update=True)
            row = _find(session, item_id, purpose_value, model)
            if row is None:
                row = ItemEmbedding(
                    item_id=item_id,
                    purpose=purpose_value,
                    model=model,
                    dimensions=dimensions,
                    content_hash=bytes(content_hash),
                    vector=payload,
                )
                session.add(row)
                session.flush()
                log.info("embeddings.upsert.inserted", embedding_id=row.id)
                return UpsertOutcome(stored=True, changed=True, embedding_id=row.id)

            if row.content_hash == bytes(content_hash):
                log.debug("embeddings.upsert.cache_hit", embedding_id=row.id)
                return UpsertOutcome(stored=True, changed=False, embedding_id=row.id)

            row.content_hash = bytes(content_hash)
            row.vector = payload
            row.dimensions = dimensions
            row.model = model
            row.updated_at = utcnow()
            session.flush()
            log.info("embeddings.upsert.refreshed", embedding_id=row.id)
            return UpsertOutcome(stored=True, changed=True, embedding_id=row.id)

    def get(self, item_id: int, purpose: EmbeddingPurpose | str, model: str) -> Optional[EmbeddingOut]:
        require_positive_id(item_id)
        purpose_value = _purpose_value(purpose)
        model = _clean_model(model)
        with self._db.session() as session:
            load_live_item(session, item_id)
            row = _find(session, item_id, purpose_value, model)
            return EmbeddingOut.from_row(row) if row is not None else None

    def get_vector(self, item_id: int, purpose: EmbeddingPurpose | str, model: str) -> Optional[list[float]]:
        require_positive_id(item_id)
        purpose_value = _purpose_value(purpose)
        with self._db.session() as session:
            load_live_item(session, item_id)
            row = _find(session, item_id, purpose_value, _clean_model(model))
            return list(row.vector) if row is not None else None

    def is_current(self, item_id: int, purpose: EmbeddingPurpose | str, model: str, content_hash: bytes) -> bool:
        """True when the cached row for the triple was computed from exactly this content."""
        cached = self.get(item_id, purpose, model)
        return cached is not None and cached.content_hash == bytes(content_hash).hex()

    def list_for_item(self, item_id: int) -> list[EmbeddingOut]:
        require_positive_id(item_id)
        with self._db.session() as session:
            load_live_item(session, item_id)
            q = (
                select(ItemEmbedding)
                .where(ItemEmbedding.item_id == item_id)
                .order_by(ItemEmbedding.purpose, ItemEmbedding.model)
            )
            return [EmbeddingOut.from_row(r) for r in session.scalars(q).all()]
