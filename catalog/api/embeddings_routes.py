"""Embedding cache routes."""

from fastapi import APIRouter, Depends

from catalog.api.deps import get_embeddings
from catalog.db.repositories import EmbeddingCache, parse_content_hash
from catalog.models import EmbeddingOut, EmbeddingUpsertRequest, UpsertOutcome

router = APIRouter(prefix="/api/items", tags=["embeddings"])


@router.get("/{item_id}/embeddings")
async def list_embeddings(item_id: int, embeddings: EmbeddingCache = Depends(get_embeddings)) -> list[EmbeddingOut]:
    return embeddings.list_for_item(item_id)


@router.put("/{item_id}/embeddings")
async def upsert_embedding(
    item_id: int,
    body: EmbeddingUpsertRequest,
    embeddings: EmbeddingCache = Depends(get_embeddings),
) -> UpsertOutcome:
    """Store the vector unless the cached one was computed from the same content (changed=false)."""
    return embeddings.upsert(
        item_id,
        body.purpose,
        body.model,
        dimensions=body.dimensions,
        content_hash=parse_content_hash(body.content_hash),
        vector=body.vector,
    )
