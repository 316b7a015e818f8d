"""AI prefill: feed collaborator suggestions into the item and the embedding cache."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from catalog.agents.base import Embedder, ItemSuggester
from catalog.db.models import EmbeddingPurpose
from catalog.db.repositories import EmbeddingCache, ImageGallery, ItemCatalog, content_hash
from catalog.errors import ValidationError
from catalog.models.embeddings import UpsertOutcome
from catalog.models.suggestions import PrefillResult
from catalog.storage.protocol import UploadCapabilityIssuer
from catalog.utils.logger import get_logger

logger = get_logger("catalog.prefill")

READ_EXPIRY = timedelta(minutes=15)


def description_source(name: str, description: Optional[str]) -> str:
    """Exact text a description embedding is computed from (and hashed over)."""
    return f"{name}\n{description or ''}".strip()


async def refresh_description_embedding(
    item_id: int,
    name: str,
    description: Optional[str],
    embeddings: EmbeddingCache,
    embedder: Embedder,
) -> tuple[Optional[UpsertOutcome], bool]:
    """Embed name+description unless the cache already holds a vector for this exact text.

    Returns (outcome, skipped). skipped is True on a cache hit; the model is not called.
    """
    source = description_source(name, description)
    digest = content_hash(source)
    purpose = EmbeddingPurpose.DESCRIPTION
    if embeddings.is_current(item_id, purpose, embedder.model, digest):
        logger.debug("prefill.embedding.cache_hit", item_id=item_id, model=embedder.model)
        return None, True
    vector = await embedder.embed(source)
    outcome = embeddings.upsert(
        item_id,
        purpose,
        embedder.model,
        dimensions=len(vector),
        content_hash=digest,
        vector=vector,
    )
    return outcome, False


async def prefill_item(
    item_id: int,
    catalog: ItemCatalog,
    gallery: ImageGallery,
    embeddings: EmbeddingCache,
    issuer: UploadCapabilityIssuer,
    suggester: ItemSuggester,
    embedder: Optional[Embedder] = None,
) -> PrefillResult:
    """Suggest listing fields from the item's images, apply them, refresh the embedding."""
    item = catalog.get(item_id)
    images = gallery.list_images(item_id)
    if not images:
        raise ValidationError("Item has no images to prefill from.")

    expires_on = datetime.now(timezone.utc) + READ_EXPIRY
    image_urls = [issuer.issue_read(image.storage_key, expires_on).url for image in images]

    log = logger.bind(item_id=item_id)
    log.info("prefill.start", images=len(image_urls))
    suggestion = await suggester.suggest(image_urls, item.name, item.description)
    updated = catalog.update(
        item_id,
        {
            "name": suggestion.name,
            "description": suggestion.description,
            "unit_price_cents": suggestion.unit_price_cents,
        },
    )

    outcome: Optional[UpsertOutcome] = None
    skipped = False
    if embedder is not None:
        outcome, skipped = await refresh_description_embedding(
            item_id, updated.name, updated.description, embeddings, embedder
        )
    log.info("prefill.ok", embedded=outcome is not None, embedding_skipped=skipped)
    return PrefillResult(item=updated, suggestion=suggestion, embedding=outcome, embedding_skipped=skipped)
