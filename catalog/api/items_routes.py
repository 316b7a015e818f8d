"""Item routes: create draft, read, update fields, soft delete, publish/unpublish, prefill."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from catalog.agents.base import Embedder, ItemSuggester
from catalog.api.deps import (
    get_catalog,
    get_embedder,
    get_embeddings,
    get_gallery,
    get_issuer,
    get_orchestrator,
    get_suggester,
)
from catalog.db.models import Lifecycle
from catalog.db.repositories import EmbeddingCache, ImageGallery, ItemCatalog
from catalog.models import CreateDraftRequest, DraftCreated, ItemOut, ItemPage, ItemUpdate, PrefillResult
from catalog.orchestrator import DraftOrchestrator
from catalog.prefill import prefill_item
from catalog.storage import UploadCapabilityIssuer

router = APIRouter(prefix="/api/items", tags=["items"])


@router.post("/drafts")
async def create_draft(
    body: Optional[CreateDraftRequest] = None,
    orchestrator: DraftOrchestrator = Depends(get_orchestrator),
) -> DraftCreated:
    """Create a draft item and return one upload target per image slot (max 4)."""
    return orchestrator.create_draft(body or CreateDraftRequest())


@router.get("")
async def list_items(
    state: Lifecycle = Query(Lifecycle.DRAFT, description="draft or published"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    catalog: ItemCatalog = Depends(get_catalog),
) -> ItemPage:
    return ItemPage(items=catalog.list_items(state, limit=limit, offset=offset), limit=limit, offset=offset)


@router.get("/{item_id}")
async def get_item(item_id: int, catalog: ItemCatalog = Depends(get_catalog)) -> ItemOut:
    return catalog.get(item_id)


@router.patch("/{item_id}")
async def update_item(item_id: int, body: ItemUpdate, catalog: ItemCatalog = Depends(get_catalog)) -> ItemOut:
    """Partial update of name, description, unitPriceCents, quantityOnHand."""
    return catalog.update(item_id, body.model_dump(exclude_unset=True))


@router.delete("/{item_id}", status_code=204)
async def delete_item(item_id: int, catalog: ItemCatalog = Depends(get_catalog)) -> Response:
    catalog.soft_delete(item_id)
    return Response(status_code=204)


@router.post("/{item_id}/publish")
async def publish_item(item_id: int, catalog: ItemCatalog = Depends(get_catalog)) -> ItemOut:
    return catalog.publish(item_id)


@router.post("/{item_id}/unpublish")
async def unpublish_item(item_id: int, catalog: ItemCatalog = Depends(get_catalog)) -> ItemOut:
    return catalog.unpublish(item_id)


@router.post("/{item_id}/prefill")
async def prefill(
    item_id: int,
    catalog: ItemCatalog = Depends(get_catalog),
    gallery: ImageGallery = Depends(get_gallery),
    embeddings: EmbeddingCache = Depends(get_embeddings),
    issuer: UploadCapabilityIssuer = Depends(get_issuer),
    suggester: ItemSuggester = Depends(get_suggester),
    embedder: Optional[Embedder] = Depends(get_embedder),
) -> PrefillResult:
    """Ask the AI collaborator for name/description/price and refresh the description embedding."""
    return await prefill_item(item_id, catalog, gallery, embeddings, issuer, suggester, embedder)
