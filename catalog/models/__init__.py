"""API-facing pydantic models."""

from catalog.models.drafts import CreateDraftRequest, DraftCreated, FileSpec, UploadTarget
from catalog.models.embeddings import EmbeddingOut, EmbeddingUpsertRequest, UpsertOutcome
from catalog.models.images import (
    AttachImagesRequest,
    ImageEntry,
    ImageList,
    ImageOut,
    PrimaryCount,
    PrimaryImageSet,
    SetPrimaryNotFound,
    SetPrimaryResult,
)
from catalog.models.items import ItemOut, ItemPage, ItemUpdate
from catalog.models.suggestions import ItemSuggestion, PrefillResult

__all__ = [
    "AttachImagesRequest",
    "CreateDraftRequest",
    "DraftCreated",
    "EmbeddingOut",
    "EmbeddingUpsertRequest",
    "FileSpec",
    "ImageEntry",
    "ImageList",
    "ImageOut",
    "ItemOut",
    "ItemPage",
    "ItemSuggestion",
    "ItemUpdate",
    "PrefillResult",
    "PrimaryCount",
    "PrimaryImageSet",
    "SetPrimaryNotFound",
    "SetPrimaryResult",
    "UploadTarget",
    "UpsertOutcome",
]
