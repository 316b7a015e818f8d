"""Request-scoped dependencies. Components are built per request from app.state."""

from datetime import timedelta
from typing import Optional

from fastapi import Depends, Request

from catalog.agents import ItemSuggester, OpenAIEmbedder, PrefillAgentSuggester
from catalog.agents.base import Embedder
from catalog.config import Settings
from catalog.db import Database
from catalog.db.repositories import EmbeddingCache, ImageGallery, ItemCatalog
from catalog.errors import ConfigurationError
from catalog.orchestrator import DraftOrchestrator
from catalog.storage import UploadCapabilityIssuer, build_issuer


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise ConfigurationError("Server misconfigured: database not initialised.")
    return database


def get_catalog(database: Database = Depends(get_database)) -> ItemCatalog:
    return ItemCatalog(database)


def get_gallery(database: Database = Depends(get_database)) -> ImageGallery:
    return ImageGallery(database)


def get_embeddings(database: Database = Depends(get_database)) -> EmbeddingCache:
    return EmbeddingCache(database)


def get_issuer(request: Request, settings: Settings = Depends(get_settings)) -> UploadCapabilityIssuer:
    issuer = getattr(request.app.state, "issuer", None)
    return issuer if issuer is not None else build_issuer(settings)


def get_orchestrator(
    catalog: ItemCatalog = Depends(get_catalog),
    issuer: UploadCapabilityIssuer = Depends(get_issuer),
    settings: Settings = Depends(get_settings),
) -> DraftOrchestrator:
    return DraftOrchestrator(catalog, issuer, upload_expiry=timedelta(minutes=settings.upload_expiry_minutes))


def get_suggester(request: Request, settings: Settings = Depends(get_settings)) -> ItemSuggester:
    suggester = getattr(request.app.state, "suggester", None)
    if suggester is not None:
        return suggester
    if not settings.prefill_enabled:
        raise ConfigurationError("Server misconfigured: missing OPENAI_API_KEY.")
    return PrefillAgentSuggester(settings.prefill_model)


def get_embedder(request: Request, settings: Settings = Depends(get_settings)) -> Optional[Embedder]:
    embedder = getattr(request.app.state, "embedder", None)
    if embedder is not None:
        return embedder
    if not settings.prefill_enabled:
        return None
    return OpenAIEmbedder(settings.openai_api_key, settings.embedding_model)
