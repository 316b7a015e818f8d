"""FastAPI app for the item catalog: routers, error mapping and request logging context."""

import uuid
from contextlib import asynccontextmanager
from time import perf_counter
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from catalog.agents.base import Embedder, ItemSuggester
from catalog.api.embeddings_routes import router as embeddings_router
from catalog.api.images_routes import router as images_router
from catalog.api.items_routes import router as items_router
from catalog.config import Settings, load_settings
from catalog.db import Database
from catalog.errors import (
    CatalogError,
    ConfigurationError,
    ImageNotFound,
    ItemNotFound,
    PersistenceError,
    StorageCapabilityError,
    ValidationError,
)
from catalog.storage import UploadCapabilityIssuer
from catalog.utils.logger import get_logger, request_context

logger = get_logger("catalog.api.server")

REQUEST_ID_HEADER = "x-request-id"


def error_response(exc: CatalogError) -> tuple[int, str]:
    """Status code and client-facing message for a core error. Internals never leak."""
    if isinstance(exc, ValidationError):
        return 400, str(exc)
    if isinstance(exc, ItemNotFound):
        return 404, "Item not found."
    if isinstance(exc, ImageNotFound):
        return 404, "Image not found for this item."
    if isinstance(exc, ConfigurationError):
        return 500, "Server misconfigured."
    if isinstance(exc, StorageCapabilityError):
        return 500, "Upload capability generation failed."
    if isinstance(exc, PersistenceError):
        return 500, "Database error."
    return 500, "Server error."


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("api.lifespan.start", container=app.state.settings.container_name)
    yield
    database: Optional[Database] = getattr(app.state, "database", None)
    if database is not None and getattr(app.state, "owns_database", False):
        database.dispose()
    logger.info("api.lifespan.stop")


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    issuer: Optional[UploadCapabilityIssuer] = None,
    suggester: Optional[ItemSuggester] = None,
    embedder: Optional[Embedder] = None,
) -> FastAPI:
    """
    Create the FastAPI app. Collaborators passed in are used as-is (tests pass in-memory
    ones); anything omitted is built from settings, which are loaded from the environment
    when not given. Missing required configuration fails here, not on the first request.
    """
    settings = settings or load_settings()
    app = FastAPI(title="Item Catalog", version="0.1.0", lifespan=_lifespan)
    app.state.settings = settings
    app.state.owns_database = database is None
    app.state.database = database or Database(settings.database_url)
    app.state.issuer = issuer
    app.state.suggester = suggester
    app.state.embedder = embedder

    app.include_router(items_router)
    app.include_router(images_router)
    app.include_router(embeddings_router)

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        start = perf_counter()
        with request_context(request_id=request_id, method=request.method, path=request.url.path):
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "api.request.done",
                status=response.status_code,
                duration_ms=round((perf_counter() - start) * 1000, 1),
            )
        return response

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
        status, message = error_response(exc)
        if status >= 500:
            logger.error(
                "api.request.failed",
                error=str(exc),
                error_type=type(exc).__name__,
                path=request.url.path,
            )
        else:
            logger.info("api.request.rejected", status=status, error=str(exc), path=request.url.path)
        return JSONResponse(status_code=status, content={"detail": message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed bodies, unknown fields and non-numeric ids are all 400s."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid input')}" if location else "Invalid request."
        logger.info("api.request.invalid", path=request.url.path, errors=len(errors))
        return JSONResponse(status_code=400, content={"detail": message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("api.request.unhandled", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"detail": "Server error."})

    @app.get("/health")
    async def health() -> dict[str, Any]:
        db_ok = app.state.database.check_connection()
        return {"status": "ok" if db_ok else "degraded", "database": db_ok}

    return app
