"""Create-draft orchestration: one draft item row plus N upload capabilities.

The database insert commits before any capability is issued. If signing fails
afterwards the draft row stays; nothing spans the database and the object store,
and abandoned drafts are not reclaimed here.
"""

import uuid
from datetime import datetime, timedelta, timezone
from time import perf_counter

from catalog.db.repositories import ItemCatalog
from catalog.errors import StorageCapabilityError, ValidationError
from catalog.models.drafts import CreateDraftRequest, DraftCreated, FileSpec, UploadTarget
from catalog.storage.keys import build_storage_key, normalize_content_type, normalize_extension
from catalog.storage.protocol import UploadCapabilityIssuer
from catalog.utils.logger import get_logger

logger = get_logger("catalog.orchestrator")

MIN_SLOTS = 1
MAX_SLOTS = 4
DEFAULT_DRAFT_NAME = "Draft"
UPLOAD_EXPIRY = timedelta(minutes=15)


def requested_slot_count(request: CreateDraftRequest) -> int:
    """files[] wins when non-empty; otherwise the legacy count. Raises when neither is positive."""
    files = request.files or []
    requested = len(files) if files else (request.count or 0)
    if requested <= 0:
        raise ValidationError("Provide files[] or count > 0.")
    return requested


def clamp_slots(requested: int) -> int:
    return max(MIN_SLOTS, min(MAX_SLOTS, requested))


def _clean_text(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value.strip()


class DraftOrchestrator:
    """Answers "start a new draft with N image slots"."""

    def __init__(
        self,
        catalog: ItemCatalog,
        issuer: UploadCapabilityIssuer,
        upload_expiry: timedelta = UPLOAD_EXPIRY,
    ):
        self._catalog = catalog
        self._issuer = issuer
        self._upload_expiry = upload_expiry

    def create_draft(self, request: CreateDraftRequest) -> DraftCreated:
        start = perf_counter()
        requested = requested_slot_count(request)
        count = clamp_slots(requested)
        if count != requested:
            logger.info("drafts.create.slots_clamped", requested=requested, granted=count)

        public_id = uuid.uuid4().hex
        sku = f"DRAFT-{public_id}"
        name = _clean_text(request.title_hint) or DEFAULT_DRAFT_NAME
        description = _clean_text(request.notes)

        item = self._catalog.create_draft(public_id=public_id, sku=sku, name=name, description=description)
        log = logger.bind(item_id=item.item_id, public_id=public_id)

        expires_on = datetime.now(timezone.utc) + self._upload_expiry
        files = request.files or []
        try:
            self._issuer.ensure_container()
            uploads = [
                self._upload_target(public_id, index, files[index - 1] if index <= len(files) else None, expires_on)
                for index in range(1, count + 1)
            ]
        except StorageCapabilityError:
            # Draft row is already committed and is left in place
            log.error("drafts.create.capability_failed", slots=count)
            raise

        log.info(
            "drafts.create.ok",
            slots=count,
            duration_ms=round((perf_counter() - start) * 1000, 1),
        )
        return DraftCreated(
            item_id=item.item_id,
            public_id=public_id,
            sku=sku,
            container=self._issuer.container_name,
            expires_on_utc=expires_on,
            uploads=uploads,
        )

    def _upload_target(
        self,
        public_id: str,
        index: int,
        spec: FileSpec | None,
        expires_on: datetime,
    ) -> UploadTarget:
        ext = normalize_extension(spec.file_name if spec else None)
        content_type = normalize_content_type(spec.content_type if spec else None, ext)
        storage_key = build_storage_key(public_id, index, ext)
        capability = self._issuer.issue_upload(storage_key, content_type, expires_on)
        return UploadTarget(
            index=index,
            storage_key=storage_key,
            upload_url=capability.url,
            method=capability.method,
            required_headers=capability.required_headers,
            content_type=content_type,
        )
