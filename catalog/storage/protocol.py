"""Upload capability issuer protocol (object-store agnostic)."""

from datetime import datetime
from typing import Protocol

from pydantic import BaseModel, Field


class Capability(BaseModel):
    """A signed, expiring URL scoped to one storage key, plus what the client must send with it."""

    url: str
    method: str = "PUT"
    required_headers: dict[str, str] = Field(default_factory=dict)
    expires_on: datetime


class UploadCapabilityIssuer(Protocol):
    """Mints time-boxed access URLs for individual storage keys. No state is kept after issuance."""

    container_name: str

    def ensure_container(self) -> None:
        """Create the target container if it does not exist. Idempotent."""
        ...

    def issue_upload(self, storage_key: str, content_type: str, expires_on: datetime) -> Capability:
        """Create-or-overwrite write capability for one key. Raises StorageCapabilityError."""
        ...

    def issue_read(self, storage_key: str, expires_on: datetime) -> Capability:
        """Read-only capability for one key (used to hand images to the AI collaborator)."""
        ...
