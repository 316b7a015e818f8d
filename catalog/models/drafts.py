"""Create-draft request/response models."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from catalog.models.base import ApiModel


class FileSpec(ApiModel):
    """Describes one image the client intends to upload."""

    file_name: Optional[str] = None  # e.g. "IMG_1234.jpg"
    content_type: Optional[str] = None  # e.g. "image/jpeg"


class CreateDraftRequest(ApiModel):
    title_hint: Optional[str] = None
    notes: Optional[str] = None
    count: Optional[int] = None  # legacy alternative to files[]
    files: Optional[list[FileSpec]] = None


class UploadTarget(ApiModel):
    index: int  # 1-based slot
    storage_key: str
    upload_url: str  # capability URI
    method: str = "PUT"
    required_headers: dict[str, str] = Field(default_factory=dict)
    content_type: str


class DraftCreated(ApiModel):
    item_id: int
    public_id: str
    sku: str
    container: str
    expires_on_utc: datetime
    uploads: list[UploadTarget]
