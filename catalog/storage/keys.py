"""Storage key and content-type rules for draft upload slots."""

import uuid
from pathlib import PurePosixPath
from typing import Optional

ALLOWED_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp", ".heic")
DEFAULT_EXTENSION = ".jpg"

_CONTENT_TYPES = {
    ".png": "image/png",
    ".webp": "image/webp",
    ".heic": "image/heic",
}
DEFAULT_CONTENT_TYPE = "image/jpeg"


def normalize_extension(file_name: Optional[str]) -> str:
    """Lower-cased extension of file_name if whitelisted, else .jpg."""
    if not file_name or not file_name.strip():
        return DEFAULT_EXTENSION
    ext = PurePosixPath(file_name.strip().replace("\\", "/")).suffix.lower()
    return ext if ext in ALLOWED_EXTENSIONS else DEFAULT_EXTENSION


def normalize_content_type(content_type: Optional[str], ext: str) -> str:
    """Declared content type if given, else inferred from the extension."""
    if content_type and content_type.strip():
        return content_type.strip()
    return _CONTENT_TYPES.get(ext, DEFAULT_CONTENT_TYPE)


def build_storage_key(public_id: str, index: int, ext: str) -> str:
    """images/<publicId>/<NN>-<random><ext>, index is 1-based."""
    return f"images/{public_id}/{index:02d}-{uuid.uuid4().hex}{ext}"
