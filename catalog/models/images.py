"""Image request/response models, including the tagged set-primary result."""

from datetime import datetime
from typing import Literal, Union

from pydantic import Field

from catalog.db.base import as_utc
from catalog.db.models import ItemImage
from catalog.models.base import ApiModel


class ImageEntry(ApiModel):
    """One storage key the client has finished uploading."""

    storage_key: str
    is_primary: bool = False
    sort_order: int = 1


class AttachImagesRequest(ApiModel):
    images: list[ImageEntry] = Field(default_factory=list)


class ImageOut(ApiModel):
    image_id: int
    item_id: int
    storage_key: str
    is_primary: bool
    sort_order: int
    created_at: datetime

    @classmethod
    def from_row(cls, row: ItemImage) -> "ImageOut":
        return cls(
            image_id=row.id,
            item_id=row.item_id,
            storage_key=row.storage_key,
            is_primary=row.is_primary,
            sort_order=row.sort_order,
            created_at=as_utc(row.created_at),
        )


class ImageList(ApiModel):
    item_id: int
    images: list[ImageOut]


class PrimaryImageSet(ApiModel):
    """Success variant of set_primary."""

    item_id: int
    primary_image_id: int
    images: list[ImageOut]


class SetPrimaryNotFound(ApiModel):
    """Not-found variant of set_primary; says which lookup failed."""

    missing: Literal["item", "image"]


SetPrimaryResult = Union[PrimaryImageSet, SetPrimaryNotFound]


class PrimaryCount(ApiModel):
    item_id: int
    primary_count: int
