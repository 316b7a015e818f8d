"""Image routes: list, attach uploaded keys, set primary."""

from fastapi import APIRouter, Depends

from catalog.api.deps import get_gallery
from catalog.db.repositories import ImageGallery
from catalog.errors import ImageNotFound, ItemNotFound
from catalog.models import AttachImagesRequest, ImageList, PrimaryImageSet, SetPrimaryNotFound

router = APIRouter(prefix="/api/items", tags=["images"])


@router.get("/{item_id}/images")
async def list_images(item_id: int, gallery: ImageGallery = Depends(get_gallery)) -> ImageList:
    return ImageList(item_id=item_id, images=gallery.list_images(item_id))


@router.post("/{item_id}/images", status_code=201)
async def attach_images(
    item_id: int,
    body: AttachImagesRequest,
    gallery: ImageGallery = Depends(get_gallery),
) -> ImageList:
    """Record storage keys the client has finished uploading."""
    return ImageList(item_id=item_id, images=gallery.attach(item_id, body.images))


@router.post("/{item_id}/images/{image_id}/set-primary")
async def set_primary_image(
    item_id: int,
    image_id: int,
    gallery: ImageGallery = Depends(get_gallery),
) -> PrimaryImageSet:
    result = gallery.set_primary(item_id, image_id)
    if isinstance(result, SetPrimaryNotFound):
        if result.missing == "item":
            raise ItemNotFound(item_id)
        raise ImageNotFound(image_id)
    return result
