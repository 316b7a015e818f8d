"""Image repository: attach uploaded keys, list, atomic primary reassignment, diagnostics.

The single-primary rule is enforced by set_primary, not by attach. attach stores
whatever the caller sends, so a batch that flags several images as primary stays
that way until set_primary is called for the item.
"""

from typing import Sequence

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from catalog.db import Database
from catalog.db.models.image import STORAGE_KEY_MAX_LENGTH, ItemImage
from catalog.db.models.item import InventoryItem
from catalog.db.repositories.item_repo import load_live_item, require_positive_id
from catalog.errors import ItemNotFound, ValidationError
from catalog.models.images import (
    ImageEntry,
    ImageOut,
    PrimaryCount,
    PrimaryImageSet,
    SetPrimaryNotFound,
    SetPrimaryResult,
)
from catalog.utils.logger import get_logger

logger = get_logger("catalog.images")


def _ordered_images(session: Session, item_id: int) -> list[ImageOut]:
    q = (
        select(ItemImage)
        .where(ItemImage.item_id == item_id)
        .order_by(ItemImage.sort_order.asc(), ItemImage.id.asc())
    )
    return [ImageOut.from_row(r) for r in session.scalars(q).all()]


class ImageGallery:
    """Owns ItemImage rows scoped to a live InventoryItem."""

    def __init__(self, db: Database):
        self._db = db

    def attach(self, item_id: int, entries: Sequence[ImageEntry]) -> list[ImageOut]:
        """Insert one row per entry and return the item's full ordered image list.

        No check is made that the referenced bytes exist in storage.
        """
        require_positive_id(item_id)
        if not entries:
            raise ValidationError("Provide at least one image.")
        for entry in entries:
            key = (entry.storage_key or "").strip()
            if not key:
                raise ValidationError("storageKey must be non-empty.")
            if len(key) > STORAGE_KEY_MAX_LENGTH:
                raise ValidationError(f"storageKey must be at most {STORAGE_KEY_MAX_LENGTH} characters.")

        with self._db.session() as session:
            load_live_item(session, item_id, for_update=True)
            for entry in entries:
                session.add(
                    ItemImage(
                        item_id=item_id,
                        storage_key=entry.storage_key.strip(),
                        is_primary=entry.is_primary,
                        sort_order=entry.sort_order,
                    )
                )
            session.flush()
            images = _ordered_images(session, item_id)

        primaries = sum(1 for e in entries if e.is_primary)
        if primaries > 1:
            logger.warning("images.attach.multiple_primary", item_id=item_id, primary_count=primaries)
        logger.info("images.attach.ok", item_id=item_id, attached=len(entries))
        return images

    def list_images(self, item_id: int) -> list[ImageOut]:
        """Images ordered by sort_order, then id."""
        require_positive_id(item_id)
        with self._db.session() as session:
            load_live_item(session, item_id)
            return _ordered_images(session, item_id)

    def set_primary(self, item_id: int, image_id: int) -> SetPrimaryResult:
        """Make image_id the only primary image of item_id, atomically.

        The item row is locked first, so concurrent calls for one item run one after
        another and each commits exactly one primary. A missing item or a foreign
        image aborts the transaction with nothing changed.
        """
        require_positive_id(item_id)
        require_positive_id(image_id, label="imageId")
        with self._db.session() as session:
            try:
                load_live_item(session, item_id, for_update=True)
            except ItemNotFound:
                session.rollback()
                logger.info("images.set_primary.item_not_found", item_id=item_id, image_id=image_id)
                return SetPrimaryNotFound(missing="item")

            owned = session.scalars(
                select(ItemImage.id).where(ItemImage.id == image_id, ItemImage.item_id == item_id)
            ).first()
            if owned is None:
                session.rollback()
                logger.info("images.set_primary.image_not_found", item_id=item_id, image_id=image_id)
                return SetPrimaryNotFound(missing="image")

            session.execute(
                update(ItemImage).where(ItemImage.item_id == item_id).values(is_primary=False)
            )
            session.execute(
                update(ItemImage)
                .where(ItemImage.id == image_id, ItemImage.item_id == item_id)
                .values(is_primary=True)
            )
            session.flush()
            images = _ordered_images(session, item_id)

        logger.info("images.set_primary.ok", item_id=item_id, image_id=image_id)
        return PrimaryImageSet(item_id=item_id, primary_image_id=image_id, images=images)

    def find_multiple_primaries(self) -> list[PrimaryCount]:
        """Diagnostics: non-deleted items that currently hold more than one primary image."""
        with self._db.session() as session:
            q = (
                select(ItemImage.item_id, func.count(ItemImage.id))
                .join(InventoryItem, InventoryItem.id == ItemImage.item_id)
                .where(ItemImage.is_primary.is_(True))
                .where(InventoryItem.is_deleted.is_(False))
                .group_by(ItemImage.item_id)
                .having(func.count(ItemImage.id) > 1)
                .order_by(ItemImage.item_id)
            )
            return [PrimaryCount(item_id=item_id, primary_count=count) for item_id, count in session.execute(q).all()]
