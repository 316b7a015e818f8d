"""ORM model for item images (references into the object store, not bytes)."""

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from catalog.db.base import Base, CreatedAtMixin

STORAGE_KEY_MAX_LENGTH = 1024


class ItemImage(Base, CreatedAtMixin):
    """One attached picture, owned by exactly one InventoryItem."""

    __tablename__ = "item_images"
    __table_args__ = (Index("ix_item_images_item_sort", "item_id", "sort_order"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("inventory_items.id"), nullable=False)
    storage_key: Mapped[str] = mapped_column(String(STORAGE_KEY_MAX_LENGTH), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    def __repr__(self) -> str:
        return f"<ItemImage(id={self.id}, item_id={self.item_id}, primary={self.is_primary})>"
