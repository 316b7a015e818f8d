"""ORM model for catalog items: InventoryItem and its lifecycle states."""

import enum
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Enum, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from catalog.db.base import Base, TimestampMixin

SKU_MAX_LENGTH = 64
NAME_MAX_LENGTH = 255


class Lifecycle(str, enum.Enum):
    """The two reachable states. Exposed externally as the is_draft/is_active pair."""

    DRAFT = "draft"
    PUBLISHED = "published"


class InventoryItem(Base, TimestampMixin):
    """One catalog entry. Never physically deleted; is_deleted hides it from reads."""

    __tablename__ = "inventory_items"
    __table_args__ = (
        CheckConstraint("unit_price_cents >= 0", name="ck_inventory_items_price_non_negative"),
        Index("ix_inventory_items_listing", "lifecycle", "is_deleted", "updated_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    public_id: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    sku: Mapped[str] = mapped_column(String(SKU_MAX_LENGTH), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    unit_price_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    quantity_on_hand: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    lifecycle: Mapped[Lifecycle] = mapped_column(
        Enum(
            Lifecycle,
            native_enum=False,
            length=16,
            values_callable=lambda members: [m.value for m in members],
        ),
        nullable=False,
        default=Lifecycle.DRAFT,
    )
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    @property
    def is_draft(self) -> bool:
        return self.lifecycle is Lifecycle.DRAFT

    @property
    def is_active(self) -> bool:
        return self.lifecycle is Lifecycle.PUBLISHED

    def __repr__(self) -> str:
        return f"<InventoryItem(id={self.id}, sku={self.sku!r}, lifecycle={self.lifecycle.value})>"
