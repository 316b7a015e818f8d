"""Item request/response models."""

from datetime import datetime
from typing import Optional

from pydantic import ConfigDict

from catalog.db.base import as_utc
from catalog.db.models import InventoryItem
from catalog.models.base import ApiModel


class ItemOut(ApiModel):
    """Item as seen by callers: lifecycle is translated back to the is_draft/is_active pair."""

    item_id: int
    public_id: str
    sku: str
    name: str
    description: Optional[str] = None
    unit_price_cents: int
    quantity_on_hand: int
    is_draft: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: InventoryItem) -> "ItemOut":
        return cls(
            item_id=row.id,
            public_id=row.public_id,
            sku=row.sku,
            name=row.name,
            description=row.description,
            unit_price_cents=row.unit_price_cents,
            quantity_on_hand=row.quantity_on_hand,
            is_draft=row.is_draft,
            is_active=row.is_active,
            created_at=as_utc(row.created_at),
            updated_at=as_utc(row.updated_at),
        )


class ItemUpdate(ApiModel):
    """Partial update body. Lifecycle flags are not accepted here."""

    name: Optional[str] = None
    description: Optional[str] = None
    unit_price_cents: Optional[int] = None
    quantity_on_hand: Optional[int] = None

    model_config = ConfigDict(extra="forbid")


class ItemPage(ApiModel):
    items: list[ItemOut]
    limit: int
    offset: int
