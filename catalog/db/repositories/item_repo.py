"""Item repository: create drafts, read, partial update, soft delete, publish/unpublish."""

from typing import Any, Mapping, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog.db import Database
from catalog.db.base import utcnow
from catalog.db.models.item import NAME_MAX_LENGTH, InventoryItem, Lifecycle
from catalog.errors import ItemNotFound, ValidationError
from catalog.models.items import ItemOut
from catalog.utils.logger import get_logger

logger = get_logger("catalog.items")

UPDATABLE_FIELDS = frozenset({"name", "description", "unit_price_cents", "quantity_on_hand"})
MAX_PAGE_SIZE = 200


def require_positive_id(value: Any, label: str = "itemId") -> int:
    """Reject ids that cannot exist (bools, non-ints, zero, negatives)."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"Invalid {label}.")
    return value


def load_live_item(session: Session, item_id: int, for_update: bool = False) -> InventoryItem:
    """Return the non-deleted item or raise ItemNotFound. Optionally lock the row."""
    q = select(InventoryItem).where(InventoryItem.id == item_id, InventoryItem.is_deleted.is_(False))
    if for_update:
        q = q.with_for_update()
    row = session.scalars(q).first()
    if row is None:
        raise ItemNotFound(item_id)
    return row


def _clean_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("name must be a non-empty string.")
    name = value.strip()
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(f"name must be at most {NAME_MAX_LENGTH} characters.")
    return name


def _clean_int(field: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer.")
    return value


class ItemCatalog:
    """Owns InventoryItem rows. Soft-deleted rows are invisible to every method here."""

    def __init__(self, db: Database):
        self._db = db

    def create_draft(self, public_id: str, sku: str, name: str, description: Optional[str] = None) -> ItemOut:
        """Insert one item in Draft state and return it with its generated id."""
        with self._db.session() as session:
            row = InventoryItem(
                public_id=public_id,
                sku=sku,
                name=name,
                description=description,
                lifecycle=Lifecycle.DRAFT,
            )
            session.add(row)
            session.flush()
            out = ItemOut.from_row(row)
        logger.info("items.create_draft.ok", item_id=out.item_id, sku=sku)
        return out

    def get(self, item_id: int) -> ItemOut:
        require_positive_id(item_id)
        with self._db.session() as session:
            return ItemOut.from_row(load_live_item(session, item_id))

    def list_items(self, lifecycle: Lifecycle, limit: int = 50, offset: int = 0) -> list[ItemOut]:
        """Non-deleted items in one lifecycle state, most recently updated first."""
        if limit < 1 or limit > MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}.")
        if offset < 0:
            raise ValidationError("offset must be >= 0.")
        with self._db.session() as session:
            q = (
                select(InventoryItem)
                .where(InventoryItem.lifecycle == lifecycle)
                .where(InventoryItem.is_deleted.is_(False))
                .order_by(InventoryItem.updated_at.desc(), InventoryItem.id.desc())
                .limit(limit)
                .offset(offset)
            )
            return [ItemOut.from_row(r) for r in session.scalars(q).all()]

    def update(self, item_id: int, fields: Mapping[str, Any]) -> ItemOut:
        """Partial update of name/description/price/quantity. Lifecycle flags are rejected."""
        require_positive_id(item_id)
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields not updatable here: {', '.join(sorted(unknown))}.")
        if not fields:
            raise ValidationError("No fields to update.")

        changes: dict[str, Any] = {}
        if "name" in fields:
            changes["name"] = _clean_name(fields["name"])
        if "description" in fields:
            description = fields["description"]
            if description is not None and not isinstance(description, str):
                raise ValidationError("description must be a string or null.")
            changes["description"] = (description.strip() or None) if description is not None else None
        if "unit_price_cents" in fields:
            price = _clean_int("unit_price_cents", fields["unit_price_cents"])
            if price < 0:
                raise ValidationError("unit_price_cents must be >= 0.")
            changes["unit_price_cents"] = price
        if "quantity_on_hand" in fields:
            changes["quantity_on_hand"] = _clean_int("quantity_on_hand", fields["quantity_on_hand"])

        with self._db.session() as session:
            row = load_live_item(session, item_id, for_update=True)
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = utcnow()
            session.flush()
            out = ItemOut.from_row(row)
        logger.info("items.update.ok", item_id=item_id, fields=sorted(changes))
        return out

    def publish(self, item_id: int) -> ItemOut:
        return self._set_lifecycle(item_id, Lifecycle.PUBLISHED)

    def unpublish(self, item_id: int) -> ItemOut:
        return self._set_lifecycle(item_id, Lifecycle.DRAFT)

    def _set_lifecycle(self, item_id: int, target: Lifecycle) -> ItemOut:
        """Move to target state. Idempotent state-wise, but updated_at is always bumped."""
        require_positive_id(item_id)
        with self._db.session() as session:
            row = load_live_item(session, item_id, for_update=True)
            previous = row.lifecycle
            row.lifecycle = target
            row.updated_at = utcnow()
            session.flush()
            out = ItemOut.from_row(row)
        logger.info(
            "items.lifecycle.ok",
            item_id=item_id,
            previous=previous.value,
            current=target.value,
        )
        return out

    def soft_delete(self, item_id: int) -> None:
        """Mark the item deleted. Its images and embeddings stay but become unreachable."""
        require_positive_id(item_id)
        with self._db.session() as session:
            row = load_live_item(session, item_id, for_update=True)
            row.is_deleted = True
            row.updated_at = utcnow()
        logger.info("items.soft_delete.ok", item_id=item_id)
