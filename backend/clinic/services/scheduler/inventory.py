# backend/clinic/services/scheduler/inventory.py
"""
Inventory preconditions for plan allocation.

Required items come from therapy_required_items joined to stock_items;
available quantity is the total of `stock` rows with the same item name.
Active staff are the distinct users who have ever updated a stock row.
"""

from dataclasses import asdict, dataclass

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...exceptions import NoStaffAvailableError, StockInsufficientError
from ...models.generated import Stock, StockItems, TherapyRequiredItems


@dataclass(frozen=True)
class RequiredItem:
    name: str
    category: str | None
    required: int
    available: int | None

    @property
    def is_short(self) -> bool:
        return not self.available or self.available < self.required

    def summary(self) -> dict:
        data = asdict(self)
        data.pop("category")
        return data


def get_required_items(db: Session, therapy_id: int) -> list[RequiredItem]:
    stock_totals = (
        db.query(Stock.item_name, func.sum(Stock.quantity).label("available"))
        .group_by(Stock.item_name)
        .subquery()
    )

    rows = (
        db.query(
            StockItems.name,
            StockItems.category,
            TherapyRequiredItems.quantity,
            stock_totals.c.available,
        )
        .select_from(TherapyRequiredItems)
        .join(StockItems, TherapyRequiredItems.stock_item_id == StockItems.id)
        .outerjoin(stock_totals, stock_totals.c.item_name == StockItems.name)
        .filter(TherapyRequiredItems.therapy_id == therapy_id)
        .order_by(StockItems.name)
        .all()
    )

    return [
        RequiredItem(
            name=name,
            category=category,
            required=quantity,
            available=int(available) if available is not None else None,
        )
        for name, category, quantity, available in rows
    ]


def check_stock(items: list[RequiredItem]) -> None:
    """Raise StockInsufficientError listing every short item."""
    shortfalls = [
        {"name": item.name, "required": item.required, "available": item.available or 0}
        for item in items
        if item.is_short
    ]
    if shortfalls:
        raise StockInsufficientError(shortfalls)


def list_active_staff(db: Session) -> list[int]:
    """User ids of everyone who has updated stock, ascending."""
    rows = (
        db.query(Stock.updated_by)
        .filter(Stock.updated_by.isnot(None))
        .distinct()
        .order_by(Stock.updated_by)
        .all()
    )
    staff = [user_id for (user_id,) in rows]
    if not staff:
        raise NoStaffAvailableError()
    return staff
