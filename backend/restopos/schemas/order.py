"""Order schemas.

``Order`` is the domain record passed between the lifecycle manager, the
repositories and the API. Its ``subtotal`` and ``total`` are derived from the
items, discount and redemption every time an instance is validated, so they
can never drift from the lines they summarize.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from restopos.schemas.menu import MenuItem
from restopos.services.pricing import compute_subtotal, compute_total, line_total


class OrderStatus(str, Enum):
    RECEIVED = "received"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    ARCHIVED = "archived"


ACTIVE_STATUSES = (
    OrderStatus.RECEIVED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.SERVED,
)

NEXT_STATUS: Dict[OrderStatus, OrderStatus] = {
    OrderStatus.RECEIVED: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.SERVED,
}


class OrderItem(BaseModel):
    menu_item: MenuItem
    quantity: int = Field(..., ge=1)

    @property
    def line_total(self) -> Decimal:
        return line_total(self.menu_item.price, self.quantity)


class Order(BaseModel):
    """A placed order."""

    id: str
    table_number: int = Field(..., ge=1)
    items: List[OrderItem] = []
    status: OrderStatus = OrderStatus.RECEIVED
    subtotal: Decimal = Decimal("0")
    discount: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    total: Decimal = Decimal("0")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    points_earned: int = Field(default=0, ge=0)
    points_redeemed: int = Field(default=0, ge=0)
    redeemed_value: Decimal = Field(default=Decimal("0"), ge=0)
    version: int = Field(default=1, ge=1)

    @model_validator(mode="after")
    def derive_totals(self):
        self.subtotal = compute_subtotal(
            (item.menu_item.price, item.quantity) for item in self.items
        )
        self.total = compute_total(self.subtotal, self.discount, self.redeemed_value)
        return self

    @property
    def next_status(self) -> Optional[OrderStatus]:
        return NEXT_STATUS.get(self.status)


# ============== Request Schemas ==============

class OrderLineCreate(BaseModel):
    menu_item_id: str
    quantity: int = Field(default=1, ge=1)


class OrderCreate(BaseModel):
    """Submit a new order from a list of menu item ids."""

    table_number: Optional[int] = None
    items: List[OrderLineCreate] = []
    customer_id: Optional[str] = None
    points_to_redeem: int = Field(default=0, ge=0)


class VersionedAction(BaseModel):
    """Body for mutations that may be guarded by the caller's last seen version."""

    expected_version: Optional[int] = None


class DiscountRequest(VersionedAction):
    percentage: Decimal


class RedeemRequest(VersionedAction):
    points: int = Field(..., ge=0)
    customer_id: Optional[str] = None


# ============== Response Schemas ==============

class KanbanBoard(BaseModel):
    """Active orders partitioned by status, in insertion order."""

    received: List[Order] = []
    preparing: List[Order] = []
    ready: List[Order] = []
    served: List[Order] = []


class ArchiveFileSize(BaseModel):
    size: int
    limit: int
