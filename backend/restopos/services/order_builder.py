"""Draft cart that turns into an order on submit."""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

from restopos.core.exceptions import ValidationError
from restopos.schemas.customer import Customer
from restopos.schemas.menu import MenuItem
from restopos.schemas.order import Order, OrderItem, OrderStatus
from restopos.services import loyalty_service
from restopos.services.ids import new_order_id
from restopos.services.pricing import compute_subtotal

logger = logging.getLogger(__name__)


class OrderBuilder:
    """Accumulates menu items into order lines.

    Lines keep insertion order. Each line holds a copy of the menu item as it
    was when first added.
    """

    def __init__(self, currency_unit_per_point=Decimal("1.0")):
        self._items: List[OrderItem] = []
        self.currency_unit_per_point = currency_unit_per_point
        self.customer: Optional[Customer] = None

    @property
    def items(self) -> List[OrderItem]:
        return list(self._items)

    def _find(self, item_id: str) -> Optional[int]:
        for index, line in enumerate(self._items):
            if line.menu_item.id == item_id:
                return index
        return None

    def add_item(self, menu_item: MenuItem) -> None:
        index = self._find(menu_item.id)
        if index is None:
            self._items.append(OrderItem(menu_item=menu_item.model_copy(), quantity=1))
        else:
            line = self._items[index]
            self._items[index] = line.model_copy(update={"quantity": line.quantity + 1})

    def update_quantity(self, item_id: str, quantity: int) -> None:
        """Set a line's quantity; anything below 1 removes the line."""
        index = self._find(item_id)
        if index is None:
            return
        if quantity < 1:
            del self._items[index]
        else:
            self._items[index] = self._items[index].model_copy(update={"quantity": quantity})

    def remove_item(self, item_id: str) -> None:
        self._items = [line for line in self._items if line.menu_item.id != item_id]

    def clear(self) -> None:
        self._items = []

    def compute_subtotal(self) -> Decimal:
        return compute_subtotal((line.menu_item.price, line.quantity) for line in self._items)

    def submit(
        self,
        table_number: Optional[int],
        customer: Optional[Customer] = None,
        points_to_redeem: int = 0,
    ) -> Order:
        """Emit a received order and empty the cart.

        When ``points_to_redeem`` is given for a customer, the redemption is
        applied to the new order and the customer with the reduced balance is
        left on ``self.customer`` for the caller to persist.
        """
        if not self._items:
            raise ValidationError("Cannot submit an order with no items")
        if table_number is None or table_number < 1:
            raise ValidationError("A table number is required to submit an order")

        points_redeemed = 0
        redeemed_value = Decimal("0")
        if customer is not None and points_to_redeem > 0:
            customer, redeemed_value, points_redeemed = loyalty_service.redeem_points(
                customer, points_to_redeem, self.currency_unit_per_point
            )
        self.customer = customer

        order = Order(
            id=new_order_id(),
            table_number=table_number,
            items=self.items,
            status=OrderStatus.RECEIVED,
            discount=Decimal("0"),
            created_at=datetime.now(timezone.utc),
            customer_id=customer.id if customer else None,
            customer_name=customer.name if customer else None,
            points_redeemed=points_redeemed,
            redeemed_value=redeemed_value,
        )
        logger.info(f"Order {order.id} submitted for table {table_number} ({len(order.items)} lines)")
        self.clear()
        return order
