"""Order lifecycle: status progression, discounts, redemption and archiving.

The manager owns two collections: the active orders (newest first) and the
append-only archive. Orders are replaced, never edited in place, and every
accepted change bumps the order's ``version``. Callers that pass
``expected_version`` get a ``VersionConflictError`` instead of silently
overwriting a newer edit.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from restopos.core.exceptions import NotFoundError, ValidationError, VersionConflictError
from restopos.schemas.customer import Customer
from restopos.schemas.order import ACTIVE_STATUSES, Order, OrderStatus
from restopos.services import loyalty_service
from restopos.services.pricing import HUNDRED, clamp_discount

logger = logging.getLogger(__name__)


class OrderLifecycleManager:
    """Applies lifecycle operations to a set of active and archived orders."""

    def __init__(
        self,
        active: Optional[List[Order]] = None,
        archived: Optional[List[Order]] = None,
        max_discount=HUNDRED,
    ):
        self._active: List[Order] = list(active or [])
        self._archived: List[Order] = list(archived or [])
        self.max_discount = max_discount

    @property
    def active(self) -> List[Order]:
        return list(self._active)

    @property
    def archived(self) -> List[Order]:
        return list(self._archived)

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def get(self, order_id: str) -> Order:
        """Return an active or archived order by id."""
        for order in self._active:
            if order.id == order_id:
                return order
        for order in self._archived:
            if order.id == order_id:
                return order
        logger.warning(f"Order {order_id} not found")
        raise NotFoundError("Order", order_id)

    def _locate_active(self, order_id: str, expected_version: Optional[int]) -> int:
        for index, order in enumerate(self._active):
            if order.id == order_id:
                if expected_version is not None and expected_version != order.version:
                    raise VersionConflictError(order_id, expected_version, order.version)
                return index
        if any(order.id == order_id for order in self._archived):
            raise ValidationError(f"Order {order_id} is archived and cannot be changed")
        logger.warning(f"Order {order_id} not found")
        raise NotFoundError("Order", order_id)

    def _replace(self, index: int, **changes) -> Order:
        current = self._active[index]
        data = current.model_dump()
        data.update(changes)
        data["version"] = current.version + 1
        updated = Order.model_validate(data)
        self._active[index] = updated
        return updated

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def add(self, order: Order) -> Order:
        if order.status not in ACTIVE_STATUSES:
            raise ValidationError(f"Cannot add an order with status {order.status.value}")
        if any(existing.id == order.id for existing in self._active + self._archived):
            raise ValidationError(f"Order {order.id} already exists")
        self._active.insert(0, order)
        return order

    def advance(self, order_id: str, expected_version: Optional[int] = None) -> Order:
        """Move to the next status; a served order stays served."""
        index = self._locate_active(order_id, expected_version)
        order = self._active[index]
        if order.next_status is None:
            logger.debug(f"Order {order_id} is {order.status.value}; nothing to advance")
            return order
        updated = self._replace(index, status=order.next_status)
        logger.info(f"Order {order_id}: {order.status.value} -> {updated.status.value}")
        return updated

    def apply_discount(
        self, order_id: str, percentage, expected_version: Optional[int] = None
    ) -> Order:
        """Set the discount percentage, replacing any earlier one.

        The value is clamped to [0, max_discount] and the total is always
        recomputed from the undiscounted subtotal.
        """
        index = self._locate_active(order_id, expected_version)
        discount = clamp_discount(percentage, self.max_discount)
        updated = self._replace(index, discount=discount)
        logger.info(f"Order {order_id}: discount {discount}% applied, total {updated.total}")
        return updated

    def archive(self, order_id: str, expected_version: Optional[int] = None) -> Order:
        """Move an order into the archive.

        Only the status changes; the archived record keeps every other field,
        including its version, exactly as it was.
        """
        index = self._locate_active(order_id, expected_version)
        order = self._active.pop(index)
        archived = order.model_copy(update={"status": OrderStatus.ARCHIVED})
        self._archived.append(archived)
        logger.info(f"Order {order_id} archived")
        return archived

    def cancel(self, order_id: str, expected_version: Optional[int] = None) -> Order:
        """Drop an order that the kitchen has not started on."""
        index = self._locate_active(order_id, expected_version)
        order = self._active[index]
        if order.status != OrderStatus.RECEIVED:
            raise ValidationError(
                f"Only received orders can be cancelled; {order_id} is {order.status.value}"
            )
        del self._active[index]
        logger.info(f"Order {order_id} cancelled")
        return order

    def redeem_points(
        self,
        order_id: str,
        customer: Customer,
        points: int,
        currency_unit_per_point=Decimal("1.0"),
        expected_version: Optional[int] = None,
    ) -> Tuple[Order, Customer]:
        """Spend customer points against an order's total."""
        index = self._locate_active(order_id, expected_version)
        order = self._active[index]
        if order.customer_id is not None and order.customer_id != customer.id:
            raise ValidationError(f"Order {order_id} belongs to another customer")
        if order.points_redeemed > 0:
            raise ValidationError(f"Order {order_id} already has a redemption; revert it first")

        customer, value, redeemed = loyalty_service.redeem_points(
            customer, points, currency_unit_per_point
        )
        if redeemed == 0:
            return order, customer
        updated = self._replace(
            index,
            customer_id=customer.id,
            customer_name=customer.name,
            points_redeemed=redeemed,
            redeemed_value=value,
        )
        return updated, customer

    def revert_redemption(
        self, order_id: str, customer: Customer, expected_version: Optional[int] = None
    ) -> Tuple[Order, Customer]:
        """Undo an order's redemption, returning the points to the customer."""
        index = self._locate_active(order_id, expected_version)
        order = self._active[index]
        if order.points_redeemed == 0:
            return order, customer
        if order.customer_id != customer.id:
            raise ValidationError(f"Order {order_id} belongs to another customer")

        customer = loyalty_service.revert_redemption(customer, order.points_redeemed)
        updated = self._replace(index, points_redeemed=0, redeemed_value=Decimal("0"))
        logger.info(f"Order {order_id}: returned {order.points_redeemed} points to {customer.id}")
        return updated, customer

    def grouped_by_status(self) -> Dict[OrderStatus, List[Order]]:
        """Active orders partitioned by status, insertion order preserved."""
        groups: Dict[OrderStatus, List[Order]] = {status: [] for status in ACTIVE_STATUSES}
        for order in self._active:
            groups[order.status].append(order)
        return groups
