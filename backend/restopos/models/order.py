"""Order model.

Line items are stored as a JSON snapshot of the menu item taken when the
line was added, so later menu edits never change a placed order.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Boolean, JSON
from sqlalchemy.orm import validates

from restopos.db.base import Base, VersionMixin
from restopos.models.validators import non_negative, positive, percentage, validate_list


class Order(Base, VersionMixin):
    """An active or archived customer order."""
    __tablename__ = "orders"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True, index=True)
    position = Column(Integer, nullable=False, default=0)
    is_archived = Column(Boolean, nullable=False, default=False, index=True)

    table_number = Column(Integer, nullable=False)
    items = Column(JSON, nullable=False, default=list)
    status = Column(String(20), nullable=False, default="received")  # received, preparing, ready, served, archived

    # Monetary fields are stored for reporting; the domain layer recomputes them on load
    subtotal = Column(Numeric(12, 4), nullable=False, default=0)
    discount = Column(Numeric(7, 4), nullable=False, default=0)
    total = Column(Numeric(12, 4), nullable=False, default=0)

    customer_id = Column(String(64), nullable=True, index=True)
    customer_name = Column(String(200), nullable=True)
    points_earned = Column(Integer, nullable=False, default=0)
    points_redeemed = Column(Integer, nullable=False, default=0)
    redeemed_value = Column(Numeric(12, 4), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    @validates('table_number')
    def _validate_table_number(self, key, value):
        return positive(key, value)

    @validates('subtotal', 'total', 'redeemed_value', 'points_earned', 'points_redeemed')
    def _validate_amounts(self, key, value):
        return non_negative(key, value)

    @validates('discount')
    def _validate_discount(self, key, value):
        return percentage(key, value)

    @validates('items')
    def _validate_items(self, key, value):
        return validate_list(key, value)
