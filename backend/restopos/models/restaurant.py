"""Dining room models."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import validates

from restopos.db.base import Base
from restopos.models.validators import positive


class Table(Base):
    """Restaurant table for seating."""
    __tablename__ = "tables"

    id = Column(Integer, primary_key=True, autoincrement=False)
    capacity = Column(Integer, nullable=False, default=4)
    status = Column(String(20), nullable=False, default="available")  # available, occupied, reserved
    order_id = Column(String(64), nullable=True)

    @validates('id', 'capacity')
    def _validate_positive(self, key, value):
        return positive(key, value)
