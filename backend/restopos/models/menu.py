"""Menu catalog model."""

from sqlalchemy import Column, Integer, String, Numeric, Text
from sqlalchemy.orm import validates

from restopos.db.base import Base
from restopos.models.validators import non_negative


class MenuItem(Base):
    """A dish or drink on the menu."""
    __tablename__ = "menu_items"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True, index=True)
    position = Column(Integer, nullable=False, default=0)  # display order
    name = Column(String(200), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    category = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)

    @validates('price')
    def _validate_price(self, key, value):
        return non_negative(key, value)
