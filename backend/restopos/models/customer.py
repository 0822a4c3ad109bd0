"""Customer model."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import validates

from restopos.db.base import Base
from restopos.models.validators import non_negative


class Customer(Base):
    """A guest known to the restaurant, with a loyalty balance."""
    __tablename__ = "customers"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")
    avatar = Column(String(500), nullable=True)
    loyalty_points = Column(Integer, nullable=False, default=0)

    @validates('loyalty_points')
    def _validate_points(self, key, value):
        return non_negative(key, value)
