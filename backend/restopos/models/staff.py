"""Staff management models."""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, Numeric, Text
from sqlalchemy.orm import validates

from restopos.db.base import Base
from restopos.models.validators import non_negative


class StaffMember(Base):
    """An employee on the roster."""
    __tablename__ = "staff_members"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String(200), nullable=False)
    role = Column(String(20), nullable=False)  # Manager, Chef, Waiter, Busboy
    email = Column(String(255), nullable=False, default="")
    phone = Column(String(50), nullable=False, default="")
    shift = Column(String(20), nullable=False)  # Morning, Afternoon, Night
    avatar = Column(String(500), nullable=True)
    salary = Column(Numeric(12, 2), nullable=True)
    carry_forward_balance = Column(Numeric(12, 2), nullable=False, default=0)

    @validates('salary')
    def _validate_salary(self, key, value):
        return non_negative(key, value)


class StaffTransaction(Base):
    """A payment or advance made to a staff member."""
    __tablename__ = "staff_transactions"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True, index=True)
    position = Column(Integer, nullable=False, default=0)
    staff_id = Column(String(64), nullable=False, index=True)
    date = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String(20), nullable=False)  # Advance, Daily Wage, Bonus, Salary
    payment_mode = Column(String(20), nullable=False, default="Cash")  # Cash, Online
    notes = Column(Text, nullable=True)

    @validates('amount')
    def _validate_amount(self, key, value):
        return non_negative(key, value)
