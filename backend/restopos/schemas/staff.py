"""Staff management schemas - roster members, payments and payroll summary."""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class StaffRole(str, Enum):
    MANAGER = "Manager"
    CHEF = "Chef"
    WAITER = "Waiter"
    BUSBOY = "Busboy"


class Shift(str, Enum):
    MORNING = "Morning"
    AFTERNOON = "Afternoon"
    NIGHT = "Night"


class TransactionType(str, Enum):
    ADVANCE = "Advance"
    DAILY_WAGE = "Daily Wage"
    BONUS = "Bonus"
    SALARY = "Salary"


class PaymentMode(str, Enum):
    CASH = "Cash"
    ONLINE = "Online"


# ============== Staff Schemas ==============

class StaffMember(BaseModel):
    id: str
    name: str = Field(..., min_length=1, max_length=200)
    role: StaffRole
    email: str = ""
    phone: str = ""
    shift: Shift
    avatar: Optional[str] = None
    salary: Optional[Decimal] = Field(default=None, ge=0)
    carry_forward_balance: Decimal = Decimal("0")

    model_config = {"from_attributes": True}


class StaffMemberCreate(BaseModel):
    """Schema for adding a staff member."""
    name: str = Field(..., min_length=1, max_length=200)
    role: StaffRole
    email: str = ""
    phone: str = ""
    shift: Shift
    avatar: Optional[str] = None
    salary: Optional[Decimal] = Field(default=None, ge=0)


class StaffMemberUpdate(BaseModel):
    """Schema for updating a staff member."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    role: Optional[StaffRole] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    shift: Optional[Shift] = None
    avatar: Optional[str] = None
    salary: Optional[Decimal] = Field(default=None, ge=0)


# ============== Transaction Schemas ==============

class StaffTransaction(BaseModel):
    id: str
    staff_id: str
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    amount: Decimal = Field(..., ge=0)
    type: TransactionType
    payment_mode: PaymentMode = PaymentMode.CASH
    notes: Optional[str] = None

    model_config = {"from_attributes": True}


class StaffTransactionCreate(BaseModel):
    amount: Decimal = Field(..., ge=0)
    type: TransactionType
    payment_mode: PaymentMode = PaymentMode.CASH
    date: Optional[datetime] = None
    notes: Optional[str] = None


class SalarySummary(BaseModel):
    """Payroll position of one staff member for a month."""
    staff_id: str
    year: int
    month: int
    gross_salary: Decimal
    carry_forward: Decimal
    bonuses: Decimal
    total_deductions: Decimal
    salaries_paid: Decimal
    net_payable: Decimal
