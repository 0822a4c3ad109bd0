"""Table schemas."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class TableStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"


STATUS_CYCLE = {
    TableStatus.AVAILABLE: TableStatus.OCCUPIED,
    TableStatus.OCCUPIED: TableStatus.RESERVED,
    TableStatus.RESERVED: TableStatus.AVAILABLE,
}


class Table(BaseModel):
    id: int = Field(..., ge=1)
    status: TableStatus = TableStatus.AVAILABLE
    capacity: int = Field(default=4, ge=1)
    order_id: Optional[str] = None

    model_config = {"from_attributes": True}

    @model_validator(mode="after")
    def clear_order_when_available(self):
        """An available table never holds an order."""
        if self.status == TableStatus.AVAILABLE:
            self.order_id = None
        return self


class TableCreate(BaseModel):
    capacity: int = Field(default=4, ge=1)


class TableUpdate(BaseModel):
    status: Optional[TableStatus] = None
    capacity: Optional[int] = Field(default=None, ge=1)
