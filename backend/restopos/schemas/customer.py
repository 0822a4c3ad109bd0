"""Customer schemas."""

from typing import Optional

from pydantic import BaseModel, Field


class Customer(BaseModel):
    id: str
    name: str = Field(..., min_length=1, max_length=200)
    email: str = ""
    phone: str = ""
    avatar: Optional[str] = None
    loyalty_points: int = Field(default=0, ge=0)

    model_config = {"from_attributes": True}


class CustomerCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = ""
    phone: str = ""
    avatar: Optional[str] = None


class CustomerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[str] = None
    phone: Optional[str] = None
    avatar: Optional[str] = None
