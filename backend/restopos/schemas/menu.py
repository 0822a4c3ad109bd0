"""Menu catalog schemas."""

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MenuCategory(str, Enum):
    APPETIZERS = "Appetizers"
    MAIN_COURSES = "Main Courses"
    DESSERTS = "Desserts"
    BEVERAGES = "Beverages"
    BREADS = "Breads"
    RICE_AND_BIRYANI = "Rice & Biryani"
    INDIAN_CHINESE = "Indian Chinese"


class MenuItem(BaseModel):
    """A menu entry. Orders embed a copy of this taken when the line is added."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0)
    category: MenuCategory
    description: Optional[str] = None
    image: Optional[str] = None

    model_config = {"from_attributes": True}


class MenuItemCreate(BaseModel):
    """Schema for adding a menu item. The id is generated when omitted."""

    id: Optional[str] = None
    name: str = Field(..., min_length=1, max_length=200)
    price: Decimal = Field(..., ge=0)
    category: MenuCategory
    description: Optional[str] = None
    image: Optional[str] = None


class MenuItemUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    price: Optional[Decimal] = Field(default=None, ge=0)
    category: Optional[MenuCategory] = None
    description: Optional[str] = None
    image: Optional[str] = None
