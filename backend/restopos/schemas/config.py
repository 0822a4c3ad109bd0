"""Runtime application configuration managed from the super-admin panel."""

from decimal import Decimal
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field

DEFAULT_ARCHIVE_FILE_LIMIT = 5 * 1024 * 1024


class Theme(str, Enum):
    DEFAULT = "default"
    OCEAN = "ocean"
    SUNSET = "sunset"
    MINT = "mint"
    PLUM = "plum"


class Font(str, Enum):
    PT_SANS = "pt-sans"
    ROBOTO_SLAB = "roboto-slab"


class LoyaltyConfig(BaseModel):
    points_per_currency_unit: Decimal = Field(default=Decimal("0.1"), ge=0)
    currency_unit_per_point: Decimal = Field(default=Decimal("1.0"), ge=0)


class EnabledAdminSections(BaseModel):
    dashboard: bool = True
    menu: bool = True
    staff: bool = True
    customers: bool = True
    settings: bool = True


class AppConfig(BaseModel):
    """Restaurant-wide settings with a default for every field."""

    title: str = "Restaurant"
    logo: Optional[str] = None
    theme: Theme = Theme.DEFAULT
    font: Font = Font.PT_SANS
    data_source: Literal["sql", "csv", "memory"] = "sql"
    enabled_admin_sections: EnabledAdminSections = Field(default_factory=EnabledAdminSections)
    gst_number: Optional[str] = None
    currency: str = Field(default="₹", min_length=1)
    max_discount: Decimal = Field(default=Decimal("100"), ge=0, le=100)
    loyalty: LoyaltyConfig = Field(default_factory=LoyaltyConfig)
    archive_file_limit: int = Field(default=DEFAULT_ARCHIVE_FILE_LIMIT, ge=1)


class LoyaltyConfigUpdate(BaseModel):
    points_per_currency_unit: Optional[Decimal] = Field(default=None, ge=0)
    currency_unit_per_point: Optional[Decimal] = Field(default=None, ge=0)


class EnabledAdminSectionsUpdate(BaseModel):
    dashboard: Optional[bool] = None
    menu: Optional[bool] = None
    staff: Optional[bool] = None
    customers: Optional[bool] = None
    settings: Optional[bool] = None


class AppConfigUpdate(BaseModel):
    """Partial config update; omitted fields keep their current value."""

    title: Optional[str] = None
    logo: Optional[str] = None
    theme: Optional[Theme] = None
    font: Optional[Font] = None
    data_source: Optional[Literal["sql", "csv", "memory"]] = None
    enabled_admin_sections: Optional[EnabledAdminSectionsUpdate] = None
    gst_number: Optional[str] = None
    currency: Optional[str] = Field(default=None, min_length=1)
    max_discount: Optional[Decimal] = Field(default=None, ge=0, le=100)
    loyalty: Optional[LoyaltyConfigUpdate] = None
    archive_file_limit: Optional[int] = Field(default=None, ge=1)
