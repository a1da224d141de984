# app/schemas.py
import math
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import date, datetime, timezone


class CamelModel(BaseModel):
    # camelCase on the wire, snake_case in Python
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessedListing(CamelModel):
    """Canonical, display-ready listing produced by the normalizer."""
    id: str
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    price: float = 0
    bedrooms: float = 0
    bathrooms: float = 0
    square_feet: float = 0
    property_type: str = ""
    photo_urls: List[str] = Field(default_factory=list)
    status: str = "ACTIVE"
    created_at: str = ""
    latitude: float = 0
    longitude: float = 0


class RangeFilter(CamelModel):
    """Date window (required) plus optional, independent price bounds."""
    start_date: datetime
    end_date: datetime
    min_price: Optional[float] = None
    max_price: Optional[float] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def parse_timestamp(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if not value:
                raise ValueError("date is required")
            return datetime.fromisoformat(value)
        if isinstance(value, date) and not isinstance(value, datetime):
            return datetime(value.year, value.month, value.day)
        return value

    @field_validator("start_date", "end_date")
    @classmethod
    def as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def blank_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("min_price", "max_price")
    @classmethod
    def finite_price(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not math.isfinite(value):
            raise ValueError("price bound must be a finite number")
        return value


class ListingBase(CamelModel):
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    price: float = 0
    bedrooms: float = 0
    bathrooms: float = 0
    square_feet: float = 0
    property_type: str = ""
    photo_urls: List[str] = Field(default_factory=list)
    status: str = "ACTIVE"
    latitude: float = 0
    longitude: float = 0
    description: Optional[str] = None

class ListingCreate(ListingBase):
    id: Optional[str] = Field(None, max_length=255)

class ListingUpdate(CamelModel):
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    price: Optional[float] = None
    bedrooms: Optional[float] = None
    bathrooms: Optional[float] = None
    square_feet: Optional[float] = None
    property_type: Optional[str] = None
    photo_urls: Optional[List[str]] = None
    status: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    description: Optional[str] = None

class ListingOut(ListingBase):
    model_config = ConfigDict(from_attributes=True)
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class ListingCount(BaseModel):
    count: int
