# app/models.py
"""SQLAlchemy ORM models for persisted entities.

`RawListingData` and `RawPhotoData` hold vendor feed rows exactly as the
ingestion process wrote them. `Listing` holds canonical, display-ready
listings managed through the CRUD endpoints.
"""
import uuid
from sqlalchemy import Column, Integer, Text, Float, JSON, TIMESTAMP, func, Index
from sqlalchemy.dialects.postgresql import JSONB
from .db import Base

# JSONB on PostgreSQL, plain JSON elsewhere
Payload = JSON().with_variant(JSONB(), "postgresql")


class RawListingData(Base):
    __tablename__ = "raw_listing_data"
    id = Column(Text, primary_key=True)
    raw_data = Column(Payload)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())
    raw_photo_data_id = Column(Text, index=True)
    # relational fallback for feeds that leave PostalCode out of the payload
    postal_code = Column(Text)


class RawPhotoData(Base):
    __tablename__ = "raw_photo_data"
    # insertion order; photo rows of one group are read back in this order
    pk = Column(Integer, primary_key=True, autoincrement=True)
    # photo group id; several rows may share one
    id = Column(Text, nullable=False, index=True)
    raw_listing_id = Column(Text, index=True)
    photo_urls = Column(JSON, nullable=False, default=list)


class Listing(Base):
    __tablename__ = "listings"
    id = Column(Text, primary_key=True, default=lambda: uuid.uuid4().hex)
    address = Column(Text, nullable=False, default="")
    city = Column(Text, nullable=False, default="")
    state = Column(Text, nullable=False, default="")
    zip_code = Column(Text, nullable=False, default="")
    price = Column(Float, nullable=False, default=0)
    bedrooms = Column(Float, nullable=False, default=0)
    bathrooms = Column(Float, nullable=False, default=0)
    square_feet = Column(Float, nullable=False, default=0)
    property_type = Column(Text, nullable=False, default="")
    photo_urls = Column(JSON, nullable=False, default=list)
    status = Column(Text, nullable=False, default="ACTIVE")
    latitude = Column(Float, nullable=False, default=0)
    longitude = Column(Float, nullable=False, default=0)
    description = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

Index("idx_raw_listing_created_at", RawListingData.created_at)
Index("idx_listings_created_at", Listing.created_at)
Index("idx_listings_price", Listing.price)
