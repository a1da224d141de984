# tests/conftest.py
import os
from datetime import datetime, timezone

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from app import models
from app.db import Base, engine, SessionLocal


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def add_raw(db):
    def _add(listing_id, created_at, raw_data=None, photo_group=None, **columns):
        row = models.RawListingData(
            id=listing_id,
            created_at=created_at,
            raw_data=raw_data,
            raw_photo_data_id=photo_group,
            **columns,
        )
        db.add(row)
        db.commit()
        return row
    return _add


@pytest.fixture
def add_photos(db):
    def _add(group_id, urls, raw_listing_id=None):
        row = models.RawPhotoData(id=group_id, photo_urls=urls, raw_listing_id=raw_listing_id)
        db.add(row)
        db.commit()
        return row
    return _add
