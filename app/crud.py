# app/crud.py
"""Storage access for raw feed rows and canonical `Listing` entities.

Raw rows are read-only here: the range predicate selects listings, photo
groups are fetched by id. Canonical listings get create, read, update and
delete helpers plus an idempotent bulk upsert.
"""
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy import select, or_, func
from .models import Listing, RawListingData, RawPhotoData
from .predicates import RangePredicate
from sqlalchemy.orm import Session
from typing import Dict, Any, Iterable, List, Optional

# 15 columns per row keeps a batch well under SQLite's 32766 parameters
UPSERT_BATCH_SIZE = 500

def find_raw_listings(db: Session, predicate: RangePredicate) -> List[RawListingData]:
    stmt = select(RawListingData).where(predicate.clause()).order_by(RawListingData.created_at, RawListingData.id)
    return list(db.scalars(stmt))

def count_raw_listings(db: Session, predicate: RangePredicate) -> int:
    stmt = select(func.count()).select_from(RawListingData).where(predicate.clause())
    return db.scalar(stmt)

def find_raw_photos(db: Session, group_ids: Iterable[Optional[str]]) -> List[RawPhotoData]:
    ids = {i for i in group_ids if i}
    if not ids:
        return []
    stmt = select(RawPhotoData).where(RawPhotoData.id.in_(ids)).order_by(RawPhotoData.pk)
    return list(db.scalars(stmt))

def upsert_listings(db: Session, rows: List[Dict[str, Any]]) -> int:
    if not rows:
        return 0
    table = Listing.__table__
    insert = pg_insert if db.bind.dialect.name == "postgresql" else sqlite_insert
    # keep each INSERT under the driver's bind-parameter limit
    for start in range(0, len(rows), UPSERT_BATCH_SIZE):
        stmt = insert(table).values(rows[start:start + UPSERT_BATCH_SIZE])
        # copy all updatable columns from EXCLUDED, but override timestamps
        excluded = {c.name: stmt.excluded[c.name] for c in table.columns if c.name in rows[0] and c.name != "id"}
        excluded["updated_at"] = func.now()
        stmt = stmt.on_conflict_do_update(index_elements=["id"], set_=excluded)
        db.execute(stmt)
    db.commit()
    return len(rows)

def create_listing(db: Session, data: Dict[str, Any]) -> Listing:
    obj = Listing(**{k: v for k, v in data.items() if v is not None})
    db.add(obj)
    db.commit()
    db.refresh(obj)
    return obj

def get_listing(db: Session, listing_id: str):
    return db.get(Listing, listing_id)

def list_listings(db: Session, query: Optional[str] = None) -> List[Listing]:
    stmt = select(Listing)
    if query:
        pattern = f"%{query}%"
        stmt = stmt.where(or_(
            Listing.address.ilike(pattern),
            Listing.city.ilike(pattern),
            Listing.description.ilike(pattern),
        ))
    return list(db.scalars(stmt.order_by(Listing.created_at.desc(), Listing.id)))

def recent_listings(db: Session, limit: int = 10) -> List[Listing]:
    stmt = select(Listing).order_by(Listing.created_at.desc(), Listing.id).limit(limit)
    return list(db.scalars(stmt))

def update_listing(db: Session, listing_id: str, updates: Dict[str, Any]):
    obj = db.get(Listing, listing_id)
    if not obj:
        return None
    for k, v in updates.items():
        setattr(obj, k, v)
    db.commit()
    db.refresh(obj)
    return obj

def delete_listing(db: Session, listing_id: str):
    obj = db.get(Listing, listing_id)
    if not obj:
        return False
    db.delete(obj)
    db.commit()
    return True
