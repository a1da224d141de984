# app/api/routes.py
import os
import time
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List
from .. import crud, schemas, services
from ..db import get_db
from ..utils import logger

router = APIRouter()

RECENT_LISTINGS_LIMIT = int(os.getenv("RECENT_LISTINGS_LIMIT", "10"))

@router.get("/health")
def health():
    return {"status": "ok"}

@router.get("/listings/filter", response_model=List[schemas.ProcessedListing])
def filter_listings(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    min_price: str | None = Query(None, alias="minPrice"),
    max_price: str | None = Query(None, alias="maxPrice"),
    db: Session = Depends(get_db)
):
    started = time.perf_counter()
    try:
        range_filter = services.parse_range_filter(start_date, end_date, min_price, max_price)
    except services.InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        report = services.fetch_filtered_listings(db, range_filter)
    except Exception as e:
        logger.exception("Error fetching filtered listings: %s", e)
        raise HTTPException(status_code=500, detail="Failed to fetch filtered listings")
    elapsed = (time.perf_counter() - started) * 1000
    logger.info("Processed %d listings in %.2fms", len(report.results), elapsed)
    return report.listings


@router.get("/listings/filter/count", response_model=schemas.ListingCount)
def count_listings(
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db)
):
    try:
        range_filter = services.parse_range_filter(start_date, end_date)
    except services.InvalidRangeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    try:
        return {"count": services.count_listings(db, range_filter)}
    except Exception as e:
        logger.exception("Error counting listings: %s", e)
        raise HTTPException(status_code=500, detail="Failed to count listings")


@router.get("/listings/recent", response_model=List[schemas.ListingOut])
def recent_listings(db: Session = Depends(get_db)):
    return crud.recent_listings(db, limit=RECENT_LISTINGS_LIMIT)


@router.get("/listings", response_model=List[schemas.ListingOut])
def listings(query: str | None = Query(None), db: Session = Depends(get_db)):
    return crud.list_listings(db, query=query)


@router.post("/listings", response_model=schemas.ListingOut, status_code=201)
def create_listing(payload: schemas.ListingCreate, db: Session = Depends(get_db)):
    return crud.create_listing(db, payload.model_dump())


@router.get("/listings/{listing_id}", response_model=schemas.ListingOut)
def get_listing(listing_id: str, db: Session = Depends(get_db)):
    obj = crud.get_listing(db, listing_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Listing not found")
    return obj


@router.patch("/listings/{listing_id}", response_model=schemas.ListingOut)
def update_listing(listing_id: str, payload: schemas.ListingUpdate, db: Session = Depends(get_db)):
    obj = crud.update_listing(db, listing_id, updates=payload.model_dump(exclude_unset=True, exclude_none=True))
    if not obj:
        raise HTTPException(status_code=404, detail="Listing not found")
    return obj


@router.delete("/listings/{listing_id}")
def delete_listing(listing_id: str, db: Session = Depends(get_db)):
    ok = crud.delete_listing(db, listing_id)
    if not ok:
        raise HTTPException(status_code=404, detail="Listing not found")
    return {"status": "deleted"}
