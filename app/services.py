# app/services.py
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from . import crud
from .normalizer import NormalizationReport, normalize_all, normalize_report
from .predicates import build_predicate
from .schemas import ProcessedListing, RangeFilter
from .utils import logger


class InvalidRangeError(ValueError):
    """Range input rejected before any storage access."""


def parse_range_filter(start_date: Any, end_date: Any,
                       min_price: Any = None, max_price: Any = None) -> RangeFilter:
    if start_date in (None, "") or end_date in (None, ""):
        raise InvalidRangeError("Missing startDate or endDate query parameter")
    try:
        return RangeFilter(start_date=start_date, end_date=end_date,
                           min_price=min_price, max_price=max_price)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
        if any(f in ("start_date", "end_date", "startDate", "endDate") for f in fields):
            raise InvalidRangeError("Invalid date format for startDate or endDate") from e
        raise InvalidRangeError("Invalid price format for minPrice or maxPrice") from e


def select_listings(range_filter: RangeFilter, raw_listings: Iterable[Any],
                    raw_photos: Iterable[Any]) -> List[ProcessedListing]:
    """Filter already-loaded raw rows by the range and normalize the survivors."""
    predicate = build_predicate(range_filter)
    return normalize_all([r for r in raw_listings if predicate.matches(r)], raw_photos)


def fetch_filtered_listings(db: Session, range_filter: RangeFilter) -> NormalizationReport:
    predicate = build_predicate(range_filter)
    raw_listings = crud.find_raw_listings(db, predicate)
    raw_photos = crud.find_raw_photos(db, (r.raw_photo_data_id for r in raw_listings))
    return normalize_report(raw_listings, raw_photos)


def count_listings(db: Session, range_filter: RangeFilter) -> int:
    # date window only; price bounds do not narrow the count
    predicate = build_predicate(range_filter.model_copy(update={"min_price": None, "max_price": None}))
    return crud.count_raw_listings(db, predicate)


def _listing_row(listing: ProcessedListing) -> Dict[str, Any]:
    row = listing.model_dump()
    created_at: Optional[str] = row.pop("created_at")
    # every row needs the same keys for a multi-row insert
    row["created_at"] = datetime.fromisoformat(created_at) if created_at else datetime.now(timezone.utc)
    return row


def save_listings(db: Session, listings: Iterable[ProcessedListing]) -> int:
    """Upsert canonical listings into the `listings` table, keyed by id."""
    rows = [_listing_row(l) for l in listings]
    saved = crud.upsert_listings(db, rows)
    logger.info("Saved %d listings", saved)
    return saved
