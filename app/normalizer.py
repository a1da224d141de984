# app/normalizer.py
"""Turns raw vendor/relational listing rows into canonical listings.

Each raw row is processed on its own: a row that fails is reported as
`Skipped` with the reason and left out of the result, and never affects the
rows around it. Individual fields never fail; they fall back to defaults.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, List, NamedTuple, Optional, Union

from .address import format_address
from .fields import convert, extract, read_attr, source_of, EmbeddedPayload
from .photos import PhotoResolver
from .schemas import ProcessedListing
from .utils import logger


class FieldMapping(NamedTuple):
    name: str
    key: Optional[str]
    column: Optional[str]
    target: type
    default: Any


# canonical field -> where it lives on the raw row
FIELD_MAPPINGS = (
    FieldMapping("price", "CurrentPrice", None, float, 0),
    FieldMapping("bedrooms", "BedroomsTotal", None, float, 0),
    FieldMapping("bathrooms", "BathroomsTotalInteger", None, float, 0),
    FieldMapping("square_feet", "LivingArea", None, float, 0),
    FieldMapping("latitude", "Latitude", None, float, 0),
    FieldMapping("longitude", "Longitude", None, float, 0),
    FieldMapping("property_type", "PropertyType", None, str, ""),
    FieldMapping("status", "MlsStatus", None, str, "ACTIVE"),
    FieldMapping("zip_code", "PostalCode", "postal_code", str, ""),
    FieldMapping("created_at", None, "created_at", datetime, ""),
)


@dataclass(frozen=True)
class Processed:
    listing: ProcessedListing


@dataclass(frozen=True)
class Skipped:
    listing_id: Optional[str]
    reason: str


NormalizationResult = Union[Processed, Skipped]


@dataclass
class NormalizationReport:
    results: List[NormalizationResult] = field(default_factory=list)

    @property
    def listings(self) -> List[ProcessedListing]:
        return [r.listing for r in self.results if isinstance(r, Processed)]

    @property
    def skipped(self) -> List[Skipped]:
        return [r for r in self.results if isinstance(r, Skipped)]

    @property
    def processed_count(self) -> int:
        return len(self.listings)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


def _build(raw: Any, resolver: PhotoResolver) -> ProcessedListing:
    listing_id = convert(read_attr(raw, "id"), str)
    if not listing_id:
        raise ValueError("listing has no id")

    source = source_of(raw)
    payload = source.payload if isinstance(source, EmbeddedPayload) else None
    address = format_address(payload)

    values = {
        m.name: convert(extract(raw, m.key, m.column), m.target, m.default)
        for m in FIELD_MAPPINGS
    }
    return ProcessedListing(
        id=listing_id,
        address=address.address,
        city=address.city,
        state=address.state,
        photo_urls=resolver.resolve(read_attr(raw, "raw_photo_data_id")),
        **values,
    )


def normalize_one(raw: Any, resolver: PhotoResolver) -> NormalizationResult:
    try:
        return Processed(_build(raw, resolver))
    except Exception as e:
        listing_id = read_attr(raw, "id")
        logger.error("Error processing listing %s: %s", listing_id, e)
        return Skipped(None if listing_id is None else str(listing_id), str(e) or type(e).__name__)


def normalize_report(raw_listings: Iterable[Any], raw_photos: Iterable[Any]) -> NormalizationReport:
    resolver = PhotoResolver(raw_photos)
    report = NormalizationReport()
    for raw in raw_listings:
        report.results.append(normalize_one(raw, resolver))
    if report.skipped_count:
        logger.info("Normalized %d listings, skipped %d", report.processed_count, report.skipped_count)
    return report


def normalize_all(raw_listings: Iterable[Any], raw_photos: Iterable[Any]) -> List[ProcessedListing]:
    """Canonical listings for every raw row that processes cleanly, in input order."""
    return normalize_report(raw_listings, raw_photos).listings
