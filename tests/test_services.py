# tests/test_services.py
import pytest

from app import services
from app.models import RawListingData, RawPhotoData

from conftest import utc


def test_parse_range_filter_accepts_query_strings():
    rf = services.parse_range_filter("2024-01-01T00:00:00Z", "2024-01-31", "100000", "")
    assert rf.start_date == utc(2024, 1, 1)
    assert rf.end_date == utc(2024, 1, 31)
    assert rf.min_price == 100000.0
    assert rf.max_price is None


@pytest.mark.parametrize("args", [
    (None, "2024-01-31"),
    ("2024-01-01", ""),
    ("2024-13-01", "2024-01-31"),
    ("2024-01-01", "2024-01-31", "abc"),
    ("2024-01-01", "2024-01-31", None, "inf"),
])
def test_parse_range_filter_rejects_bad_input(args):
    with pytest.raises(services.InvalidRangeError):
        services.parse_range_filter(*args)


def test_start_after_end_is_left_to_caller():
    rf = services.parse_range_filter("2024-02-01", "2024-01-01")
    assert rf.start_date > rf.end_date


def test_select_listings_filters_then_normalizes():
    raws = [
        RawListingData(id="L1", created_at=utc(2024, 1, 2), raw_data={"CurrentPrice": 200}, raw_photo_data_id="g1"),
        RawListingData(id="L2", created_at=utc(2024, 1, 3), raw_data={"City": "austin"}),
        RawListingData(id="L3", created_at=utc(2024, 1, 4), raw_data={"CurrentPrice": 50}),
    ]
    photos = [RawPhotoData(id="g1", photo_urls=["a.jpg"])]
    rf = services.parse_range_filter("2024-01-01", "2024-01-31", min_price="100")

    listings = services.select_listings(rf, raws, photos)

    assert [(l.id, l.price, l.photo_urls) for l in listings] == [("L1", 200.0, ["a.jpg"])]


def test_fetch_filtered_listings_reports_skips(db, add_raw, add_photos):
    add_photos("g1", ["a.jpg"])
    add_photos("bad", 7)
    add_raw("L1", utc(2024, 1, 2), {"CurrentPrice": 200}, photo_group="g1")
    add_raw("L2", utc(2024, 1, 3), {"CurrentPrice": 300}, photo_group="bad")
    rf = services.parse_range_filter("2024-01-01", "2024-01-31")

    report = services.fetch_filtered_listings(db, rf)

    assert [l.id for l in report.listings] == ["L1"]
    assert [s.listing_id for s in report.skipped] == ["L2"]
