# tests/test_fields.py
from datetime import date, datetime, timedelta, timezone

from app.fields import ColumnOnly, EmbeddedPayload, convert, extract, source_of
from app.models import RawListingData


def test_payload_value_wins_over_column():
    raw = RawListingData(id="a", raw_data={"postal_code": "78701"}, postal_code="10001")
    assert isinstance(source_of(raw), EmbeddedPayload)
    assert extract(raw, "postal_code") == "78701"


def test_falls_back_to_named_column_when_key_missing():
    raw = RawListingData(id="a", raw_data={"City": "austin"}, postal_code="10001")
    assert extract(raw, "PostalCode", "postal_code") == "10001"


def test_column_only_record():
    raw = {"id": "a", "raw_data": None, "postal_code": "10001"}
    assert isinstance(source_of(raw), ColumnOnly)
    assert extract(raw, "PostalCode", "postal_code") == "10001"
    assert extract(raw, "PostalCode") is None


def test_payload_null_is_returned_as_is():
    raw = {"id": "a", "raw_data": {"PostalCode": None}, "PostalCode": "10001"}
    assert extract(raw, "PostalCode") is None


def test_convert_absent_value_gives_default():
    assert convert(None, float, 0) == 0
    assert convert(None, str, "ACTIVE") == "ACTIVE"


def test_convert_numbers():
    assert convert("250000", float, 0) == 250000.0
    assert convert(3, float, 0) == 3.0
    assert convert("12abc", float, 0) == 0
    assert convert("nan", float, 0) == 0
    assert convert({"a": 1}, float, 0) == 0


def test_convert_timestamps_to_iso():
    assert convert(datetime(2024, 5, 1, 12, 30), datetime, "") == "2024-05-01T12:30:00+00:00"
    assert convert("2024-05-01T12:30:00Z", datetime, "") == "2024-05-01T12:30:00+00:00"
    assert convert(date(2024, 5, 1), datetime, "") == "2024-05-01T00:00:00+00:00"
    assert convert(0, datetime, "") == "1970-01-01T00:00:00+00:00"
    offset = datetime(2024, 5, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))
    assert convert(offset, datetime, "") == "2024-05-01T12:30:00+00:00"


def test_convert_invalid_timestamp_gives_default():
    assert convert("not a date", datetime, "") == ""
    assert convert(["2024"], datetime, "") == ""
