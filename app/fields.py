# app/fields.py
"""Field extraction and conversion for raw listing records.

A raw record carries the same semantic field in one of two places: inside
the vendor payload (`raw_data`) or as a flat relational column. `extract`
hides that difference; `convert` turns whatever it finds into a typed value,
falling back to a caller-supplied default instead of raising.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Mapping, Optional, Union


def read_attr(record: Any, name: Optional[str]) -> Any:
    if name is None or record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


@dataclass(frozen=True)
class EmbeddedPayload:
    """Record whose vendor payload is present; payload keys win over columns."""
    payload: Mapping[str, Any]
    record: Any

    def get(self, key: Optional[str], column: Optional[str]) -> Any:
        if key is not None and key in self.payload:
            return self.payload[key]
        return read_attr(self.record, column)


@dataclass(frozen=True)
class ColumnOnly:
    """Record without a usable payload; only flat columns are consulted."""
    record: Any

    def get(self, key: Optional[str], column: Optional[str]) -> Any:
        return read_attr(self.record, column)


RecordSource = Union[EmbeddedPayload, ColumnOnly]


def source_of(record: Any) -> RecordSource:
    payload = read_attr(record, "raw_data")
    if isinstance(payload, Mapping):
        return EmbeddedPayload(payload, record)
    return ColumnOnly(record)


def extract(record: Any, key: Optional[str], column: Optional[str] = None) -> Any:
    """Read `key` from the payload, else the `column` (defaults to `key`)."""
    return source_of(record).get(key, column if column is not None else key)


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_float(value: Any) -> float:
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"not a finite number: {value!r}")
    return number


def _to_timestamp(value: Any) -> str:
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, bool):
        raise TypeError("boolean is not a timestamp")
    elif isinstance(value, (int, float)):
        # epoch milliseconds
        parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip())
    else:
        raise TypeError(f"unsupported timestamp type: {type(value).__name__}")
    return to_utc(parsed).isoformat()


_CONVERTERS = {
    str: str,
    float: _to_float,
    datetime: _to_timestamp,
}


def convert(value: Any, target: type, default: Any = None) -> Any:
    """Coerce `value` to `target` (str, float or datetime) or return `default`.

    Timestamps come back as ISO-8601 strings in UTC. Any coercion error,
    non-finite number or invalid date yields `default`.
    """
    if value is None:
        return default
    converter = _CONVERTERS[target]
    try:
        return converter(value)
    except (TypeError, ValueError, OverflowError, OSError):
        return default
