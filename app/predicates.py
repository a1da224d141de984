# app/predicates.py
"""Range predicates over raw listings.

A predicate is a mandatory, inclusive `created_at` window plus one of four
price bounds. The same predicate renders as a SQLAlchemy clause for the
database and evaluates in memory against already-loaded rows.

Only a JSON number counts as a payload price. Strings, booleans and nulls
read as "no price" on both paths, so a bounded filter excludes them.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Union

from sqlalchemy import Boolean, and_, case, literal
from sqlalchemy.exc import CompileError
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement

from .fields import convert, extract, read_attr, to_utc
from .models import RawListingData
from .schemas import RangeFilter

PRICE_KEY = "CurrentPrice"


class json_is_number(FunctionElement):
    """True when `column[key]` holds a JSON number."""
    type = Boolean()
    name = "json_is_number"
    inherit_cache = True


@compiles(json_is_number)
def _json_is_number_default(element, compiler, **kw):
    raise CompileError(f"json_is_number is not supported on {compiler.dialect.name}")


@compiles(json_is_number, "postgresql")
def _json_is_number_postgresql(element, compiler, **kw):
    column, key = element.clauses
    return "jsonb_typeof(%s -> %s) = 'number'" % (compiler.process(column, **kw), compiler.process(key, **kw))


@compiles(json_is_number, "sqlite")
def _json_is_number_sqlite(element, compiler, **kw):
    column, key = element.clauses
    return "json_type(%s, '$.\"' || %s || '\"') IN ('integer', 'real')" % (
        compiler.process(column, **kw), compiler.process(key, **kw))


def price_column():
    # the cast only runs on numbers, so malformed prices become NULL
    payload = RawListingData.raw_data
    return case((json_is_number(payload, literal(PRICE_KEY)), payload[PRICE_KEY].as_float()))


def payload_price(record: Any) -> Optional[float]:
    value = extract(record, PRICE_KEY)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return convert(value, float)


@dataclass(frozen=True)
class Unbounded:
    """No price bound; records match whatever their price, even none."""

    def conditions(self, column) -> List[Any]:
        return []

    def admits(self, price: Optional[float]) -> bool:
        return True


@dataclass(frozen=True)
class AtLeast:
    minimum: float

    def conditions(self, column) -> List[Any]:
        return [column.isnot(None), column >= self.minimum]

    def admits(self, price: Optional[float]) -> bool:
        return price is not None and price >= self.minimum


@dataclass(frozen=True)
class AtMost:
    maximum: float

    def conditions(self, column) -> List[Any]:
        return [column.isnot(None), column <= self.maximum]

    def admits(self, price: Optional[float]) -> bool:
        return price is not None and price <= self.maximum


@dataclass(frozen=True)
class Between:
    minimum: float
    maximum: float

    def conditions(self, column) -> List[Any]:
        return [column.isnot(None), column.between(self.minimum, self.maximum)]

    def admits(self, price: Optional[float]) -> bool:
        return price is not None and self.minimum <= price <= self.maximum


PriceBound = Union[Unbounded, AtLeast, AtMost, Between]


def price_bound(min_price: Optional[float] = None, max_price: Optional[float] = None) -> PriceBound:
    if min_price is not None and max_price is not None:
        return Between(min_price, max_price)
    if min_price is not None:
        return AtLeast(min_price)
    if max_price is not None:
        return AtMost(max_price)
    return Unbounded()


@dataclass(frozen=True)
class RangePredicate:
    start_date: datetime
    end_date: datetime
    price: PriceBound = Unbounded()

    def clause(self):
        """SQLAlchemy filter for `RawListingData` queries."""
        return and_(
            RawListingData.created_at.between(self.start_date, self.end_date),
            *self.price.conditions(price_column()),
        )

    def matches(self, record: Any) -> bool:
        created_at = read_attr(record, "created_at")
        if not isinstance(created_at, datetime):
            return False
        if not to_utc(self.start_date) <= to_utc(created_at) <= to_utc(self.end_date):
            return False
        return self.price.admits(payload_price(record))


def build_predicate(range_filter: RangeFilter) -> RangePredicate:
    return RangePredicate(
        start_date=range_filter.start_date,
        end_date=range_filter.end_date,
        price=price_bound(range_filter.min_price, range_filter.max_price),
    )
