# app/address.py
"""Postal address assembly from vendor payload sub-fields."""
from typing import Any, Mapping, NamedTuple, Optional

from .fields import convert
from .utils import logger

STREET_FIELDS = ("StreetNumber", "StreetDirPrefix", "StreetName", "StreetSuffix", "StreetDirSuffix")


class FormattedAddress(NamedTuple):
    address: str = ""
    city: str = ""
    state: str = ""


def capitalize_words(value: str) -> str:
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split())


def _text(payload: Mapping[str, Any], key: str) -> str:
    return convert(payload.get(key), str, "").strip()


def _format(payload: Mapping[str, Any]) -> FormattedAddress:
    parts = {key: _text(payload, key) for key in STREET_FIELDS}
    parts["StreetName"] = capitalize_words(parts["StreetName"])
    street = " ".join(parts[key] for key in STREET_FIELDS if parts[key])

    unit = _text(payload, "UnitNumber")
    if unit:
        street = f"{street} {unit}" if street else unit

    city = capitalize_words(_text(payload, "City"))
    state = _text(payload, "StateOrProvince").upper()
    postal = _text(payload, "PostalCode")
    # empty segments are kept so every address has the same shape
    address = ", ".join([street, city, state, postal])
    return FormattedAddress(address, city, state)


def format_address(payload: Optional[Mapping[str, Any]]) -> FormattedAddress:
    """Build `address`, `city` and `state` from a vendor payload.

    Never raises: an absent payload or any failure while formatting gives
    an all-empty result rather than a partial address.
    """
    if payload is None:
        return FormattedAddress()
    try:
        return _format(payload)
    except Exception as e:
        logger.warning("Address formatting failed: %s", e)
        return FormattedAddress()
