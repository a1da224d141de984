# tests/test_address.py
from app.address import FormattedAddress, capitalize_words, format_address


def test_formats_basic_address():
    result = format_address({
        "StreetNumber": "12",
        "StreetName": "main street",
        "City": "austin",
        "StateOrProvince": "tx",
        "PostalCode": "78701",
    })
    assert result.address == "12 Main Street, Austin, TX, 78701"
    assert result.city == "Austin"
    assert result.state == "TX"


def test_directionals_suffix_and_unit():
    result = format_address({
        "StreetNumber": 400,
        "StreetDirPrefix": "N",
        "StreetName": "LAMAR",
        "StreetSuffix": "Blvd",
        "StreetDirSuffix": "W",
        "UnitNumber": "5B",
        "City": "SAN  antonio",
        "StateOrProvince": "Tx",
        "PostalCode": "78205",
    })
    assert result.address == "400 N Lamar Blvd W 5B, San Antonio, TX, 78205"
    assert result.city == "San Antonio"


def test_empty_segments_are_kept():
    assert format_address({"City": "austin"}).address == ", Austin, , "


def test_absent_payload_gives_empty_components():
    assert format_address(None) == FormattedAddress("", "", "")


def test_failure_degrades_to_empty_components():
    assert format_address(["not", "a", "mapping"]) == FormattedAddress("", "", "")


def test_capitalize_words():
    assert capitalize_words("  mAIN   street ") == "Main Street"
    assert capitalize_words("") == ""


def test_unit_is_appended_as_given():
    assert format_address({"StreetName": "elm", "UnitNumber": "#4"}).address == "Elm #4, , , "
    assert format_address({"UnitNumber": "Apt 2"}).address == "Apt 2, , , "
