"""pytest configuration and shared fixtures."""

import pytest

from ingest_core import IngestDocument
from ingest_core.processors import GeoIpRecord, StaticGeoIpDatabase

FIXED_TIMESTAMP = "2016-01-01T10:20:30.456+00:00"


@pytest.fixture
def source_data():
    """Sample record body with nested maps, lists and scalars."""
    return {
        "foo": "bar",
        "int": 123,
        "double": 123.45,
        "bool": True,
        "fizz": {
            "buzz": "hello world",
            "foo_null": None,
            "1": "bar",
            "list": [{"field": "value"}],
        },
        "list": [{"field": "value"}, {"field": "value2"}],
        "tags": ["a", "b", "c"],
    }


@pytest.fixture
def document(source_data):
    """Document with system fields and a fixed ingest timestamp."""
    body = dict(source_data)
    body.update({"_index": "index", "_type": "type", "_id": "id"})
    return IngestDocument.from_maps(body, {"timestamp": FIXED_TIMESTAMP})


@pytest.fixture
def geoip_databases():
    city = StaticGeoIpDatabase("GeoLite2-City", {
        "82.170.213.79": GeoIpRecord(
            country_iso_code="NL",
            country_name="Netherlands",
            continent_name="Europe",
            region_name="North Holland",
            city_name="Amsterdam",
            timezone="Europe/Amsterdam",
            latitude=52.374,
            longitude=4.8897,
        ),
    })
    country = StaticGeoIpDatabase("GeoLite2-Country", {
        "82.170.213.79": GeoIpRecord(
            country_iso_code="NL",
            country_name="Netherlands",
            continent_name="Europe",
        ),
    })
    return {"GeoLite2-City.mmdb": city, "GeoLite2-Country.mmdb": country}
