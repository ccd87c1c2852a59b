"""``geoip`` — enrich a document with the location of an IP address.

The lookup database is an external, read-only resource.  The factory holds
every available database by file name and hands the selected one to each
processor it creates; databases must therefore be safe for concurrent
reads.

Schema::

    {"geoip": {"source_field": "client.ip",
               "target_field": "geoip",                   # default
               "database_file": "GeoLite2-City.mmdb",     # default
               "fields": ["city_name", "location"]}}      # default: DEFAULT_FIELDS

Output (``target_field``)::

    {"continent_name": "Europe", "country_iso_code": "DE",
     "region_name": "Hesse", "city_name": "Frankfurt am Main",
     "location": [8.68, 50.11]}      # [longitude, latitude]
"""

from __future__ import annotations

import ipaddress
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional

from ..config import read_choice_list, read_string_property
from ..core import AbstractProcessorFactory, Processor
from ..document import IngestDocument
from ..errors import IngestError, InvalidConfigValue, TypeMismatch
from ..log import get_logger

logger = get_logger(__name__)

DEFAULT_TARGET_FIELD = "geoip"
DEFAULT_DATABASE_FILE = "GeoLite2-City.mmdb"


class AddressNotFound(IngestError, LookupError):
    """The database has no record for the address."""


class Field(Enum):
    IP = "ip"
    COUNTRY_ISO_CODE = "country_iso_code"
    COUNTRY_NAME = "country_name"
    CONTINENT_NAME = "continent_name"
    REGION_NAME = "region_name"
    CITY_NAME = "city_name"
    TIMEZONE = "timezone"
    LATITUDE = "latitude"
    LONGITUDE = "longitude"
    LOCATION = "location"


DEFAULT_FIELDS: FrozenSet[Field] = frozenset({
    Field.CONTINENT_NAME,
    Field.COUNTRY_ISO_CODE,
    Field.REGION_NAME,
    Field.CITY_NAME,
    Field.LOCATION,
})


# ─────────────────────────────────────────────────────────────────────────────
# Database
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GeoIpRecord:
    country_iso_code: Optional[str] = None
    country_name: Optional[str] = None
    continent_name: Optional[str] = None
    region_name: Optional[str] = None
    city_name: Optional[str] = None
    timezone: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None


class GeoIpDatabase(ABC):
    """Read-only address → record lookup."""

    database_type: str

    @abstractmethod
    def lookup(self, ip: str) -> Optional[GeoIpRecord]:
        """Return the record for *ip*, or ``None`` if the address is unknown."""


class StaticGeoIpDatabase(GeoIpDatabase):
    """A database over a fixed in-memory table, keyed by normalized address.

    ::

        StaticGeoIpDatabase("GeoLite2-City", {"8.8.8.8": GeoIpRecord(country_iso_code="US")})
    """

    def __init__(self, database_type: str, records: Mapping[str, GeoIpRecord]) -> None:
        self.database_type = database_type
        self._records = {str(ipaddress.ip_address(k)): v for k, v in records.items()}

    def lookup(self, ip: str) -> Optional[GeoIpRecord]:
        return self._records.get(str(ipaddress.ip_address(ip)))


# ─────────────────────────────────────────────────────────────────────────────
# Processor
# ─────────────────────────────────────────────────────────────────────────────


class GeoIpProcessor(Processor):
    type = "geoip"

    def __init__(
            self,
            tag: Optional[str],
            source_field: str,
            target_field: str,
            database: GeoIpDatabase,
            fields: FrozenSet[Field],
    ) -> None:
        super().__init__(tag)
        self.source_field = source_field
        self.target_field = target_field
        self.database = database
        self.fields = fields

    def apply(self, document: IngestDocument) -> IngestDocument:
        ip = document.get_field_value(self.source_field, str)
        if ip is None:
            raise TypeMismatch(f"field [{self.source_field}] is null, cannot extract geoip information.", self.source_field)
        try:
            ipaddress.ip_address(ip)
        except ValueError as e:
            raise TypeMismatch(f"field [{self.source_field}] value [{ip}] is not an IP address", self.source_field) from e

        record = self.database.lookup(ip)
        if record is None:
            logger.debug("no %s record for address [%s]", self.database.database_type, ip)
            raise AddressNotFound(f"address [{ip}] not found in database [{self.database.database_type}]")

        document.set_field_value(self.target_field, self._extract(ip, record))
        return document

    def _extract(self, ip: str, record: GeoIpRecord) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for field in Field:
            if field not in self.fields:
                continue
            if field is Field.IP:
                value: Any = ip
            elif field is Field.LOCATION:
                if record.latitude is None or record.longitude is None:
                    continue
                value = [record.longitude, record.latitude]
            else:
                value = getattr(record, field.value)
            if value is not None:
                data[field.value] = value
        return data


class GeoIpProcessorFactory(AbstractProcessorFactory):
    """Build ``geoip`` processors over a fixed set of databases.

    Args:
        databases: database file name → loaded ``GeoIpDatabase``.
    """

    def __init__(self, databases: Optional[Mapping[str, GeoIpDatabase]] = None) -> None:
        self.databases = dict(databases or {})

    def do_create(self, tag: Optional[str], config: Dict[str, Any]) -> GeoIpProcessor:
        source_field = read_string_property(config, "source_field")
        target_field = read_string_property(config, "target_field", DEFAULT_TARGET_FIELD)
        database_file = read_string_property(config, "database_file", DEFAULT_DATABASE_FILE)
        names = read_choice_list(config, "fields", [f.name for f in Field], label="field")

        database = self.databases.get(database_file)
        if database is None:
            raise InvalidConfigValue(
                f"database file [{database_file}] doesn't exist in [{', '.join(sorted(self.databases))}]",
                "database_file",
            )

        fields = DEFAULT_FIELDS if names is None else frozenset(Field[n] for n in names)
        return GeoIpProcessor(tag, source_field, target_field, database, fields)
