"""Processors sub-package — concrete ``Processor`` + ``ProcessorFactory``
implementations.

mutate – set, append, remove, rename, uppercase, lowercase, trim, gsub, convert
geoip  – IP address enrichment over a read-only lookup database
"""

from .geoip import (
    DEFAULT_FIELDS,
    AddressNotFound,
    Field,
    GeoIpDatabase,
    GeoIpProcessor,
    GeoIpProcessorFactory,
    GeoIpRecord,
    StaticGeoIpDatabase,
)
from .mutate import (
    AbstractStringProcessor,
    AppendProcessor,
    AppendProcessorFactory,
    ConvertProcessor,
    ConvertProcessorFactory,
    GsubProcessor,
    GsubProcessorFactory,
    LowercaseProcessor,
    RemoveProcessor,
    RemoveProcessorFactory,
    RenameProcessor,
    RenameProcessorFactory,
    SetProcessor,
    SetProcessorFactory,
    StringProcessorFactory,
    TrimProcessor,
    UppercaseProcessor,
)

__all__ = [
    # geoip
    "DEFAULT_FIELDS",
    "AddressNotFound",
    "Field",
    "GeoIpDatabase",
    "GeoIpProcessor",
    "GeoIpProcessorFactory",
    "GeoIpRecord",
    "StaticGeoIpDatabase",
    # mutate
    "AbstractStringProcessor",
    "AppendProcessor",
    "AppendProcessorFactory",
    "ConvertProcessor",
    "ConvertProcessorFactory",
    "GsubProcessor",
    "GsubProcessorFactory",
    "LowercaseProcessor",
    "RemoveProcessor",
    "RemoveProcessorFactory",
    "RenameProcessor",
    "RenameProcessorFactory",
    "SetProcessor",
    "SetProcessorFactory",
    "StringProcessorFactory",
    "TrimProcessor",
    "UppercaseProcessor",
]
