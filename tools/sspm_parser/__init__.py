"""SSPM Map Parser Package."""
from .errors import MalformedSectionError, OutOfBoundsError, SSPMError, UnsupportedTagError
from .sspm_fields import decode_custom_value, read_marker_field, read_marker_fields
from .sspm_parser import SSPMParser, parse_bytes, parse_file
from .sspm_reader import SSPMReader
from .sspm_types import (
    CustomData,
    CustomField,
    DataType,
    FieldValue,
    MapStrings,
    Marker,
    MarkerDefinition,
    ParsedMap,
    Pointers,
    Position,
    SSPMHeader,
    StaticMetadata,
)

__all__ = [
    "SSPMParser", "parse_bytes", "parse_file", "SSPMReader",
    "read_marker_field", "read_marker_fields", "decode_custom_value",
    "SSPMError", "OutOfBoundsError", "UnsupportedTagError", "MalformedSectionError",
    "DataType", "SSPMHeader", "StaticMetadata", "Pointers", "MapStrings",
    "CustomField", "CustomData", "MarkerDefinition", "Marker", "FieldValue",
    "Position", "ParsedMap",
]
