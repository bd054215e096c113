"""Type definitions for the SSPM map format."""
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional, Tuple


class DataType(IntEnum):
    """Field type tags used by custom data and marker definitions."""
    END = 0x00          # terminator, never valid as a field
    INT8 = 0x01         # 1 byte, signed
    UINT16 = 0x02       # 2 bytes
    UINT32 = 0x03       # 4 bytes
    UINT64 = 0x04       # 8 bytes
    FLOAT32 = 0x05      # 4 bytes, IEEE 754
    FLOAT64 = 0x06      # 8 bytes, IEEE 754
    POSITION = 0x07     # 1 byte discriminant + 2x uint8 or 2x float32
    BUFFER = 0x08       # uint16 length + payload
    STRING = 0x09       # uint16 length + payload
    LONG_BUFFER = 0x0A  # uint32 length + payload
    LONG_STRING = 0x0B  # uint32 length + payload
    ARRAY = 0x0C        # custom data only


@dataclass
class SSPMHeader:
    """Fixed 10-byte file preamble."""
    signature: bytes  # 4 bytes
    version: int      # 2 bytes
    reserved: bytes   # 4 bytes


@dataclass
class StaticMetadata:
    """Map statistics following the header."""
    sha1: bytes           # 20 bytes
    last_marker_pos: int  # 4 bytes
    note_count: int       # 4 bytes
    marker_count: int     # 4 bytes
    difficulty: int       # 1 byte
    rating: int           # 2 bytes
    has_audio: bool       # 1 byte
    has_cover: bool       # 1 byte
    requires_mod: bool    # 1 byte


@dataclass
class Pointers:
    """Offset/length pairs locating the variable-size sections."""
    custom_data_offset: int = 0
    custom_data_length: int = 0
    audio_offset: int = 0
    audio_length: int = 0
    cover_offset: int = 0
    cover_length: int = 0
    marker_definitions_offset: int = 0
    marker_definitions_length: int = 0
    marker_offset: int = 0
    marker_length: int = 0


@dataclass
class MapStrings:
    """Identifying text of a map."""
    map_id: str
    map_name: str
    song_name: str
    mappers: List[str] = field(default_factory=list)


@dataclass
class CustomField:
    """One entry of the custom data section. The value is kept undecoded."""
    id: str
    type: int
    value: bytes
    array_type: Optional[int] = None


@dataclass
class CustomData:
    fields: List[CustomField] = field(default_factory=list)

    def get(self, field_id: str) -> Optional[CustomField]:
        """Get field by id."""
        for custom_field in self.fields:
            if custom_field.id == field_id:
                return custom_field
        return None


@dataclass
class MarkerDefinition:
    """Ordered field type tags composing one marker kind."""
    id: str
    values: List[int] = field(default_factory=list)


@dataclass(frozen=True)
class Position:
    """2D note position. type is "int" for grid cells, "quantum" for floats."""
    x: float
    y: float
    type: str

    @property
    def is_quantum(self) -> bool:
        return self.type == "quantum"


@dataclass(frozen=True)
class FieldValue:
    """A decoded marker field together with its type tag."""
    tag: int
    value: Any


@dataclass
class Marker:
    """One timed event in the map."""
    position: int
    type: int
    fields: Tuple[FieldValue, ...] = ()

    def field(self, index: int) -> Any:
        """Get the decoded value of the field at index."""
        return self.fields[index].value

    @property
    def data(self) -> Dict[str, Any]:
        """Fields keyed as field0, field1, ..."""
        return {f"field{i}": f.value for i, f in enumerate(self.fields)}


def _jsonable(value: Any) -> Any:
    if isinstance(value, Position):
        return {"x": value.x, "y": value.y, "type": value.type}
    if isinstance(value, bytes):
        return value.hex()
    return value


@dataclass
class ParsedMap:
    """Everything decoded from one SSPM buffer.

    Markers are kept in stream order, which the format does not guarantee
    to be chronological. Use sorted_markers() for temporal order.
    """
    header: SSPMHeader
    metadata: StaticMetadata
    pointers: Pointers
    strings: MapStrings
    custom_data: CustomData
    marker_definitions: List[MarkerDefinition]
    markers: List[Marker]
    audio: Optional[bytes] = None
    cover: Optional[bytes] = None

    def sorted_markers(self) -> List[Marker]:
        return sorted(self.markers, key=lambda m: m.position)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-compatible dictionary."""
        return {
            "header": {
                "signature": self.header.signature.decode("latin-1"),
                "version": self.header.version,
            },
            "metadata": {
                "sha1": self.metadata.sha1.hex(),
                "last_marker_pos": self.metadata.last_marker_pos,
                "note_count": self.metadata.note_count,
                "marker_count": self.metadata.marker_count,
                "difficulty": self.metadata.difficulty,
                "rating": self.metadata.rating,
                "has_audio": self.metadata.has_audio,
                "has_cover": self.metadata.has_cover,
                "requires_mod": self.metadata.requires_mod,
            },
            "strings": {
                "map_id": self.strings.map_id,
                "map_name": self.strings.map_name,
                "song_name": self.strings.song_name,
                "mappers": list(self.strings.mappers),
            },
            "custom_data": [
                {
                    "id": f.id,
                    "type": f.type,
                    "array_type": f.array_type,
                    "value": f.value.hex(),
                }
                for f in self.custom_data.fields
            ],
            "audio_length": len(self.audio) if self.audio is not None else None,
            "cover_length": len(self.cover) if self.cover is not None else None,
            "marker_definitions": [
                {"id": d.id, "values": list(d.values)}
                for d in self.marker_definitions
            ],
            "markers": [
                {
                    "position": m.position,
                    "type": m.type,
                    "data": {k: _jsonable(v) for k, v in m.data.items()},
                }
                for m in self.sorted_markers()
            ],
        }
