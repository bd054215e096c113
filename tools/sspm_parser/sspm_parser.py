"""Parser for SSPM rhythm game map files.

SSPM layout (all integers little-endian):
- 0x00: Header (10 bytes)
  - signature "SS+m" (4 bytes), version (uint16), reserved (4 bytes)
- 0x0A: Static metadata (38 bytes)
  - sha1 (20 bytes), last marker position, note count, marker count (uint32)
  - difficulty (uint8), rating (uint16), has audio, has cover, requires mod (uint8)
- 0x30: Pointers (80 bytes), ten uint64 values as (offset, length) pairs for
  custom data, audio, cover, marker definitions and markers
- 0x80: Strings
  - map id, map name, song name (uint16 length + UTF-8)
  - mapper count (uint16), then that many strings
- Sections reached through the pointer table:
  - custom data: uint16 field count, per field: id string, type (uint8),
    element type (uint8, only for arrays), value length (uint32), raw value
  - audio / cover: raw bytes
  - marker definitions: count (uint8), per definition: id string,
    field count (uint8), field type tags (uint8 each)
  - markers: until marker length bytes are consumed: position (uint32),
    type (uint8), fields per the note definition
"""
import logging
from pathlib import Path
from typing import List, Optional, Union

from .errors import MalformedSectionError, SSPMError
from .sspm_fields import read_marker_fields
from .sspm_reader import SSPMReader
from .sspm_types import (
    CustomData,
    CustomField,
    DataType,
    MapStrings,
    Marker,
    MarkerDefinition,
    ParsedMap,
    Pointers,
    SSPMHeader,
    StaticMetadata,
)

logger = logging.getLogger(__name__)


class SSPMParser:
    """Parses one fully buffered SSPM file."""

    SIGNATURE = b"SS+m"
    HEADER_SIZE = 10
    METADATA_SIZE = 38
    POINTER_COUNT = 10
    NOTE_DEFINITION = "ssp_note"

    def __init__(self, data: bytes, note_definition: str = NOTE_DEFINITION,
                 strict: bool = False):
        """Initialize parser over a byte buffer.

        Args:
            data: Complete contents of an SSPM file
            note_definition: Id of the marker definition used to decode markers
            strict: Reject buffers whose signature is not "SS+m"
        """
        self.reader = SSPMReader(data)
        self.note_definition = note_definition
        self.strict = strict

    def parse(self) -> ParsedMap:
        """Decode the whole buffer.

        Returns:
            ParsedMap with every section decoded

        Raises:
            OutOfBoundsError: If a mandatory section runs past the buffer
            UnsupportedTagError: If a marker definition uses an invalid tag
            MalformedSectionError: If a mandatory section is inconsistent
        """
        self.reader.seek(0)

        header = self._read_header()
        metadata = self._read_metadata()
        pointers = self._read_pointers()
        strings = self._read_strings()

        custom_data = self._read_custom_data(pointers)
        audio = None
        if metadata.has_audio:
            audio = self._read_blob("audio", pointers.audio_offset, pointers.audio_length)
        cover = None
        if metadata.has_cover:
            cover = self._read_blob("cover", pointers.cover_offset, pointers.cover_length)

        definitions = self._read_marker_definitions(pointers)
        markers = self._read_markers(pointers, definitions)

        return ParsedMap(
            header=header,
            metadata=metadata,
            pointers=pointers,
            strings=strings,
            custom_data=custom_data,
            marker_definitions=definitions,
            markers=markers,
            audio=audio,
            cover=cover,
        )

    def _read_header(self) -> SSPMHeader:
        r = self.reader
        header = SSPMHeader(
            signature=r.read_bytes(4),
            version=r.read_u16(),
            reserved=r.read_bytes(4),
        )
        if header.signature != self.SIGNATURE:
            if self.strict:
                raise MalformedSectionError(
                    "header", f"invalid signature {header.signature!r}"
                )
            logger.warning("Unexpected SSPM signature %r", header.signature)
        logger.debug("SSPM version %d", header.version)
        return header

    def _read_metadata(self) -> StaticMetadata:
        r = self.reader
        return StaticMetadata(
            sha1=r.read_bytes(20),
            last_marker_pos=r.read_u32(),
            note_count=r.read_u32(),
            marker_count=r.read_u32(),
            difficulty=r.read_u8(),
            rating=r.read_u16(),
            has_audio=r.read_bool(),
            has_cover=r.read_bool(),
            requires_mod=r.read_bool(),
        )

    def _read_pointers(self) -> Pointers:
        r = self.reader
        pointers = Pointers(
            custom_data_offset=r.read_u64(),
            custom_data_length=r.read_u64(),
            audio_offset=r.read_u64(),
            audio_length=r.read_u64(),
            cover_offset=r.read_u64(),
            cover_length=r.read_u64(),
            marker_definitions_offset=r.read_u64(),
            marker_definitions_length=r.read_u64(),
            marker_offset=r.read_u64(),
            marker_length=r.read_u64(),
        )
        logger.debug("Pointers: %s", pointers)
        return pointers

    def _read_strings(self) -> MapStrings:
        r = self.reader
        map_id = r.read_string()
        map_name = r.read_string()
        song_name = r.read_string()
        mappers = r.read_string_list(r.read_u16())
        return MapStrings(
            map_id=map_id,
            map_name=map_name,
            song_name=song_name,
            mappers=mappers,
        )

    def _read_custom_data(self, pointers: Pointers) -> CustomData:
        """Read the optional custom data section.

        A malformed section is dropped rather than failing the whole map.
        """
        if not (pointers.custom_data_offset and pointers.custom_data_length):
            return CustomData()

        logger.debug(
            "Reading custom data, offset=%d length=%d",
            pointers.custom_data_offset, pointers.custom_data_length,
        )
        r = self.reader
        try:
            r.seek(pointers.custom_data_offset)
            fields: List[CustomField] = []
            for _ in range(r.read_u16()):
                field_id = r.read_string()
                field_type = r.read_u8()
                array_type = r.read_u8() if field_type == DataType.ARRAY else None
                value = r.read_bytes(r.read_u32())
                fields.append(CustomField(
                    id=field_id,
                    type=field_type,
                    array_type=array_type,
                    value=value,
                ))
        except SSPMError as e:
            logger.warning("Ignoring malformed custom data: %s", e)
            return CustomData()

        return CustomData(fields=fields)

    def _read_blob(self, name: str, offset: int, length: int) -> Optional[bytes]:
        """Read an audio or cover section if the pointer table locates it."""
        if offset == 0 or length == 0:
            return None
        logger.debug("Reading %s, offset=%d length=%d", name, offset, length)
        self.reader.seek(offset)
        return self.reader.read_bytes(length)

    def _read_marker_definitions(self, pointers: Pointers) -> List[MarkerDefinition]:
        r = self.reader
        logger.debug(
            "Reading marker definitions, offset=%d length=%d",
            pointers.marker_definitions_offset, pointers.marker_definitions_length,
        )
        r.seek(pointers.marker_definitions_offset)

        definitions = []
        for _ in range(r.read_u8()):
            definition_id = r.read_string()
            values = [r.read_u8() for _ in range(r.read_u8())]
            definitions.append(MarkerDefinition(id=definition_id, values=values))
        return definitions

    def resolve_definition(self, marker_type: int,
                           definitions: List[MarkerDefinition]) -> Optional[MarkerDefinition]:
        """Pick the definition that describes a marker's fields.

        Every marker is decoded with the note definition regardless of its
        type byte. Override to select by type.
        """
        for definition in definitions:
            if definition.id == self.note_definition:
                return definition
        return None

    def _read_markers(self, pointers: Pointers,
                      definitions: List[MarkerDefinition]) -> List[Marker]:
        r = self.reader
        logger.debug(
            "Reading markers, offset=%d length=%d",
            pointers.marker_offset, pointers.marker_length,
        )
        if pointers.marker_length and not definitions:
            raise MalformedSectionError(
                "markers", f"{pointers.marker_length} bytes of markers but no marker definitions"
            )

        if not pointers.marker_length:
            return []

        r.seek(pointers.marker_offset)
        end_offset = pointers.marker_offset + pointers.marker_length

        markers = []
        while r.offset < end_offset:
            position = r.read_u32()
            marker_type = r.read_u8()
            definition = self.resolve_definition(marker_type, definitions)
            fields = read_marker_fields(r, definition.values) if definition else ()
            markers.append(Marker(position=position, type=marker_type, fields=fields))

        logger.debug("Read %d markers", len(markers))
        return markers


def parse_bytes(data: bytes, **options) -> ParsedMap:
    """Parse an SSPM file already loaded into memory."""
    return SSPMParser(data, **options).parse()


def parse_file(path: Union[str, Path], **options) -> ParsedMap:
    """Read and parse an SSPM file from disk."""
    with open(path, "rb") as f:
        data = f.read()
    return parse_bytes(data, **options)
