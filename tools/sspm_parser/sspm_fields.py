"""Typed field decoding for SSPM markers and custom data.

Wire encoding per type tag (all little-endian):
- 0x01: int8
- 0x02 / 0x03 / 0x04: uint16 / uint32 / uint64
- 0x05 / 0x06: float32 / float64
- 0x07: position, 1 discriminant byte then
  - 0x00: 2x uint8 (grid cell, "int")
  - otherwise: 2x float32 ("quantum")
- 0x08 / 0x09: uint16 length + payload
- 0x0a / 0x0b: uint32 length + payload
- 0x0c: array, custom data only (uint16 count + count values of the element type)

Buffers and strings are both returned as decoded UTF-8 text.
"""
from typing import Any, Iterable, List, Tuple

from .errors import OutOfBoundsError, UnsupportedTagError
from .sspm_reader import SSPMReader
from .sspm_types import CustomField, DataType, FieldValue, Position


def read_position(reader: SSPMReader) -> Position:
    """Read a position field body (discriminant + coordinates)."""
    if reader.read_u8() == 0x00:
        x = reader.read_u8()
        y = reader.read_u8()
        return Position(x=x, y=y, type="int")
    x = reader.read_f32()
    y = reader.read_f32()
    return Position(x=x, y=y, type="quantum")


_SCALAR_READERS = {
    DataType.INT8: SSPMReader.read_i8,
    DataType.UINT16: SSPMReader.read_u16,
    DataType.UINT32: SSPMReader.read_u32,
    DataType.UINT64: SSPMReader.read_u64,
    DataType.FLOAT32: SSPMReader.read_f32,
    DataType.FLOAT64: SSPMReader.read_f64,
    DataType.POSITION: read_position,
}


def read_marker_field(reader: SSPMReader, tag: int) -> Any:
    """Decode one value of the given type tag at the reader's offset.

    Raises:
        UnsupportedTagError: For 0x00, 0x0c and unknown tags
        OutOfBoundsError: If the value runs past the buffer; the reader
            is left where the field started
    """
    start = reader.offset
    try:
        if tag in _SCALAR_READERS:
            return _SCALAR_READERS[tag](reader)
        if tag in (DataType.BUFFER, DataType.STRING):
            return reader.read_text(reader.read_u16())
        if tag in (DataType.LONG_BUFFER, DataType.LONG_STRING):
            return reader.read_text(reader.read_u32())
    except OutOfBoundsError:
        reader.seek(start)
        raise
    raise UnsupportedTagError(tag)


def read_marker_fields(reader: SSPMReader, tags: Iterable[int]) -> Tuple[FieldValue, ...]:
    """Decode one value per tag, in order."""
    return tuple(FieldValue(tag=tag, value=read_marker_field(reader, tag)) for tag in tags)


def decode_custom_value(custom_field: CustomField) -> Any:
    """Decode a custom field's raw bytes to its declared type.

    Arrays hold a uint16 element count followed by that many values of
    array_type. Nested arrays are not supported.
    """
    reader = SSPMReader(custom_field.value)
    if custom_field.type != DataType.ARRAY:
        return read_marker_field(reader, custom_field.type)

    if custom_field.array_type is None:
        raise UnsupportedTagError(DataType.ARRAY)
    count = reader.read_u16()
    values: List[Any] = []
    for _ in range(count):
        values.append(read_marker_field(reader, custom_field.array_type))
    return values
