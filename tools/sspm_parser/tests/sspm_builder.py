"""Helpers building synthetic SSPM files for tests."""
import struct

HEADER_SIZE = 10
METADATA_SIZE = 38
POINTERS_SIZE = 80
STRINGS_OFFSET = HEADER_SIZE + METADATA_SIZE + POINTERS_SIZE


def pack_string(text, prefix="<H"):
    data = text.encode("utf-8")
    return struct.pack(prefix, len(data)) + data


def pack_position(x, y, quantum=False):
    if quantum:
        return b"\x01" + struct.pack("<ff", x, y)
    return b"\x00" + struct.pack("<BB", x, y)


def note_marker(position, x, y, quantum=False, marker_type=0):
    """Marker using the standard ssp_note definition (one position field)."""
    return struct.pack("<IB", position, marker_type) + pack_position(x, y, quantum)


def pack_custom_fields(fields):
    """Encode custom data.

    Args:
        fields: List of (id, type, raw_value) or (id, type, raw_value, array_type)
    """
    data = struct.pack("<H", len(fields))
    for entry in fields:
        field_id, field_type, value = entry[:3]
        data += pack_string(field_id)
        data += struct.pack("<B", field_type)
        if field_type == 0x0C:
            data += struct.pack("<B", entry[3])
        data += struct.pack("<I", len(value)) + value
    return data


def pack_definitions(definitions):
    data = struct.pack("<B", len(definitions))
    for definition_id, tags in definitions:
        data += pack_string(definition_id)
        data += struct.pack("<B", len(tags)) + bytes(tags)
    return data


def build_sspm(
    map_id="test_map",
    map_name="Test Map",
    song_name="Test Song",
    mappers=("mapper",),
    custom_data=None,
    audio=None,
    cover=None,
    has_audio=None,
    has_cover=None,
    definitions=(("ssp_note", [0x07]),),
    markers=(),
    signature=b"SS+m",
    version=2,
    difficulty=3,
    rating=1234,
    sha1=b"\xab" * 20,
):
    """Build a complete SSPM file.

    Args:
        custom_data: Raw custom data section bytes, or None to omit it
        audio, cover: Raw section bytes, or None to omit them
        has_audio, has_cover: Metadata flags; default to whether the
            section is present
        markers: Iterable of already encoded markers

    Returns:
        bytes of the file
    """
    if has_audio is None:
        has_audio = audio is not None
    if has_cover is None:
        has_cover = cover is not None

    marker_data = b"".join(markers)

    strings = pack_string(map_id) + pack_string(map_name) + pack_string(song_name)
    strings += struct.pack("<H", len(mappers))
    for mapper in mappers:
        strings += pack_string(mapper)

    body = b""
    offset = STRINGS_OFFSET + len(strings)
    pointers = []
    for section in (custom_data, audio, cover):
        if section is None:
            pointers.append((0, 0))
        else:
            pointers.append((offset + len(body), len(section)))
            body += section

    definition_data = pack_definitions(definitions)
    pointers.append((offset + len(body), len(definition_data)))
    body += definition_data
    pointers.append((offset + len(body), len(marker_data)))
    body += marker_data

    header = signature + struct.pack("<H", version) + b"\x00" * 4

    metadata = sha1
    metadata += struct.pack("<III", 1000, len(markers), len(markers))
    metadata += struct.pack("<BH", difficulty, rating)
    metadata += struct.pack("<BBB", int(has_audio), int(has_cover), 0)

    pointer_table = b"".join(struct.pack("<QQ", o, n) for o, n in pointers)

    return header + metadata + pointer_table + strings + body
