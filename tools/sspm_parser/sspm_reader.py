"""Bounds-checked cursor over an in-memory SSPM buffer."""
import struct

from .errors import OutOfBoundsError


class SSPMReader:
    """Reads little-endian primitives from a byte buffer.

    Every read validates the requested span first; a failed read leaves
    the offset untouched.
    """

    def __init__(self, data: bytes, offset: int = 0):
        self._data = bytes(data)
        self._offset = 0
        self.seek(offset)

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def __len__(self) -> int:
        return len(self._data)

    def check_bounds(self, length: int):
        """Raise OutOfBoundsError if length bytes are not available."""
        if length < 0 or self._offset + length > len(self._data):
            raise OutOfBoundsError(self._offset, length, len(self._data))

    def seek(self, offset: int):
        """Move to an absolute offset. The end of the buffer is a valid target."""
        if offset < 0 or offset > len(self._data):
            raise OutOfBoundsError(offset, 0, len(self._data))
        self._offset = offset

    def _unpack(self, fmt: str, size: int):
        self.check_bounds(size)
        value = struct.unpack_from(fmt, self._data, self._offset)[0]
        self._offset += size
        return value

    def read_u8(self) -> int:
        return self._unpack("<B", 1)

    def read_i8(self) -> int:
        return self._unpack("<b", 1)

    def read_u16(self) -> int:
        return self._unpack("<H", 2)

    def read_u32(self) -> int:
        return self._unpack("<I", 4)

    def read_u64(self) -> int:
        """Read an 8-byte value as two uint32 halves, low half first."""
        self.check_bounds(8)
        low, high = struct.unpack_from("<II", self._data, self._offset)
        self._offset += 8
        return low + high * 2 ** 32

    def read_f32(self) -> float:
        return self._unpack("<f", 4)

    def read_f64(self) -> float:
        return self._unpack("<d", 8)

    def read_bool(self) -> bool:
        """Read a flag byte; only 1 counts as set."""
        return self.read_u8() == 1

    def read_bytes(self, length: int) -> bytes:
        self.check_bounds(length)
        value = self._data[self._offset:self._offset + length]
        self._offset += length
        return value

    def read_text(self, length: int) -> str:
        """Read length bytes as UTF-8. Invalid sequences become U+FFFD."""
        return self.read_bytes(length).decode("utf-8", errors="replace")

    def read_string(self) -> str:
        """Read a uint16 length-prefixed UTF-8 string.

        The offset is restored if the payload is out of bounds.
        """
        start = self._offset
        length = self.read_u16()
        try:
            return self.read_text(length)
        except OutOfBoundsError:
            self._offset = start
            raise

    def read_string_list(self, count: int):
        return [self.read_string() for _ in range(count)]
