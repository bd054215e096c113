"""Exceptions raised while decoding SSPM files."""


class SSPMError(ValueError):
    """Base class for SSPM decoding failures."""


class OutOfBoundsError(SSPMError):
    """A read would run past the end of the buffer."""

    def __init__(self, offset: int, length: int, buffer_length: int):
        self.offset = offset
        self.length = length
        self.buffer_length = buffer_length
        super().__init__(
            f"Attempt to read beyond buffer length: Offset={offset}, "
            f"Length={length}, Buffer Length={buffer_length}"
        )


class UnsupportedTagError(SSPMError):
    """A field type tag that cannot be decoded where it appeared."""

    def __init__(self, tag: int):
        self.tag = int(tag)
        super().__init__(f"Unexpected data type 0x{self.tag:02x} in marker definition")


class MalformedSectionError(SSPMError):
    """A section is structurally inconsistent."""

    def __init__(self, section: str, message: str):
        self.section = section
        super().__init__(f"Malformed {section} section: {message}")
