from chunk_errors import InvalidChunkType

TYPE_SIZE = 4

# bit 5 of an ASCII letter is 0 for uppercase, 1 for lowercase
CASE_BIT = 0x20

# CC - critical chunk | AC - ancillary chunk
chunk_types = {
    "49484452": "Image header",  # CC IHDR
    "504c5445": "Palette",  # CC PLTE
    "49444154": "Image data",  # CC IDAT
    "49454e44": "Image trailer",  # CC IEND
    "73524742": "Standard RGB colour space",  # AC sRGB
    "67414d41": "Image gamma",  # AC gAMA
    "70485973": "Physical pixel dimensions",  # AC pHYs
    "73424954": "Significant bits",  # AC sBIT
    "73504c54": "Suggested palette",  # AC sPLT
    "74494d45": "Last-modification time",  # AC tIME
    "6348524d": "Primary chromaticities",  # AC cHRM
    "74455874": "Textual data",  # AC tEXt
    "69545874": "International textual data",  # AC iTXt
    "7a545874": "Compressed textual data",  # AC zTXt
    "68495354": "Palette histogram",  # AC hIST
    "74524e53": "Transparency",  # AC tRNS
    "624b4744": "Background colour",  # AC bKGD
}


def _is_ascii_letter(byte):
    return 65 <= byte <= 90 or 97 <= byte <= 122


class ChunkType:
    """Four-letter chunk tag; the case of each letter carries one property bit.

    byte 0 uppercase -> critical, lowercase -> ancillary
    byte 1 uppercase -> public, lowercase -> private
    byte 2 uppercase -> conforming (reserved bit unset)
    byte 3 lowercase -> safe to copy
    """

    __slots__ = ("_bytes",)

    def __init__(self, value):
        if isinstance(value, str):
            tag = self._bytes_from_str(value)
        else:
            tag = self._bytes_from_array(value)
        object.__setattr__(self, "_bytes", tag)

    @classmethod
    def from_bytes(cls, value):
        return cls(cls._bytes_from_array(value))

    @classmethod
    def from_str(cls, value):
        return cls(cls._bytes_from_str(value))

    @staticmethod
    def _bytes_from_array(value):
        if isinstance(value, (str, int)):
            raise InvalidChunkType(value, "array")
        try:
            tag = bytes(value)
        except (TypeError, ValueError):
            raise InvalidChunkType(value, "array") from None

        if len(tag) != TYPE_SIZE or not all(_is_ascii_letter(b) for b in tag):
            raise InvalidChunkType(value, "array")
        return tag

    @staticmethod
    def _bytes_from_str(value):
        if not all(_is_ascii_letter(ord(c)) for c in value):
            raise InvalidChunkType(value, "string")

        tag = value.encode("utf-8")
        if len(tag) != TYPE_SIZE:
            raise InvalidChunkType(value, "string")
        return tag

    def bytes(self):
        return self._bytes

    def is_critical(self):
        return not self._bytes[0] & CASE_BIT

    def is_public(self):
        return not self._bytes[1] & CASE_BIT

    def is_reserved_bit_valid(self):
        return not self._bytes[2] & CASE_BIT

    def is_safe_to_copy(self):
        return bool(self._bytes[3] & CASE_BIT)

    def is_valid(self):
        return (
            all(_is_ascii_letter(b) for b in self._bytes)
            and self.is_reserved_bit_valid()
        )

    def name(self):
        """Descriptive name of a well-known PNG chunk, or None."""
        return chunk_types.get(self._bytes.hex())

    def __setattr__(self, name, value):
        raise AttributeError("ChunkType is immutable")

    def __reduce__(self):
        return (ChunkType, (self._bytes,))

    def __eq__(self, other):
        if not isinstance(other, ChunkType):
            return NotImplemented
        return self._bytes == other._bytes

    def __hash__(self):
        return hash(self._bytes)

    def __str__(self):
        return self._bytes.decode("ascii")

    def __repr__(self):
        return f"ChunkType({str(self)!r})"
