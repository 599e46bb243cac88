import logging
import zlib

import chardet

from chunk_errors import ChunkTooLarge, CrcMismatch, InvalidChunk, InvalidChunkType
from chunk_errors import InvalidText
from chunk_type import TYPE_SIZE, ChunkType

logger = logging.getLogger(__name__)

# [4B length][4B type][payload][4B CRC]
LENGTH_SIZE = 4
CRC_SIZE = 4
HEADER_SIZE = LENGTH_SIZE + TYPE_SIZE
MIN_CHUNK_SIZE = HEADER_SIZE + CRC_SIZE
MAX_CHUNK_LENGTH = 0xFFFFFFFF
READ_BLOCK_SIZE = 64 * 1024


def crc32_of(type_bytes, data):
    """CRC-32 as PNG defines it, computed over the type tag followed by the data."""
    return zlib.crc32(data, zlib.crc32(type_bytes)) & 0xFFFFFFFF


def _read_exact(stream, size):
    # at most READ_BLOCK_SIZE per read; short result at end of stream
    parts = []
    remaining = size
    while remaining:
        part = stream.read(min(remaining, READ_BLOCK_SIZE))
        if not part:
            break
        parts.append(part)
        remaining -= len(part)
    return b"".join(parts)


class Chunk:
    """A single length/type/data/CRC frame.

    Length and CRC are always derived from the type and data, so a Chunk
    cannot disagree with itself. Instances are immutable.
    """

    __slots__ = ("_length", "_chunk_type", "_data", "_crc")

    def __init__(self, chunk_type, data=b""):
        if not isinstance(chunk_type, ChunkType):
            chunk_type = ChunkType(chunk_type)
        if len(data) > MAX_CHUNK_LENGTH:
            raise ChunkTooLarge(len(data))
        data = bytes(data)

        object.__setattr__(self, "_length", len(data))
        object.__setattr__(self, "_chunk_type", chunk_type)
        object.__setattr__(self, "_data", data)
        object.__setattr__(self, "_crc", crc32_of(chunk_type.bytes(), data))

    @classmethod
    def parse(cls, buf):
        """Parse exactly one frame; extra bytes after the CRC are an error."""
        buf = memoryview(buf).cast("B")
        chunk, end = cls._parse_frame(buf)
        if end != len(buf):
            logger.debug("Rejecting frame: %d trailing bytes", len(buf) - end)
            raise InvalidChunk(
                f"Declared length {chunk.length()} does not match frame size {len(buf)}"
            )
        return chunk

    @classmethod
    def parse_prefix(cls, buf):
        """Parse the frame at the start of buf, returning (chunk, bytes consumed)."""
        return cls._parse_frame(buf)

    @classmethod
    def _parse_frame(cls, buf):
        buf = memoryview(buf).cast("B")
        if len(buf) < MIN_CHUNK_SIZE:
            logger.debug("Rejecting frame: only %d bytes", len(buf))
            raise InvalidChunk(f"Chunk too short: {len(buf)} bytes")

        length = int.from_bytes(buf[:LENGTH_SIZE], byteorder="big")
        try:
            chunk_type = ChunkType.from_bytes(bytes(buf[LENGTH_SIZE:HEADER_SIZE]))
        except InvalidChunkType as err:
            logger.debug("Rejecting frame: bad type tag %r", err.value)
            raise InvalidChunk(f"Invalid chunk type: {err}") from err

        data_end = HEADER_SIZE + length
        if len(buf) < data_end + CRC_SIZE:
            logger.debug(
                "Rejecting %s frame: declared %d data bytes, %d available",
                chunk_type,
                length,
                len(buf) - MIN_CHUNK_SIZE,
            )
            raise InvalidChunk(
                f"Chunk {chunk_type} declares {length} data bytes but frame is "
                f"{len(buf)} bytes"
            )

        chunk = cls(chunk_type, buf[HEADER_SIZE:data_end])

        stored_crc = int.from_bytes(buf[data_end : data_end + CRC_SIZE], byteorder="big")
        if stored_crc != chunk.crc():
            logger.debug("Rejecting %s frame: CRC mismatch", chunk_type)
            raise CrcMismatch(stored_crc, chunk.crc())

        return chunk, data_end + CRC_SIZE

    @classmethod
    def read_from(cls, stream):
        """Read one frame from a binary stream. Returns None at end of stream."""
        length_bytes = stream.read(LENGTH_SIZE)
        if not length_bytes:
            return None
        header = length_bytes + _read_exact(stream, HEADER_SIZE - len(length_bytes))
        if len(header) < HEADER_SIZE:
            logger.debug("Rejecting frame: stream ended after %d bytes", len(header))
            raise InvalidChunk(f"Truncated chunk: got {len(header)} bytes")

        length = int.from_bytes(header[:LENGTH_SIZE], byteorder="big")
        rest = _read_exact(stream, length + CRC_SIZE)

        frame = header + rest
        if len(frame) < length + MIN_CHUNK_SIZE:
            logger.debug("Rejecting frame: stream ended after %d bytes", len(frame))
            raise InvalidChunk(
                f"Truncated chunk: declared {length} data bytes, got {len(frame)} bytes"
            )
        return cls.parse(frame)

    def length(self):
        return self._length

    def chunk_type(self):
        return self._chunk_type

    def data(self):
        return self._data

    def crc(self):
        return self._crc

    def data_as_text(self):
        try:
            return self._data.decode("utf-8")
        except UnicodeDecodeError as err:
            detected_encoding = chardet.detect(self._data)["encoding"]
            raise InvalidText(detected_encoding) from err

    def serialize(self):
        return (
            self._length.to_bytes(LENGTH_SIZE, byteorder="big")
            + self._chunk_type.bytes()
            + self._data
            + self._crc.to_bytes(CRC_SIZE, byteorder="big")
        )

    def write_to(self, file):
        frame = self.serialize()
        file.write(frame)
        return len(frame)

    def __bytes__(self):
        return self.serialize()

    def __setattr__(self, name, value):
        raise AttributeError("Chunk is immutable")

    def __reduce__(self):
        return (Chunk, (self._chunk_type, self._data))

    def __eq__(self, other):
        if not isinstance(other, Chunk):
            return NotImplemented
        return (
            self._length == other._length
            and self._chunk_type == other._chunk_type
            and self._data == other._data
            and self._crc == other._crc
        )

    def __hash__(self):
        return hash((self._chunk_type, self._data))

    def __str__(self):
        return self.data_as_text()

    def __repr__(self):
        name = self._chunk_type.name()
        if name is None:
            return f"<Chunk Type:{self._chunk_type} Length:{self._length}>"
        return f"<Chunk Type:{self._chunk_type} ({name}) Length:{self._length}>"
