class ChunkError(ValueError):
    """Base class for everything the chunk codec raises."""


class InvalidChunkType(ChunkError):
    # form is "array" for raw bytes, "string" for text
    def __init__(self, value, form):
        self.value = value
        self.form = form
        super().__init__(f"Invalid chunk type ({form}): {value!r}")


class InvalidChunk(ChunkError):
    pass


class CrcMismatch(InvalidChunk):
    def __init__(self, expected, actual):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Chunk checksum failed: stored {expected:08x}, computed {actual:08x}"
        )


class InvalidText(ChunkError):
    def __init__(self, detected_encoding=None):
        self.detected_encoding = detected_encoding
        message = "Chunk data is not valid UTF-8"
        if detected_encoding:
            message += f" (looks like {detected_encoding})"
        super().__init__(message)


class ChunkTooLarge(ChunkError):
    def __init__(self, length):
        self.length = length
        super().__init__(f"Chunk data too large to frame: {length} bytes")
