import copy
import pickle

import pytest

from chunk_errors import ChunkError, InvalidChunkType
from chunk_type import ChunkType


def test_chunk_type_from_bytes():
    chunk_type = ChunkType.from_bytes([82, 117, 83, 116])
    assert chunk_type.bytes() == bytes([82, 117, 83, 116])


def test_chunk_type_from_str():
    assert ChunkType.from_str("RuSt") == ChunkType.from_bytes(b"RuSt")


def test_constructor_dispatches_on_input():
    assert ChunkType("RuSt") == ChunkType(b"RuSt") == ChunkType(bytearray(b"RuSt"))


def test_rust_fixture_classification():
    chunk_type = ChunkType.from_str("RuSt")
    assert chunk_type.is_critical()
    assert not chunk_type.is_public()
    assert chunk_type.is_reserved_bit_valid()
    assert chunk_type.is_safe_to_copy()
    assert chunk_type.is_valid()


@pytest.mark.parametrize(
    "tag, predicate, expected",
    [
        ("RuSt", "is_critical", True),
        ("ruSt", "is_critical", False),
        ("RUSt", "is_public", True),
        ("RuSt", "is_public", False),
        ("RuSt", "is_reserved_bit_valid", True),
        ("Rust", "is_reserved_bit_valid", False),
        ("RuSt", "is_safe_to_copy", True),
        ("RuST", "is_safe_to_copy", False),
    ],
)
def test_case_bits(tag, predicate, expected):
    assert getattr(ChunkType.from_str(tag), predicate)() is expected


def test_reserved_bit_makes_type_invalid():
    chunk_type = ChunkType.from_str("Rust")
    assert not chunk_type.is_reserved_bit_valid()
    assert not chunk_type.is_valid()


def test_digit_is_rejected():
    with pytest.raises(InvalidChunkType) as excinfo:
        ChunkType.from_str("Ru1t")
    assert excinfo.value.form == "string"


@pytest.mark.parametrize("tag", ["", "RuS", "RuStX", "Ru t", "RuSé", "Rußt"])
def test_bad_strings_are_rejected(tag):
    with pytest.raises(InvalidChunkType):
        ChunkType.from_str(tag)


@pytest.mark.parametrize(
    "value",
    [b"Ru1t", b"RuS", b"RuStX", [82, 117, 83, 300], b"Ru\x00t", b"Ru[t", b"Ru@t"],
)
def test_bad_arrays_are_rejected(value):
    with pytest.raises(InvalidChunkType) as excinfo:
        ChunkType.from_bytes(value)
    assert excinfo.value.form == "array"


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        ChunkType("12ab")
    assert issubclass(InvalidChunkType, ChunkError)


def test_equality_is_case_sensitive():
    assert ChunkType("RuSt") != ChunkType("rust")
    assert ChunkType("RuSt") != b"RuSt"


def test_hash_follows_equality():
    seen = {ChunkType("IDAT"): 1}
    assert seen[ChunkType(b"IDAT")] == 1


def test_string_forms():
    chunk_type = ChunkType([82, 117, 83, 116])
    assert str(chunk_type) == "RuSt"
    assert repr(chunk_type) == "ChunkType('RuSt')"


def test_known_chunk_names():
    assert ChunkType("IHDR").name() == "Image header"
    assert ChunkType("tEXt").name() == "Textual data"
    assert ChunkType("RuSt").name() is None


def test_standard_chunks_classify_correctly():
    assert ChunkType("IHDR").is_critical()
    assert ChunkType("IEND").is_valid()
    assert not ChunkType("tEXt").is_critical()
    assert ChunkType("tEXt").is_safe_to_copy()


def test_chunk_type_is_immutable():
    chunk_type = ChunkType("RuSt")
    with pytest.raises(AttributeError):
        chunk_type._bytes = b"IEND"


def test_chunk_type_copies_and_pickles():
    chunk_type = ChunkType("RuSt")
    assert copy.copy(chunk_type) == chunk_type
    assert copy.deepcopy(chunk_type) == chunk_type
    assert pickle.loads(pickle.dumps(chunk_type)) == chunk_type
