import io

import pytest

from ajutil.vardata import (
    MAX_VARINT_LEN64,
    ByteOrder,
    VarintOverflowError,
    uint8_prefix,
    uint16_prefix,
    uint32_prefix,
    uint64_prefix,
    varint_prefix,
)

FOX = b"The quick brown fox"
FOX_SENTENCE = "The quick brown fox jumped over the lazy dog!"


def test_init():
    u8 = uint8_prefix()
    assert u8.prefix_size == 1
    assert u8.max_size == 255
    assert u8.byte_order is ByteOrder.LITTLE

    u16 = uint16_prefix()
    assert u16.prefix_size == 2
    assert u16.max_size == 65535
    assert u16.byte_order is ByteOrder.LITTLE

    u32 = uint32_prefix()
    assert u32.prefix_size == 4
    assert u32.byte_order is ByteOrder.LITTLE

    u64 = uint64_prefix()
    assert u64.prefix_size == 8
    assert u64.max_size == 2**64 - 1
    assert u64.byte_order is ByteOrder.LITTLE

    u16_big = uint16_prefix().big_endian()
    assert u16_big.prefix_size == 2
    assert u16_big.max_size == 65535
    assert u16_big.byte_order is ByteOrder.BIG

    assert uint8_prefix().little_endian().byte_order is ByteOrder.LITTLE
    assert uint8_prefix().big_endian().byte_order is ByteOrder.BIG
    assert uint8_prefix().native_endian().byte_order is ByteOrder.NATIVE

    assert varint_prefix().byte_order is ByteOrder.LITTLE


def test_uint32_max_size():
    assert uint32_prefix().max_size == 4294967295


@pytest.mark.parametrize("factory", [uint8_prefix, uint16_prefix, uint32_prefix, uint64_prefix])
def test_write_and_read(factory):
    stream = io.BytesIO()
    v = factory()
    wcount = v.write(stream, FOX)
    assert wcount == len(FOX) + v.prefix_size

    stream.seek(0)
    data, rcount = v.read(stream, None)
    assert rcount == len(FOX) + v.prefix_size
    assert data == FOX


def test_prefix_encoding_byte_order():
    little = io.BytesIO()
    uint16_prefix().write(little, b"abc")
    assert little.getvalue() == b"\x03\x00abc"

    big = io.BytesIO()
    uint16_prefix().big_endian().write(big, b"abc")
    assert big.getvalue() == b"\x00\x03abc"

    big.seek(0)
    data, count = uint16_prefix().big_endian().read(big)
    assert data == b"abc"
    assert count == 5


def test_read_using_existing_buffer():
    stream = io.BytesIO()
    v = uint8_prefix()
    assert v.write(stream, FOX) == len(FOX) + v.prefix_size

    into_buffer = bytearray(len(FOX) + 4)
    stream.seek(0)
    data, rcount = v.read(stream, into_buffer)
    assert rcount == len(FOX) + v.prefix_size
    assert data == FOX
    assert isinstance(data, memoryview) and data.obj is into_buffer
    assert bytes(into_buffer[: len(FOX)]) == FOX

    stream = io.BytesIO()
    v.write(stream, FOX)
    stream.seek(0)
    small_buffer = bytearray(len(FOX) - 2)
    data, rcount = v.read(stream, small_buffer)
    assert rcount == len(FOX) + v.prefix_size
    assert data == FOX
    assert small_buffer == bytearray(len(FOX) - 2)
    assert not (isinstance(data, memoryview) and data.obj is small_buffer)


def test_write_too_big():
    stream = io.BytesIO()
    with pytest.raises(ValueError, match="maximum size allowed is 255"):
        uint8_prefix().write(stream, bytes(256))
    assert stream.getvalue() == b""


def test_write_string_too_big():
    stream = io.BytesIO()
    with pytest.raises(ValueError):
        uint8_prefix().write_string(stream, "x" * 256)
    assert stream.getvalue() == b""


def test_write_and_read_string():
    stream = io.BytesIO()
    for v in (uint8_prefix(), uint16_prefix(), uint32_prefix(), uint64_prefix()):
        start = stream.tell()
        wcount = v.write_string(stream, FOX_SENTENCE)
        assert wcount == len(FOX_SENTENCE) + v.prefix_size
        stream.seek(start)
        text, rcount = v.read_string(stream)
        assert text == FOX_SENTENCE
        assert rcount == len(FOX_SENTENCE) + v.prefix_size


def test_string_counts_utf8_bytes():
    stream = io.BytesIO()
    v = uint8_prefix()
    assert v.write_string(stream, "語") == 4
    assert stream.getvalue() == b"\x03" + "語".encode("utf-8")
    stream.seek(0)
    assert v.read_string(stream) == ("語", 4)


def test_read_from_empty_stream():
    with pytest.raises(EOFError, match="size of the data"):
        uint16_prefix().read(io.BytesIO(b""))


def test_read_truncated_data():
    with pytest.raises(EOFError, match="expected size 5"):
        uint8_prefix().read(io.BytesIO(b"\x05abc"))


def test_write_and_read_varint():
    v = varint_prefix()
    stream = io.BytesIO()
    assert v.write(stream, FOX) == len(FOX) + 1
    stream.seek(0)
    data, rcount = v.read(stream, None)
    assert rcount == len(FOX) + 1
    assert data == FOX

    expected = bytes(200)
    stream = io.BytesIO()
    assert v.write(stream, expected) == len(expected) + 2
    assert stream.getvalue()[:2] == b"\xc8\x01"
    stream.seek(0)
    data, rcount = v.read(stream, None)
    assert rcount == len(expected) + 2
    assert data == expected


def test_read_varint_using_existing_buffer():
    v = varint_prefix()
    stream = io.BytesIO()
    assert v.write(stream, FOX) == len(FOX) + 1

    into_buffer = bytearray(len(FOX) + MAX_VARINT_LEN64)
    stream.seek(0)
    data, rcount = v.read(stream, into_buffer)
    assert rcount == len(FOX) + 1
    assert data == FOX
    assert isinstance(data, memoryview) and data.obj is into_buffer

    stream = io.BytesIO()
    v.write(stream, FOX)
    stream.seek(0)
    small_buffer = bytearray(len(FOX) - 2)
    data, rcount = v.read(stream, small_buffer)
    assert rcount == len(FOX) + 1
    assert data == FOX
    assert not (isinstance(data, memoryview) and data.obj is small_buffer)


def test_write_and_read_string_varint():
    v = varint_prefix()
    stream = io.BytesIO()
    assert v.write_string(stream, FOX_SENTENCE) == len(FOX_SENTENCE) + 1
    stream.seek(0)
    assert v.read_string(stream) == (FOX_SENTENCE, len(FOX_SENTENCE) + 1)

    expected = "\x00" * 200
    stream = io.BytesIO()
    assert v.write_string(stream, expected) == len(expected) + 2
    stream.seek(0)
    assert v.read_string(stream) == (expected, len(expected) + 2)


def test_varint_overflow():
    with pytest.raises(VarintOverflowError):
        varint_prefix().read(io.BytesIO(b"\xff" * 10))
    with pytest.raises(VarintOverflowError):
        varint_prefix().read(io.BytesIO(b"\x80" * 9 + b"\x02"))


def test_varint_truncated_prefix():
    with pytest.raises(EOFError, match="inside a varint"):
        varint_prefix().read(io.BytesIO(b"\x80"))


def test_varint_empty_stream():
    with pytest.raises(EOFError):
        varint_prefix().read(io.BytesIO(b""))


def test_varint_truncated_data():
    with pytest.raises(EOFError, match="expected size 4"):
        varint_prefix().read(io.BytesIO(b"\x04ab"))