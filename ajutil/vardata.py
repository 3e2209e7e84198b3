"""Read and write length-prefixed binary data.

Each record is the length of the data followed by the data itself. The
length is either a fixed-width unsigned integer (:class:`FixedLengthPrefix`)
or an unsigned LEB128 varint of 1 to 10 bytes (:class:`VarintPrefix`).

Streams are binary file-like objects: writers need ``write`` and readers
need ``read``.
"""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass, replace
from typing import Any

__all__ = [
    "ByteOrder",
    "VarintOverflowError",
    "FixedLengthPrefix",
    "VarintPrefix",
    "MAX_VARINT_LEN64",
    "uint8_prefix",
    "uint16_prefix",
    "uint32_prefix",
    "uint64_prefix",
    "varint_prefix",
]

MAX_VARINT_LEN64 = 10
"""Maximum number of bytes in a varint encoding of a 64-bit value."""

_STRING_ERRORS = "surrogateescape"
_STRUCT_CODES = {1: "B", 2: "H", 4: "I", 8: "Q"}


class ByteOrder(enum.Enum):
    """Byte order of a fixed-width length prefix."""

    LITTLE = "<"
    BIG = ">"
    NATIVE = "="


class VarintOverflowError(ValueError):
    """A varint length prefix does not fit in 64 bits."""

    def __init__(self, message: str = "varint overflows a 64-bit integer") -> None:
        super().__init__(message)


def _read_exact(stream: Any, count: int) -> bytes:
    """Read exactly ``count`` bytes, raising EOFError if the stream ends first."""
    chunks = []
    remaining = count
    while remaining > 0:
        chunk = stream.read(remaining)
        if not chunk:
            break
        chunks.append(bytes(chunk))
        remaining -= len(chunk)
    data = b"".join(chunks)
    if len(data) < count:
        raise EOFError(f"expected {count} bytes but only {len(data)} were available")
    return data


def _write(stream: Any, data: bytes) -> int:
    written = stream.write(data)
    return len(data) if written is None else written


def _into(buffer: bytearray | memoryview | None, data: bytes) -> bytes | memoryview:
    """Place ``data`` in ``buffer`` when it is writable and large enough."""
    if buffer is not None:
        view = memoryview(buffer)
        if not view.readonly and view.nbytes >= len(data):
            view = view.cast("B")[: len(data)]
            view[:] = data
            return view
    return data


def _read_payload(
    stream: Any, count: int, buffer: bytearray | memoryview | None
) -> bytes | memoryview:
    try:
        data = _read_exact(stream, count)
    except EOFError as exc:
        raise EOFError(f"failed to read the expected size {count} of data. {exc}") from exc
    return _into(buffer, data)


@dataclass(frozen=True)
class FixedLengthPrefix:
    """Length-prefixed data whose prefix is a fixed-width unsigned integer.

    The default byte order is little endian.
    """

    prefix_size: int
    byte_order: ByteOrder = ByteOrder.LITTLE

    def __post_init__(self) -> None:
        if self.prefix_size not in _STRUCT_CODES:
            raise ValueError(f"unsupported prefix size {self.prefix_size}")

    @property
    def max_size(self) -> int:
        """Largest data length the prefix can record."""
        return (1 << (8 * self.prefix_size)) - 1

    @property
    def _format(self) -> str:
        return self.byte_order.value + _STRUCT_CODES[self.prefix_size]

    def little_endian(self) -> FixedLengthPrefix:
        """Return a copy that uses little endian byte order."""
        return replace(self, byte_order=ByteOrder.LITTLE)

    def big_endian(self) -> FixedLengthPrefix:
        """Return a copy that uses big endian byte order."""
        return replace(self, byte_order=ByteOrder.BIG)

    def native_endian(self) -> FixedLengthPrefix:
        """Return a copy that uses the platform's byte order."""
        return replace(self, byte_order=ByteOrder.NATIVE)

    def _write_record(self, stream: Any, payload: bytes, what: str) -> int:
        if len(payload) > self.max_size:
            raise ValueError(
                f"failed to write {what} of size {len(payload)}. "
                f"maximum size allowed is {self.max_size}"
            )
        _write(stream, struct.pack(self._format, len(payload)))
        return _write(stream, payload) + self.prefix_size

    def write(self, stream: Any, data: bytes | bytearray | memoryview) -> int:
        """Write the length of ``data`` followed by ``data``.

        Returns the number of bytes written, prefix included. Raises
        ValueError, writing nothing, if ``data`` is longer than ``max_size``.
        """
        return self._write_record(stream, bytes(data), "data")

    def read(
        self, stream: Any, buffer: bytearray | memoryview | None = None
    ) -> tuple[bytes | memoryview, int]:
        """Read one record and return its data and the bytes consumed.

        When ``buffer`` is writable and large enough the data is placed in it
        and a memoryview over the filled part is returned; otherwise new
        bytes are returned. Raises EOFError if the stream ends early.
        """
        try:
            header = _read_exact(stream, self.prefix_size)
        except EOFError as exc:
            raise EOFError(f"failed to read the size of the data. {exc}") from exc
        (count,) = struct.unpack(self._format, header)
        data = _read_payload(stream, count, buffer)
        return data, count + self.prefix_size

    def write_string(self, stream: Any, text: str) -> int:
        """Write ``text`` encoded as UTF-8 with its byte length as prefix."""
        return self._write_record(stream, text.encode("utf-8", _STRING_ERRORS), "string")

    def read_string(self, stream: Any) -> tuple[str, int]:
        """Read one record as UTF-8 text and return it with the bytes consumed."""
        data, count = self.read(stream)
        return bytes(data).decode("utf-8", _STRING_ERRORS), count


def _encode_uvarint(value: int) -> bytes:
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


@dataclass(frozen=True)
class VarintPrefix:
    """Length-prefixed data whose prefix is an unsigned varint of 1 to 10 bytes."""

    byte_order: ByteOrder = ByteOrder.LITTLE

    def _read_uvarint(self, stream: Any) -> tuple[int, int]:
        value = 0
        shift = 0
        for index in range(MAX_VARINT_LEN64):
            chunk = stream.read(1)
            if not chunk:
                if index > 0:
                    raise EOFError("unexpected end of data inside a varint")
                raise EOFError("end of data")
            byte = chunk[0]
            if byte < 0x80:
                if index == MAX_VARINT_LEN64 - 1 and byte > 1:
                    raise VarintOverflowError()
                return value | (byte << shift), index + 1
            value |= (byte & 0x7F) << shift
            shift += 7
        raise VarintOverflowError()

    def _write_record(self, stream: Any, payload: bytes) -> int:
        prefix = _encode_uvarint(len(payload))
        _write(stream, prefix)
        return _write(stream, payload) + len(prefix)

    def write(self, stream: Any, data: bytes | bytearray | memoryview) -> int:
        """Write the length of ``data`` as a varint followed by ``data``.

        Returns the number of bytes written, prefix included.
        """
        return self._write_record(stream, bytes(data))

    def read(
        self, stream: Any, buffer: bytearray | memoryview | None = None
    ) -> tuple[bytes | memoryview, int]:
        """Read one record and return its data and the bytes consumed.

        When ``buffer`` is writable and large enough the data is placed in it
        and a memoryview over the filled part is returned; otherwise new
        bytes are returned. Raises EOFError if the stream ends early and
        VarintOverflowError for a prefix beyond 64 bits.
        """
        count, prefix_size = self._read_uvarint(stream)
        data = _read_payload(stream, count, buffer)
        return data, count + prefix_size

    def write_string(self, stream: Any, text: str) -> int:
        """Write ``text`` encoded as UTF-8 with its byte length as prefix."""
        return self._write_record(stream, text.encode("utf-8", _STRING_ERRORS))

    def read_string(self, stream: Any) -> tuple[str, int]:
        """Read one record as UTF-8 text and return it with the bytes consumed."""
        data, count = self.read(stream)
        return bytes(data).decode("utf-8", _STRING_ERRORS), count


def uint8_prefix() -> FixedLengthPrefix:
    """Records with a 1-byte length prefix."""
    return FixedLengthPrefix(1)


def uint16_prefix() -> FixedLengthPrefix:
    """Records with a 2-byte length prefix."""
    return FixedLengthPrefix(2)


def uint32_prefix() -> FixedLengthPrefix:
    """Records with a 4-byte length prefix."""
    return FixedLengthPrefix(4)


def uint64_prefix() -> FixedLengthPrefix:
    """Records with an 8-byte length prefix."""
    return FixedLengthPrefix(8)


def varint_prefix() -> VarintPrefix:
    """Records with a varint length prefix."""
    return VarintPrefix()