"""Readers and writers that keep track of their offset in a stream."""

from __future__ import annotations

from typing import Any

from ajutil.safe import add64, int_to_uint64

__all__ = ["OffsetReader", "OffsetWriter"]


class OffsetReader:
    """Wrap a readable binary stream and count the bytes read from it.

    ``base_offset`` is the known offset of the stream's current position.
    Raises :class:`~ajutil.safe.IntegerOverflowError` if the offset would
    exceed the unsigned 64-bit range.
    """

    def __init__(self, source: Any, base_offset: int = 0) -> None:
        self._source = source
        self._offset = add64(base_offset, 0)

    @property
    def offset(self) -> int:
        """The current offset in bytes."""
        return self._offset

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes (all if negative) and advance the offset."""
        data = self._source.read(size)
        self._offset = add64(self._offset, len(data))
        return data

    def reset_offset(self, offset: int) -> None:
        """Set the known offset in bytes."""
        self._offset = add64(offset, 0)

    def readable(self) -> bool:
        return True


class OffsetWriter:
    """Wrap a writable binary stream and count the bytes written to it.

    ``base_offset`` is the known offset of the stream's current position.
    Raises :class:`~ajutil.safe.IntegerOverflowError` if the offset would
    exceed the unsigned 64-bit range.
    """

    def __init__(self, sink: Any, base_offset: int = 0) -> None:
        self._sink = sink
        self._offset = add64(base_offset, 0)

    @property
    def offset(self) -> int:
        """The current offset in bytes."""
        return self._offset

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Write ``data`` and advance the offset by the number of bytes written."""
        written = self._sink.write(data)
        if written is None:
            written = len(memoryview(data).cast("B"))
        self._offset = add64(self._offset, int_to_uint64(written))
        return written

    def reset_offset(self, offset: int) -> None:
        """Set the known offset in bytes."""
        self._offset = add64(offset, 0)

    def writable(self) -> bool:
        return True