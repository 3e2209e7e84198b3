"""A buffered file that keeps track of its offset without asking the OS.

:class:`TrackedFile` wraps a binary file object and buffers reads and writes
separately. It counts the bytes that pass through it, so the current offset
is known without seeking. Offsets are unsigned 64-bit values; going beyond
that range raises :class:`~ajutil.safe.IntegerOverflowError` or
:class:`~ajutil.safe.IntegerUnderflowError`.
"""

from __future__ import annotations

import os
from typing import Any, BinaryIO, Callable

from ajutil.safe import add64, int64_to_uint64, sub64

__all__ = ["TrackedFile", "open_file", "open_for_reading", "create"]

_BUFFER_SIZE = 4096
_REPLACEMENT = "\ufffd"


def _rune_length(lead: int) -> int:
    """Number of bytes a UTF-8 sequence starting with ``lead`` should span."""
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 1


def _write_all(raw: Any, data: bytes) -> None:
    view = memoryview(data)
    while view:
        written = raw.write(view)
        if written is None:
            written = len(view)
        if written <= 0:
            raise OSError("short write")
        view = view[written:]


class TrackedFile:
    """A file with separate read and write buffers and a tracked offset.

    After moving the position with :meth:`seek`, call
    :meth:`reset_read_buffer` or :meth:`reset_write_buffer` so that stale
    buffered data is not used.
    """

    def __init__(self, raw: BinaryIO) -> None:
        self._raw: Any = raw
        self._rbuf = b""
        self._rpos = 0
        self._last_byte = -1
        self._wbuf = bytearray()
        self._offset = 0
        self.sync_offset()

    # -- state ---------------------------------------------------------------

    def _file(self) -> Any:
        if self._raw is None:
            raise ValueError("I/O operation on closed file")
        return self._raw

    @property
    def closed(self) -> bool:
        """True once the file has been closed."""
        return self._raw is None

    @property
    def file(self) -> BinaryIO:
        """The underlying file object."""
        return self._file()

    @property
    def name(self) -> Any:
        """Path of the file."""
        return self._file().name

    @property
    def offset(self) -> int:
        """The current offset in bytes."""
        return self._offset

    @offset.setter
    def offset(self, value: int) -> None:
        self._offset = add64(value, 0)

    def _advance(self, count: int) -> None:
        self._offset = add64(self._offset, count)

    def close(self) -> None:
        """Close the file. Unflushed written data is discarded."""
        raw = self._file()
        self._raw = None
        self._rbuf = b""
        self._rpos = 0
        self._wbuf = bytearray()
        raw.close()

    def stat(self) -> os.stat_result:
        """Return information describing the file."""
        return os.fstat(self._file().fileno())

    def __enter__(self) -> TrackedFile:
        return self

    def __exit__(self, *args: Any) -> None:
        if self._raw is None:
            return
        exc_type = args[0] if args else None
        try:
            if exc_type is None:
                self.flush()
        finally:
            self.close()

    # -- reading -------------------------------------------------------------

    @property
    def _buffered(self) -> int:
        return len(self._rbuf) - self._rpos

    def _fill(self) -> bool:
        """Read once more from the file into the read buffer. False at EOF."""
        raw = self._file()
        want = max(_BUFFER_SIZE - self._buffered, 1)
        chunk = raw.read(want)
        if not chunk:
            return False
        self._rbuf = self._rbuf[self._rpos:] + bytes(chunk)
        self._rpos = 0
        return True

    def _take(self, count: int) -> bytes:
        data = self._rbuf[self._rpos:self._rpos + count]
        self._rpos += len(data)
        return data

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, all remaining bytes if negative.

        At most one read is made from the file, so fewer bytes than asked
        for may be returned. Returns ``b""`` at end of file.
        """
        raw = self._file()
        if size is None or size < 0:
            data = self._take(self._buffered)
            rest = raw.read()
            if rest:
                data += bytes(rest)
        elif size == 0:
            return b""
        elif self._buffered == 0 and size >= _BUFFER_SIZE:
            data = bytes(raw.read(size) or b"")
        else:
            if self._buffered == 0 and not self._fill():
                return b""
            data = self._take(min(size, self._buffered))
        if data:
            self._last_byte = data[-1]
            self._advance(len(data))
        return data

    def read_byte(self) -> int:
        """Read and return a single byte. Raises EOFError at end of file."""
        self._file()
        if self._buffered == 0 and not self._fill():
            raise EOFError("end of file")
        value = self._rbuf[self._rpos]
        self._rpos += 1
        self._last_byte = value
        self._advance(1)
        return value

    def unread_byte(self) -> None:
        """Unread the most recently read byte.

        Raises ValueError if the last operation did not read a byte.
        """
        self._file()
        if self._last_byte < 0 or (self._rpos == 0 and self._buffered > 0):
            raise ValueError("invalid use of unread_byte")
        self._rbuf = bytes([self._last_byte]) + self._rbuf[self._rpos:]
        self._rpos = 0
        self._last_byte = -1
        self._offset = sub64(self._offset, 1)

    def peek(self, n: int) -> bytes:
        """Return the next ``n`` bytes without advancing the offset.

        Raises ValueError if ``n`` is negative or larger than the buffer, and
        EOFError if fewer than ``n`` bytes remain.
        """
        self._file()
        if n < 0:
            raise ValueError("negative count")
        if n > _BUFFER_SIZE:
            raise ValueError(f"cannot peek more than {_BUFFER_SIZE} bytes")
        self._last_byte = -1
        while self._buffered < n:
            if not self._fill():
                break
        if self._buffered < n:
            raise EOFError(f"only {self._buffered} of {n} bytes available")
        return self._rbuf[self._rpos:self._rpos + n]

    def discard(self, n: int) -> int:
        """Skip the next ``n`` bytes and return the number skipped.

        Raises EOFError if the file ends first; the offset is then left
        unchanged.
        """
        self._file()
        if n < 0:
            raise ValueError("negative count")
        if n == 0:
            return 0
        self._last_byte = -1
        remaining = n
        while remaining:
            if self._buffered == 0 and not self._fill():
                raise EOFError(f"discarded only {n - remaining} of {n} bytes")
            skip = min(remaining, self._buffered)
            self._rpos += skip
            remaining -= skip
        self._advance(n)
        return n

    def read_rune(self) -> tuple[str, int]:
        """Read one UTF-8 encoded character and return it with its size.

        An invalid encoding consumes one byte and yields U+FFFD with size 1.
        Raises EOFError at end of file.
        """
        self._file()
        if self._buffered == 0 and not self._fill():
            raise EOFError("end of file")
        needed = _rune_length(self._rbuf[self._rpos])
        while self._buffered < needed and self._fill():
            pass
        lead = self._rbuf[self._rpos]
        chunk = self._rbuf[self._rpos:self._rpos + needed]
        char, size = _REPLACEMENT, 1
        if needed == 1:
            if lead < 0x80:
                char = chr(lead)
        elif len(chunk) == needed:
            try:
                char, size = chunk.decode("utf-8"), needed
            except UnicodeDecodeError:
                pass
        self._rpos += size
        self._last_byte = self._rbuf[self._rpos - 1]
        self._advance(size)
        return char, size

    def reset_read_buffer(self) -> None:
        """Discard buffered data that has not been read yet."""
        self._file()
        self._rbuf = b""
        self._rpos = 0
        self._last_byte = -1

    # -- writing -------------------------------------------------------------

    def _flush_buffer(self) -> None:
        if self._wbuf:
            _write_all(self._file(), bytes(self._wbuf))
            self._wbuf.clear()

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Buffer ``data`` for writing and return the number of bytes taken."""
        self._file()
        payload = bytes(data)
        if len(self._wbuf) + len(payload) > _BUFFER_SIZE:
            self._flush_buffer()
        if len(payload) >= _BUFFER_SIZE:
            _write_all(self._file(), payload)
        else:
            self._wbuf.extend(payload)
        self._advance(len(payload))
        return len(payload)

    def write_byte(self, value: int) -> None:
        """Write a single byte (an int from 0 to 255)."""
        self._file()
        if not 0 <= value <= 0xFF:
            raise ValueError(f"byte must be in range(0, 256), got {value}")
        if len(self._wbuf) >= _BUFFER_SIZE:
            self._flush_buffer()
        self._wbuf.append(value)
        self._advance(1)

    def write_rune(self, char: str | int) -> int:
        """Write one character as UTF-8 and return the number of bytes written.

        An invalid code point is written as U+FFFD.
        """
        if isinstance(char, int):
            try:
                text = chr(char)
            except (ValueError, OverflowError):
                text = _REPLACEMENT
        elif isinstance(char, str) and len(char) == 1:
            text = char
        else:
            raise ValueError("expected a single character or a code point")
        try:
            encoded = text.encode("utf-8")
        except UnicodeEncodeError:
            encoded = _REPLACEMENT.encode("utf-8")
        return self.write(encoded)

    def flush(self) -> None:
        """Write any buffered data out to the file."""
        raw = self._file()
        self._flush_buffer()
        flush: Callable[[], None] | None = getattr(raw, "flush", None)
        if flush is not None:
            flush()

    def sync(self) -> None:
        """Commit the file's contents to stable storage.

        Data still held in the write buffer is not included; call
        :meth:`flush` first.
        """
        raw = self._file()
        os.fsync(raw.fileno())

    def reset_write_buffer(self) -> None:
        """Discard buffered data that has not been written yet."""
        self._file()
        self._wbuf.clear()

    # -- positioning ---------------------------------------------------------

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        """Move the file position and return the new position.

        Buffers are left untouched; reset them afterwards.
        """
        position = self._file().seek(offset, whence)
        self._offset = int64_to_uint64(position)
        return position

    def sync_offset(self) -> None:
        """Set the tracked offset to the file's actual position."""
        position = self._file().seek(0, os.SEEK_CUR)
        self._offset = int64_to_uint64(position)


def _open(path: str | os.PathLike[str], mode: str, opener: Any = None) -> TrackedFile:
    try:
        raw = open(path, mode, buffering=0, opener=opener)
    except OSError as exc:
        raise type(exc)(
            exc.errno, f"failed to open the file {os.fspath(path)!r}. {exc.strerror}", os.fspath(path)
        ) from exc
    try:
        return TrackedFile(raw)
    except BaseException:
        raw.close()
        raise


def open_file(
    path: str | os.PathLike[str], flags: int = os.O_RDONLY, perm: int = 0o666
) -> TrackedFile:
    """Open ``path`` with ``os.open`` style ``flags`` and permission bits."""
    if flags & os.O_RDWR:
        mode = "r+b"
    elif flags & os.O_WRONLY:
        mode = "wb"
    else:
        mode = "rb"
    os_flags = flags | getattr(os, "O_BINARY", 0)

    def opener(target: str, _flags: int) -> int:
        return os.open(target, os_flags, perm)

    return _open(path, mode, opener)


def open_for_reading(path: str | os.PathLike[str]) -> TrackedFile:
    """Open ``path`` for reading."""
    return _open(path, "rb")


def create(path: str | os.PathLike[str]) -> TrackedFile:
    """Create or truncate ``path`` and open it for reading and writing."""
    return _open(path, "w+b")