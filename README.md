# ajutil

A handful of small building blocks, using only the standard library, for
Python programs that work with binary files and streams.

## What is inside

- `ajutil.safe`: add, subtract and conversion functions that check values
  against fixed-width integer bounds. They raise `IntegerOverflowError` (a
  subclass of `OverflowError`) or `IntegerUnderflowError` (a subclass of
  `ArithmeticError`) rather than wrapping around. Examples are `add64`, `sub32`,
  `int64_to_uint32` and `uint64_to_int`. A `ValueError` is raised when an
  argument is outside the range of the function's source type. The platform
  `int` and `uint` types are taken to be `INT_SIZE` (64) bits wide.
- `ajutil.hashing`: the `Algo` enum (`SHA1`, `SHA256`, `SHA512`) has these
  methods:
  - `size()` returns the digest size.
  - `hasher()` returns a new `hashlib` object.
  - `zero_value()` and `buffer()` return a new all-zero `bytearray` of the
    digest size.
  - `hashed_string_for_zero_bytes()` returns the hex digest of empty input.

  `str(Algo.SHA256)` gives `"SHA-256"`. `DEFAULT_ALGO` is SHA-256.
  `all_zero_bytes(buf)` checks whether a buffer holds only zeroes.
- `ajutil.tracked`: `OffsetReader` and `OffsetWriter` wrap a binary stream and
  count the bytes read or written, starting from a known base offset. The
  count is kept in `offset` and can be changed with `reset_offset`. Going past
  the unsigned 64-bit range raises `IntegerOverflowError`.
- `ajutil.trackedfile`: `TrackedFile` is a file with separate read and write
  buffers that keeps track of its offset without seeking. It supports:
  - `read`, `read_byte`, `unread_byte`, `peek` and `discard`
  - `write` and `write_byte`
  - UTF-8 characters with `read_rune` and `write_rune`
  - `seek`, `sync_offset`, `flush`, `sync` and `stat`
  - `reset_read_buffer` and `reset_write_buffer`, to call after a seek

  Open one with `open_for_reading`, `create` or `open_file` (which takes
  `os.open` style flags and permission bits). When used as a context manager
  it flushes on a normal exit and then closes. `close()` on its own discards
  data that has not been flushed.
- `ajutil.vardata`: length-prefixed records.
  - `FixedLengthPrefix` uses a fixed-width length. Get one from
    `uint8_prefix`, `uint16_prefix`, `uint32_prefix` or `uint64_prefix`. It
    is little endian by default; use `big_endian()` or `native_endian()` for
    the other byte orders.
  - `VarintPrefix` uses an unsigned varint length of 1 to 10 bytes. Get one
    from `varint_prefix`.

  Both have `write`, `read`, `write_string` and `read_string`. Each method
  returns the number of bytes handled, prefix included. `read` fills a
  writable buffer you pass in, when it is large enough, and returns a
  memoryview over it. A stream that ends early raises `EOFError`. An
  oversized varint raises `VarintOverflowError`.
- `ajutil.fanout`: `fanout` copies every item from one source to several
  queue-like outputs. `transformed_fanout` applies a function to each item
  first. The source is either a queue, read until `CLOSED` is taken from it,
  or any iterable. The call blocks until the source ends, or until the
  optional `stop` event is set. It then puts `CLOSED` on every output.
- `ajutil.buildinfo`: `usage_name`, `version_string` and
  `usage_name_and_version` build the name and version strings for usage
  output. They read the module-level `APP_NAME`, `VERSION` and
  `GIT_COMMIT_HASH` when called. When these are empty, the name defaults to
  `unknown` and the version to `v0.0.0`.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Length-prefixed records:

```python
import io
from ajutil.vardata import uint16_prefix

codec = uint16_prefix().big_endian()
stream = io.BytesIO()
codec.write_string(stream, "hello")
stream.seek(0)
text, count = codec.read_string(stream)   # ("hello", 7)
```

Checked arithmetic:

```python
from ajutil.safe import add32, IntegerOverflowError

try:
    add32(42, 0xFFFFFFFF)
except IntegerOverflowError:
    ...
```

Keeping track of where you are in a file:

```python
from ajutil.trackedfile import open_for_reading

with open_for_reading("data.bin") as f:
    header = f.read(4)
    f.offset   # number of bytes read so far
```

Fan-out to several queues:

```python
import queue
from ajutil.fanout import CLOSED, fanout

outs = [queue.Queue(), queue.Queue()]
fanout(range(3), *outs)
outs[0].get()   # 0, then 1, 2 and finally CLOSED
```

## Command

```
ajutil-buildinfo
```

This prints the application name and version, for example
`unknown version: v0.0.0 `. The command takes no options apart from `-h`.