"""Checked arithmetic and integer conversions between fixed-width types.

Python integers are unbounded, so every function here first checks that its
argument lies within the range of the declared source type (raising
``ValueError`` otherwise) and then raises :class:`IntegerOverflowError` or
:class:`IntegerUnderflowError` when the value does not fit the target type.
The platform-dependent ``int`` and ``uint`` types are taken to be
:data:`INT_SIZE` bits wide.
"""

from __future__ import annotations

import operator

__all__ = [
    "INT_SIZE",
    "IntegerOverflowError",
    "IntegerUnderflowError",
    "add32",
    "add64",
    "sub32",
    "sub64",
    "int8_to_uint8",
    "uint8_to_int8",
    "int16_to_uint16",
    "uint16_to_int16",
    "int32_to_uint32",
    "uint32_to_int32",
    "int64_to_uint64",
    "uint64_to_int64",
    "uint64_to_uint32",
    "int64_to_int32",
    "int64_to_uint32",
    "uint64_to_int32",
    "int_to_int8",
    "int_to_int16",
    "int_to_int32",
    "int_to_uint8",
    "int_to_uint16",
    "int_to_uint32",
    "int_to_uint64",
    "uint_to_uint8",
    "uint_to_uint16",
    "uint_to_uint32",
    "uint32_to_int",
    "uint64_to_int",
]

INT_SIZE = 64
"""Width in bits of the platform ``int`` and ``uint`` types."""

MIN_INT8, MAX_INT8 = -(1 << 7), (1 << 7) - 1
MIN_INT16, MAX_INT16 = -(1 << 15), (1 << 15) - 1
MIN_INT32, MAX_INT32 = -(1 << 31), (1 << 31) - 1
MIN_INT64, MAX_INT64 = -(1 << 63), (1 << 63) - 1
MAX_UINT8 = (1 << 8) - 1
MAX_UINT16 = (1 << 16) - 1
MAX_UINT32 = (1 << 32) - 1
MAX_UINT64 = (1 << 64) - 1

_MAX_INT = MAX_INT32 if INT_SIZE == 32 else MAX_INT64


class IntegerOverflowError(OverflowError):
    """An integer overflow occurred."""

    def __init__(self, message: str = "integer overflow occurred") -> None:
        super().__init__(message)


class IntegerUnderflowError(ArithmeticError):
    """An integer underflow occurred."""

    def __init__(self, message: str = "integer underflow occurred") -> None:
        super().__init__(message)


def _operand(x: int, bits: int, signed: bool) -> int:
    """Return ``x`` as an int, checking it lies in the range of the source type."""
    value = operator.index(x)
    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= value <= high:
        kind = "int" if signed else "uint"
        raise ValueError(f"{value} is not a valid {kind}{bits}")
    return value


def _narrow(x: int, low: int, high: int) -> int:
    if x < low:
        raise IntegerUnderflowError()
    if x > high:
        raise IntegerOverflowError()
    return x


def _wrap_signed(x: int, bits: int) -> int:
    half = 1 << (bits - 1)
    return ((x + half) % (1 << bits)) - half


def add32(x: int, y: int) -> int:
    """Add two unsigned 32-bit integers, raising on overflow."""
    result = _operand(x, 32, False) + _operand(y, 32, False)
    if result > MAX_UINT32:
        raise IntegerOverflowError()
    return result


def add64(x: int, y: int) -> int:
    """Add two unsigned 64-bit integers, raising on overflow."""
    result = _operand(x, 64, False) + _operand(y, 64, False)
    if result > MAX_UINT64:
        raise IntegerOverflowError()
    return result


def sub32(x: int, y: int) -> int:
    """Subtract two unsigned 32-bit integers, raising on underflow."""
    result = _operand(x, 32, False) - _operand(y, 32, False)
    if result < 0:
        raise IntegerUnderflowError()
    return result


def sub64(x: int, y: int) -> int:
    """Subtract two unsigned 64-bit integers, raising on underflow."""
    result = _operand(x, 64, False) - _operand(y, 64, False)
    if result < 0:
        raise IntegerUnderflowError()
    return result


def int8_to_uint8(x: int) -> int:
    """Cast int8 to uint8, raising underflow for negative values."""
    return _narrow(_operand(x, 8, True), 0, MAX_UINT8)


def uint8_to_int8(x: int) -> int:
    """Cast uint8 to int8, raising overflow for values that are too big."""
    return _narrow(_operand(x, 8, False), 0, MAX_INT8)


def int16_to_uint16(x: int) -> int:
    """Cast int16 to uint16, raising underflow for negative values."""
    return _narrow(_operand(x, 16, True), 0, MAX_UINT16)


def uint16_to_int16(x: int) -> int:
    """Cast uint16 to int16, raising overflow for values that are too big."""
    return _narrow(_operand(x, 16, False), 0, MAX_INT16)


def int32_to_uint32(x: int) -> int:
    """Cast int32 to uint32, raising underflow for negative values."""
    return _narrow(_operand(x, 32, True), 0, MAX_UINT32)


def uint32_to_int32(x: int) -> int:
    """Cast uint32 to int32, raising overflow for values that are too big."""
    return _narrow(_operand(x, 32, False), 0, MAX_INT32)


def int64_to_uint64(x: int) -> int:
    """Cast int64 to uint64, raising underflow for negative values."""
    return _narrow(_operand(x, 64, True), 0, MAX_UINT64)


def uint64_to_int64(x: int) -> int:
    """Cast uint64 to int64, raising overflow for values that are too big."""
    return _narrow(_operand(x, 64, False), 0, MAX_INT64)


def uint64_to_uint32(x: int) -> int:
    """Downcast uint64 to uint32, raising overflow for values that are too big."""
    return _narrow(_operand(x, 64, False), 0, MAX_UINT32)


def int64_to_int32(x: int) -> int:
    """Downcast int64 to int32, raising overflow for values that are too big.

    Only the upper bound is checked; values below the int32 range wrap around.
    """
    value = _operand(x, 64, True)
    if value > MAX_INT32:
        raise IntegerOverflowError()
    return _wrap_signed(value, 32)


def int64_to_uint32(x: int) -> int:
    """Downcast int64 to uint32, raising underflow or overflow when out of range."""
    return _narrow(_operand(x, 64, True), 0, MAX_UINT32)


def uint64_to_int32(x: int) -> int:
    """Downcast uint64 to int32, raising overflow for values that are too big."""
    return _narrow(_operand(x, 64, False), 0, MAX_INT32)


def int_to_int8(x: int) -> int:
    """Cast a platform int to int8, raising underflow or overflow when out of range."""
    return _narrow(_operand(x, INT_SIZE, True), MIN_INT8, MAX_INT8)


def int_to_int16(x: int) -> int:
    """Cast a platform int to int16, raising underflow or overflow when out of range."""
    return _narrow(_operand(x, INT_SIZE, True), MIN_INT16, MAX_INT16)


def int_to_int32(x: int) -> int:
    """Cast a platform int to int32, raising underflow or overflow when out of range."""
    return _narrow(_operand(x, INT_SIZE, True), MIN_INT32, MAX_INT32)


def int_to_uint8(x: int) -> int:
    """Cast a platform int to uint8, raising underflow or overflow when out of range."""
    return _narrow(_operand(x, INT_SIZE, True), 0, MAX_UINT8)


def int_to_uint16(x: int) -> int:
    """Cast a platform int to uint16, raising underflow or overflow when out of range."""
    return _narrow(_operand(x, INT_SIZE, True), 0, MAX_UINT16)


def int_to_uint32(x: int) -> int:
    """Cast a platform int to uint32, raising underflow or overflow when out of range."""
    return _narrow(_operand(x, INT_SIZE, True), 0, MAX_UINT32)


def int_to_uint64(x: int) -> int:
    """Cast a platform int to uint64, raising underflow for negative values."""
    return _narrow(_operand(x, INT_SIZE, True), 0, MAX_UINT64)


def uint_to_uint8(x: int) -> int:
    """Cast a platform uint to uint8, raising overflow for values that are too big."""
    return _narrow(_operand(x, INT_SIZE, False), 0, MAX_UINT8)


def uint_to_uint16(x: int) -> int:
    """Cast a platform uint to uint16, raising overflow for values that are too big."""
    return _narrow(_operand(x, INT_SIZE, False), 0, MAX_UINT16)


def uint_to_uint32(x: int) -> int:
    """Cast a platform uint to uint32, raising overflow for values that are too big."""
    return _narrow(_operand(x, INT_SIZE, False), 0, MAX_UINT32)


def uint32_to_int(x: int) -> int:
    """Cast uint32 to a platform int, raising overflow for values that are too big."""
    return _narrow(_operand(x, 32, False), 0, _MAX_INT)


def uint64_to_int(x: int) -> int:
    """Cast uint64 to a platform int, raising overflow for values that are too big."""
    return _narrow(_operand(x, 64, False), 0, _MAX_INT)