"""Helpers for the standard hashing algorithms."""

from __future__ import annotations

import enum
import hashlib
from dataclasses import dataclass

__all__ = ["Algo", "DEFAULT_ALGO", "all_zero_bytes"]


@dataclass(frozen=True)
class _AlgoInfo:
    label: str
    hashlib_name: str
    empty_digest: str


class Algo(enum.IntEnum):
    """A hashing algorithm."""

    SHA1 = 1
    SHA256 = 2
    SHA512 = 3

    @property
    def _info(self) -> _AlgoInfo:
        return _INFO[self]

    def size(self) -> int:
        """Number of bytes in a digest produced by this algorithm."""
        return self.hasher().digest_size

    def hasher(self):
        """Return a new hash object for this algorithm."""
        return hashlib.new(self._info.hashlib_name)

    def zero_value(self) -> bytearray:
        """Return a new all-zero buffer of the digest size."""
        return bytearray(self.size())

    def buffer(self) -> bytearray:
        """Return a new buffer of the digest size for reading or writing."""
        return self.zero_value()

    def hashed_string_for_zero_bytes(self) -> str:
        """Hex digest of the empty input."""
        return self._info.empty_digest

    def __str__(self) -> str:
        return self._info.label


_INFO = {
    Algo.SHA1: _AlgoInfo(
        "SHA-1",
        "sha1",
        "da39a3ee5e6b4b0d3255bfef95601890afd80709",
    ),
    Algo.SHA256: _AlgoInfo(
        "SHA-256",
        "sha256",
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855",
    ),
    Algo.SHA512: _AlgoInfo(
        "SHA-512",
        "sha512",
        "cf83e1357eefb8bdf1542850d66d8007d620e4050b5715dc83f4a921d36ce9ce"
        "47d0d13c5d85f2b0ff8318d2877eec2f63b931bd47417a81a538327af927da3e",
    ),
}

DEFAULT_ALGO = Algo.SHA256


def all_zero_bytes(buf: bytes | bytearray | memoryview) -> bool:
    """Return True if every byte in ``buf`` is zero."""
    return not any(buf)