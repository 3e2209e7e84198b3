"""Checked integer arithmetic, hashing helpers, offset-tracking I/O, length-prefixed data, fan-out and build information."""

__version__ = "0.1.0"

__all__ = ["buildinfo", "fanout", "hashing", "safe", "tracked", "trackedfile", "vardata"]