"""Duplicate a stream of items to several consumers.

Outputs are queue-like objects with a ``put`` method (``queue.Queue``,
``queue.SimpleQueue`` and so on). When the source is exhausted, or when the
``stop`` event is set, every output receives :data:`CLOSED` to mark the end
of the stream.

A source is either a queue, read until :data:`CLOSED` is taken from it, or any
other iterable.
"""

from __future__ import annotations

import queue
from typing import Any, Callable, Iterable, Iterator, Protocol, TypeVar

__all__ = ["CLOSED", "fanout", "transformed_fanout"]

T = TypeVar("T")
V = TypeVar("V")


class _Closed:
    def __repr__(self) -> str:
        return "CLOSED"


CLOSED: Any = _Closed()
"""Marker put on each output once no more items will follow."""

_POLL_INTERVAL = 0.01


class _Event(Protocol):
    def is_set(self) -> bool: ...


class _Sink(Protocol):
    def put(self, item: Any) -> None: ...


def _stopped(stop: _Event | None) -> bool:
    return stop is not None and stop.is_set()


def _from_queue(source: Any, stop: _Event | None) -> Iterator[Any]:
    while not _stopped(stop):
        if stop is None:
            item = source.get()
        else:
            try:
                item = source.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                continue
        if item is CLOSED:
            return
        yield item


def _from_iterable(source: Iterable[Any], stop: _Event | None) -> Iterator[Any]:
    iterator = iter(source)
    while not _stopped(stop):
        try:
            item = next(iterator)
        except StopIteration:
            return
        yield item


def _items(source: Any, stop: _Event | None) -> Iterator[Any]:
    if isinstance(source, (queue.Queue, queue.SimpleQueue)):
        return _from_queue(source, stop)
    return _from_iterable(source, stop)


def fanout(source: Any, *args: _Sink, stop: _Event | None = None) -> None:
    """Put every item from ``source`` on each output in ``args``.

    Blocks until the source ends or ``stop`` is set, then puts :data:`CLOSED`
    on every output.
    """
    transformed_fanout(_identity, source, *args, stop=stop)


def transformed_fanout(
    transformer: Callable[[T], V],
    source: Any,
    *args: _Sink,
    stop: _Event | None = None,
) -> None:
    """Put ``transformer(item)`` for every item from ``source`` on each output.

    The transformer is applied once per output. Blocks until the source ends
    or ``stop`` is set, then puts :data:`CLOSED` on every output.
    """
    try:
        for item in _items(source, stop):
            for out in args:
                out.put(transformer(item))
    finally:
        for out in args:
            out.put(CLOSED)


def _identity(item: T) -> T:
    return item