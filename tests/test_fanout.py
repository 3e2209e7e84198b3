import queue
import random
import threading
import time

import pytest

from ajutil.fanout import CLOSED, fanout, transformed_fanout


def _drain(q, delay=0.0):
    items = []
    while (item := q.get(timeout=30)) is not CLOSED:
        items.append(item)
        if delay:
            time.sleep(delay)
    return items


def _producer(source, count, close=True, pause=0.0):
    def produce():
        for i in range(count):
            source.put(i)
            if pause:
                time.sleep(pause)
        if close:
            source.put(CLOSED)

    return threading.Thread(target=produce, daemon=True)


def _stopping_source(stop, stop_at, count):
    for i in range(count):
        if i == stop_at:
            stop.set()
        yield i


def test_fanout():
    expected_count = 10000
    producer = queue.Queue(maxsize=1000)
    consumers = [queue.SimpleQueue() for _ in range(100)]

    feeder = _producer(producer, expected_count)
    feeder.start()
    fanout(producer, *consumers)
    feeder.join(timeout=30)

    results = [_drain(consumer) for consumer in consumers]
    expected = list(range(expected_count))
    assert len(results) == 100
    for received in results:
        assert received == expected


def test_transformed_fanout():
    expected_count = 10000
    producer = queue.Queue(maxsize=1000)
    consumers = [queue.SimpleQueue() for _ in range(100)]

    feeder = _producer(producer, expected_count)
    feeder.start()
    transformed_fanout(lambda value: value * 2, producer, *consumers)
    feeder.join(timeout=30)

    results = [_drain(consumer) for consumer in consumers]
    expected = [i * 2 for i in range(expected_count)]
    assert len(results) == 100
    for received in results:
        assert received == expected


def test_fanout_with_timeout():
    expected_count = 1000
    producer = queue.Queue()
    consumers = [queue.SimpleQueue() for _ in range(10)]

    # The source is never closed, so only the stop event ends the fanout.
    feeder = _producer(producer, expected_count, close=False)
    stop = threading.Event()
    timer = threading.Timer(0.1, stop.set)
    feeder.start()
    timer.start()

    started = time.monotonic()
    fanout(producer, *consumers, stop=stop)
    elapsed = time.monotonic() - started
    timer.join(timeout=10)

    assert elapsed < 10
    results = [_drain(consumer) for consumer in consumers]
    first = results[0]
    assert first == list(range(len(first)))
    assert len(first) <= expected_count
    for received in results:
        assert received == first


def test_fanout_different_rates():
    expected_count = 100
    producer = queue.Queue(maxsize=100)
    consumers = [queue.Queue(maxsize=random.randint(4, 20)) for _ in range(10)]

    results = [None] * len(consumers)

    def consume(index, consumer):
        results[index] = _drain(consumer, delay=index / 1000)

    readers = [
        threading.Thread(target=consume, args=(index, consumer), daemon=True)
        for index, consumer in enumerate(consumers)
    ]
    feeder = _producer(producer, expected_count, pause=0.001)
    feeder.start()
    for reader in readers:
        reader.start()

    fanout(producer, *consumers)

    for reader in readers:
        reader.join(timeout=30)

    expected = list(range(expected_count))
    for received in results:
        assert received == expected


def test_fanout_from_iterable():
    first, second = queue.SimpleQueue(), queue.SimpleQueue()
    fanout(range(5), first, second)
    assert _drain(first) == [0, 1, 2, 3, 4]
    assert _drain(second) == [0, 1, 2, 3, 4]


def test_transformer_applied_per_output():
    calls = []

    def transformer(value):
        calls.append(value)
        return str(value)

    outputs = [queue.SimpleQueue() for _ in range(3)]
    transformed_fanout(transformer, ["a", "b"], *outputs)
    assert len(calls) == 6
    for out in outputs:
        assert _drain(out) == ["a", "b"]


def test_stop_already_set_only_closes_outputs():
    stop = threading.Event()
    stop.set()
    out = queue.SimpleQueue()
    fanout(range(10), out, stop=stop)
    assert _drain(out) == []
    assert out.empty()


def test_stop_during_iteration_ends_stream():
    stop = threading.Event()
    out = queue.SimpleQueue()
    fanout(_stopping_source(stop, 3, 10), out, stop=stop)
    received = _drain(out)
    assert received == list(range(len(received)))
    assert len(received) < 10


def test_outputs_closed_when_transformer_raises():
    def transformer(value):
        raise RuntimeError("boom")

    out = queue.SimpleQueue()
    with pytest.raises(RuntimeError, match="boom"):
        transformed_fanout(transformer, [1], out)
    assert out.get_nowait() is CLOSED