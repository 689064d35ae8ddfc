import threading

import pytest

from core.errors import QueueCapacityError, QueueSealedError
from core.queue import WorkQueue


def test_pop_is_lifo(loopback):
    q = WorkQueue(3)
    for port in (21, 22, 80):
        q.push(loopback.with_port(port))
    q.seal()
    assert [q.pop().port for _ in range(3)] == [80, 22, 21]
    assert q.pop() is None


def test_push_beyond_capacity_fails(loopback):
    q = WorkQueue(1)
    q.push(loopback.with_port(80))
    with pytest.raises(QueueCapacityError):
        q.push(loopback.with_port(81))


def test_sealed_queue_rejects_push(loopback):
    q = WorkQueue(2)
    q.seal()
    with pytest.raises(QueueSealedError):
        q.push(loopback.with_port(80))


def test_pop_requires_seal(loopback):
    q = WorkQueue(1)
    q.push(loopback.with_port(80))
    with pytest.raises(QueueSealedError):
        q.pop()


def test_empty_is_terminal(loopback):
    q = WorkQueue(1)
    q.push(loopback.with_port(80))
    q.seal()
    assert q.pop() is not None
    assert all(q.pop() is None for _ in range(5))
    assert len(q) == 0


def test_zero_capacity_queue():
    q = WorkQueue(0)
    q.seal()
    assert q.pop() is None


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        WorkQueue(-1)


def test_concurrent_pops_hand_out_each_item_once(loopback):
    total = 2000
    q = WorkQueue(total)
    for port in range(1, total + 1):
        q.push(loopback.with_port(port))
    q.seal()

    seen = []
    lock = threading.Lock()

    def drain():
        mine = []
        while True:
            item = q.pop()
            if item is None:
                break
            mine.append(item.port)
        with lock:
            seen.extend(mine)

    threads = [threading.Thread(target=drain) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(seen) == list(range(1, total + 1))
