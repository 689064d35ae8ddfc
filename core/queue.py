"""
Bounded LIFO work queue shared by the scan workers.

The queue has two phases. While building, the coordinator pushes every
work item from a single thread; seal() then closes it and the workers pop
until it reports empty. Empty is terminal: nothing is pushed after seal().
"""

import logging
import threading
from typing import List, Optional

from core.errors import QueueCapacityError, QueueSealedError
from core.models import WorkItem

log = logging.getLogger(__name__)


class WorkQueue:
    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        self._capacity = capacity
        self._items: List[Optional[WorkItem]] = [None] * capacity
        self._top = 0
        self._sealed = False
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __len__(self) -> int:
        with self._lock:
            return self._top

    def push(self, item: WorkItem) -> None:
        with self._lock:
            if self._sealed:
                raise QueueSealedError("push after seal()")
            if self._top >= self._capacity:
                raise QueueCapacityError(f"work queue full ({self._capacity} items)")
            self._items[self._top] = item
            self._top += 1

    def seal(self) -> None:
        with self._lock:
            if not self._sealed:
                log.debug("work queue sealed with %d/%d items", self._top, self._capacity)
            self._sealed = True

    def pop(self) -> Optional[WorkItem]:
        with self._lock:
            if not self._sealed:
                raise QueueSealedError("pop before seal()")
            if self._top == 0:
                return None
            self._top -= 1
            item = self._items[self._top]
            self._items[self._top] = None
            return item
