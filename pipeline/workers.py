"""
Fixed-size thread pool draining a sealed WorkQueue.

Each worker pops until the queue is empty and keeps its own tally, so the
queue lock is the only thing the workers share. A handler exception stops
the whole pool and is re-raised from run() once every thread has joined.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from core.errors import ResourceExhaustedError
from core.models import ProbeResult, WorkItem
from core.queue import WorkQueue

log = logging.getLogger(__name__)


@dataclass
class Tally:
    probes: int = 0
    open: int = 0
    closed: int = 0

    def add(self, other: "Tally") -> None:
        self.probes += other.probes
        self.open += other.open
        self.closed += other.closed


class WorkerPool:
    def __init__(self, queue: WorkQueue, handler: Callable[[WorkItem], ProbeResult], concurrency: int):
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.queue = queue
        self.handler = handler
        self.concurrency = concurrency
        self._abort = threading.Event()
        self._errors: List[BaseException] = []
        self._errors_lock = threading.Lock()
        self._tallies: List[Tally] = []

    def _drain(self, tally: Tally) -> None:
        while not self._abort.is_set():
            item = self.queue.pop()
            if item is None:
                break
            try:
                result = self.handler(item)
            except Exception as exc:  # noqa: BLE001
                log.error("worker %s failed on %s:%d: %s", threading.current_thread().name, item.address, item.port, exc)
                with self._errors_lock:
                    self._errors.append(exc)
                self._abort.set()
                break
            tally.probes += 1
            if result.is_open:
                tally.open += 1
            else:
                tally.closed += 1
        log.debug("worker %s done after %d probes", threading.current_thread().name, tally.probes)

    def run(self) -> Tally:
        threads: List[threading.Thread] = []
        start_error: Optional[RuntimeError] = None
        for i in range(self.concurrency):
            tally = Tally()
            thread = threading.Thread(target=self._drain, args=(tally,), name=f"scan-worker-{i}", daemon=True)
            try:
                thread.start()
            except RuntimeError as exc:
                start_error = exc
                self._abort.set()
                break
            self._tallies.append(tally)
            threads.append(thread)

        for thread in threads:
            thread.join()

        if start_error is not None:
            raise ResourceExhaustedError("thread start", start_error) from start_error
        if self._errors:
            raise self._errors[0]

        total = Tally()
        for tally in self._tallies:
            total.add(tally)
        return total
