"""
Reporting sinks. The scan emits events synchronously from whichever worker
thread determined them; sinks serialize their own output.
"""

from __future__ import annotations

import sys
import threading
from typing import List, Sequence, TextIO

from core.models import AddressCandidate, ProbeResult, ScanConfig, ScanSummary, WorkItem


def format_try(item: WorkItem) -> str:
    return f"[TRY] {item.address} {item.port}"


def format_result(result: ProbeResult) -> str:
    tag = f"[{result.outcome.value}]"
    if result.banner:
        return f"{tag} | {result.banner} | {result.address} {result.port}"
    return f"{tag} | {result.address} {result.port}"


class Reporter:
    """No-op sink; subclasses override the hooks they care about."""

    def on_start(self, config: ScanConfig, addresses: Sequence[AddressCandidate]) -> None:
        pass

    def on_try(self, item: WorkItem) -> None:
        pass

    def on_result(self, result: ProbeResult) -> None:
        pass

    def on_finish(self, summary: ScanSummary) -> None:
        pass


class LineReporter(Reporter):
    def __init__(self, stream: TextIO | None = None, verbose: bool = False):
        self.stream = stream or sys.stdout
        self.verbose = verbose
        self._lock = threading.Lock()

    def _write(self, *lines: str) -> None:
        with self._lock:
            for line in lines:
                self.stream.write(line + "\n")
            self.stream.flush()

    def on_start(self, config: ScanConfig, addresses: Sequence[AddressCandidate]) -> None:
        if not self.verbose:
            return
        lines = [
            f"Hostname: {config.host}",
            f"IPs resolved: {len(addresses)}",
            f"Using threads: {config.concurrency}",
            f"Sockets to be tested: {len(addresses) * len(config.ports)}",
            f"Connection timeout: {config.timeout_ms}ms",
        ]
        if config.ipv6:
            lines.append("IPv6 enabled")
        if config.banner:
            lines.append("Banner grabbing enabled")
        lines += ["", "Will try:"]
        self._write(*lines)

    def on_try(self, item: WorkItem) -> None:
        self._write(format_try(item))

    def on_result(self, result: ProbeResult) -> None:
        self._write(format_result(result))

    def on_finish(self, summary: ScanSummary) -> None:
        if not self.verbose:
            return
        self._write(
            "",
            f"Done: {summary.probes} probes, {summary.open} open, {summary.closed} closed in {summary.duration_s:.2f}s",
        )


class CollectingReporter(Reporter):
    def __init__(self):
        self._lock = threading.Lock()
        self._results: List[ProbeResult] = []

    def on_result(self, result: ProbeResult) -> None:
        with self._lock:
            self._results.append(result)

    @property
    def results(self) -> List[ProbeResult]:
        with self._lock:
            return list(self._results)
