"""
Single-run scan coordinator: resolve, build the sealed work queue, drain it
with a fixed thread pool, summarize. BUILDING -> DRAINING -> DONE, no way back.
"""

import enum
import logging
import time
from typing import Callable, List, Optional

from core.errors import ScannerError
from core.models import AddressCandidate, ScanConfig, ScanSummary
from core.resolver import resolve_host
from pipeline import stages
from pipeline.report import Reporter
from pipeline.workers import WorkerPool
from probers import l4_tcp

log = logging.getLogger(__name__)

Resolver = Callable[[str, bool], List[AddressCandidate]]


class ScanPhase(str, enum.Enum):
    IDLE = "idle"
    BUILDING = "building"
    DRAINING = "draining"
    DONE = "done"
    FAILED = "failed"


class Orchestrator:
    def __init__(self, resolver: Resolver = resolve_host, prober: stages.Prober = l4_tcp.tcp_probe) -> None:
        self.resolver = resolver
        self.prober = prober
        self.phase = ScanPhase.IDLE

    def _enter(self, phase: ScanPhase) -> None:
        log.debug("scan phase %s -> %s", self.phase.value, phase.value)
        self.phase = phase

    def scan(self, config: ScanConfig, reporter: Optional[Reporter] = None) -> ScanSummary:
        if self.phase is not ScanPhase.IDLE:
            raise ScannerError(f"orchestrator already used (phase={self.phase.value})")
        reporter = reporter or Reporter()
        start = time.monotonic()
        try:
            self._enter(ScanPhase.BUILDING)
            addresses = self.resolver(config.host, config.ipv6)
            log.info(
                "scanning %s: %d addresses x %d ports, %d threads, timeout %dms",
                config.host,
                len(addresses),
                len(config.ports),
                config.concurrency,
                config.timeout_ms,
            )
            reporter.on_start(config, addresses)
            queue = stages.build_work_queue(addresses, config.ports, reporter if config.verbose else None)

            self._enter(ScanPhase.DRAINING)
            handler = stages.make_probe_handler(config, reporter, prober=self.prober)
            tally = WorkerPool(queue, handler, config.concurrency).run()
        except BaseException:
            self._enter(ScanPhase.FAILED)
            raise

        self._enter(ScanPhase.DONE)
        summary = ScanSummary(
            host=config.host,
            addresses=[a.address for a in addresses],
            probes=tally.probes,
            open=tally.open,
            closed=tally.closed,
            duration_s=time.monotonic() - start,
        )
        log.info("scan of %s finished: %d open / %d probes", config.host, summary.open, summary.probes)
        reporter.on_finish(summary)
        return summary


def run_scan(config: ScanConfig, reporter: Optional[Reporter] = None) -> ScanSummary:
    return Orchestrator().scan(config, reporter)
