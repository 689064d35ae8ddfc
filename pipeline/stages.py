"""
Scan stages:
build: cross product of resolved addresses x requested ports into a sealed queue
probe: per-item handler run by the workers (connect, optional banner, report)
"""

from typing import Callable, Optional, Sequence

from core.config import get_settings
from core.models import AddressCandidate, ProbeResult, ScanConfig, WorkItem
from core.queue import WorkQueue
from pipeline.report import Reporter
from probers import l4_tcp

Prober = Callable[..., ProbeResult]
ProbeHandler = Callable[[WorkItem], ProbeResult]


def build_work_queue(
    addresses: Sequence[AddressCandidate],
    ports: Sequence[int],
    reporter: Optional[Reporter] = None,
) -> WorkQueue:
    queue = WorkQueue(len(addresses) * len(ports))
    # address-major, port-minor
    for address in addresses:
        for port in ports:
            item = address.with_port(port)
            queue.push(item)
            if reporter is not None:
                reporter.on_try(item)
    queue.seal()
    return queue


def make_probe_handler(config: ScanConfig, reporter: Reporter, prober: Prober = l4_tcp.tcp_probe) -> ProbeHandler:
    banner_size = get_settings().banner_size
    timeout = config.timeout_s

    def handle(item: WorkItem) -> ProbeResult:
        result = prober(item, timeout, grab_banner=config.banner, banner_size=banner_size)
        if result.is_open or config.verbose:
            reporter.on_result(result)
        return result

    return handle
