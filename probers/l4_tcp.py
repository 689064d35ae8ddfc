"""
TCP connect prober using plain connect() without crafting raw packets.
A refused, reset or timed-out connect all classify as CLOSED.
"""

import logging
import socket
from typing import Optional

from core.errors import ResourceExhaustedError
from core.models import Outcome, ProbeResult, WorkItem

log = logging.getLogger(__name__)

DEFAULT_BANNER_SIZE = 1024


def _read_banner(sock: socket.socket, size: int) -> Optional[str]:
    try:
        data = sock.recv(size)
    except OSError as exc:
        log.debug("no banner: %s", exc)
        return None
    if not data:
        return None
    banner = data.decode("utf-8", errors="replace").rstrip("\r\n")
    return banner or None


def tcp_probe(
    item: WorkItem,
    timeout: float,
    grab_banner: bool = False,
    banner_size: int = DEFAULT_BANNER_SIZE,
) -> ProbeResult:
    try:
        sock = socket.socket(item.family, item.socktype, item.proto)
    except OSError as exc:
        raise ResourceExhaustedError("socket()", exc) from exc

    with sock:
        sock.settimeout(timeout)
        try:
            sock.connect(item.sockaddr)
        except OSError as exc:
            log.debug("%s:%d closed (%s)", item.address, item.port, exc)
            return ProbeResult(item.address, item.port, Outcome.CLOSED)

        banner = _read_banner(sock, banner_size) if grab_banner else None
        log.debug("%s:%d open", item.address, item.port)
        return ProbeResult(item.address, item.port, Outcome.OPEN, banner)
