"""
Hostname resolution: one getaddrinfo() call, no retries.
"""

import logging
import socket
from typing import List

from core.errors import ResolutionError
from core.models import AddressCandidate

log = logging.getLogger(__name__)


def resolve_host(host: str, ipv6: bool = False) -> List[AddressCandidate]:
    """
    Resolve host to stream-socket address candidates, in resolver order.
    IPv4 only unless ipv6 is set, in which case any family is accepted.
    """
    family = socket.AF_UNSPEC if ipv6 else socket.AF_INET
    try:
        infos = socket.getaddrinfo(host, None, family, socket.SOCK_STREAM)
    except (OSError, UnicodeError) as exc:
        raise ResolutionError(host, str(exc)) from exc

    candidates = [AddressCandidate.from_addrinfo(info) for info in infos]
    if not candidates:
        raise ResolutionError(host, "no addresses returned")
    log.debug("resolved %s -> %s", host, [c.address for c in candidates])
    return candidates
