"""
Shared data models: the immutable run configuration plus the small value
types that flow through a scan: AddressCandidate -> WorkItem -> ProbeResult.
"""

from __future__ import annotations

import enum
import socket
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from core.config import MAX_CONCURRENCY, MAX_TIMEOUT_MS, MIN_CONCURRENCY, MIN_TIMEOUT_MS
from core.errors import ConfigError

MIN_PORT = 1
MAX_PORT = 65535


class ScanConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    ports: Tuple[int, ...] = Field(min_length=1)
    ipv6: bool = False
    verbose: bool = False
    banner: bool = False
    concurrency: int = Field(5, ge=MIN_CONCURRENCY, le=MAX_CONCURRENCY)
    timeout_ms: int = Field(100, ge=MIN_TIMEOUT_MS, le=MAX_TIMEOUT_MS)

    @field_validator("host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("host must not be blank")
        return v

    @field_validator("ports")
    @classmethod
    def validate_ports(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        for port in v:
            if not MIN_PORT <= port <= MAX_PORT:
                raise ValueError(f"port {port} outside {MIN_PORT}..{MAX_PORT}")
        return v

    @property
    def timeout_s(self) -> float:
        return self.timeout_ms / 1000.0

    @property
    def timeout_us(self) -> int:
        return self.timeout_ms * 1000


@dataclass(frozen=True)
class WorkItem:
    family: int
    socktype: int
    proto: int
    sockaddr: tuple

    @property
    def address(self) -> str:
        return self.sockaddr[0]

    @property
    def port(self) -> int:
        return self.sockaddr[1]


@dataclass(frozen=True)
class AddressCandidate:
    family: int
    socktype: int
    proto: int
    sockaddr: tuple

    @classmethod
    def from_addrinfo(cls, info: tuple) -> "AddressCandidate":
        family, socktype, proto, _canonname, sockaddr = info
        return cls(family=family, socktype=socktype or socket.SOCK_STREAM, proto=proto, sockaddr=tuple(sockaddr))

    @property
    def address(self) -> str:
        return self.sockaddr[0]

    def with_port(self, port: int) -> WorkItem:
        # IPv6 sockaddrs carry (host, port, flowinfo, scope_id); keep the tail.
        sockaddr = (self.sockaddr[0], port) + tuple(self.sockaddr[2:])
        return WorkItem(family=self.family, socktype=self.socktype, proto=self.proto, sockaddr=sockaddr)


class Outcome(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


@dataclass(frozen=True)
class ProbeResult:
    address: str
    port: int
    outcome: Outcome
    banner: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.outcome is Outcome.OPEN

    def to_dict(self) -> dict:
        return {
            "address": self.address,
            "port": self.port,
            "outcome": self.outcome.value,
            "banner": self.banner,
        }


@dataclass
class ScanSummary:
    host: str
    addresses: List[str] = field(default_factory=list)
    probes: int = 0
    open: int = 0
    closed: int = 0
    duration_s: float = 0.0

    def to_dict(self) -> dict:
        return {
            "host": self.host,
            "addresses": list(self.addresses),
            "probes": self.probes,
            "open": self.open,
            "closed": self.closed,
            "duration_s": round(self.duration_s, 3),
        }


def build_scan_config(**fields) -> ScanConfig:
    """Validate a run configuration, raising ConfigError with pydantic's messages."""
    try:
        return ScanConfig(**fields)
    except ValidationError as exc:
        raise ConfigError("; ".join(err["msg"] for err in exc.errors())) from exc
