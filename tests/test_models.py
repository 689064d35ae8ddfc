import socket

import pytest
from pydantic import ValidationError

from core.errors import ConfigError
from core.models import AddressCandidate, Outcome, ProbeResult, ScanConfig, build_scan_config


def test_with_port_returns_new_item(loopback):
    item = loopback.with_port(8080)
    assert item.sockaddr == ("127.0.0.1", 8080)
    assert item.family == socket.AF_INET
    assert loopback.sockaddr == ("127.0.0.1", 0)


def test_with_port_keeps_ipv6_flow_and_scope():
    cand = AddressCandidate(socket.AF_INET6, socket.SOCK_STREAM, 6, ("::1", 0, 0, 3))
    item = cand.with_port(443)
    assert item.sockaddr == ("::1", 443, 0, 3)
    assert item.address == "::1"
    assert item.port == 443


def test_from_addrinfo():
    info = (socket.AF_INET, socket.SOCK_STREAM, 6, "", ("10.0.0.1", 0))
    cand = AddressCandidate.from_addrinfo(info)
    assert cand.address == "10.0.0.1"
    assert cand.proto == 6


def test_scan_config_defaults():
    cfg = ScanConfig(host="example.com", ports=[21, 22, 80])
    assert cfg.ports == (21, 22, 80)
    assert cfg.concurrency == 5
    assert cfg.timeout_ms == 100
    assert cfg.timeout_s == pytest.approx(0.1)
    assert cfg.timeout_us == 100_000
    assert not (cfg.ipv6 or cfg.verbose or cfg.banner)


def test_scan_config_keeps_duplicate_ports_in_order():
    cfg = ScanConfig(host="h", ports=[443, 80, 443])
    assert cfg.ports == (443, 80, 443)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"ports": [70000]},
        {"ports": [0]},
        {"ports": []},
        {"concurrency": 0},
        {"concurrency": 51},
        {"timeout_ms": 49},
        {"timeout_ms": 100_001},
        {"host": "   "},
    ],
)
def test_scan_config_rejects_out_of_range(kwargs):
    base = {"host": "example.com", "ports": [80]}
    base.update(kwargs)
    with pytest.raises(ValidationError):
        ScanConfig(**base)


def test_scan_config_is_frozen():
    cfg = ScanConfig(host="example.com", ports=[80])
    with pytest.raises(ValidationError):
        cfg.verbose = True


def test_probe_result_to_dict():
    res = ProbeResult("127.0.0.1", 22, Outcome.OPEN, "SSH-2.0-x")
    assert res.is_open
    assert res.to_dict() == {"address": "127.0.0.1", "port": 22, "outcome": "OPEN", "banner": "SSH-2.0-x"}


def test_build_scan_config_raises_config_error():
    with pytest.raises(ConfigError) as exc:
        build_scan_config(host="example.com", ports=[80, 70000])
    assert "70000" in str(exc.value)
    assert isinstance(exc.value.__cause__, ValidationError)


def test_build_scan_config_accepts_valid_fields():
    cfg = build_scan_config(host="example.com", ports=[22], concurrency=1)
    assert cfg.ports == (22,)
