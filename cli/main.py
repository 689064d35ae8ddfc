import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from core.config import MAX_CONCURRENCY, MAX_TIMEOUT_MS, MIN_CONCURRENCY, MIN_TIMEOUT_MS, get_settings
from core.errors import ConfigError, ResolutionError, ResourceExhaustedError
from core.models import MAX_PORT, MIN_PORT, ScanConfig, build_scan_config
from pipeline.orchestrator import Orchestrator
from pipeline.report import LineReporter

EXAMPLE = """
Example:
  tcpscan -v -t 500 -c 10 -6 -H example.com -p 21,22,23,80,443,3306
"""


def parse_int_option(flag: str, text: str, lo: int, hi: int) -> int:
    try:
        value = int(text.strip())
    except ValueError:
        value = None
    if value is None or not lo <= value <= hi:
        raise argparse.ArgumentTypeError(f"invalid value '{text}' for {flag} [{lo}..{hi}]")
    return value


def parse_ports(text: str) -> List[int]:
    ports = []
    for token in text.split(","):
        if not token.strip():
            continue
        ports.append(parse_int_option("-p", token, MIN_PORT, MAX_PORT))
    return ports


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="tcpscan",
        description="Concurrent TCP connect scanner",
        epilog=EXAMPLE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-6", dest="ipv6", action="store_true", help="enable IPv6 (default: IPv4 only)")
    parser.add_argument("-v", dest="verbose", action="store_true", help="verbose mode: show tried and closed ports")
    parser.add_argument("-b", dest="banner", action="store_true", help="grab banners (may slow the scan down)")
    parser.add_argument(
        "-t",
        dest="timeout_ms",
        metavar="MS",
        type=lambda s: parse_int_option("-t", s, MIN_TIMEOUT_MS, MAX_TIMEOUT_MS),
        default=settings.default_timeout_ms,
        help=f"connection timeout (default: %(default)s; {MIN_TIMEOUT_MS} to {MAX_TIMEOUT_MS} ms)",
    )
    parser.add_argument(
        "-c",
        dest="concurrency",
        metavar="N",
        type=lambda s: parse_int_option("-c", s, MIN_CONCURRENCY, MAX_CONCURRENCY),
        default=settings.default_concurrency,
        help=f"number of threads (default: %(default)s; {MIN_CONCURRENCY} to {MAX_CONCURRENCY})",
    )
    required = parser.add_argument_group("required")
    required.add_argument("-H", dest="host", metavar="HOSTNAME", required=True, help="hostname to scan")
    required.add_argument(
        "-p",
        dest="ports",
        metavar="PORTS",
        type=parse_ports,
        action="append",
        required=True,
        help="comma separated list of ports",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> ScanConfig:
    ports = [p for chunk in args.ports for p in chunk]
    return build_scan_config(
        host=args.host,
        ports=ports,
        ipv6=args.ipv6,
        verbose=args.verbose,
        banner=args.banner,
        concurrency=args.concurrency,
        timeout_ms=args.timeout_ms,
    )


def main(argv: Optional[List[str]] = None) -> int:
    try:
        settings = get_settings()
    except ValidationError as exc:
        msg = "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in exc.errors())
        print(f"tcpscan: error: invalid TCPSCAN_* setting: {msg}", file=sys.stderr)
        return 2

    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = config_from_args(args)
    except ConfigError as exc:
        parser.error(str(exc))

    level = settings.log_level
    if config.verbose and logging.getLevelName(level) > logging.INFO:
        level = "INFO"
    logging.basicConfig(level=level, stream=sys.stderr, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        Orchestrator().scan(config, LineReporter(verbose=config.verbose))
    except ResolutionError as exc:
        print(f"tcpscan: {exc}", file=sys.stderr)
        return 1
    except ResourceExhaustedError as exc:
        print(f"tcpscan: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
