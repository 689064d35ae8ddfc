"""
Error kinds for the scanner.

Only configuration, resolution and resource errors ever reach the process
boundary. Per-target network failures are absorbed by the prober.
"""

from typing import Optional


class ScannerError(Exception):
    """Base class for every error raised by the scanner itself."""


class ConfigError(ScannerError):
    pass


class ResolutionError(ScannerError):
    def __init__(self, host: str, reason: str):
        super().__init__(f"could not resolve {host!r}: {reason}")
        self.host = host
        self.reason = reason


class ResourceExhaustedError(ScannerError):
    """
    The environment ran out of something the scan cannot work without
    (sockets, threads). Never retried.
    """

    def __init__(self, what: str, cause: Optional[BaseException] = None):
        detail = f"{what}: {cause}" if cause is not None else what
        super().__init__(detail)
        self.what = what
        self.cause = cause


class QueueCapacityError(ScannerError):
    pass


class QueueSealedError(ScannerError):
    pass
