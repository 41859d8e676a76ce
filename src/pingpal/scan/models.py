"""Scan configurations and the verdicts produced by individual probes."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import InvalidScanConfigError

_OCTET = r"(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])"
IP_ADDRESS_RE = re.compile(rf"^(?:{_OCTET}\.){{3}}{_OCTET}$")
NETWORK_RANGE_RE = re.compile(rf"^(?:{_OCTET}\.){{3}}{_OCTET}/(?:[1-9]|[12][0-9]|3[0-2])$")

MIN_TIMEOUT = 100
MAX_TIMEOUT = 10_000
MIN_PING_INTERVAL = 100
MAX_PING_INTERVAL = 10_000
MIN_PINGS = 1
MAX_PINGS = 100
MIN_PORT = 1
MAX_PORT = 65535


class ScanType(str, Enum):
    """Discriminator shared by configurations and exported records."""

    ADDRESS_SWEEP = "address_sweep"
    PORT_SWEEP = "port_sweep"
    PING = "ping"


def _check_int(field: str, value: object, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidScanConfigError(field, f"expected an integer, got {value!r}")
    if not low <= value <= high:
        raise InvalidScanConfigError(field, f"{value} is outside [{low}, {high}]")


def validate_ip_address(address: str) -> None:
    """Raise :class:`InvalidScanConfigError` unless *address* is a dotted quad."""

    if not isinstance(address, str) or not IP_ADDRESS_RE.match(address):
        raise InvalidScanConfigError("address", f"invalid IPv4 address {address!r}")


def validate_network_range(network_range: str) -> None:
    """Raise :class:`InvalidScanConfigError` unless *network_range* is ``a.b.c.d/n``."""

    if not isinstance(network_range, str) or not NETWORK_RANGE_RE.match(network_range):
        raise InvalidScanConfigError(
            "network_range", f"invalid network range {network_range!r}"
        )


@dataclass(frozen=True)
class AddressSweepConfig:
    """Sweep every address of ``network_range`` for live hosts."""

    network_range: str
    timeout: int = 1000

    scan_type = ScanType.ADDRESS_SWEEP

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        validate_network_range(self.network_range)
        _check_int("timeout", self.timeout, MIN_TIMEOUT, MAX_TIMEOUT)

    @property
    def prefix_length(self) -> int:
        return int(self.network_range.split("/", 1)[1])


@dataclass(frozen=True)
class PortSweepConfig:
    """Sweep ports ``low``..``high`` on ``address`` for open services."""

    address: str
    low: int
    high: int
    timeout: int = 1000

    scan_type = ScanType.PORT_SWEEP

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        validate_ip_address(self.address)
        _check_int("low", self.low, MIN_PORT, MAX_PORT)
        _check_int("high", self.high, MIN_PORT, MAX_PORT)
        if self.low > self.high:
            raise InvalidScanConfigError(
                "high", f"port range {self.low}-{self.high} is inverted"
            )
        _check_int("timeout", self.timeout, MIN_TIMEOUT, MAX_TIMEOUT)


@dataclass(frozen=True)
class PingConfig:
    """Ping ``address`` every ``interval`` milliseconds.

    ``count`` is ignored when ``continuous`` is set; the run then lasts until
    a stop is requested.
    """

    address: str
    interval: int = 1000
    count: int = 4
    continuous: bool = False

    scan_type = ScanType.PING

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        validate_ip_address(self.address)
        _check_int("interval", self.interval, MIN_PING_INTERVAL, MAX_PING_INTERVAL)
        if not isinstance(self.continuous, bool):
            raise InvalidScanConfigError("continuous", "expected a boolean")
        if not self.continuous:
            _check_int("count", self.count, MIN_PINGS, MAX_PINGS)


ScanConfig = Union[AddressSweepConfig, PortSweepConfig, PingConfig]

# An address (address sweep, ping) or a port number (port sweep).
ScanTarget = Union[str, int]


@dataclass(frozen=True)
class HostUp:
    address: str


@dataclass(frozen=True)
class PortOpen:
    port: int
    protocol: str


@dataclass(frozen=True)
class PingSample:
    """One ping attempt.

    Failed attempts carry the full interval as their round trip.
    """

    round_trip: int
    success: bool
    loss_percent: float


Verdict = Union[HostUp, PortOpen, PingSample]


@dataclass(frozen=True)
class PingSummary:
    """Summary statistics derived from the samples of one ping run."""

    minimum: int
    maximum: int
    average: float | None
    total: int
    successful: int
    failed: int
    loss_percent: float


__all__ = [
    "ScanType",
    "AddressSweepConfig",
    "PortSweepConfig",
    "PingConfig",
    "ScanConfig",
    "ScanTarget",
    "HostUp",
    "PortOpen",
    "PingSample",
    "PingSummary",
    "Verdict",
    "validate_ip_address",
    "validate_network_range",
    "IP_ADDRESS_RE",
    "NETWORK_RANGE_RE",
    "MIN_TIMEOUT",
    "MAX_TIMEOUT",
    "MIN_PING_INTERVAL",
    "MAX_PING_INTERVAL",
    "MIN_PINGS",
    "MAX_PINGS",
    "MIN_PORT",
    "MAX_PORT",
]
