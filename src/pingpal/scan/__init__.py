"""Concurrent scanning engine: range expansion, probes, coordination and results."""
from __future__ import annotations

from .coordinator import (
    GRACE_PERIOD,
    POOL_MULTIPLIER,
    ScanCoordinator,
    ScanSession,
    SessionState,
    default_pool_size,
)
from .errors import (
    InvalidScanConfigError,
    NoSamplesError,
    PingPalError,
    ProtocolTableError,
    RecordError,
    ScanSessionError,
)
from .models import (
    AddressSweepConfig,
    HostUp,
    PingConfig,
    PingSample,
    PingSummary,
    PortOpen,
    PortSweepConfig,
    ScanConfig,
    ScanType,
    Verdict,
)
from .prober import Prober
from .protocols import UNKNOWN_PROTOCOL, ProtocolResolver, get_resolver
from .ranges import expand_addresses, expand_ports
from .reporting import CallbackReporter, NullReporter, ProgressReporter
from .results import ResultSet, summarize

__all__ = [
    "AddressSweepConfig",
    "CallbackReporter",
    "GRACE_PERIOD",
    "HostUp",
    "InvalidScanConfigError",
    "NoSamplesError",
    "NullReporter",
    "POOL_MULTIPLIER",
    "PingConfig",
    "PingPalError",
    "PingSample",
    "PingSummary",
    "PortOpen",
    "PortSweepConfig",
    "Prober",
    "ProgressReporter",
    "ProtocolResolver",
    "ProtocolTableError",
    "RecordError",
    "ResultSet",
    "ScanConfig",
    "ScanCoordinator",
    "ScanSession",
    "ScanSessionError",
    "ScanType",
    "SessionState",
    "UNKNOWN_PROTOCOL",
    "Verdict",
    "default_pool_size",
    "expand_addresses",
    "expand_ports",
    "get_resolver",
    "summarize",
]
