"""Public package interface for PingPal."""

__version__ = "1.0.0"

from .scan import (
    AddressSweepConfig,
    PingConfig,
    PortSweepConfig,
    ScanCoordinator,
    expand_addresses,
    expand_ports,
)

__all__ = [
    "AddressSweepConfig",
    "PingConfig",
    "PortSweepConfig",
    "ScanCoordinator",
    "__version__",
    "expand_addresses",
    "expand_ports",
]
