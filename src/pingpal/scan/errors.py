"""Exception types raised by the scanning engine."""
from __future__ import annotations


class PingPalError(RuntimeError):
    """Base class for all PingPal errors."""


class InvalidScanConfigError(PingPalError, ValueError):
    """Raised when a scan configuration value is out of range or malformed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class ScanSessionError(PingPalError):
    """Raised when a session is started twice or after a stop request."""


class ProtocolTableError(PingPalError):
    """Raised when the port/protocol table cannot be loaded."""


class NoSamplesError(PingPalError):
    """Raised when statistics are requested for an empty ping run."""


class RecordError(PingPalError, ValueError):
    """Raised when an exported scan record is malformed."""


class MissingRecordKeysError(RecordError):
    """Raised when a record lacks one or more required keys."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(f"Missing required keys: {', '.join(missing)}")
        self.missing = missing


class UnknownScanTypeError(RecordError):
    """Raised when a record does not hold any known scan results."""


__all__ = [
    "PingPalError",
    "InvalidScanConfigError",
    "ScanSessionError",
    "ProtocolTableError",
    "NoSamplesError",
    "RecordError",
    "MissingRecordKeysError",
    "UnknownScanTypeError",
]
