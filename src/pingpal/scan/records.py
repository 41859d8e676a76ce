"""Flat JSON records for exporting and re-importing scan results.

The record layout matches the files written by earlier PingPal releases so
old exports keep loading::

    {"networkRange": ..., "timeout": ..., "subnetScanResults": [{"ipAddress": ...}]}
    {"ipAddress": ..., "bottomRangePort": ..., "topRangePort": ..., "timeout": ...,
     "portScanResults": [{"portNumber": ..., "protocol": ...}]}
    {"ipAddress": ..., "pingInterval": ..., "numOfPings": ..., "continuousPinging": ...,
     "devicePingResults": [{"roundTripTime": ..., "successfulPing": ..., "packetLoss": ...}]}
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping

from .errors import (
    InvalidScanConfigError,
    MissingRecordKeysError,
    RecordError,
    UnknownScanTypeError,
)
from .models import (
    MAX_PORT,
    MIN_PORT,
    AddressSweepConfig,
    HostUp,
    PingConfig,
    PingSample,
    PortOpen,
    PortSweepConfig,
    ScanConfig,
    ScanType,
    Verdict,
    validate_ip_address,
)
from .protocols import ProtocolResolver, get_resolver

logger = logging.getLogger(__name__)

RESULT_KEYS = {
    ScanType.ADDRESS_SWEEP: "subnetScanResults",
    ScanType.PORT_SWEEP: "portScanResults",
    ScanType.PING: "devicePingResults",
}

_REQUIRED_KEYS = {
    ScanType.ADDRESS_SWEEP: ("networkRange", "timeout", "subnetScanResults"),
    ScanType.PORT_SWEEP: (
        "ipAddress",
        "bottomRangePort",
        "topRangePort",
        "timeout",
        "portScanResults",
    ),
    ScanType.PING: (
        "ipAddress",
        "pingInterval",
        "numOfPings",
        "continuousPinging",
        "devicePingResults",
    ),
}


@dataclass(frozen=True)
class ScanRecord:
    """A configuration together with the verdicts it produced."""

    config: ScanConfig
    verdicts: tuple[Verdict, ...]

    @property
    def scan_type(self) -> ScanType:
        return self.config.scan_type


# -- export -------------------------------------------------------------------
def _verdict_to_dict(verdict: Verdict) -> dict[str, Any]:
    if isinstance(verdict, HostUp):
        return {"ipAddress": verdict.address}
    if isinstance(verdict, PortOpen):
        return {"portNumber": verdict.port, "protocol": verdict.protocol}
    return {
        "roundTripTime": verdict.round_trip,
        "successfulPing": verdict.success,
        "packetLoss": verdict.loss_percent,
    }


def to_record(config: ScanConfig, verdicts: Iterable[Verdict]) -> dict[str, Any]:
    """Return the flat export record for *config* and its *verdicts*."""

    if isinstance(config, AddressSweepConfig):
        record: dict[str, Any] = {
            "networkRange": config.network_range,
            "timeout": config.timeout,
        }
    elif isinstance(config, PortSweepConfig):
        record = {
            "ipAddress": config.address,
            "bottomRangePort": config.low,
            "topRangePort": config.high,
            "timeout": config.timeout,
        }
    else:
        record = {
            "ipAddress": config.address,
            "pingInterval": config.interval,
            "numOfPings": config.count,
            "continuousPinging": config.continuous,
        }
    record[RESULT_KEYS[config.scan_type]] = [_verdict_to_dict(v) for v in verdicts]
    return record


def save_record(path: Path | str, config: ScanConfig, verdicts: Iterable[Verdict]) -> Path:
    """Write the export record for a scan to *path* as indented JSON."""

    path = Path(path)
    if path.suffix != ".json":
        path = path.with_name(path.name + ".json")
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(to_record(config, verdicts), handle, indent=4)
    logger.info("Exported %s results to %s", config.scan_type.value, path)
    return path


# -- import -------------------------------------------------------------------
def detect_scan_type(record: Mapping[str, Any]) -> ScanType:
    """Return the scan type whose results key appears in *record*."""

    for scan_type, key in RESULT_KEYS.items():
        if key in record:
            return scan_type
    raise UnknownScanTypeError("Unknown scan type in record")


def _require(record: Mapping[str, Any], keys: Iterable[str]) -> None:
    missing = [key for key in keys if key not in record]
    if missing:
        raise MissingRecordKeysError(missing)


def _as_str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise RecordError(f"{name} is not a string")
    return value


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise RecordError(f"{name} is not an integer")
    return value


def _as_number(value: Any, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RecordError(f"{name} is not a number")
    return float(value)


def _as_bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise RecordError(f"{name} is not a boolean")
    return value


def _as_list(value: Any, name: str) -> list[Any]:
    if not isinstance(value, list):
        raise RecordError(f"{name} is not an array")
    return value


def _as_mapping(value: Any, name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise RecordError(f"{name} is not an object")
    return value


def _address_sweep(record: Mapping[str, Any]) -> ScanRecord:
    config = AddressSweepConfig(
        network_range=_as_str(record["networkRange"], "networkRange"),
        timeout=_as_int(record["timeout"], "timeout"),
    )
    verdicts = []
    for index, raw in enumerate(_as_list(record["subnetScanResults"], "subnetScanResults")):
        item = _as_mapping(raw, f"subnetScanResults[{index}]")
        _require(item, ("ipAddress",))
        address = _as_str(item["ipAddress"], "ipAddress")
        try:
            validate_ip_address(address)
        except InvalidScanConfigError as exc:
            raise RecordError(f"invalid ipAddress {address!r}") from exc
        verdicts.append(HostUp(address))
    return ScanRecord(config, tuple(verdicts))


def _port_sweep(record: Mapping[str, Any], resolver: ProtocolResolver) -> ScanRecord:
    config = PortSweepConfig(
        address=_as_str(record["ipAddress"], "ipAddress"),
        low=_as_int(record["bottomRangePort"], "bottomRangePort"),
        high=_as_int(record["topRangePort"], "topRangePort"),
        timeout=_as_int(record["timeout"], "timeout"),
    )
    verdicts = []
    for index, raw in enumerate(_as_list(record["portScanResults"], "portScanResults")):
        item = _as_mapping(raw, f"portScanResults[{index}]")
        _require(item, ("portNumber", "protocol"))
        port = _as_int(item["portNumber"], "portNumber")
        protocol = _as_str(item["protocol"], "protocol")
        if not MIN_PORT <= port <= MAX_PORT:
            raise RecordError(f"port {port} is outside [{MIN_PORT}, {MAX_PORT}]")
        if resolver.lookup(port) != protocol:
            raise RecordError(f"port {port} does not correspond to protocol {protocol!r}")
        verdicts.append(PortOpen(port, protocol))
    return ScanRecord(config, tuple(verdicts))


def _ping(record: Mapping[str, Any]) -> ScanRecord:
    config = PingConfig(
        address=_as_str(record["ipAddress"], "ipAddress"),
        interval=_as_int(record["pingInterval"], "pingInterval"),
        count=_as_int(record["numOfPings"], "numOfPings"),
        continuous=_as_bool(record["continuousPinging"], "continuousPinging"),
    )
    verdicts = []
    for index, raw in enumerate(_as_list(record["devicePingResults"], "devicePingResults")):
        item = _as_mapping(raw, f"devicePingResults[{index}]")
        _require(item, ("roundTripTime", "successfulPing", "packetLoss"))
        round_trip = _as_int(item["roundTripTime"], "roundTripTime")
        success = _as_bool(item["successfulPing"], "successfulPing")
        loss = _as_number(item["packetLoss"], "packetLoss")
        if not 0 <= round_trip <= config.interval:
            raise RecordError(f"round trip {round_trip} is outside [0, {config.interval}]")
        if round_trip < config.interval and not success:
            raise RecordError("a round trip shorter than the interval must be a success")
        if not 0 <= loss <= 100:
            raise RecordError(f"packet loss {loss} is outside [0, 100]")
        verdicts.append(PingSample(round_trip, success, loss))
    return ScanRecord(config, tuple(verdicts))


def from_record(
    record: Mapping[str, Any], resolver: ProtocolResolver | None = None
) -> ScanRecord:
    """Validate an exported *record* and rebuild its configuration and verdicts.

    Raises :class:`RecordError` (or one of its subclasses) for structural
    problems and :class:`InvalidScanConfigError` for out-of-range settings.
    """

    if not isinstance(record, Mapping):
        raise RecordError("record is not a JSON object")
    scan_type = detect_scan_type(record)
    _require(record, _REQUIRED_KEYS[scan_type])
    if scan_type is ScanType.ADDRESS_SWEEP:
        return _address_sweep(record)
    if scan_type is ScanType.PORT_SWEEP:
        return _port_sweep(record, resolver or get_resolver())
    return _ping(record)


def load_record(path: Path | str, resolver: ProtocolResolver | None = None) -> ScanRecord:
    """Read and validate an exported record from *path*."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RecordError(f"JSON parsing error in {path}: {exc}") from exc
    return from_record(data, resolver)


__all__ = [
    "RESULT_KEYS",
    "ScanRecord",
    "detect_scan_type",
    "from_record",
    "load_record",
    "save_record",
    "to_record",
]
