import pytest

from pingpal.scan.errors import InvalidScanConfigError
from pingpal.scan.models import AddressSweepConfig, PingConfig, PortSweepConfig, ScanType


def test_timeout_bounds_are_inclusive():
    AddressSweepConfig("10.0.0.0/24", timeout=100)
    AddressSweepConfig("10.0.0.0/24", timeout=10_000)
    with pytest.raises(InvalidScanConfigError) as excinfo:
        AddressSweepConfig("10.0.0.0/24", timeout=99)
    assert excinfo.value.field == "timeout"
    with pytest.raises(InvalidScanConfigError):
        PortSweepConfig("10.0.0.1", 1, 2, timeout=10_001)


def test_port_sweep_validation():
    config = PortSweepConfig("10.0.0.1", 1, 65535)
    assert config.scan_type is ScanType.PORT_SWEEP
    with pytest.raises(InvalidScanConfigError):
        PortSweepConfig("10.0.0.1", 0, 10)
    with pytest.raises(InvalidScanConfigError):
        PortSweepConfig("10.0.0.1", 10, 65536)
    with pytest.raises(InvalidScanConfigError):
        PortSweepConfig("10.0.0.1", 30, 20)
    with pytest.raises(InvalidScanConfigError):
        PortSweepConfig("10.0.0.256", 20, 30)


def test_ping_count_only_checked_when_not_continuous():
    PingConfig("10.0.0.1", count=100)
    PingConfig("10.0.0.1", count=0, continuous=True)
    with pytest.raises(InvalidScanConfigError):
        PingConfig("10.0.0.1", count=0)
    with pytest.raises(InvalidScanConfigError):
        PingConfig("10.0.0.1", count=101)
    with pytest.raises(InvalidScanConfigError):
        PingConfig("10.0.0.1", interval=True)


def test_prefix_length():
    assert AddressSweepConfig("192.168.0.7/22").prefix_length == 22
