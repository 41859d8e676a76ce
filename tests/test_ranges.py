import pytest

from pingpal.scan.errors import InvalidScanConfigError
from pingpal.scan.ranges import (
    address_count,
    address_to_int,
    expand_addresses,
    expand_ports,
    int_to_address,
)


def test_expand_addresses_slash_30():
    assert list(expand_addresses("192.168.1.0/30")) == [
        "192.168.1.1",
        "192.168.1.2",
        "192.168.1.3",
    ]


def test_expand_addresses_does_not_mask_base():
    addresses = expand_addresses("10.0.0.255/24")
    assert len(addresses) == 255
    assert addresses[0] == "10.0.1.0"
    assert addresses[-1] == "10.0.1.254"


def test_expand_addresses_wraps_past_broadcast():
    assert list(expand_addresses("255.255.255.254/30")) == [
        "255.255.255.255",
        "0.0.0.0",
        "0.0.0.1",
    ]


def test_expand_addresses_slash_32_is_empty():
    assert list(expand_addresses("10.1.2.3/32")) == []


def test_expand_addresses_is_lazy_and_restartable():
    addresses = expand_addresses("0.0.0.0/1")
    assert len(addresses) == 2**31 - 1
    assert addresses[2**31 - 2] == "127.255.255.255"
    small = expand_addresses("172.16.0.0/28")
    assert list(small) == list(small)
    assert small[1:3] == ["172.16.0.2", "172.16.0.3"]
    with pytest.raises(IndexError):
        small[15]


@pytest.mark.parametrize(
    "cidr",
    ["10.0.0.0/0", "10.0.0.0/33", "256.0.0.1/24", "10.0.0/24", "10.0.0.1", "01.2.3.4/24"],
)
def test_expand_addresses_rejects_malformed_ranges(cidr):
    with pytest.raises(InvalidScanConfigError):
        expand_addresses(cidr)


def test_address_count():
    assert address_count(32) == 0
    assert address_count(24) == 255
    with pytest.raises(InvalidScanConfigError):
        address_count(0)


def test_address_int_conversion():
    assert address_to_int("1.2.3.4") == 0x01020304
    assert int_to_address(2**32 + 5) == "0.0.0.5"


def test_expand_ports():
    assert list(expand_ports(20, 25)) == [20, 21, 22, 23, 24, 25]
    assert list(expand_ports(80, 80)) == [80]
