"""Expand compact range descriptors into ordered probe targets.

Both expanders return lazy sequences: nothing is materialized up front and
iterating twice yields the same targets in the same order.
"""
from __future__ import annotations

import ipaddress
from collections.abc import Sequence
from typing import Iterator, overload

from .errors import InvalidScanConfigError
from .models import validate_network_range

_ADDRESS_SPACE = 1 << 32


def address_to_int(address: str) -> int:
    """Return the dotted-quad *address* as a 32-bit unsigned integer."""

    return int(ipaddress.IPv4Address(address))


def int_to_address(value: int) -> str:
    """Render *value* (wrapped modulo 2**32) as a dotted quad."""

    return str(ipaddress.IPv4Address(value % _ADDRESS_SPACE))


def address_count(prefix_length: int) -> int:
    """Number of addresses swept for a ``/prefix_length`` range."""

    if not 1 <= prefix_length <= 32:
        raise InvalidScanConfigError("network_range", f"prefix /{prefix_length} out of range")
    return 2 ** (32 - prefix_length) - 1


class AddressRange(Sequence):
    """Addresses following ``base`` for a CIDR sweep.

    The base is used exactly as written (it is not masked to the network
    address) and the sequence starts one address after it. Offsets past
    ``255.255.255.255`` wrap around to ``0.0.0.0``.
    """

    def __init__(self, base: str, prefix_length: int) -> None:
        self.base = base
        self.prefix_length = prefix_length
        self._base_value = address_to_int(base)
        self._count = address_count(prefix_length)

    def __len__(self) -> int:
        return self._count

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> list[str]: ...

    def __getitem__(self, index):
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(self._count))]
        if index < 0:
            index += self._count
        if not 0 <= index < self._count:
            raise IndexError("address index out of range")
        return int_to_address(self._base_value + index + 1)

    def __iter__(self) -> Iterator[str]:
        for offset in range(1, self._count + 1):
            yield int_to_address(self._base_value + offset)

    def __repr__(self) -> str:
        return f"AddressRange({self.base!r}/{self.prefix_length}, count={self._count})"


def expand_addresses(cidr: str) -> AddressRange:
    """Return the addresses swept for *cidr* (``a.b.c.d/n``)."""

    validate_network_range(cidr)
    base, prefix = cidr.split("/", 1)
    return AddressRange(base, int(prefix))


def expand_ports(low: int, high: int) -> range:
    """Return ports ``low`` through ``high`` inclusive."""

    return range(low, high + 1)


__all__ = [
    "AddressRange",
    "address_count",
    "address_to_int",
    "expand_addresses",
    "expand_ports",
    "int_to_address",
]
