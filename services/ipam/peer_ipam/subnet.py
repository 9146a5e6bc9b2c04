from __future__ import annotations

import ipaddress as ipa
from typing import Tuple, Union

from peer_ipam.errors import InvalidCIDR

IPAddress = Union[ipa.IPv4Address, ipa.IPv6Address]
IPNetwork = Union[ipa.IPv4Network, ipa.IPv6Network]


def resolve_gateway(cidr: str) -> Tuple[IPAddress, IPNetwork]:
    """
    Разбирает CIDR и возвращает (gateway, network).
    Gateway: базовый адрес сети с выставленным младшим битом последнего байта
    (10.99.97.0/24 -> 10.99.97.1). Биты хоста во входной строке отбрасываются.
    """
    try:
        net = ipa.ip_network(cidr.strip(), strict=False)
    except (ValueError, AttributeError) as e:
        raise InvalidCIDR(f"invalid CIDR {cidr!r}: {e}") from e
    if net.max_prefixlen - net.prefixlen == 0:
        raise InvalidCIDR(f"given CIDR ({cidr}) does not represent a network")

    raw = bytearray(net.network_address.packed)
    raw[-1] |= 1
    return ipa.ip_address(bytes(raw)), net
