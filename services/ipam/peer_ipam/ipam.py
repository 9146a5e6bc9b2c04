from __future__ import annotations

import ipaddress as ipa
from typing import Iterable, List, Tuple

from peer_ipam.errors import AddressPoolExhausted

# 0 — адрес сети, 1 — gateway; пирам никогда не выдаются
MIN_PEER_ID = 2
MAX_PEER_ID = 0xFFFFFFFF


def decimal_to_hex_digits(chunk: int) -> int:
    """
    Переписывает десятичные цифры байта как шестнадцатеричные: 100 -> 0x100,
    42 -> 0x42. Так суффикс IPv6 читается как номер пира (::100 у пира 100).
    """
    return chunk % 10 + 16 * ((chunk // 10) % 10) + 256 * (chunk // 100)


_V4_BROADCAST = ipa.IPv4Address("255.255.255.255")


def _is_unicast_v6(addr: ipa.IPv6Address) -> bool:
    # global unicast (включая ULA fd00::/8) или link-local unicast
    if addr.is_unspecified or addr.is_loopback or addr.is_multicast:
        return False
    # ::ffff:a.b.c.d судим как IPv4 (is_loopback их не видит до 3.13)
    mapped = addr.ipv4_mapped
    if mapped is not None:
        return not (mapped.is_unspecified or mapped.is_loopback or mapped.is_multicast or mapped == _V4_BROADCAST)
    return True


def allocate(
    v4_net: ipa.IPv4Network,
    v6_net: ipa.IPv6Network,
    peer_id: int,
) -> Tuple[ipa.IPv4Address, ipa.IPv6Address]:
    """
    Детерминированная пара (IPv4, IPv6) для номера пира.

    id берётся по байту за шаг, начиная с младшего. Байт прибавляется к
    очередному младшему байту базового v4-адреса и, после
    decimal_to_hex_digits(), к очередной паре младших байт v6-адреса.
    Переполнение байта без переноса в соседний (по модулю 256).
    """
    if not 0 <= peer_id <= MAX_PEER_ID:
        raise ValueError(f"peer id must fit in 32 bits, got {peer_id}")

    v4 = bytearray(v4_net.network_address.packed)
    v6 = bytearray(v6_net.network_address.packed)
    left, pos4, pos6 = peer_id, len(v4) - 1, len(v6) - 2
    while left:
        chunk = left & 0xFF
        v4[pos4] = (v4[pos4] + chunk) & 0xFF
        hexed = decimal_to_hex_digits(chunk)
        v6[pos6] = (v6[pos6] + (hexed >> 8)) & 0xFF
        v6[pos6 + 1] = (v6[pos6 + 1] + (hexed & 0xFF)) & 0xFF
        left, pos4, pos6 = left >> 8, pos4 - 1, pos6 - 2

    ipv4 = ipa.IPv4Address(bytes(v4))
    ipv6 = ipa.IPv6Address(bytes(v6))
    if ipv4 not in v4_net or ipv4 == v4_net.broadcast_address:
        raise AddressPoolExhausted(peer_id, f"{ipv4} is not a host of {v4_net}")
    if ipv6 not in v6_net or not _is_unicast_v6(ipv6):
        raise AddressPoolExhausted(peer_id, f"{ipv6} is not a unicast host of {v6_net}")
    return ipv4, ipv6


def find_first_free_id(assigned_ids: Iterable[int]) -> int:
    """
    Наименьший свободный id начиная с MIN_PEER_ID.
    Дыры после удалённых пиров заполняются первыми; дубликаты и
    зарезервированные id (< MIN_PEER_ID) игнорируются.
    """
    ids: List[int] = sorted({int(i) for i in assigned_ids if int(i) >= MIN_PEER_ID})
    if not ids:
        return MIN_PEER_ID
    for expected, actual in enumerate(ids, start=MIN_PEER_ID):
        if expected != actual:
            return expected
    return ids[-1] + 1
