from __future__ import annotations

import ipaddress as ipa
from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Tuple

import structlog

from peer_ipam.errors import InvalidCIDR
from peer_ipam.ipam import allocate
from peer_ipam.subnet import resolve_gateway

if TYPE_CHECKING:
    from peer_ipam.config_schema import Config

log = structlog.get_logger()


@dataclass(frozen=True)
class NetworkConfig:
    """
    Диапазоны overlay-сети и их gateway. Строится один раз при старте и
    передаётся явно; смена диапазонов только через перезапуск.
    """

    network_ipv4: ipa.IPv4Network
    gateway_ipv4: ipa.IPv4Address
    network_ipv6: ipa.IPv6Network
    gateway_ipv6: ipa.IPv6Address

    @classmethod
    def from_config(cls, cfg: "Config") -> "NetworkConfig":
        return init_network_config(cfg.network.ipv4_pool, cfg.network.ipv6_pool)

    def allocate(self, peer_id: int) -> Tuple[ipa.IPv4Address, ipa.IPv6Address]:
        return allocate(self.network_ipv4, self.network_ipv6, peer_id)

    def to_dict(self) -> Dict[str, str]:
        return {
            "ipv4_network": str(self.network_ipv4),
            "ipv4_gateway": str(self.gateway_ipv4),
            "ipv6_network": str(self.network_ipv6),
            "ipv6_gateway": str(self.gateway_ipv6),
        }


def init_network_config(v4_cidr: str, v6_cidr: str) -> NetworkConfig:
    gw4, net4 = resolve_gateway(v4_cidr)
    if not isinstance(net4, ipa.IPv4Network):
        raise InvalidCIDR(f"{v4_cidr} is not an IPv4 network")
    gw6, net6 = resolve_gateway(v6_cidr)
    if not isinstance(net6, ipa.IPv6Network):
        raise InvalidCIDR(f"{v6_cidr} is not an IPv6 network")

    conf = NetworkConfig(network_ipv4=net4, gateway_ipv4=gw4, network_ipv6=net6, gateway_ipv6=gw6)
    log.info("network_config_ready", **conf.to_dict())
    return conf
