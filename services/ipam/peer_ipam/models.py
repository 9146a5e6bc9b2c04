from __future__ import annotations

from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address
from typing import Dict, List


@dataclass(frozen=True)
class PeerAssignment:
    peer_id: int
    ipv4: IPv4Address
    ipv6: IPv6Address

    def allowed_ips(self, ipv4_enabled: bool = True, ipv6_enabled: bool = True) -> str:
        """
        Строка адресов для [Peer]/[Interface]: "10.99.97.2/32,fd00::10:97:2/128".
        Выключенное семейство просто пропускается.
        """
        parts: List[str] = []
        if ipv4_enabled:
            parts.append(f"{self.ipv4}/32")
        if ipv6_enabled:
            parts.append(f"{self.ipv6}/128")
        return ",".join(parts)

    def to_dict(self) -> Dict[str, object]:
        return {"peer_id": self.peer_id, "ipv4": str(self.ipv4), "ipv6": str(self.ipv6)}
