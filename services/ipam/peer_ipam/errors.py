from __future__ import annotations


class InvalidCIDR(ValueError):
    """CIDR не разбирается, не того семейства или без бит хоста."""


class AddressPoolExhausted(RuntimeError):
    """Адрес пира вышел за пределы подсети или допустимого класса адресов."""

    def __init__(self, peer_id: int, reason: str) -> None:
        super().__init__(f"no addresses available for peer {peer_id}: {reason}")
        self.peer_id = peer_id
        self.reason = reason
