from __future__ import annotations

import threading
from typing import Callable, Iterable, Optional

import structlog

from peer_ipam.errors import AddressPoolExhausted
from peer_ipam.ipam import find_first_free_id
from peer_ipam.models import PeerAssignment
from peer_ipam.network import NetworkConfig

log = structlog.get_logger()


class PeerProvisioner:
    """
    Свободный id -> адреса -> сохранение, одной критической секцией.

    Расчёт адресов чистый, но два параллельных запроса между чтением пиров и
    сохранением нового выберут один и тот же id. provision() держит один lock
    на всю последовательность; при нескольких процессах нужен внешний
    lock или транзакция.
    """

    def __init__(self, network: NetworkConfig, lock: Optional[threading.Lock] = None) -> None:
        self._network = network
        self._lock = lock or threading.Lock()

    def next_assignment(self, assigned_ids: Iterable[int]) -> PeerAssignment:
        peer_id = find_first_free_id(assigned_ids)
        ipv4, ipv6 = self._network.allocate(peer_id)
        return PeerAssignment(peer_id=peer_id, ipv4=ipv4, ipv6=ipv6)

    def has_capacity(self, assigned_ids: Iterable[int]) -> bool:
        # проверка "есть ли место" до создания профиля
        try:
            self.next_assignment(assigned_ids)
        except AddressPoolExhausted:
            return False
        return True

    def provision(
        self,
        load_ids: Callable[[], Iterable[int]],
        persist: Callable[[PeerAssignment], None],
    ) -> PeerAssignment:
        with self._lock:
            ids = list(load_ids())
            try:
                assignment = self.next_assignment(ids)
            except AddressPoolExhausted as e:
                log.warning("address_pool_exhausted", peer_id=e.peer_id, reason=e.reason, peers=len(ids))
                raise
            persist(assignment)
        log.info("peer_provisioned", **assignment.to_dict())
        return assignment
