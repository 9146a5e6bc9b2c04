import threading
from ipaddress import IPv4Address, IPv6Address

import pytest

from peer_ipam.errors import AddressPoolExhausted
from peer_ipam.models import PeerAssignment
from peer_ipam.network import init_network_config
from peer_ipam.provision import PeerProvisioner


class TestPeerAssignment:

    def setup_method(self):
        self.a = PeerAssignment(peer_id=2, ipv4=IPv4Address("10.99.97.2"), ipv6=IPv6Address("fd00::10:97:2"))

    def test_allowed_ips_both(self):
        assert self.a.allowed_ips() == "10.99.97.2/32,fd00::10:97:2/128"

    def test_allowed_ips_single_family(self):
        assert self.a.allowed_ips(ipv6_enabled=False) == "10.99.97.2/32"
        assert self.a.allowed_ips(ipv4_enabled=False) == "fd00::10:97:2/128"

    def test_to_dict(self):
        assert self.a.to_dict() == {"peer_id": 2, "ipv4": "10.99.97.2", "ipv6": "fd00::10:97:2"}


class TestPeerProvisioner:

    def test_next_assignment_fills_gap(self, network):
        a = PeerProvisioner(network).next_assignment([2, 3, 5])
        assert a.peer_id == 4
        assert str(a.ipv4) == "10.99.97.4"
        assert str(a.ipv6) == "fd00::10:97:4"

    def test_keeps_network_private(self, network):
        prov = PeerProvisioner(network)
        assert not hasattr(prov, "network")

    def test_has_capacity(self):
        small = init_network_config("10.0.0.0/29", "fd00::/112")
        prov = PeerProvisioner(small)
        # /29: .2 .. .6 usable for peers, .7 is broadcast
        assert prov.has_capacity([2, 3, 4, 5])
        assert not prov.has_capacity([2, 3, 4, 5, 6])

    def test_provision_persists_once(self, network):
        stored = []
        a = PeerProvisioner(network).provision(lambda: [2], stored.append)
        assert stored == [a]
        assert a.peer_id == 3

    def test_exhausted_does_not_persist(self):
        small = init_network_config("10.0.0.0/30", "fd00::/112")
        stored = []
        with pytest.raises(AddressPoolExhausted):
            PeerProvisioner(small).provision(lambda: [2], stored.append)
        assert stored == []

    def test_persist_error_propagates(self, network):
        def boom(_):
            raise OSError("disk full")

        with pytest.raises(OSError, match="disk full"):
            PeerProvisioner(network).provision(lambda: [], boom)

    def test_concurrent_provision_unique(self, network):
        prov = PeerProvisioner(network)
        peers = []

        def worker():
            prov.provision(lambda: [p.peer_id for p in peers], peers.append)

        threads = [threading.Thread(target=worker) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert sorted(p.peer_id for p in peers) == list(range(2, 22))
        assert len({p.ipv4 for p in peers}) == 20

    def test_shared_lock(self, network):
        lock = threading.Lock()
        prov = PeerProvisioner(network, lock=lock)
        seen = []

        def persist(_):
            seen.append(lock.locked())

        prov.provision(lambda: [], persist)
        assert seen == [True]
        assert not lock.locked()
