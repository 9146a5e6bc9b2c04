"""
Pytest fixtures shared by the peer_ipam tests
"""

import ipaddress

import pytest
import structlog

from peer_ipam.network import NetworkConfig, init_network_config

ENV_VARS = (
    "PEER_IPAM_CONFIG",
    "PEER_IPAM_LOG_LEVEL",
    "SUBSPACE_IPV4_POOL",
    "SUBSPACE_IPV6_POOL",
    "SUBSPACE_IPV4_NAT_ENABLED",
    "SUBSPACE_IPV6_NAT_ENABLED",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep host environment overrides out of the tests"""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI runs bind structlog to the runner's stderr; undo that after each test"""
    yield
    structlog.reset_defaults()


@pytest.fixture
def v4_net():
    return ipaddress.IPv4Network("127.10.0.0/16")


@pytest.fixture
def v6_net():
    return ipaddress.IPv6Network("fe80::/112")


@pytest.fixture
def network() -> NetworkConfig:
    return init_network_config("10.99.97.0/24", "fd00::10:97:0/112")


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML config and return its path"""

    def _write(text: str):
        path = tmp_path / "config.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    return _write
