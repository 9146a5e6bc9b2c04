from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

import typer

from peer_ipam.config_io import load_config
from peer_ipam.config_schema import Config
from peer_ipam.errors import AddressPoolExhausted, InvalidCIDR
from peer_ipam.models import PeerAssignment
from peer_ipam.network import NetworkConfig
from peer_ipam.provision import PeerProvisioner
from peer_ipam.util import configure_logging

app = typer.Typer(no_args_is_help=True)

CONFIG_OPTION = typer.Option(
    None,
    "--config",
    "-c",
    help="Путь к YAML конфигурации (по умолчанию $PEER_IPAM_CONFIG или /app/config/config.yaml)",
)


# =========================
#       IO HELPERS
# =========================

def _bootstrap(config: Optional[str]) -> Tuple[Config, NetworkConfig]:
    try:
        cfg = load_config(config)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    configure_logging(cfg.global_.log_level)
    try:
        return cfg, NetworkConfig.from_config(cfg)
    except InvalidCIDR as e:
        raise typer.BadParameter(str(e)) from e


def _emit(payload: Dict[str, Any]) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _emit_assignment(cfg: Config, a: PeerAssignment) -> None:
    payload = a.to_dict()
    payload["allowed_ips"] = a.allowed_ips(cfg.network.ipv4_enabled, cfg.network.ipv6_enabled)
    _emit(payload)


def _exhausted(e: AddressPoolExhausted) -> None:
    typer.echo(f"no addresses available: {e.reason}", err=True)
    raise typer.Exit(code=1)


# =========================
#         CLI
# =========================

@app.command("show")
def show_cmd(config: Optional[str] = CONFIG_OPTION) -> None:
    _, net = _bootstrap(config)
    _emit(net.to_dict())


@app.command("allocate")
def allocate_cmd(
    peer_id: int = typer.Argument(..., min=0, help="Номер пира"),
    config: Optional[str] = CONFIG_OPTION,
) -> None:
    cfg, net = _bootstrap(config)
    try:
        ipv4, ipv6 = net.allocate(peer_id)
    except AddressPoolExhausted as e:
        _exhausted(e)
        return
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
    _emit_assignment(cfg, PeerAssignment(peer_id=peer_id, ipv4=ipv4, ipv6=ipv6))


@app.command("next-id")
def next_id_cmd(
    ids: Optional[List[int]] = typer.Argument(None, help="Уже занятые номера пиров"),
    config: Optional[str] = CONFIG_OPTION,
) -> None:
    cfg, net = _bootstrap(config)
    try:
        assignment = PeerProvisioner(net).next_assignment(ids or [])
    except AddressPoolExhausted as e:
        _exhausted(e)
        return
    _emit_assignment(cfg, assignment)


if __name__ == "__main__":
    app()
