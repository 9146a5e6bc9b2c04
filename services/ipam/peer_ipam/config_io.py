from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from peer_ipam.config_schema import Config

DEFAULT_CONFIG_PATH = "/app/config/config.yaml"

# env -> (секция, ключ)
_ENV_OVERRIDES = {
    "SUBSPACE_IPV4_POOL": ("network", "ipv4_pool"),
    "SUBSPACE_IPV6_POOL": ("network", "ipv6_pool"),
    "SUBSPACE_IPV4_NAT_ENABLED": ("network", "ipv4_enabled"),
    "SUBSPACE_IPV6_NAT_ENABLED": ("network", "ipv6_enabled"),
    "PEER_IPAM_LOG_LEVEL": ("global", "log_level"),
}
_FLAG_KEYS = {"ipv4_enabled", "ipv6_enabled"}


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ValueError(f"invalid config {path}: top level must be a mapping")
    return raw


def _apply_env(raw: Dict[str, Any], env: Mapping[str, str]) -> Dict[str, Any]:
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = env.get(var)
        if value is None or value == "":
            continue
        sect = dict(raw.get(section) or {})
        if key in _FLAG_KEYS:
            sect[key] = value.strip() != "0"
        elif key == "log_level":
            sect[key] = value.strip().upper()
        else:
            sect[key] = value.strip()
        raw[section] = sect
    return raw


def load_config(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Config:
    """
    YAML (если файл есть) + переопределения из окружения.
    Отсутствующий или пустой файл = значения по умолчанию.
    """
    env = os.environ if env is None else env
    cfg_path = Path(path or env.get("PEER_IPAM_CONFIG") or DEFAULT_CONFIG_PATH)
    raw = _apply_env(_read_yaml(cfg_path), env)
    try:
        return Config.model_validate(raw)
    except ValidationError as e:
        raise ValueError(f"invalid config {cfg_path}: {e}") from e
