from __future__ import annotations

from ipaddress import IPv4Network, IPv6Network
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class GlobalCfg(BaseModel):
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


class NetworkCfg(BaseModel):
    ipv4_pool: str = "10.99.97.0/24"
    ipv6_pool: str = "fd00::10:97:0/112"
    ipv4_enabled: bool = True
    ipv6_enabled: bool = True

    @field_validator("ipv4_pool")
    @classmethod
    def _v4_ok(cls, v: str) -> str:
        try:
            IPv4Network(v, strict=False)
        except Exception as e:
            raise ValueError(f"invalid ipv4_pool {v}: {e}") from e
        return v

    @field_validator("ipv6_pool")
    @classmethod
    def _v6_ok(cls, v: str) -> str:
        try:
            IPv6Network(v, strict=False)
        except Exception as e:
            raise ValueError(f"invalid ipv6_pool {v}: {e}") from e
        return v


class Config(BaseModel):
    global_: GlobalCfg = Field(default_factory=GlobalCfg, alias="global")
    network: NetworkCfg = Field(default_factory=NetworkCfg)

    model_config = {"populate_by_name": True}
