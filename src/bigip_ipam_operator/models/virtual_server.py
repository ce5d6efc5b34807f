"""Pydantic models for the k8s-bigip-ctlr virtual-server configuration.

Field names are the JSON keys expected by the ``bigip-virtual-server`` schema,
so the models are dumped by field name, not by alias.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from ..constants import BALANCE_ROUND_ROBIN


class F5Mode(str, Enum):
    """Virtual server mode."""

    HTTP = "http"
    TCP = "tcp"


class VirtualAddress(BaseModel):
    """Frontend bind address and port."""

    bindAddr: Optional[str] = Field(default=None, alias="bind_addr")
    port: int

    class Config:
        populate_by_name = True


class SSLProfile(BaseModel):
    """SSL profile(s) attached to the frontend.

    A single profile goes into ``f5ProfileName``, several into
    ``f5ProfileNames``.
    """

    f5ProfileName: Optional[str] = Field(default=None, alias="f5_profile_name")
    f5ProfileNames: Optional[list[str]] = Field(default=None, alias="f5_profile_names")

    class Config:
        populate_by_name = True


class Frontend(BaseModel):
    """Frontend of a virtual server."""

    balance: str = BALANCE_ROUND_ROBIN
    mode: F5Mode = F5Mode.TCP
    partition: str
    virtualAddress: VirtualAddress = Field(alias="virtual_address")
    sslProfile: Optional[SSLProfile] = Field(default=None, alias="ssl_profile")

    class Config:
        populate_by_name = True


class Backend(BaseModel):
    """Backend Service of a virtual server."""

    serviceName: str = Field(alias="service_name")
    servicePort: int = Field(alias="service_port", ge=1, le=65535)

    class Config:
        populate_by_name = True


class VirtualServer(BaseModel):
    frontend: Frontend
    backend: Backend


class VirtualServerConfig(BaseModel):
    """Top level document stored in the virtual-server ConfigMap."""

    virtualServer: VirtualServer = Field(alias="virtual_server")

    class Config:
        populate_by_name = True

    def to_json(self) -> str:
        """Serialize to the compact JSON stored in the record."""
        return self.model_dump_json(exclude_none=True)

    @classmethod
    def from_json(cls, data: str) -> "VirtualServerConfig":
        return cls.model_validate_json(data)
