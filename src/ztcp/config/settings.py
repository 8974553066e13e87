"""Connection manager configuration resolved from the environment."""

from __future__ import annotations

import logging
import socket
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ztcp.domain.session import DEFAULT_PORT

AddressFamilyName = Literal["inet", "inet6"]

_FAMILIES: dict[str, socket.AddressFamily] = {
    "inet": socket.AF_INET,
    "inet6": socket.AF_INET6,
}


class ZtcpSettings(BaseSettings):
    """Defaults applied when callers omit connection parameters."""

    model_config = SettingsConfigDict(
        env_prefix="",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    default_port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, alias="ZTCP_DEFAULT_PORT")
    address_family: AddressFamilyName = Field(default="inet", alias="ZTCP_ADDRESS_FAMILY")
    oob_inline: bool = Field(
        default=True,
        alias="ZTCP_OOB_INLINE",
        description="Deliver urgent (telnet) data inline on new sockets.",
    )
    managed_label: str = Field(default="ZFTP", alias="ZTCP_MANAGED_LABEL")

    @property
    def family(self) -> socket.AddressFamily:
        return _FAMILIES[self.address_family]

    @classmethod
    def load(cls) -> ZtcpSettings:
        instance = cls()
        logger = logging.getLogger("ztcp.settings")
        logger.info("ztcp settings loaded: %r", instance)
        return instance


__all__ = ["AddressFamilyName", "ZtcpSettings"]
