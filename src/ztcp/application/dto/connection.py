"""DTOs returned by the connection manager."""

from __future__ import annotations

from dataclasses import dataclass

UNKNOWN_PEER = "UNKNOWN"


@dataclass(frozen=True)
class ConnectionListing:
    """One row of the open-connection listing."""

    peer_name: str | None
    peer_port: int
    handle: int
    protected: bool
    peer_address: str | None = None

    @property
    def display_name(self) -> str:
        return self.peer_name or UNKNOWN_PEER


__all__ = ["ConnectionListing", "UNKNOWN_PEER"]
