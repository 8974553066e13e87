"""Report lines for the shell builtin that drives the connection manager."""

from __future__ import annotations

from ztcp.application.dto.connection import ConnectionListing
from ztcp.domain.session import Session


def describe_opened(host: str, port: int, session: Session) -> str:
    return f"{host}:{port} is now on fd {session.handle}"


def describe_listing(entry: ConnectionListing, managed_label: str = "ZFTP") -> str:
    line = f"{entry.display_name}:{entry.peer_port} is on fd {entry.handle}"
    if entry.protected:
        line = f"{line} {managed_label}"
    return line


__all__ = ["describe_listing", "describe_opened"]
