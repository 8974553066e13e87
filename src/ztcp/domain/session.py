"""TCP session records and their lifecycle primitives."""

from __future__ import annotations

import socket
from dataclasses import dataclass
from enum import Enum, IntFlag
from typing import Protocol

UNSET_HANDLE = -1
DEFAULT_PORT = 23  # telnet

_ADDRESS_LENGTHS = {
    socket.AF_INET: 4,
    socket.AF_INET6: 16,
}


class SessionFlags(IntFlag):
    """Usage tags attached to a session when it is created."""

    NONE = 0
    MANAGED = 1  # owned by a higher-level protocol, closing requires force


class SessionState(str, Enum):
    """Lifecycle states for a tracked socket."""

    CREATED = "created"
    SOCKET_ALLOCATED = "socket_allocated"
    CONNECTED = "connected"
    CLOSED = "closed"


class SocketLike(Protocol):
    """Subset of :class:`socket.socket` the connection manager relies on."""

    def fileno(self) -> int: ...

    def connect(self, address: tuple[object, ...]) -> None: ...

    def setsockopt(self, level: int, optname: int, value: int) -> None: ...

    def close(self) -> None: ...


@dataclass(frozen=True, slots=True)
class PeerEndpoint:
    """Remote endpoint of a session; ``port`` is kept in host byte order."""

    family: socket.AddressFamily
    address: bytes
    port: int
    flowinfo: int = 0
    scope_id: int = 0

    def __post_init__(self) -> None:
        expected = _ADDRESS_LENGTHS.get(self.family)
        if expected is None:
            raise ValueError(f"unsupported address family: {self.family!r}")
        if len(self.address) != expected:
            raise ValueError(
                f"address length mismatch: expected {expected} bytes, got {len(self.address)}"
            )
        if not 0 <= self.port <= 0xFFFF:
            raise ValueError("port must fit in 16 bits")

    @property
    def host(self) -> str:
        return socket.inet_ntop(self.family, self.address)

    @property
    def wire_port(self) -> int:
        """Port in network byte order, as it travels in the socket address."""
        return socket.htons(self.port)

    def sockaddr(self) -> tuple[object, ...]:
        """Return the address tuple accepted by :meth:`socket.socket.connect`."""
        if self.family == socket.AF_INET6:
            return (self.host, self.port, self.flowinfo, self.scope_id)
        return (self.host, self.port)


@dataclass(slots=True, eq=False)
class Session:
    """One tracked TCP client socket and its peer metadata."""

    session_id: int
    flags: SessionFlags = SessionFlags.NONE
    handle: int = UNSET_HANDLE
    peer: PeerEndpoint | None = None
    state: SessionState = SessionState.CREATED
    sock: SocketLike | None = None

    @property
    def is_open(self) -> bool:
        return self.handle != UNSET_HANDLE

    @property
    def protected(self) -> bool:
        return bool(self.flags & SessionFlags.MANAGED)

    def attach_socket(self, sock: SocketLike) -> None:
        """Bind a freshly created socket to this session."""
        if self.state is not SessionState.CREATED:
            raise ValueError(f"cannot attach a socket in state {self.state.value}")
        self.sock = sock
        self.handle = sock.fileno()
        self.state = SessionState.SOCKET_ALLOCATED

    def target(self, peer: PeerEndpoint) -> None:
        """Record the endpoint a connect is about to be attempted against."""
        self.peer = peer

    def mark_connected(self, peer: PeerEndpoint) -> None:
        if not self.is_open:
            raise ValueError("cannot connect a session without a socket")
        self.peer = peer
        self.state = SessionState.CONNECTED

    def mark_closed(self) -> None:
        self.sock = None
        self.handle = UNSET_HANDLE
        self.state = SessionState.CLOSED


__all__ = [
    "DEFAULT_PORT",
    "PeerEndpoint",
    "Session",
    "SessionFlags",
    "SessionState",
    "SocketLike",
    "UNSET_HANDLE",
]
