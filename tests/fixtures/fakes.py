from __future__ import annotations

import errno
import socket
from collections.abc import Callable, Iterable, Mapping, Sequence
from itertools import count

from ztcp.application.ports.resolver import ResolverPort
from ztcp.errors import ResolutionError


class FakeSocket:
    """Socket double that replays scripted connect outcomes per address."""

    def __init__(
        self,
        handle: int,
        family: int,
        *,
        outcomes: Mapping[str, Sequence[BaseException | None]] | None = None,
        close_error: OSError | None = None,
        on_connect: Callable[[], None] | None = None,
    ) -> None:
        self.handle = handle
        self.family = family
        self.outcomes = {host: list(results) for host, results in (outcomes or {}).items()}
        self.close_error = close_error
        self.on_connect = on_connect
        self.connect_calls: list[tuple[object, ...]] = []
        self.options: dict[tuple[int, int], int] = {}
        self.closed = False
        self.connected_to: tuple[object, ...] | None = None

    def fileno(self) -> int:
        return -1 if self.closed else self.handle

    def connect(self, address: tuple[object, ...]) -> None:
        self.connect_calls.append(address)
        if self.on_connect is not None:
            self.on_connect()
        pending = self.outcomes.get(str(address[0]))
        outcome = pending.pop(0) if pending else None
        if outcome is not None:
            raise outcome
        self.connected_to = address

    def setsockopt(self, level: int, optname: int, value: int) -> None:
        self.options[(level, optname)] = value

    def close(self) -> None:
        if self.close_error is not None:
            raise self.close_error
        self.closed = True


class FakeSocketFactory:
    """Hands out FakeSockets with increasing descriptors."""

    def __init__(
        self,
        *,
        outcomes: Mapping[str, Sequence[BaseException | None]] | None = None,
        create_error: OSError | None = None,
        on_connect: Callable[[], None] | None = None,
        first_handle: int = 10,
    ) -> None:
        self.outcomes = outcomes or {}
        self.create_error = create_error
        self.on_connect = on_connect
        self.sockets: list[FakeSocket] = []
        self.calls: list[tuple[int, int, int]] = []
        self._handles = count(first_handle)

    def __call__(self, family: int, type_: int, proto: int) -> FakeSocket:
        self.calls.append((family, type_, proto))
        if self.create_error is not None:
            raise self.create_error
        sock = FakeSocket(
            next(self._handles),
            family,
            outcomes=self.outcomes,
            on_connect=self.on_connect,
        )
        self.sockets.append(sock)
        return sock

    @property
    def last(self) -> FakeSocket:
        return self.sockets[-1]


class FakeResolver(ResolverPort):
    """Static name table; reverse lookups only succeed for known addresses."""

    def __init__(
        self,
        hosts: Mapping[str, Iterable[str]] | None = None,
        names: Mapping[str, str] | None = None,
        *,
        on_resolve: Callable[[], None] | None = None,
    ) -> None:
        self.hosts = {name: tuple(addrs) for name, addrs in (hosts or {}).items()}
        self.names = dict(names or {})
        self.on_resolve = on_resolve
        self.reverse_calls: list[str] = []

    def resolve(self, name: str, family: socket.AddressFamily) -> tuple[bytes, ...]:
        if self.on_resolve is not None:
            self.on_resolve()
        addresses = self.hosts.get(name)
        if not addresses:
            raise ResolutionError(name, "unknown host")
        return tuple(socket.inet_pton(family, address) for address in addresses)

    def reverse_resolve(self, address: bytes, family: socket.AddressFamily) -> str | None:
        host = socket.inet_ntop(family, address)
        self.reverse_calls.append(host)
        return self.names.get(host)


def refused() -> OSError:
    return ConnectionRefusedError(errno.ECONNREFUSED, "Connection refused")


def unreachable() -> OSError:
    return OSError(errno.ENETUNREACH, "Network is unreachable")


def interrupted() -> OSError:
    return InterruptedError(errno.EINTR, "Interrupted system call")
