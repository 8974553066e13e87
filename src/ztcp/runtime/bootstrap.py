"""Runtime wiring for the connection manager."""

from __future__ import annotations

import logging
import socket
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from ztcp.application.connection_manager import ConnectionManager
from ztcp.application.ports.resolver import ResolverPort
from ztcp.application.ports.sockets import SocketFactory
from ztcp.config.settings import ZtcpSettings
from ztcp.infrastructure.net.resolver import SystemResolver
from ztcp.infrastructure.state.session_table import InMemorySessionTable

logger = logging.getLogger("ztcp.runtime")


@dataclass(frozen=True, slots=True)
class RuntimeContext:
    """Process-wide session table and the manager that owns it."""

    settings: ZtcpSettings
    session_table: InMemorySessionTable
    resolver: ResolverPort
    connection_manager: ConnectionManager

    def shutdown(self) -> int:
        """Drain every remaining session; safe to call more than once."""
        removed = self.connection_manager.teardown_all()
        logger.debug("ztcp runtime shut down", extra={"data": {"removed": removed}})
        return removed


def build_runtime(
    settings: ZtcpSettings | None = None,
    *,
    resolver: ResolverPort | None = None,
    socket_factory: SocketFactory | None = None,
) -> RuntimeContext:
    """Construct an empty session table and the manager bound to it."""
    resolved = settings or ZtcpSettings.load()
    table = InMemorySessionTable()
    resolver = resolver or SystemResolver()
    manager = ConnectionManager(
        table,
        resolver,
        socket_factory=socket_factory or socket.socket,
        default_port=resolved.default_port,
        default_family=resolved.family,
        oob_inline=resolved.oob_inline,
    )
    return RuntimeContext(
        settings=resolved,
        session_table=table,
        resolver=resolver,
        connection_manager=manager,
    )


@contextmanager
def runtime_scope(
    settings: ZtcpSettings | None = None,
    *,
    resolver: ResolverPort | None = None,
    socket_factory: SocketFactory | None = None,
) -> Iterator[RuntimeContext]:
    """Yield a runtime whose sessions are torn down when the scope exits."""
    runtime = build_runtime(settings, resolver=resolver, socket_factory=socket_factory)
    try:
        yield runtime
    finally:
        runtime.shutdown()


__all__ = ["RuntimeContext", "build_runtime", "runtime_scope"]
