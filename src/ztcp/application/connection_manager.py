"""Connection lifecycle use cases built on the session table."""

from __future__ import annotations

import errno as errno_codes
import logging
import socket

from ztcp.application.cancellation import CancellationToken
from ztcp.application.dto.connection import ConnectionListing
from ztcp.application.ports.resolver import ResolverPort
from ztcp.application.ports.session_table import SessionTablePort
from ztcp.application.ports.sockets import SocketFactory
from ztcp.domain.session import DEFAULT_PORT, PeerEndpoint, Session, SessionFlags
from ztcp.errors import (
    CloseError,
    ConnectError,
    NotFoundError,
    NotOpenError,
    ProtectedError,
    ResolutionError,
    SocketCreateError,
    errno_of,
)

logger = logging.getLogger("ztcp.connections")


class ConnectionManager:
    """Opens, lists and closes outbound TCP sessions tracked in a session table."""

    def __init__(
        self,
        table: SessionTablePort,
        resolver: ResolverPort,
        *,
        socket_factory: SocketFactory = socket.socket,
        default_port: int = DEFAULT_PORT,
        default_family: socket.AddressFamily = socket.AF_INET,
        oob_inline: bool = True,
    ) -> None:
        self._table = table
        self._resolver = resolver
        self._socket_factory = socket_factory
        self._default_port = default_port
        self._default_family = default_family
        self._oob_inline = oob_inline

    @property
    def table(self) -> SessionTablePort:
        return self._table

    # ------------------------------------------------------------------
    # public API

    def open(
        self,
        host: str,
        port: int | None = None,
        family: socket.AddressFamily | None = None,
        *,
        flags: SessionFlags = SessionFlags.NONE,
        cancel: CancellationToken | None = None,
    ) -> Session:
        """Resolve ``host`` and connect a new session to the first reachable candidate.

        On :class:`ConnectError` the session stays in the table with its
        unconnected socket; ``exc.session`` is the record to close or remove.
        """
        port = self._default_port if port is None else port
        if not 0 < port <= 0xFFFF:
            raise ValueError(f"port out of range: {port}")
        family = socket.AddressFamily(self._default_family if family is None else family)
        cancel = cancel or CancellationToken()

        try:
            candidates = self._resolver.resolve(host, family)
        except InterruptedError as exc:
            raise ResolutionError(host, "interrupted") from exc
        if cancel.cancelled:
            raise ResolutionError(host, "interrupted")

        session = self._table.create(flags)
        try:
            sock = self._socket_factory(family, socket.SOCK_STREAM, 0)
        except OSError as exc:
            self._table.remove(session)
            raise SocketCreateError(errno=errno_of(exc)) from exc
        session.attach_socket(sock)
        self._enable_oob_inline(session)

        last_error: OSError | None = None
        for address in candidates:
            peer = PeerEndpoint(family=family, address=address, port=port)
            if cancel.cancelled:
                raise self._cancelled(session, host, peer, errno_codes.EINTR)
            session.target(peer)
            try:
                self._connect(session, peer, cancel)
            except InterruptedError as exc:
                raise self._cancelled(session, host, peer, errno_of(exc)) from exc
            except OSError as exc:
                last_error = exc
                logger.debug(
                    "connect attempt failed",
                    extra={"data": {"peer": peer.host, "port": port, "errno": exc.errno}},
                )
                continue
            session.mark_connected(peer)
            logger.info(
                "session connected",
                extra={"data": {"host": host, "peer": peer.host, "port": port, "fd": session.handle}},
            )
            return session

        logger.warning(
            "connection failed",
            extra={"data": {"host": host, "port": port, "candidates": len(candidates)}},
        )
        errno = errno_of(last_error) if last_error is not None else None
        raise ConnectError(session, errno=errno) from last_error

    def close(self, session: Session) -> None:
        """Close the socket of ``session`` without forgetting the record."""
        if not session.is_open or session.sock is None:
            raise NotOpenError()
        handle = session.handle
        try:
            session.sock.close()
        except OSError as exc:
            logger.warning(
                "connection close failed",
                extra={"data": {"fd": handle, "errno": exc.errno}},
            )
            raise CloseError(handle, errno=errno_of(exc)) from exc
        session.mark_closed()
        logger.debug("session closed", extra={"data": {"fd": handle}})

    def remove(self, session: Session) -> bool:
        """Close ``session`` when still open, then drop it from the table."""
        if session.is_open:
            self.close(session)
        return self._table.remove(session)

    def close_by_handle(self, handle: int, *, force: bool = False) -> None:
        """Close and forget the session owning ``handle``.

        Protected sessions need ``force``. A failed OS close still drops the
        record before the :class:`CloseError` propagates.
        """
        session = self._table.find_by_handle(handle)
        if session is None:
            raise NotFoundError(handle)
        if session.protected and not force:
            raise ProtectedError(handle)
        try:
            self.close(session)
        finally:
            self._table.remove(session)

    def list_all(self) -> tuple[ConnectionListing, ...]:
        """Describe every session that still owns a socket."""
        listings: list[ConnectionListing] = []
        for session in self._table.iterate():
            if not session.is_open:
                continue
            peer = session.peer
            if peer is None:
                listings.append(
                    ConnectionListing(
                        peer_name=None,
                        peer_port=0,
                        handle=session.handle,
                        protected=session.protected,
                    )
                )
                continue
            listings.append(
                ConnectionListing(
                    peer_name=self._resolver.reverse_resolve(peer.address, peer.family),
                    peer_port=peer.port,
                    handle=session.handle,
                    protected=session.protected,
                    peer_address=peer.host,
                )
            )
        return tuple(listings)

    def teardown_all(self) -> int:
        """Close and forget every session regardless of protection."""
        removed = 0
        for session in self._table.iterate():
            if session.is_open:
                try:
                    self.close(session)
                except CloseError as exc:
                    logger.warning(
                        "dropping session after failed close",
                        extra={"data": {"fd": exc.handle, "errno": exc.errno}},
                    )
            if self._table.remove(session):
                removed += 1
        if removed:
            logger.info("tcp sessions torn down", extra={"data": {"count": removed}})
        return removed

    # ------------------------------------------------------------------
    # helpers

    def _connect(self, session: Session, peer: PeerEndpoint, cancel: CancellationToken) -> None:
        sock = session.sock
        if sock is None:
            raise NotOpenError()
        while True:
            try:
                sock.connect(peer.sockaddr())
            except InterruptedError:
                if cancel.cancelled:
                    raise
                continue
            return

    def _cancelled(
        self, session: Session, host: str, peer: PeerEndpoint, errno: int
    ) -> ConnectError:
        logger.info(
            "connect cancelled",
            extra={"data": {"host": host, "peer": peer.host, "fd": session.handle}},
        )
        return ConnectError(session, errno=errno, cancelled=True)

    def _enable_oob_inline(self, session: Session) -> None:
        option = getattr(socket, "SO_OOBINLINE", None)
        if not self._oob_inline or option is None or session.sock is None:
            return
        try:
            session.sock.setsockopt(socket.SOL_SOCKET, option, 1)
        except OSError as exc:
            logger.warning(
                "unable to enable inline out-of-band data",
                extra={"data": {"fd": session.handle, "errno": exc.errno}},
            )


__all__ = ["ConnectionManager"]
