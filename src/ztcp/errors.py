"""Typed failures raised by the session table and connection manager."""

from __future__ import annotations

import errno as errno_codes
import os
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ztcp.domain.session import Session


class ZtcpError(RuntimeError):
    """Base class for connection manager failures."""


class OsBackedError(ZtcpError):
    """Failure carrying the operating system error code that caused it."""

    def __init__(self, message: str, *, errno: int | None = None) -> None:
        self.errno = errno
        if errno is not None:
            message = f"{message}: {os.strerror(errno)}"
        super().__init__(message)


class ResolutionError(ZtcpError):
    """Raised when a destination name cannot be resolved."""

    def __init__(self, host: str, detail: str | None = None) -> None:
        self.host = host
        self.detail = detail
        message = f"host resolution failure: {host}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class SocketCreateError(OsBackedError):
    """Raised when the operating system refuses to create a socket."""

    def __init__(self, *, errno: int | None = None) -> None:
        super().__init__("socket creation failed", errno=errno)


class ConnectError(OsBackedError):
    """Raised when every candidate address refused or failed the connect.

    The session stays registered with its unconnected socket so the caller can
    inspect or close it.
    """

    def __init__(
        self,
        session: Session,
        *,
        errno: int | None = None,
        cancelled: bool = False,
    ) -> None:
        self.session = session
        self.cancelled = cancelled
        message = "connection cancelled" if cancelled else "connection failed"
        super().__init__(message, errno=errno)


class CloseError(OsBackedError):
    """Raised when closing the socket of a session fails."""

    def __init__(self, handle: int, *, errno: int | None = None) -> None:
        self.handle = handle
        super().__init__(f"connection close failed on fd {handle}", errno=errno)


class NotFoundError(ZtcpError, LookupError):
    """Raised when a handle does not belong to any tracked session."""

    def __init__(self, handle: int) -> None:
        self.handle = handle
        super().__init__(f"fd {handle} not found in tcp table")


class ProtectedError(ZtcpError):
    """Raised when a protected session is closed without force."""

    def __init__(self, handle: int) -> None:
        self.handle = handle
        super().__init__(f"fd {handle} is a managed connection; use force to close it")


class NotOpenError(ZtcpError):
    """Raised when closing a session whose handle is already unset."""

    def __init__(self) -> None:
        super().__init__("session is not open")


def errno_of(exc: OSError) -> int:
    """Return the errno of ``exc``, falling back to EIO when the OS left it unset."""
    return exc.errno if exc.errno is not None else errno_codes.EIO


__all__ = [
    "CloseError",
    "ConnectError",
    "NotFoundError",
    "NotOpenError",
    "OsBackedError",
    "ProtectedError",
    "ResolutionError",
    "SocketCreateError",
    "ZtcpError",
    "errno_of",
]
