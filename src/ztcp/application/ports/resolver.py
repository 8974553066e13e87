"""Port describing host name resolution."""

from __future__ import annotations

import socket
from typing import Protocol


class ResolverPort(Protocol):
    """Forward and reverse name lookups for a single address family."""

    def resolve(self, name: str, family: socket.AddressFamily) -> tuple[bytes, ...]:
        """Return packed candidate addresses in preference order.

        Raises :class:`ztcp.errors.ResolutionError` when nothing resolves.
        """

    def reverse_resolve(self, address: bytes, family: socket.AddressFamily) -> str | None:
        """Return the host name for ``address`` or ``None`` when unknown."""


__all__ = ["ResolverPort"]
