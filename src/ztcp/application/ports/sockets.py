"""Port describing socket construction."""

from __future__ import annotations

from collections.abc import Callable

from ztcp.domain.session import SocketLike

SocketFactory = Callable[[int, int, int], SocketLike]
"""Called as ``factory(family, type, proto)``; raises :class:`OSError` on failure."""

__all__ = ["SocketFactory"]
