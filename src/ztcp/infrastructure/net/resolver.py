"""Operating system backed implementation of the resolver port."""

from __future__ import annotations

import logging
import socket

from ztcp.application.ports.resolver import ResolverPort
from ztcp.errors import ResolutionError

logger = logging.getLogger("ztcp.resolver")


def parse_literal(name: str, family: socket.AddressFamily) -> bytes | None:
    """Return the packed form of ``name`` when it is a literal address of ``family``."""
    try:
        return socket.inet_pton(family, name)
    except (OSError, ValueError):
        return None


class SystemResolver(ResolverPort):
    """Resolve names through ``getaddrinfo`` and ``gethostbyaddr``."""

    def resolve(self, name: str, family: socket.AddressFamily) -> tuple[bytes, ...]:
        literal = parse_literal(name, family)
        if literal is not None:
            return (literal,)

        try:
            infos = socket.getaddrinfo(name, None, family, socket.SOCK_STREAM)
        except (socket.gaierror, UnicodeError) as exc:
            logger.debug(
                "name lookup failed",
                extra={"data": {"host": name, "family": family.name, "error": str(exc)}},
            )
            detail = exc.strerror if isinstance(exc, socket.gaierror) else str(exc)
            raise ResolutionError(name, detail) from exc

        addresses: list[bytes] = []
        for info_family, _, _, _, sockaddr in infos:
            if info_family != family:
                continue
            # link-local IPv6 results carry a "%iface" scope suffix
            host = str(sockaddr[0]).split("%", 1)[0]
            packed = socket.inet_pton(family, host)
            if packed not in addresses:
                addresses.append(packed)

        if not addresses:
            raise ResolutionError(name, f"no {family.name} addresses")
        logger.debug(
            "resolved host",
            extra={"data": {"host": name, "candidates": len(addresses)}},
        )
        return tuple(addresses)

    def reverse_resolve(self, address: bytes, family: socket.AddressFamily) -> str | None:
        try:
            host, _, _ = socket.gethostbyaddr(socket.inet_ntop(family, address))
        except (OSError, ValueError):
            return None
        return host


__all__ = ["SystemResolver", "parse_literal"]
