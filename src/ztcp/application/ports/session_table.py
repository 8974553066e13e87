"""Port describing the registry of tracked TCP sessions."""

from __future__ import annotations

from typing import Protocol

from ztcp.domain.session import Session, SessionFlags


class SessionTablePort(Protocol):
    """Ordered table of sessions keyed by their socket handle."""

    def create(self, flags: SessionFlags = SessionFlags.NONE) -> Session:
        """Allocate a session with an unset handle and append it to the table."""

    def find_by_handle(self, handle: int) -> Session | None:
        """Return the session currently owning ``handle``."""

    def remove(self, session: Session) -> bool:
        """Unlink ``session``; return ``False`` when it was not tracked."""

    def iterate(self) -> tuple[Session, ...]:
        """Return the tracked sessions in insertion order."""

    def __len__(self) -> int:
        """Return the number of tracked sessions."""


__all__ = ["SessionTablePort"]
