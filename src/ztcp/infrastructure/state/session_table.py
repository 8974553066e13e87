"""In-memory session table implementation."""

from __future__ import annotations

from itertools import count
from threading import Lock

from ztcp.application.ports.session_table import SessionTablePort
from ztcp.domain.session import UNSET_HANDLE, Session, SessionFlags


class InMemorySessionTable(SessionTablePort):
    """Owns session records for the lifetime of the process, in insertion order."""

    def __init__(self) -> None:
        self._sessions: dict[int, Session] = {}
        self._ids = count(1)
        self._lock = Lock()

    def create(self, flags: SessionFlags = SessionFlags.NONE) -> Session:
        with self._lock:
            session = Session(session_id=next(self._ids), flags=flags)
            self._sessions[session.session_id] = session
        return session

    def find_by_handle(self, handle: int) -> Session | None:
        if handle == UNSET_HANDLE:
            return None
        with self._lock:
            for session in self._sessions.values():
                if session.handle == handle:
                    return session
        return None

    def remove(self, session: Session) -> bool:
        with self._lock:
            tracked = self._sessions.get(session.session_id)
            if tracked is not session:
                return False
            del self._sessions[session.session_id]
        return True

    def iterate(self) -> tuple[Session, ...]:
        with self._lock:
            return tuple(self._sessions.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


__all__ = ["InMemorySessionTable"]
