"""Cooperative cancellation shared between a caller and a blocking connect."""

from __future__ import annotations

import errno
import os
import signal
from collections.abc import Iterator
from contextlib import contextmanager
from threading import Event
from types import FrameType


class CancellationToken:
    """Flag checked by the connection manager between connect retries.

    Blocking socket calls restart themselves after a signal unless the handler
    raises, so a handler meant to abort a connect must be :meth:`interrupt`
    (or be installed through :meth:`interrupt_on`), not a bare :meth:`cancel`.
    """

    def __init__(self) -> None:
        self._event = Event()

    def cancel(self) -> None:
        self._event.set()

    def reset(self) -> None:
        self._event.clear()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def interrupt(self, signum: int | None = None, frame: FrameType | None = None) -> None:
        """Signal handler: cancel, then abort the system call in progress."""
        self.cancel()
        raise InterruptedError(errno.EINTR, os.strerror(errno.EINTR))

    @contextmanager
    def interrupt_on(self, signum: int) -> Iterator[CancellationToken]:
        """Route ``signum`` to :meth:`interrupt` for the duration of the block."""
        previous = signal.signal(signum, self.interrupt)
        try:
            yield self
        finally:
            signal.signal(signum, previous)


__all__ = ["CancellationToken"]
