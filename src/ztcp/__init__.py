"""Shell-driven TCP client sessions: a session table plus connection lifecycle manager."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
