"""
Session store - Holds one GameState per session identifier.

Sessions are created lazily on first contact and live for the lifetime of
the process. There is no eviction and no capacity bound.

The SessionStore protocol is what the rest of the backend depends on, so
the in-memory table can be swapped for a cache or database without
touching callers.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncIterator, Protocol, runtime_checkable

from adventure.models.game import GameState

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionStore(Protocol):
    """Protocol for session state storage.

    Implementations must hand out a per-session mutual-exclusion region via
    lock(): callers hold it across the whole read-modify-write of a scene
    round so that concurrent requests for the same session are serialized.
    """

    def get(self, session_id: str) -> GameState | None:
        """Return the stored state, or None if the session is unknown."""
        ...

    def get_or_create(self, session_id: str) -> GameState:
        """Return the stored state, creating and storing a fresh one if absent."""
        ...

    def save(self, session_id: str, state: GameState) -> None:
        """Overwrite the stored state for a session."""
        ...

    def lock(self, session_id: str) -> AbstractAsyncContextManager[None]:
        """Async context manager holding the session's mutual-exclusion region."""
        ...

    def __len__(self) -> int: ...


class InMemorySessionStore:
    """Dict-backed session store with one asyncio.Lock per session"""

    def __init__(self):
        self._sessions: dict[str, GameState] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def get(self, session_id: str) -> GameState | None:
        return self._sessions.get(session_id)

    def get_or_create(self, session_id: str) -> GameState:
        state = self._sessions.get(session_id)
        if state is None:
            state = GameState()
            self._sessions[session_id] = state
            logger.info(f"Created session {session_id} ({len(self._sessions)} active)")
        return state

    def save(self, session_id: str, state: GameState) -> None:
        self._sessions[session_id] = state

    @asynccontextmanager
    async def lock(self, session_id: str) -> AsyncIterator[None]:
        # setdefault never yields, so two tasks can't create different locks
        session_lock = self._locks.setdefault(session_id, asyncio.Lock())
        async with session_lock:
            yield

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions


# Process-wide store (sessions live until the server exits)
_store: InMemorySessionStore | None = None


def get_store() -> SessionStore:
    """Get the global session store instance."""
    global _store
    if _store is None:
        _store = InMemorySessionStore()
    return _store


def reset_store() -> None:
    """Drop every session (used by tests)."""
    global _store
    _store = None
