"""
Server-side sessions and the store interface used to resolve them.

The request only derives a session id from its cookie; the store owns
every HttpSession it is given. InMemorySessionStore is a process-local
store with idle expiry and a size cap, suitable for tests and single
process deployments.
"""

import threading
import time
import uuid
from typing import Any, Callable, Dict, Optional, Protocol


class HttpSession:
    """Session state correlated with a client through a cookie-carried id."""

    def __init__(self, session_id: Optional[uuid.UUID] = None, clock: Callable[[], float] = time.time):
        self.id = session_id or uuid.uuid4()
        self._clock = clock
        self._attributes: Dict[str, Any] = {}
        self.created_at = clock()
        self.last_accessed = self.created_at
        self.valid = True

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def set_attribute(self, name: str, value: Any) -> None:
        self._attributes[name] = value

    def remove_attribute(self, name: str) -> None:
        self._attributes.pop(name, None)

    def invalidate(self) -> None:
        """Drop all attributes and mark the session unusable."""
        self._attributes.clear()
        self.valid = False

    def touch(self) -> None:
        self.last_accessed = self._clock()

    def __repr__(self) -> str:
        return f"HttpSession(id={self.id}, valid={self.valid})"


class SessionStore(Protocol):
    """Anything that can keep sessions by id."""

    def put(self, session: HttpSession) -> None:
        ...

    def get(self, session_id: uuid.UUID) -> Optional[HttpSession]:
        ...


class InMemorySessionStore:
    """Thread-safe dict-backed session store.

    Sessions idle for longer than ``ttl`` seconds are dropped on lookup
    and during periodic cleanup. When ``max_entries`` is reached the
    least recently accessed sessions are evicted to make room.
    """

    def __init__(self,
                 ttl: Optional[float] = 1800,
                 max_entries: int = 10000,
                 cleanup_interval: float = 300,
                 clock: Callable[[], float] = time.time):
        """Initialize session store.

        Args:
            ttl: Idle seconds before a session expires, None to disable expiry
            max_entries: Maximum number of sessions kept
            cleanup_interval: Seconds between sweeps of expired sessions
            clock: Time source, seconds as float
        """
        if ttl is not None and ttl <= 0:
            raise ValueError("TTL must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")

        self.ttl = ttl
        self.max_entries = max_entries
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._sessions: Dict[uuid.UUID, HttpSession] = {}
        self._lock = threading.Lock()
        self.last_cleanup = clock()

    def put(self, session: HttpSession) -> None:
        with self._lock:
            now = self._clock()
            if now - self.last_cleanup > self.cleanup_interval:
                self._cleanup(now)

            if session.id not in self._sessions and len(self._sessions) >= self.max_entries:
                self._cleanup(now)
                self._evict_oldest(len(self._sessions) - self.max_entries + 1)

            session.last_accessed = now
            self._sessions[session.id] = session

    def get(self, session_id: uuid.UUID) -> Optional[HttpSession]:
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None

            now = self._clock()
            if not session.valid or self._is_expired(session, now):
                del self._sessions[session_id]
                return None

            session.last_accessed = now
            return session

    def remove(self, session_id: uuid.UUID) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _is_expired(self, session: HttpSession, now: float) -> bool:
        return self.ttl is not None and now - session.last_accessed > self.ttl

    def _cleanup(self, now: float) -> None:
        """Remove expired and invalidated sessions. Caller holds the lock."""
        stale = [
            sid for sid, session in self._sessions.items()
            if not session.valid or self._is_expired(session, now)
        ]
        for sid in stale:
            del self._sessions[sid]
        self.last_cleanup = now

    def _evict_oldest(self, count: int) -> None:
        if count <= 0:
            return
        oldest = sorted(
            self._sessions.items(),
            key=lambda item: item[1].last_accessed
        )[:count]
        for sid, _ in oldest:
            del self._sessions[sid]
