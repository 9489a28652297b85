"""
Session store: lifecycle owner for reservation dialogues.

Sessions are created on first contact, removed a grace period after
their reservation is committed, and removed after an idle timeout if
they never complete. Expiry is decided by an injected clock, evaluated
whenever a session is read and by ``sweep()``, so it can be tested
without waiting on wall-clock time.

Turns for the same session must be serialized: callers hold
``store.lock(session_id)`` for the whole read-modify-write of a turn.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional

from reservation_bot.config import settings
from reservation_bot.schemas.session_schema import Session
from reservation_bot.utils import Clock, make_clock

logger = logging.getLogger(__name__)


class SessionStore(ABC):
    """Interface the dialogue engines depend on."""

    @abstractmethod
    def get(self, session_id: str) -> Optional[Session]:
        """Return the live session, or None if absent or expired."""

    @abstractmethod
    def create(self, session_id: str) -> Session:
        """Create and store a fresh session at the first step."""

    @abstractmethod
    def save(self, session: Session) -> None:
        """Replace the stored state for ``session.session_id``."""

    @abstractmethod
    def delete(self, session_id: str) -> None:
        """Remove a session; a no-op if it is absent."""

    @abstractmethod
    def sweep(self) -> int:
        """Remove every expired session and return how many were removed."""

    @abstractmethod
    def lock(self, session_id: str) -> asyncio.Lock:
        """Return the lock serializing turns for one session."""

    def get_or_create(self, session_id: str) -> Session:
        session = self.get(session_id)
        if session is None:
            session = self.create(session_id)
        return session


class InMemorySessionStore(SessionStore):
    """Process-local session store with TTL-based expiry."""

    def __init__(
        self,
        clock: Optional[Clock] = None,
        completion_grace: timedelta = timedelta(seconds=settings.session.completion_grace_seconds),
        idle_ttl: timedelta = timedelta(seconds=settings.session.idle_ttl_seconds),
    ) -> None:
        self._clock = clock or make_clock(settings.restaurant.timezone)
        self._completion_grace = completion_grace
        self._idle_ttl = idle_ttl
        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def now(self) -> datetime:
        return self._clock()

    def is_expired(self, session: Session, now: Optional[datetime] = None) -> bool:
        now = now or self._clock()
        if session.is_complete and session.completed_at is not None:
            return now - session.completed_at >= self._completion_grace
        return now - session.updated_at >= self._idle_ttl

    def get(self, session_id: str) -> Optional[Session]:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if self.is_expired(session):
            logger.info("Session expired on access: %s", session_id)
            self._remove(session_id)
            return None
        return session.copy()

    def create(self, session_id: str) -> Session:
        now = self._clock()
        session = Session(session_id=session_id, created_at=now, updated_at=now)
        self._sessions[session_id] = session
        logger.info("Session created: %s", session_id)
        return session.copy()

    def save(self, session: Session) -> None:
        stored = session.copy()
        stored.updated_at = self._clock()
        self._sessions[session.session_id] = stored

    def delete(self, session_id: str) -> None:
        if session_id in self._sessions:
            self._remove(session_id)
            logger.info("Session deleted: %s", session_id)

    def sweep(self) -> int:
        now = self._clock()
        expired = [sid for sid, s in self._sessions.items() if self.is_expired(s, now)]
        for session_id in expired:
            self._remove(session_id)
        if expired:
            logger.info("Swept %d expired session(s)", len(expired))
        return len(expired)

    def lock(self, session_id: str) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[session_id] = lock
        return lock

    def _remove(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
        lock = self._locks.get(session_id)
        if lock is not None and not lock.locked():
            del self._locks[session_id]
