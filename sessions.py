"""
Angler sessions.

One ConditionsStore per session, plus the bits of state that live around
it: the geolocation ticket and the last status message shown to the user.

Geolocation lookups can overlap (tap the button twice, or edit the form
while a slow lookup is still out). Every lookup takes a ticket; only the
latest ticket is allowed to write its result into the store.

Sessions nobody has touched for `ttl_seconds` are swept out whenever a new
one is created.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Callable, Dict, Optional

from conditions_store import ConditionsStore
from fishing_types import Coordinates, FishingConditions
from weather_service import WeatherReading

logger = logging.getLogger(__name__)

LOCATING_MESSAGE = "Connexion aux satellites..."
SESSION_TTL_SECONDS = 6 * 60 * 60


@dataclass
class StatusMessage:
    kind: str  # loading | success | error
    message: str


@dataclass
class Session:
    session_id: str
    store: ConditionsStore
    locate_ticket: int = 0
    status: Optional[StatusMessage] = None
    last_seen: float = field(default=0.0, compare=False)


class SessionRegistry:
    def __init__(
        self,
        ttl_seconds: float = SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: Dict[str, Session] = {}
        self._lock = Lock()
        self._ttl = ttl_seconds
        self._clock = clock

    def create(self, initial: Optional[FishingConditions] = None) -> Session:
        session = Session(
            session_id=secrets.token_urlsafe(16),
            store=ConditionsStore(initial),
            last_seen=self._clock(),
        )
        with self._lock:
            self._sweep(session.last_seen)
            self._sessions[session.session_id] = session
        logger.info("Session %s created", session.session_id)
        return session

    def _sweep(self, now: float) -> None:
        # caller holds the lock
        expired = [sid for sid, s in self._sessions.items() if now - s.last_seen > self._ttl]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.info("Expired %d idle session(s)", len(expired))

    def get(self, session_id: str) -> Session:
        """Look up a session and mark it as seen. KeyError if unknown or expired."""
        now = self._clock()
        with self._lock:
            session = self._sessions[session_id]
            if now - session.last_seen > self._ttl:
                del self._sessions[session_id]
                raise KeyError(session_id)
            session.last_seen = now
            return session

    def drop(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("Session %s closed", session_id)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def update(self, session_id: str, changes: Dict[str, Any]) -> FishingConditions:
        """User edit: clears a stale error banner, then goes through the store."""
        session = self.get(session_id)
        if session.status is not None and session.status.kind == "error":
            session.status = None
        return session.store.update(changes)

    # ------------- Geolocation -------------

    def begin_locate(self, session_id: str) -> int:
        session = self.get(session_id)
        with self._lock:
            session.locate_ticket += 1
            ticket = session.locate_ticket
        session.status = StatusMessage("loading", LOCATING_MESSAGE)
        return ticket

    def is_current(self, session_id: str, ticket: int) -> bool:
        return self.get(session_id).locate_ticket == ticket

    def finish_locate(
        self,
        session_id: str,
        ticket: int,
        reading: WeatherReading,
        coordinates: Coordinates,
    ) -> bool:
        """Apply a weather result. Returns False if a newer lookup superseded it."""
        if not self.is_current(session_id, ticket):
            logger.info("Dropping stale weather result for %s (ticket %s)", session_id, ticket)
            return False
        session = self.get(session_id)
        session.store.apply_weather(reading, coordinates)
        place = f"{reading.city_name} ({reading.region})" if reading.region else reading.city_name
        session.status = StatusMessage("success", f"Météo synchronisée pour {place} !")
        return True

    def fail_locate(self, session_id: str, ticket: int, message: str) -> bool:
        if not self.is_current(session_id, ticket):
            return False
        self.get(session_id).status = StatusMessage("error", message)
        return True
