"""
Sessioni della vista logistica.

Ogni client apre una sessione che possiede il proprio coordinatore (cache,
lista viva, token di annullamento). Il registro vive in
``app.extensions["logistics_sessions"]``.

Le sessioni inattive da più di ``idle_timeout`` vengono chiuse alla prima
operazione successiva sul registro; oltre ``max_sessions`` viene chiusa quella
usata meno di recente.
"""
from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from flask import Flask, current_app

from app.services.logistics_cache import DeliveryRecordCache
from app.services.logistics_coordinator import LogisticsCoordinator
from app.services.logistics_store import SqlDeliveryStore

logger = logging.getLogger(__name__)

EXTENSION_KEY = "logistics_sessions"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class LogisticsSession:
    id: str
    owner: Optional[str]
    coordinator: LogisticsCoordinator
    opened_at: datetime = field(default_factory=_utcnow)
    last_used: Optional[datetime] = None
    references_loaded: bool = False

    def __post_init__(self) -> None:
        if self.last_used is None:
            self.last_used = self.opened_at

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "owner": self.owner,
            "opened_at": self.opened_at.isoformat(),
            "last_used": self.last_used.isoformat(),
            "active_date": self.coordinator.active_date,
            "cached_dates": self.coordinator.cache.keys(),
            "references_loaded": self.references_loaded,
        }


class LogisticsSessionRegistry:
    def __init__(
        self,
        cache_capacity: int = 10,
        idle_timeout: Optional[timedelta] = None,
        max_sessions: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.cache_capacity = cache_capacity
        self.idle_timeout = idle_timeout
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: Dict[str, LogisticsSession] = {}
        self._lock = threading.Lock()

    def open(self, owner: Optional[str] = None) -> LogisticsSession:
        coordinator = LogisticsCoordinator(
            store=SqlDeliveryStore(),
            cache=DeliveryRecordCache(self.cache_capacity),
        )
        session = LogisticsSession(
            id=uuid.uuid4().hex, owner=owner, coordinator=coordinator, opened_at=self._clock()
        )
        with self._lock:
            expired = self._pop_expired()
            self._sessions[session.id] = session
            if self.max_sessions is not None:
                while len(self._sessions) > self.max_sessions:
                    oldest = min(self._sessions.values(), key=lambda s: s.last_used)
                    expired.append(self._sessions.pop(oldest.id))
        self._close_all(expired, "limite sessioni")
        logger.info("Sessione logistica aperta", extra={"session_id": session.id, "owner": owner})
        return session

    def get(self, session_id: str) -> Optional[LogisticsSession]:
        """Sessione attiva (e ne aggiorna l'ultimo uso) oppure ``None``."""
        with self._lock:
            expired = self._pop_expired()
            session = self._sessions.get(session_id)
            if session is not None:
                session.last_used = self._clock()
        self._close_all(expired, "inattività")
        return session

    def close(self, session_id: str) -> bool:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        session.coordinator.close()
        logger.info("Sessione logistica chiusa", extra={"session_id": session_id})
        return True

    def prune(self) -> int:
        """Chiude le sessioni inattive; restituisce quante ne ha chiuse."""
        with self._lock:
            expired = self._pop_expired()
        self._close_all(expired, "inattività")
        return len(expired)

    def list(self) -> List[LogisticsSession]:
        with self._lock:
            return list(self._sessions.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _pop_expired(self) -> List[LogisticsSession]:
        if self.idle_timeout is None:
            return []
        limit = self._clock() - self.idle_timeout
        expired = [s for s in self._sessions.values() if s.last_used < limit]
        for session in expired:
            del self._sessions[session.id]
        return expired

    @staticmethod
    def _close_all(sessions: List[LogisticsSession], reason: str) -> None:
        for session in sessions:
            session.coordinator.close()
            logger.info(
                "Sessione logistica chiusa (%s)",
                reason,
                extra={"session_id": session.id, "owner": session.owner},
            )


def init_logistics_sessions(app: Flask) -> LogisticsSessionRegistry:
    idle_minutes = app.config.get("LOGISTICS_SESSION_IDLE_MINUTES")
    registry = LogisticsSessionRegistry(
        app.config.get("LOGISTICS_CACHE_ENTRIES", 10),
        idle_timeout=timedelta(minutes=idle_minutes) if idle_minutes else None,
        max_sessions=app.config.get("LOGISTICS_MAX_SESSIONS") or None,
    )
    app.extensions[EXTENSION_KEY] = registry
    return registry


def get_session_registry() -> LogisticsSessionRegistry:
    return current_app.extensions[EXTENSION_KEY]
