import asyncio
import uuid
from datetime import datetime, timezone, timedelta
from typing import Dict, Optional

import structlog

from config.app_config import AppConfig
from core.query_session import QuerySessionState
from exceptions.custom_exceptions import SessionNotFoundException

logger = structlog.get_logger(__name__)

SESSION_TIMEOUT = timedelta(minutes=AppConfig.SESSION_TIMEOUT_MINUTES)


class SessionStore:
    """In-memory store; a page reload starts a new session."""

    def __init__(self, timeout: timedelta = SESSION_TIMEOUT):
        self.timeout = timeout
        self._sessions: Dict[str, dict] = {}

    def create(self, state: QuerySessionState) -> str:
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = {
            "state": state,
            "last_activity": datetime.now(timezone.utc),
        }
        return session_id

    def get(self, session_id: str) -> QuerySessionState:
        entry = self._sessions.get(session_id)
        if entry is None:
            raise SessionNotFoundException(session_id)
        entry["last_activity"] = datetime.now(timezone.utc)
        return entry["state"]

    def save(self, session_id: str, state: QuerySessionState) -> None:
        if session_id not in self._sessions:
            raise SessionNotFoundException(session_id)
        self._sessions[session_id] = {
            "state": state,
            "last_activity": datetime.now(timezone.utc),
        }

    def remove_expired(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.now(timezone.utc)
        expired = [
            sid
            for sid, data in self._sessions.items()
            if now - data["last_activity"] > self.timeout
        ]
        for sid in expired:
            del self._sessions[sid]
            logger.info("session_expired", session_id=sid)
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)


session_store = SessionStore()


async def remove_expired_sessions(
    store: SessionStore = session_store,
    interval_seconds: int = AppConfig.SESSION_SWEEP_INTERVAL_SECONDS,
):
    while True:
        store.remove_expired()
        await asyncio.sleep(interval_seconds)
