# app/core/session_events.py
"""
Process-wide session change notifications.

Sign-out publishes "session gone" for a user. Guarded requests still in
flight for that user are subscribed and react immediately; requests that
arrive later are rejected through `is_revoked`.
"""

import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Callable

from app.models.session import AuthSession

logger = logging.getLogger(__name__)

SessionCallback = Callable[[AuthSession | None], None]
Unsubscribe = Callable[[], None]


class SessionEvents:
    def __init__(self) -> None:
        self._subscribers: dict[uuid.UUID, list[SessionCallback]] = defaultdict(list)
        self._revoked_at: dict[uuid.UUID, datetime] = {}

    def subscribe(self, user_id: uuid.UUID, callback: SessionCallback) -> Unsubscribe:
        """
        Register `callback` for session changes of `user_id`.

        Returns an idempotent unsubscribe function.
        """
        self._subscribers[user_id].append(callback)

        def unsubscribe() -> None:
            callbacks = self._subscribers.get(user_id)
            if callbacks and callback in callbacks:
                callbacks.remove(callback)
                if not callbacks:
                    del self._subscribers[user_id]

        return unsubscribe

    def publish(self, user_id: uuid.UUID, session: AuthSession | None) -> None:
        # Copy: callbacks may unsubscribe while we iterate.
        for callback in list(self._subscribers.get(user_id, ())):
            callback(session)

    def revoke(self, user_id: uuid.UUID, at: datetime | None = None) -> None:
        """
        Record a sign-out and notify every live subscriber.

        Token `iat` claims are whole seconds, so the sign-out instant is
        truncated to the second as well.
        """
        revoked_at = at or datetime.now(timezone.utc)
        self._revoked_at[user_id] = revoked_at.replace(microsecond=0)
        logger.info("Session revoked for user %s", user_id)
        self.publish(user_id, None)

    def is_revoked(self, session: AuthSession) -> bool:
        """True if the session was issued before the second of the last sign-out."""
        revoked_at = self._revoked_at.get(session.user_id)
        if revoked_at is None:
            return False
        if session.issued_at is None:
            return True
        # A token issued in the sign-out second itself is a fresh sign-in.
        return session.issued_at < revoked_at

    def subscriber_count(self, user_id: uuid.UUID) -> int:
        return len(self._subscribers.get(user_id, ()))


session_events = SessionEvents()


def get_session_events() -> SessionEvents:
    """FastAPI dependency; overridden in tests."""
    return session_events
