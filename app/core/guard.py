# app/core/guard.py
"""
Session gate for protected views.

A guard starts PENDING, then settles on AUTHORIZED or REDIRECT. REDIRECT is
terminal: one observation of a missing session is enough, and the redirect
callback fires at most once no matter how many events report it.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Protocol

from app.core.config import get_settings
from app.core.session_events import SessionCallback, SessionEvents, Unsubscribe
from app.models.session import AuthSession

settings = get_settings()

logger = logging.getLogger(__name__)


class SessionSource(Protocol):
    async def get_current_session(self) -> AuthSession | None: ...

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe: ...


class GuardState(str, Enum):
    PENDING = "pending"
    AUTHORIZED = "authorized"
    REDIRECT = "redirect"


class SessionGuard:
    def __init__(
        self,
        source: SessionSource,
        on_redirect: Callable[[str], None] | None = None,
        login_path: str | None = None,
    ):
        self.source = source
        self.on_redirect = on_redirect
        self.login_path = login_path or settings.LOGIN_PATH
        self.state = GuardState.PENDING
        self._unsubscribe: Unsubscribe | None = None
        self._torn_down = False

    @property
    def is_authorized(self) -> bool:
        return self.state is GuardState.AUTHORIZED

    @property
    def redirected(self) -> bool:
        return self.state is GuardState.REDIRECT

    async def start(self) -> GuardState:
        """
        Subscribe, then check the current session.

        Subscribing first means a change that lands while the initial check
        is suspended is still seen.
        """
        self._unsubscribe = self.source.on_session_change(self._on_change)
        session = await self.source.get_current_session()
        self._observe(session)
        return self.state

    def teardown(self) -> None:
        self._torn_down = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, session: AuthSession | None) -> None:
        if self._torn_down:
            return
        self._observe(session)

    def _observe(self, session: AuthSession | None) -> None:
        if self.state is GuardState.REDIRECT:
            return
        if session is None:
            self._redirect()
        else:
            self.state = GuardState.AUTHORIZED

    def _redirect(self) -> None:
        self.state = GuardState.REDIRECT
        logger.info("Session missing, redirecting to %s", self.login_path)
        if self.on_redirect is not None:
            self.on_redirect(self.login_path)

    async def __aenter__(self) -> "SessionGuard":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.teardown()


class RequestSessionSource:
    """
    Exposes one verified request session as a SessionSource.

    The session counts as absent once it has expired or its user has
    signed out.
    """

    def __init__(self, session: AuthSession, events: SessionEvents):
        self.session = session
        self.events = events

    async def get_current_session(self) -> AuthSession | None:
        return self._live(self.session)

    def on_session_change(self, callback: SessionCallback) -> Unsubscribe:
        return self.events.subscribe(self.session.user_id, callback)

    def _live(self, session: AuthSession) -> AuthSession | None:
        if session.is_expired(datetime.now(timezone.utc)):
            return None
        if self.events.is_revoked(session):
            return None
        return session
