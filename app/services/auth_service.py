# app/services/auth_service.py
import logging
from datetime import datetime, timezone

from supabase import AsyncClient, AuthError

from app.core.errors import NotAuthenticated, TransientFetchFailure
from app.core.session_events import SessionEvents
from app.i18n.translator import LanguageContext
from app.models.session import AuthSession
from app.repositories.base import bounded
from app.schemas.auth import LoginRequest, SessionRead

logger = logging.getLogger(__name__)


class AuthService:
    """
    Sign-in and sign-out against Supabase Auth.

    Token verification for protected routes lives in app.core.auth; this
    service only talks to the platform.
    """

    async def login(
        self,
        client: AsyncClient,
        payload: LoginRequest,
        i18n: LanguageContext,
    ) -> SessionRead:
        """
        Password sign-in.

        Raises:
            NotAuthenticated(401): wrong credentials or no session returned.
            TransientFetchFailure(503): platform unreachable / timed out.
        """
        try:
            response = await bounded(
                client.auth.sign_in_with_password(
                    {"email": payload.email, "password": payload.password}
                ),
                "sign in",
            )
        except AuthError as exc:
            logger.info("Sign-in rejected for %s: %s", payload.email, exc)
            raise NotAuthenticated(getattr(exc, "message", None) or i18n.t("auth.error"))

        session = response.session
        if session is None:
            raise NotAuthenticated(i18n.t("auth.error"))

        expires_at = None
        if session.expires_at:
            expires_at = datetime.fromtimestamp(session.expires_at, tz=timezone.utc)

        return SessionRead(
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=expires_at,
            user_id=session.user.id,
            message=i18n.t("auth.login"),
        )

    async def logout(
        self,
        client: AsyncClient,
        session: AuthSession,
        events: SessionEvents,
    ) -> None:
        """
        Sign the user out everywhere.

        The local revocation always happens, even if the platform call
        fails, so guarded requests for this user stop immediately.
        """
        try:
            await bounded(
                client.auth.admin.sign_out(session.access_token, "global"),
                "sign out",
            )
        except (AuthError, TransientFetchFailure) as exc:
            logger.warning("Platform sign-out failed for %s: %s", session.user_id, exc)
        finally:
            events.revoke(session.user_id)
