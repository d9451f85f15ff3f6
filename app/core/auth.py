# app/core/auth.py
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from supabase import AsyncClient

from app.core.config import get_settings
from app.core.errors import NotAuthenticated, NotFound
from app.core.session_events import SessionEvents, get_session_events
from app.core.supabase_client import get_store_client
from app.models.profile import Profile
from app.models.session import AuthSession
from app.repositories.profile_repo import ProfileRepository

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header reaches us as None
#   so it becomes NotAuthenticated (401 + login location), not a bare 403.
bearer_scheme = HTTPBearer(auto_error=False)

profile_repo = ProfileRepository()


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Args:
        token: raw JWT from the Authorization header.

    Returns:
        Decoded JWT claims.

    Raises:
        NotAuthenticated: if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise NotAuthenticated("Invalid or expired token")


def _timestamp(value: Any) -> datetime | None:
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc)
    except (TypeError, ValueError):
        return None


def session_from_token(token: str) -> AuthSession:
    """
    Build an AuthSession from a verified access token.

    Raises:
        NotAuthenticated: if the token is invalid or lacks sub/exp.
    """
    payload = decode_access_token(token)
    sub = payload.get("sub")
    expires_at = _timestamp(payload.get("exp"))

    if not sub or expires_at is None:
        raise NotAuthenticated("Token missing sub/exp")

    # Supabase provides sub as a string; enforce UUID
    try:
        user_id = uuid.UUID(sub)
    except ValueError:
        raise NotAuthenticated("Invalid sub in token")

    return AuthSession(
        user_id=user_id,
        email=payload.get("email"),
        access_token=token,
        issued_at=_timestamp(payload.get("iat")),
        expires_at=expires_at,
    )


def get_optional_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    events: SessionEvents = Depends(get_session_events),
) -> AuthSession | None:
    """
    Resolve the caller's session, or None when there is no live one.

    Used by views that behave differently for signed-in callers (login)
    without rejecting anonymous ones.
    """
    if credentials is None:
        return None
    try:
        session = session_from_token(credentials.credentials)
    except NotAuthenticated:
        return None
    if events.is_revoked(session):
        return None
    return session


def get_current_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    events: SessionEvents = Depends(get_session_events),
) -> AuthSession:
    """
    Enforce a live session.

    Flow:
      1. No Authorization header => NotAuthenticated.
      2. Decode + verify JWT => AuthSession.
      3. Reject tokens issued before the user's last sign-out.

    Raises:
        NotAuthenticated(401): clients redirect to LOGIN_PATH.
    """
    if credentials is None:
        raise NotAuthenticated()

    session = session_from_token(credentials.credentials)
    if events.is_revoked(session):
        raise NotAuthenticated("Session has been signed out")
    return session


async def get_current_profile(
    session: AuthSession = Depends(get_current_session),
    client: AsyncClient = Depends(get_store_client),
) -> Profile:
    """
    Load the caller's profile row.

    Raises:
        NotFound(404): if the identity has no profile yet.
    """
    profile = await profile_repo.get_by_id(client, session.user_id)
    if profile is None:
        raise NotFound("Profile not found")
    return profile
