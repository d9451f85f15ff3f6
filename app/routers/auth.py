# app/routers/auth.py
from fastapi import APIRouter, Depends
from supabase import AsyncClient

from app.core.auth import get_current_profile, get_current_session, get_optional_session
from app.core.config import get_settings
from app.core.session_events import SessionEvents, get_session_events
from app.core.supabase_client import get_auth_client, get_store_client
from app.i18n.translator import LanguageContext, get_language_context
from app.models.profile import Profile
from app.models.session import AuthSession
from app.schemas.auth import LoginRequest, LogoutResponse, SessionRead, SessionStatus
from app.schemas.patient import ProfileRead
from app.services.auth_service import AuthService

settings = get_settings()

router = APIRouter(prefix="/auth", tags=["Auth"])

service = AuthService()


@router.post("/login", response_model=SessionRead)
async def login(
    payload: LoginRequest,
    client: AsyncClient = Depends(get_auth_client),
    i18n: LanguageContext = Depends(get_language_context),
):
    """
    Email/password sign-in through Supabase Auth.

    Returns the session; send `access_token` as a Bearer token afterwards.
    """
    return await service.login(client, payload, i18n)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    session: AuthSession = Depends(get_current_session),
    client: AsyncClient = Depends(get_store_client),
    events: SessionEvents = Depends(get_session_events),
):
    """
    Sign out everywhere.

    In-flight guarded requests for this user are cancelled and answer 401.
    """
    await service.logout(client, session, events)
    return LogoutResponse(redirect_to=settings.LOGIN_PATH)


@router.get("/session", response_model=SessionStatus)
def read_session(session: AuthSession | None = Depends(get_optional_session)):
    """
    Whether the bearer token is a live session.

    The login view uses this to skip straight to the dashboard.
    """
    if session is None or session.is_expired():
        return SessionStatus(authenticated=False, redirect_to=settings.LOGIN_PATH)
    return SessionStatus(
        authenticated=True,
        user_id=session.user_id,
        expires_at=session.expires_at,
    )


@router.get("/me", response_model=ProfileRead)
def read_me(profile: Profile = Depends(get_current_profile)):
    """
    Return the authenticated caller's profile.

    Auth:
      - Requires valid Supabase JWT.
    """
    return ProfileRead(
        id=profile.id,
        role=profile.role,
        full_name=profile.full_name,
        phone=profile.phone,
    )
