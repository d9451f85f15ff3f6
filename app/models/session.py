# app/models/session.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel


class AuthSession(SQLModel):
    """
    A verified Supabase session as seen by this service.

    Built from the access token claims; the token itself is opaque to
    everything except the auth layer.
    """

    user_id: uuid.UUID
    email: str | None = None
    access_token: str
    issued_at: datetime | None = None
    expires_at: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at
