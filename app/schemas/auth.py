# app/schemas/auth.py
import uuid
from datetime import datetime

from pydantic import EmailStr, ConfigDict
from sqlmodel import SQLModel, Field


class LoginRequest(SQLModel):
    """Email + password sign-in payload."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class SessionRead(SQLModel):
    """
    Session handed back after sign-in.

    Clients send `access_token` as a Bearer token on every protected call.
    """

    access_token: str
    refresh_token: str | None = None
    token_type: str = "bearer"
    expires_at: datetime | None = None
    user_id: uuid.UUID
    message: str | None = None


class SessionStatus(SQLModel):
    authenticated: bool
    user_id: uuid.UUID | None = None
    expires_at: datetime | None = None
    redirect_to: str | None = None


class LogoutResponse(SQLModel):
    success: bool = True
    redirect_to: str
