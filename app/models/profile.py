# app/models/profile.py
import uuid
from datetime import datetime
from enum import Enum

from sqlmodel import SQLModel


class Role(str, Enum):
    """
    Closed set of application roles.

    Every visibility branch matches on this enum exhaustively, so adding a
    member forces each branch to be revisited.
    """

    CUSTOMER = "customer"
    CAREGIVER = "caregiver"
    ADMIN = "admin"

    @classmethod
    def parse(cls, raw: str | None) -> "Role | None":
        """Return the matching Role, or None for anything unknown."""
        if raw is None:
            return None
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return None


class Profile(SQLModel):
    """
    Row of `profiles`, one per Supabase auth identity.

    Identity:
      - id: matches Supabase auth.users.id (UUID from JWT "sub")

    Role:
      - kept as the raw string from the store; `role_kind` is the parsed
        value the resolver works with.
    """

    id: uuid.UUID
    role: str | None = None
    full_name: str | None = None
    phone: str | None = None
    created_at: datetime | None = None

    @property
    def role_kind(self) -> Role | None:
        return Role.parse(self.role)

    @property
    def display_name(self) -> str:
        return self.full_name or str(self.id)
