# app/repositories/profile_repo.py
import uuid

from supabase import AsyncClient

from app.models.profile import Profile
from app.repositories.base import fetch_rows

TABLE = "profiles"


class ProfileRepository:
    """
    Data access layer for `profiles`.

    Responsibilities:
      - Pure store reads
      - No FastAPI, no HTTP, no business logic
    """

    async def get_by_id(self, client: AsyncClient, user_id: uuid.UUID) -> Profile | None:
        """Return the profile for an auth identity, or None if missing."""
        query = client.table(TABLE).select("*").eq("id", str(user_id)).limit(1)
        rows = await fetch_rows(query, TABLE)
        if not rows:
            return None
        return Profile.model_validate(rows[0])
