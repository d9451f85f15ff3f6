# app/core/supabase_client.py
from supabase import AsyncClient, acreate_client

from app.core.config import get_settings

settings = get_settings()

# One client per key for the process lifetime.
_clients: dict[str, AsyncClient] = {}


async def _client_for(key: str) -> AsyncClient:
    client = _clients.get(key)
    if client is None:
        client = await acreate_client(settings.SUPABASE_URL, key)
        _clients[key] = client
    return client


async def supabase_public() -> AsyncClient:
    """
    Supabase client with the anon/public key.

    Use cases:
      - password sign-in on behalf of the user

    Note: This client still respects RLS.
    """
    return await _client_for(settings.SUPABASE_KEY)


async def supabase_admin() -> AsyncClient:
    """
    Supabase client with the service role key.

    Use cases:
      - reading care tables once the visibility resolver has scoped the caller
      - issuing signed URLs for private documents
      - admin sign-out

    WARNING:
      - Never expose service role key to frontend.
      - Every patient-scoped read through this client MUST go through
        VisibilityService first; RLS is bypassed.

    Raises:
        RuntimeError: if SUPABASE_SERVICE_ROLE_KEY is not set.
    """
    if not settings.SUPABASE_SERVICE_ROLE_KEY:
        raise RuntimeError("Missing SUPABASE_SERVICE_ROLE_KEY in .env")
    return await _client_for(settings.SUPABASE_SERVICE_ROLE_KEY)


async def get_store_client() -> AsyncClient:
    """FastAPI dependency for the store client used by repositories."""
    return await supabase_admin()


async def get_auth_client() -> AsyncClient:
    """FastAPI dependency for the client used for password sign-in."""
    return await supabase_public()
