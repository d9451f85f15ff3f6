# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - SUPABASE_URL
      - SUPABASE_KEY (anon key)
      - SUPABASE_JWT_SECRET (JWT signing secret from Supabase project settings)

    Optional:
      - SUPABASE_SERVICE_ROLE_KEY (store reads, storage signing, admin sign-out)
    """

    PROJECT_NAME: str = "CareConnect24 API"
    API_V1_STR: str = "/api/v1"
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
    ]

    # Supabase
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Service role key bypasses RLS (backend only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # Storage / edge functions
    DOCUMENTS_BUCKET: str = "documents"
    SIGNED_URL_TTL_SECONDS: int = 60
    LEAD_CAPTURE_FUNCTION: str = "lead-capture"

    # Upper bound for any single call to the platform
    STORE_TIMEOUT_SECONDS: float = 10.0

    # Where unauthenticated callers are sent
    LOGIN_PATH: str = "/login"

    # i18n
    DEFAULT_LANGUAGE: str = "de"
    LANGUAGE_STATE_FILE: str = ".language.json"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
