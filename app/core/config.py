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
      - SUPABASE_SERVICE_ROLE_KEY (only used for admin Supabase client)
      - FREE_ITEM_HISTORY_CHECK_ENABLED (check past orders before adding free items)
      - ORDER_HISTORY_TIMEOUT_SECONDS
      - CART_SESSION_TTL_SECONDS (idle carts are dropped after this long)
    """

    PROJECT_NAME: str = "Farm Marketplace Cart API"
    API_V1_STR: str = "/api/v1"

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Supabase config
    SUPABASE_URL: str
    SUPABASE_KEY: str

    # JWT verification (backend-side)
    SUPABASE_JWT_SECRET: str
    SUPABASE_JWT_ALG: str = "HS256"

    # Service role key bypasses RLS (backend only)
    SUPABASE_SERVICE_ROLE_KEY: str | None = None

    # Free item fairness
    FREE_ITEM_HISTORY_CHECK_ENABLED: bool = False
    ORDER_HISTORY_TIMEOUT_SECONDS: float = 5.0

    # In-memory cart sessions
    CART_SESSION_TTL_SECONDS: int = 24 * 60 * 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
