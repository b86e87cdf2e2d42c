"""Configuration settings for the coaching API."""
import os
from typing import List, Literal


EnvironmentType = Literal["development", "staging", "production"]


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Supabase
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    SUPABASE_ANON_KEY: str | None = None
    SUPABASE_JWT_SECRET: str | None = None
    SUPABASE_JWT_AUDIENCE: str = "authenticated"

    # Session sentinel cookie
    SESSION_COOKIE_NAME: str = "axend_sess"
    SESSION_MAX_AGE_SECONDS: int = 60 * 60

    # Feature flags
    COMPLETION_RPC_ENABLED: bool = True

    # API Keys
    API_NINJAS_KEY: str | None = None

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Supabase
        self.SUPABASE_URL = os.getenv("SUPABASE_URL")
        self.SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
        self.SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY")
        self.SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
        self.SUPABASE_JWT_AUDIENCE = os.getenv("SUPABASE_JWT_AUDIENCE", "authenticated")

        # Session sentinel cookie
        self.SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "axend_sess")
        try:
            self.SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", "3600"))
        except ValueError:
            self.SESSION_MAX_AGE_SECONDS = 60 * 60

        # Feature flags
        self.COMPLETION_RPC_ENABLED = os.getenv("COMPLETION_RPC_ENABLED", "true").lower() == "true"

        # API Keys
        self.API_NINJAS_KEY = os.getenv("API_NINJAS_KEY")

        origins = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:3001")
        self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def supabase_key(self) -> str | None:
        """Service role key, falling back to the anon key."""
        return self.SUPABASE_SERVICE_ROLE_KEY or self.SUPABASE_ANON_KEY


settings = Settings()
