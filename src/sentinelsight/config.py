from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import os


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./sentinelsight.db")

    # Server
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", 8000))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"
    log_level: str = "INFO"
    sql_echo: bool = False

    # CORS
    cors_origins: List[str] = []

    # Security
    secret_key: str = os.getenv("SECRET_KEY", "")
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 480  # 8 hours
    session_cookie_name: str = "app_session_id"

    # The owner is promoted to admin the first time they sign in
    owner_open_id: str = ""

    def __init__(self, **values):
        super().__init__(**values)
        # Parse CORS_ORIGINS from env (comma-separated string)
        cors_env = os.getenv("CORS_ORIGINS")
        if cors_env:
            self.cors_origins = [origin.strip() for origin in cors_env.split(",") if origin.strip()]
        elif not self.cors_origins:
            # fallback to default dev origins if not set
            self.cors_origins = [
                "http://localhost:3000",
                "http://localhost:8000"
            ]

    @property
    def signing_key(self) -> str:
        """Key used to sign session tokens; falls back to a dev-only value."""
        return self.secret_key or "sentinelsight-dev-only-signing-key"


settings = Settings()
