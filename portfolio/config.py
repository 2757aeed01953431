"""
Configuration and settings for the portfolio API.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings for the FastAPI service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_prefix: str = Field(default="/api")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    # Auth
    jwt_secret: str = Field(default="super-secret-key-change-me")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_hours: int = Field(default=24)
    admin_username: str = Field(default="admin")
    admin_password: str = Field(default="admin123")

    # Storage
    database_path: str = Field(default="impact.db")
    # Set by Vercel; its filesystem is read-only so SQLite cannot be used.
    vercel: bool = Field(default=False)
    use_in_memory_backends: bool = Field(default=False)

    # Rate limits (requests per window, per client address)
    events_rate_limit: int = Field(default=100)
    events_rate_window_seconds: int = Field(default=15 * 60)
    contact_rate_limit: int = Field(default=5)
    contact_rate_window_seconds: int = Field(default=60 * 60)
    # Reverse proxies in front of the app that append to X-Forwarded-For.
    # 0 keys on the socket peer and ignores the header entirely.
    trusted_proxy_hops: int = Field(default=0, ge=0)

    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Built front end (index.html + assets); served when present.
    static_dir: Optional[str] = Field(default=None)
    cv_url: str = Field(default="/cv-placeholder.pdf")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
