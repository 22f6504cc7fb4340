"""
Configuration settings for the Anonymous Notes API Service.
"""

from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings


PACKAGE_PUBLIC_DIR = Path(__file__).parent / "public"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Settings
    app_name: str = "Anonymous Notes API"
    app_version: str = "0.1.0"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    public_dir: Path = PACKAGE_PUBLIC_DIR

    # Database
    database_url: str = "sqlite:///./notes.db"
    database_sslmode: str = "require"  # Encrypt, but skip peer verification

    # Admin Security
    admin_password: str = ""  # Empty disables every admin route
    allowed_origins: str = "*"

    # Moderation
    report_threshold: int = 3   # Reports before a note is hidden
    max_message_words: int = 500

    # Feature flags (the tagged and untagged deployments share one schema)
    tags_enabled: bool = True
    require_title: bool = False
    report_reset_enabled: bool = True
    strict_likes: bool = False  # 404 instead of silent success on unknown ids

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"

    @field_validator("admin_password", mode="before")
    @classmethod
    def strip_admin_password(cls, v):
        """Surrounding whitespace is never part of the secret."""
        return str(v or "").strip()

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Accept the `postgres://` scheme that hosting providers hand out."""
        if v.startswith("postgres://"):
            return "postgresql://" + v[len("postgres://"):]
        return v

    @property
    def origins(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def admin_enabled(self) -> bool:
        return bool(self.admin_password)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
