"""
Configuration settings for ReflectDesk.
All sensitive values are loaded from environment variables.
"""

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = "ReflectDesk"
    app_version: str = "1.0.0"
    debug: bool = Field(default=False)
    environment: str = Field(default="production")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    allowed_origins: str = Field(default="*")  # comma-separated

    # Database (PostgreSQL in production, SQLite for local runs)
    database_url: str = Field(default="sqlite+aiosqlite:///./reflectdesk.db")
    database_echo: bool = Field(default=False)
    db_pool_size: int = Field(default=5)
    db_max_overflow: int = Field(default=10)
    db_pool_timeout: int = Field(default=30)
    db_pool_recycle: int = Field(default=1800)

    # Timezone used for server-side timestamps (startedAt, completedAt)
    timezone: str = Field(default="UTC")

    # Auth
    jwt_secret: str = Field(default="dev-secret")
    jwt_algorithm: str = Field(default="HS256")
    jwt_ttl_seconds: int = Field(default=60 * 60 * 24 * 7)  # 1 week
    auth_cookie_name: str = Field(default="reflectdesk_token")
    auth_cookie_secure: bool = Field(default=False)

    # Rate limiting (slowapi)
    rate_limit_enabled: bool = Field(default=True)
    auth_rate_limit: str = Field(default="10/minute")

    # Reviews
    review_store: str = Field(default="database")  # database | memory

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @field_validator("review_store")
    @classmethod
    def validate_review_store(cls, v):
        if v not in ("database", "memory"):
            raise ValueError("review_store must be 'database' or 'memory'")
        return v


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the application settings."""
    return settings
