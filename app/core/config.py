"""Application configuration settings."""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Fleet API"
    app_env: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database
    database_url: str = "sqlite+aiosqlite:///./fleet.db"

    # JWT Authentication
    jwt_access_secret: str = "dev-access-secret-change-me"
    jwt_refresh_secret: str = "dev-refresh-secret-change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7

    # Cookies
    refresh_cookie_name: str = "refresh_token"
    access_cookie_name: str = "access_token"
    cookie_secure: bool = False
    cookie_samesite: str = "lax"  # "none" requires cookie_secure

    # Users
    default_role: str = "user"

    # CORS
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    # Security
    allowed_hosts: str = "*"

    @property
    def allowed_hosts_list(self) -> List[str]:
        """Get allowed hosts as a list."""
        return [host.strip() for host in self.allowed_hosts.split(",")]

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @property
    def refresh_token_max_age(self) -> int:
        """Refresh cookie lifetime in seconds."""
        return self.refresh_token_expire_days * 24 * 60 * 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
