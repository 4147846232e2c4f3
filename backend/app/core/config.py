"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "YeloCar Showroom API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    # Document store
    STORE_BACKEND: str = "memory"  # memory, redis
    REDIS_URL: str = "redis://localhost:6379/0"
    STORE_KEY_PREFIX: str = "yelocar:"
    STORE_SCAN_COUNT: int = 200

    # JWT Auth
    SECRET_KEY: str = "super-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    LOGIN_MAX_FAILURES: int = 5
    LOGIN_LOCKOUT_MINUTES: int = 15

    # Catalog / bookings
    PLACEHOLDER_IMAGE: str = "/placeholder.png"
    INTERACTION_QUERY_LIMIT: int = 100
    CONTACT_QUERY_LIMIT: int = 50

    # Redirect targets used by the access check and sign-in
    SIGNIN_PATH: str = "/auth/signin"
    HOME_PATH: str = "/"
    BUYER_HOME_PATH: str = "/home"
    ADMIN_DASHBOARD_PATH: str = "/admin-dashboard"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
