import os
from decimal import Decimal
from functools import lru_cache


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""

    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite+aiosqlite:///./prorights.db"
    )
    DATABASE_ECHO: bool = _env_bool("DATABASE_ECHO", "false")

    # Token signing
    JWT_SECRET: str = os.getenv("JWT_SECRET", "dev-jwt-secret-change-in-production")
    JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
    JWT_EXPIRES_DAYS: int = int(os.getenv("JWT_EXPIRES_DAYS", "7"))

    BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Royalty policy
    PER_PLAY_RATE: Decimal = Decimal(os.getenv("PER_PLAY_RATE", "0.01"))
    AUTO_DISTRIBUTE: bool = _env_bool("AUTO_DISTRIBUTE", "true")

    LICENSE_VALIDITY_DAYS: int = int(os.getenv("LICENSE_VALIDITY_DAYS", "365"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
