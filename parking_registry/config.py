# parking_registry/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
MAX_CAPACITY is read once at process start; there is no runtime reconfiguration.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DATABASE_URL: str = "sqlite:///./parqueadero.db"
    SEED_EXAMPLE_DATA: bool = True   # Insert three example records into an empty table

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_IP: str = "127.0.0.1"
    BACKEND_PORT: int = 5000
    CORS_ORIGINS: list[str] = ["*"]

    # ── Parking lot ───────────────────────────────────────────────────────
    MAX_CAPACITY: int = Field(default=50, ge=1)   # Max simultaneous "Inside" records

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
