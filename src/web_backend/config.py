"""
Configuration management for the SlothBoost web backend.

Uses Pydantic settings for environment variable support.
"""

from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "SlothBoost API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    API_PREFIX: str = "/api"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/slothboost.db"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        # Vite dev server
        *[f"http://localhost:{port}" for port in range(5173, 5180)],
        *[f"http://127.0.0.1:{port}" for port in range(5173, 5180)],
    ]

    # Generation
    DEFAULT_LLM_PROVIDER: str = "deepseek"
    GENERATION_TIMEOUT_SECONDS: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound for a single generation call"
    )
    DEFAULT_LANGUAGE: str = "en"

    # Live sessions
    MAX_LIVE_SESSIONS: int = Field(
        default=1000,
        ge=1,
        description="Oldest in-memory sessions are evicted past this count"
    )

    # History
    HISTORY_PAGE_SIZE: int = Field(default=20, ge=1, le=200)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Global settings instance
settings = Settings()
