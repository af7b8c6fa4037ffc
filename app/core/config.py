"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables (.env file).
"""

from typing import Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Project Info
    PROJECT_NAME: str = "Spotter - exercise alternatives API"
    VERSION: str = "0.1.0"

    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str
    DATABASE_HOST: str = "localhost"
    DATABASE_PORT: int = 5432
    DATABASE_DBNAME: str = "postgres"
    # Full URL override (e.g. sqlite:///./spotter.db for local runs)
    DATABASE_URL_OVERRIDE: Optional[str] = None

    # Security
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Generative ranking service
    OPENAI_API_KEY: str = ""
    # Overrides the plan's model when set
    OPENAI_MODEL: str = ""
    AI_TIMEOUT_SECONDS: float = 8.0
    AI_MAX_TOKENS: int = 1500
    AI_MAX_REASON_LENGTH: int = 100

    # Alternatives pipeline
    ALTERNATIVES_CACHE_TTL_SECONDS: int = 7 * 24 * 3600
    ALTERNATIVES_MAX_CANDIDATES: int = 50
    # "degrade": quota denial only skips the AI stage.
    # "gate": quota denial rejects the request with 429.
    QUOTA_POLICY: Literal["degrade", "gate"] = "degrade"

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        return (f"postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}"
                f":{self.DATABASE_PORT}"
                f"/{self.DATABASE_DBNAME}")


# Global settings instance
settings = Settings()
