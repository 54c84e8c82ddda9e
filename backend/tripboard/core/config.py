"""
Application configuration and environment settings.
"""
from pydantic_settings import BaseSettings
from pydantic import field_validator
from typing import List, Union


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Tripboard"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Persistence collaborator
    PERSISTENCE_BACKEND: str = "http"  # Options: "http" (remote trip API), "sql" (local database)
    PERSISTENCE_API_URL: str = "http://localhost:5000/api"
    PERSISTENCE_TIMEOUT_SECONDS: float = 10.0

    # Database (only used when PERSISTENCE_BACKEND == "sql")
    DATABASE_URL: str = "sqlite:///./tripboard.db"
    DB_ECHO: bool = False

    # JWT issued by the identity provider
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("PERSISTENCE_BACKEND")
    @classmethod
    def validate_backend(cls, v):
        """Only the remote API and the local database gateways exist."""
        v = v.lower()
        if v not in ("http", "sql"):
            raise ValueError("PERSISTENCE_BACKEND must be 'http' or 'sql'")
        return v

    # Ledger rules
    BUDGET_WARNING_RATIO: float = 0.8  # Warn once spending passes this share of the budget
    PACKING_MAX_QUANTITY: int = 99

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
