"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from sqlalchemy import URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    version: str = "0.1.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: Annotated[list[str] | None, NoDecode] = None

    # Database
    database_url: str = Field(
        default="",
        description="Async SQLAlchemy URL; assembled from PG* variables when empty",
    )
    pghost: str = "localhost"
    pgport: int = 5432
    pguser: str = "postgres"
    pgpassword: str = "postgres"
    pgdatabase: str = "boilerplate"
    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_pool_timeout: int = 30

    # Auth (Clerk)
    clerk_publishable_key: str = ""
    clerk_secret_key: str = ""
    clerk_webhook_secret: str = ""
    clerk_issuer: str = ""
    clerk_jwt_key: str = ""
    clerk_authorized_parties: Annotated[list[str], NoDecode] = Field(default_factory=list)

    # Observability
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    loki_host: str = ""  # e.g. http://localhost:3100
    metrics_username: str = ""
    metrics_password: str = ""
    otel_enabled: bool = False
    otlp_endpoint: str = ""  # OTLP collector endpoint (e.g., http://localhost:4317)
    otel_service_name: str = "boilerplate-api"

    @field_validator("clerk_authorized_parties", "cors_origins", mode="before")
    @classmethod
    def _split_csv(cls, value: object) -> object:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @computed_field
    @property
    def sqlalchemy_url(self) -> str:
        """Effective async database URL."""
        if self.database_url:
            return self.database_url
        return URL.create(
            "postgresql+asyncpg",
            username=self.pguser,
            password=self.pgpassword,
            host=self.pghost,
            port=self.pgport,
            database=self.pgdatabase,
        ).render_as_string(hide_password=False)

    @property
    def allowed_origins(self) -> list[str]:
        if self.cors_origins is not None:
            return self.cors_origins
        return [] if self.is_production else ["*"]

    @property
    def metrics_auth_enabled(self) -> bool:
        return bool(self.metrics_username and self.metrics_password)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
