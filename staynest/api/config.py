"""
Server settings for the StayNest HTTP API.

Store and database settings live in ``config.settings``; this module only
covers how the API is served.
"""
from typing import Annotated, List
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic import Field, field_validator
from config.settings import app_config

DEFAULT_CORS_ORIGINS = ["http://localhost:3000", "http://localhost:9002", "http://127.0.0.1:3000"]


class FastAPISettings(BaseSettings):
    """FastAPI application settings with environment variable loading."""

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    app_name: str = Field(default="StayNest API", description="Application name")
    app_description: str = Field(
        default="Listings, bookings, inquiries and reviews for the StayNest marketplace",
        description="Shown on the OpenAPI page"
    )
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="development, staging or production")

    host: str = Field(default="127.0.0.1", validation_alias="API_HOST")
    port: int = Field(default=8000, validation_alias="API_PORT")

    api_prefix: str = Field(default="/api", description="Prefix for docs and versioned routers")
    api_version: str = Field(default="v1", description="Router version segment")

    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_CORS_ORIGINS),
        description="Browser origins allowed to call the API",
        validation_alias="CORS_ORIGINS"
    )

    log_level: str = Field(default_factory=lambda: app_config.log_level)

    @field_validator('cors_origins', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Accept a comma-separated string; fall back to the local dev origins when empty."""
        if isinstance(v, str):
            v = [origin.strip() for origin in v.split(',') if origin.strip()]
        return v or list(DEFAULT_CORS_ORIGINS)

    @property
    def versioned_prefix(self) -> str:
        return f"{self.api_prefix}/{self.api_version}"


settings = FastAPISettings()
