"""Configuration for the REST server.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseSettings):
    """Settings for the issue tracker API process.

    Environment variables:
    - ITOPS_HOST          (optional)
    - ITOPS_PORT          (optional)
    - LOG_LEVEL           (optional)
    - ITOPS_ACCESS_LOG    (optional)
    - ITOPS_CORS_ORIGINS  (optional)

    Notes:
        Tests can bypass the `.env` file via `ServerSettings(_env_file=None)`.
    """

    host: str = Field(
        default="0.0.0.0",
        validation_alias="ITOPS_HOST",
        description="Interface the HTTP server binds to",
    )
    port: int = Field(
        default=8080,
        validation_alias="ITOPS_PORT",
        description="TCP port the HTTP server listens on",
        ge=1,
        le=65535,
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    access_log: bool = Field(
        default=True,
        validation_alias="ITOPS_ACCESS_LOG",
        description="Emit one log line per handled HTTP request",
    )

    cors_origins: str = Field(
        default="*",
        validation_alias="ITOPS_CORS_ORIGINS",
        description="Comma-separated list of allowed CORS origins.",
    )

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore")

    def parsed_cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]
