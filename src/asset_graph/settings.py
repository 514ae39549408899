from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AssetGraphSettings(BaseSettings):
    """Service configuration.

    Environment variables are prefixed with ASSET_GRAPH_; a local .env file is
    read too.
    """

    model_config = SettingsConfigDict(env_prefix="ASSET_GRAPH_", env_file=".env", extra="ignore")

    # HTTP
    bind_host: str = "0.0.0.0"
    bind_port: int = 3000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # Logging
    log_level: str = Field(default="INFO", description="Python logging level")

    # Auth
    api_key: str | None = Field(default=None, description="If set, require X-API-Key")

    # Storage
    database_path: str = Field(default="asset_graph.db", description="SQLite file, or :memory:")


def configure_logging(level: str | None = None) -> None:
    level = (level or settings.log_level or "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


settings = AssetGraphSettings()
