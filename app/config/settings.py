# app/config/settings.py

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Application ---
    app_name: str = "compliance-gateway"
    environment: Literal["dev", "test", "prod"] = "dev"
    debug: bool = False
    version: str = "0.1.0"
    port: int = 4001

    # --- Database ---
    # Empty means no database: health reports degraded, audit writes are dropped and logged.
    database_url: str = ""
    db_pool_size: int = Field(10, ge=1)
    db_max_overflow: int = Field(20, ge=0)

    # --- Policy decision point ---
    # Unset means policy enforcement is not active (every check allows).
    opa_url: Optional[str] = None

    # --- Compliance versioning ---
    schema_version: str = "v1-minimal"
    policy_version: str = "live"

    # --- Internal service auth ---
    agent_api_secret: str = ""

    # --- Observability ---
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> AppSettings:
    return AppSettings()
