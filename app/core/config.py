"""Application configuration via environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = Field("Patent Search Service", description="Human-readable service name.")
    environment: str = Field("dev", description="Deployment environment tag.")
    debug: bool = Field(False, description="Enable FastAPI debug mode.")
    log_level: str = Field("INFO", description="Root logging level for the service.")

    api_prefix: str = Field("/api", description="Root prefix for API routes.")
    frontend_origin: Optional[HttpUrl] = Field(
        None, description="Optional frontend origin allowed for CORS policies."
    )
    allowed_hosts: List[str] = Field(
        default_factory=lambda: ["*"], description="Hosts allowed to access the service."
    )

    downloads_dir: Path = Field(
        Path("downloads"), description="Directory holding one PDF per acquired patent."
    )
    temp_dir: Path = Field(
        Path("temp"), description="Scratch directory used by batch downloads."
    )

    http_timeout_seconds: float = Field(
        30.0, description="Timeout applied to every outbound PDF request."
    )
    user_agent: str = Field(
        DEFAULT_USER_AGENT, description="User agent sent to patent sources."
    )

    browser_headless: bool = Field(True, description="Run the rendering browser headless.")
    browser_navigation_timeout_ms: int = Field(
        30000, description="Timeout for page navigation in the rendering browser."
    )
    browser_wait_timeout_ms: int = Field(
        10000,
        description="Timeout waiting for result markup before extracting best-effort.",
    )

    default_max_results: int = Field(10, description="Results per source when unspecified.")
    max_results_limit: int = Field(
        50, description="Upper bound accepted for maxResults on search requests."
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache()
def get_settings() -> Settings:
    """Provide a cached Settings instance."""

    return Settings()
