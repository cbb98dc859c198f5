"""
Configuration settings for the eligibility report runner.

Uses Pydantic Settings to load environment variables for the remote record
source, concurrency policy, template/output locations and logging. Report
definitions themselves live in the TOML file pointed to by `REPORT_CONFIG_PATH`
(see `eligibility.report_config`).
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Remote record source
    source_base_url: str = Field("https://demo.aeries.net/aeries/api/v5", alias="SOURCE_BASE_URL")
    source_school_code: str = Field("994", alias="SOURCE_SCHOOL_CODE")
    source_cert: str = Field("477abe9e7d27439681d62f4e0de1f5e1", alias="SOURCE_CERT")
    http_timeout_seconds: float = Field(10.0, alias="HTTP_TIMEOUT_SECONDS")

    # Aggregation
    fetch_concurrency: int = Field(0, ge=0, alias="FETCH_CONCURRENCY")
    failure_mode: Literal["abort", "partial"] = Field("abort", alias="FAILURE_MODE")

    # Reports
    report_config_path: str = Field("config.toml", alias="REPORT_CONFIG_PATH")
    templates_dir: str = Field("templates", alias="TEMPLATES_DIR")
    output_dir: str = Field(".", alias="OUTPUT_DIR")
    output_extension: str = Field(".html", alias="OUTPUT_EXTENSION")
    default_display_name: str = Field("Mr. Smith", alias="DEFAULT_DISPLAY_NAME")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def concurrency_limit(self) -> int | None:
        """Cap on in-flight student fetches; None means unbounded."""
        return self.fetch_concurrency or None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
