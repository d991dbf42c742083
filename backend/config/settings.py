"""
Centralized configuration management using Pydantic Settings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from typing import Optional, List, Union


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = "Board Search Backend"
    app_version: str = "1.0.0"
    debug: bool = False
    environment: str = Field(default="development", validation_alias="APP_ENV")
    api_prefix: str = Field(default="/board", validation_alias="API_PREFIX")

    # CORS
    cors_origins: Union[str, List[str]] = Field(
        default_factory=lambda: ["http://localhost:3000"],
        validation_alias="CORS_ORIGINS"
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: List[str] = Field(default_factory=lambda: ["*"])
    cors_allow_headers: List[str] = Field(default_factory=lambda: ["*"])

    # Elasticsearch
    elasticsearch_host: str = Field(default="localhost", validation_alias="ELASTICSEARCH_HOST")
    elasticsearch_port: int = Field(default=9200, validation_alias="ELASTICSEARCH_PORT")
    elasticsearch_scheme: str = Field(default="http", validation_alias="ELASTICSEARCH_SCHEME")
    elasticsearch_username: Optional[str] = Field(default=None, validation_alias="ELASTICSEARCH_USERNAME")
    elasticsearch_password: Optional[str] = Field(default=None, validation_alias="ELASTICSEARCH_PASSWORD")
    elasticsearch_request_timeout: float = 10.0  # seconds
    # Refresh policy applied to writes: "true", "false" or "wait_for"
    elasticsearch_refresh: str = Field(default="wait_for", validation_alias="ELASTICSEARCH_REFRESH")

    # Index
    index_name: str = Field(default="board", validation_alias="ELASTICSEARCH_INDEX_NAME")
    index_shards: Optional[int] = Field(default=None, validation_alias="ELASTICSEARCH_INDEX_SHARDS")
    index_replicas: Optional[int] = Field(default=None, validation_alias="ELASTICSEARCH_INDEX_REPLICAS")
    # Must match the index.max_result_window setting of the index
    index_max_result_window: int = Field(default=10000, validation_alias="ELASTICSEARCH_MAX_RESULT_WINDOW")

    # Board behaviour
    comment_max_retries: int = 3

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: str = "text"  # json or text

    @field_validator("cors_origins", mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            if not v:  # Handle empty string
                return ["http://localhost:3000"]
            return [origin.strip() for origin in v.split(",")]
        elif v is None:
            return ["http://localhost:3000"]
        return v

    @field_validator("elasticsearch_refresh")
    @classmethod
    def check_refresh_policy(cls, v):
        if v not in ("true", "false", "wait_for"):
            raise ValueError("elasticsearch_refresh must be one of: true, false, wait_for")
        return v

    @property
    def elasticsearch_url(self) -> str:
        return f"{self.elasticsearch_scheme}://{self.elasticsearch_host}:{self.elasticsearch_port}"

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        return self.environment == "testing"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore"
    )


# Singleton instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the settings singleton instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
