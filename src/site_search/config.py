"""Centralized configuration for site-search using Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from site_search.domain.search import ContentType


class Settings(BaseSettings):
    """Strictly typed configuration loaded from environment variables.

    All environment variables are validated at startup with proper types.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Content + index locations
    content_root: Path = Field(default=Path("src/content"), description="Root of the content tree")
    search_index_path: Path = Field(
        default=Path("public/search-index.json"), description="Location of the serialized search index"
    )
    search_content_types: str = Field(default="blog,docs", description="Comma-separated content types to index")

    # Indexing
    search_max_content_length: int = Field(
        default=10_000, ge=1, description="Maximum characters of cleaned body text kept per document"
    )

    # Query
    search_default_limit: int = Field(default=10, ge=1, description="Results returned when no limit is given")
    search_max_result_limit: int = Field(default=50, ge=1, description="Upper bound for a requested limit")
    search_preload_index: bool = Field(default=False, description="Load the index at startup instead of first query")

    # Server settings
    search_host: str = Field(default="127.0.0.1", description="HTTP server host")
    search_port: int = Field(default=4322, ge=1, le=65535, description="HTTP server port")

    # Logging + tracing
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")
    otlp_traces_endpoint: str = Field(default="", description="OTLP/HTTP traces endpoint; empty disables export")
    service_name: str = Field(default="site-search", description="Service name reported to tracing")

    @field_validator("search_content_types")
    @classmethod
    def _check_content_types(cls, value: str) -> str:
        for entry in value.split(","):
            if entry.strip():
                ContentType.parse(entry)
        return value

    @model_validator(mode="after")
    def _check_limits(self) -> "Settings":
        if self.search_default_limit > self.search_max_result_limit:
            raise ValueError("SEARCH_DEFAULT_LIMIT cannot exceed SEARCH_MAX_RESULT_LIMIT")
        return self

    def get_content_types(self) -> list[ContentType]:
        """Get the configured content types, in indexing order."""
        return [ContentType.parse(entry) for entry in self.search_content_types.split(",") if entry.strip()]
